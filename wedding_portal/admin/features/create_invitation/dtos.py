"""DTOs for the admin invitation provisioning feature."""

import re
from dataclasses import dataclass
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from wedding_portal.guests.dtos import InviteType

INVITE_CODE_PATTERN = re.compile(r"[a-zA-Z0-9]+")


class InvitationValidationError(ValueError):
    """Raised for a malformed provisioning request, before anything is written."""


class InvitationConflictError(Exception):
    """Raised when the email or invite code is already taken."""


class CreateInvitationRequest(BaseModel):
    """Request body, camelCase on the wire. Required fields are checked by validate_invitation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    primary_first_name: str | None = None
    primary_last_name: str | None = None
    primary_email: str | None = None
    invite_type: str | None = None
    second_first_name: str | None = None
    second_last_name: str | None = None
    accommodation_group: str | None = None
    invited_to_atitlan: bool = False
    invite_code: str | None = None


class InvitationData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    invite_id: UUID
    primary_guest_id: UUID


class CreateInvitationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    invite_code: str
    message: str = "Invitation created successfully"
    data: InvitationData


@dataclass(frozen=True)
class NewInvitationDTO:
    primary_first_name: str
    primary_last_name: str
    primary_email: str
    invite_type: InviteType
    accommodation_group: str
    invited_to_atitlan: bool
    invite_code: str
    second_first_name: str | None = None
    second_last_name: str | None = None

    @property
    def has_second_guest(self) -> bool:
        return (
            self.invite_type == InviteType.COUPLE
            and bool(self.second_first_name)
            and bool(self.second_last_name)
        )


@dataclass(frozen=True)
class CreatedInvitationDTO:
    invite_code: str
    invite_id: UUID
    primary_guest_id: UUID
    second_guest_id: UUID | None = None


def validate_invitation(request: CreateInvitationRequest) -> NewInvitationDTO:
    required = (
        request.primary_first_name,
        request.primary_last_name,
        request.primary_email,
        request.invite_type,
        request.accommodation_group,
        request.invite_code,
    )
    if not all(required):
        raise InvitationValidationError("Missing required fields")

    try:
        invite_type = InviteType(request.invite_type)
    except ValueError:
        raise InvitationValidationError("Invalid invite type")

    if invite_type == InviteType.COUPLE and not (
        request.second_first_name and request.second_last_name
    ):
        raise InvitationValidationError(
            "Second guest first name and last name are required for couple invitations"
        )

    if not INVITE_CODE_PATTERN.fullmatch(request.invite_code):
        raise InvitationValidationError("Invite code must be alphanumeric with no spaces")

    return NewInvitationDTO(
        primary_first_name=request.primary_first_name,
        primary_last_name=request.primary_last_name,
        primary_email=request.primary_email,
        invite_type=invite_type,
        accommodation_group=request.accommodation_group,
        invited_to_atitlan=request.invited_to_atitlan,
        invite_code=request.invite_code,
        second_first_name=request.second_first_name,
        second_last_name=request.second_last_name,
    )
