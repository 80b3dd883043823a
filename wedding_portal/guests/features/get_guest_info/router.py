from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wedding_portal.auth.dependencies import (
    AuthenticatedCaller,
    find_admin_user,
    get_admin_user_read_model,
    require_identity,
)
from wedding_portal.auth.read_models import AdminUserReadModel
from wedding_portal.guests.dependencies import get_optional_guest_bundle
from wedding_portal.guests.dtos import GuestBundleDTO, GuestDTO, InviteType, RsvpStatus
from wedding_portal.guests.urls import GET_GUEST_INFO_URL

router = APIRouter()


class GuestResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    is_primary: bool

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            is_primary=guest.is_primary,
        )


class InviteResponse(BaseModel):
    id: UUID
    invite_type: InviteType
    accommodation_group: str | None = None
    invited_to_atitlan: bool
    rsvp_status: RsvpStatus
    rsvp_submitted_at: datetime | None = None


class GuestDataResponse(BaseModel):
    current_guest: GuestResponse
    invite: InviteResponse
    all_guests: list[GuestResponse]

    @classmethod
    def from_bundle(cls, bundle: GuestBundleDTO) -> "GuestDataResponse":
        return cls(
            current_guest=GuestResponse.from_dto(bundle.current_guest),
            invite=InviteResponse(
                id=bundle.invite.id,
                invite_type=bundle.invite.invite_type,
                accommodation_group=bundle.invite.accommodation_group,
                invited_to_atitlan=bundle.invite.invited_to_atitlan,
                rsvp_status=bundle.invite.rsvp_status,
                rsvp_submitted_at=bundle.invite.rsvp_submitted_at,
            ),
            all_guests=[GuestResponse.from_dto(guest) for guest in bundle.all_guests],
        )


class GuestInfoResponse(BaseModel):
    guest_data: GuestDataResponse | None = None
    is_admin: bool = False


@router.get(GET_GUEST_INFO_URL, response_model=GuestInfoResponse)
async def get_guest_info(
    caller: AuthenticatedCaller = Depends(require_identity),
    bundle: GuestBundleDTO | None = Depends(get_optional_guest_bundle),
    admin_read_model: AdminUserReadModel = Depends(get_admin_user_read_model),
) -> GuestInfoResponse:
    """
    The signed-in guest, their invite and everyone on it.
    Accounts without a guest record (admins) get guest_data=null.
    """
    if bundle is not None:
        return GuestInfoResponse(guest_data=GuestDataResponse.from_bundle(bundle))

    admin = await find_admin_user(admin_read_model, caller.identity.email)
    return GuestInfoResponse(guest_data=None, is_admin=admin is not None)
