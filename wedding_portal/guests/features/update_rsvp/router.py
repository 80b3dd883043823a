from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_portal.auth.dependencies import AuthenticatedCaller, require_identity
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.guests.dependencies import get_invite_scope
from wedding_portal.guests.dtos import (
    ContributionTier,
    DietaryMissingError,
    OutOfInviteScopeError,
    RsvpStatus,
)
from wedding_portal.guests.features.update_rsvp.write_model import (
    RsvpResponseUpdateDTO,
    RsvpUpdateWriteModel,
    SqlRsvpUpdateWriteModel,
    ensure_dietary_answered,
)
from wedding_portal.guests.scope import InviteScope
from wedding_portal.guests.urls import RSVP_RESPONSES_URL

router = APIRouter()


class RsvpResponseUpdate(BaseModel):
    guest_id: UUID
    attending: bool
    dietary_restrictions: list[str] = []
    dietary_notes: str | None = None
    accommodation_needed: bool = False
    accommodation_payment_level: ContributionTier | None = None
    atitlan_attending: bool = False
    atitlan_payment_level: ContributionTier | None = None


class RsvpResponsesUpdateRequest(BaseModel):
    responses: list[RsvpResponseUpdate]


class RsvpResponsesUpdateResponse(BaseModel):
    message: str
    rsvp_status: RsvpStatus


def get_rsvp_update_write_model() -> RsvpUpdateWriteModel:
    """Dependency to get RSVP update write model instance."""
    return SqlRsvpUpdateWriteModel()


@router.put(RSVP_RESPONSES_URL, response_model=RsvpResponsesUpdateResponse)
async def update_rsvp_responses(
    request: RsvpResponsesUpdateRequest,
    caller: AuthenticatedCaller = Depends(require_identity),
    scope: InviteScope = Depends(get_invite_scope),
    write_model: RsvpUpdateWriteModel = Depends(get_rsvp_update_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> RsvpResponsesUpdateResponse:
    """Edit already submitted answers from the guest dashboard."""
    try:
        scope.ensure_guests(update.guest_id for update in request.responses)
    except OutOfInviteScopeError as e:
        raise HTTPException(status_code=403, detail=str(e))

    updates = [
        RsvpResponseUpdateDTO(
            guest_id=update.guest_id,
            attending=update.attending,
            dietary_restrictions=tuple(update.dietary_restrictions),
            dietary_notes=update.dietary_notes,
            accommodation_needed=update.accommodation_needed,
            accommodation_payment_level=update.accommodation_payment_level,
            atitlan_attending=update.atitlan_attending,
            atitlan_payment_level=update.atitlan_payment_level,
        )
        for update in request.responses
    ]
    try:
        ensure_dietary_answered(updates)
        status = await write_model.update_responses(scope.invite_id, updates)
    except DietaryMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    cache.invalidate(caller.identity.id)
    return RsvpResponsesUpdateResponse(message="RSVP updated successfully!", rsvp_status=status)
