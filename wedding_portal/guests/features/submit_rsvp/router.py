import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from wedding_portal.auth.dependencies import AuthenticatedCaller, require_identity
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.guests.dependencies import get_guest_bundle, get_guest_data_read_model
from wedding_portal.guests.dtos import (
    GuestBundleDTO,
    OutOfInviteScopeError,
    PaymentType,
    RsvpStatus,
)
from wedding_portal.guests.features.rsvp_form.dtos import RsvpFormRequest, build_form_state
from wedding_portal.guests.features.rsvp_form.readiness import evaluate_readiness
from wedding_portal.guests.features.rsvp_form.router import get_invite_accommodation_group
from wedding_portal.guests.features.submit_rsvp.write_model import (
    RsvpSubmissionDTO,
    RsvpWriteModel,
    SqlRsvpWriteModel,
)
from wedding_portal.guests.repository.read_models import GuestDataReadModel
from wedding_portal.guests.urls import RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class CommitmentResponse(BaseModel):
    payment_type: PaymentType
    amount_committed: float


class RsvpSubmitResponse(BaseModel):
    message: str
    rsvp_status: RsvpStatus
    commitments: list[CommitmentResponse] = []


def get_rsvp_write_model() -> RsvpWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRsvpWriteModel()


@router.post(RSVP_URL, response_model=RsvpSubmitResponse)
async def submit_rsvp(
    form: RsvpFormRequest,
    caller: AuthenticatedCaller = Depends(require_identity),
    bundle: GuestBundleDTO = Depends(get_guest_bundle),
    read_model: GuestDataReadModel = Depends(get_guest_data_read_model),
    write_model: RsvpWriteModel = Depends(get_rsvp_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> RsvpSubmitResponse:
    """
    Submit the RSVP form for the caller's invite.
    Declining (attending=false) records every guest as not attending.
    The form is re-checked here and refused if any section is incomplete.
    """
    group = await get_invite_accommodation_group(bundle, read_model)
    try:
        state = build_form_state(form, bundle, group)
    except OutOfInviteScopeError as e:
        raise HTTPException(status_code=403, detail=str(e))

    readiness = evaluate_readiness(state)
    if not readiness.is_ready:
        section, incomplete = readiness.first_incomplete
        raise HTTPException(
            status_code=422,
            detail={"section": section.value, "reason": incomplete.reason},
        )

    try:
        if readiness.declining:
            outcome = await write_model.decline_rsvp(bundle.invite.id)
        else:
            outcome = await write_model.submit_rsvp(
                RsvpSubmissionDTO.from_form_state(state, bundle.invite.id)
            )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        logger.exception("RSVP submission failed for invite %s", bundle.invite.id)
        raise HTTPException(status_code=500, detail="Failed to submit RSVP: please try again")
    finally:
        cache.invalidate(caller.identity.id)

    return RsvpSubmitResponse(
        message=outcome.message,
        rsvp_status=outcome.rsvp_status,
        commitments=[
            CommitmentResponse(
                payment_type=payment.payment_type,
                amount_committed=float(payment.amount_committed),
            )
            for payment in outcome.payments
        ],
    )
