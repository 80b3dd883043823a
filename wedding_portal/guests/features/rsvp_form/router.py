from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_portal.guests.dependencies import get_guest_bundle, get_guest_data_read_model
from wedding_portal.guests.dtos import (
    AccommodationGroupDTO,
    GuestBundleDTO,
    OutOfInviteScopeError,
)
from wedding_portal.guests.features.rsvp_form.dtos import RsvpFormRequest, build_form_state
from wedding_portal.guests.features.rsvp_form.readiness import (
    FormReadiness,
    Incomplete,
    evaluate_readiness,
)
from wedding_portal.guests.repository.read_models import GuestDataReadModel
from wedding_portal.guests.urls import RSVP_ACCOMMODATION_GROUP_URL, RSVP_READINESS_URL

router = APIRouter()


class SectionReadinessResponse(BaseModel):
    section: str
    ready: bool
    reason: str | None = None


class ReadinessResponse(BaseModel):
    ready: bool
    declining: bool
    sections: list[SectionReadinessResponse]

    @classmethod
    def from_readiness(cls, readiness: FormReadiness) -> "ReadinessResponse":
        return cls(
            ready=readiness.is_ready,
            declining=readiness.declining,
            sections=[
                SectionReadinessResponse(
                    section=section.value,
                    ready=result.is_ready,
                    reason=result.reason if isinstance(result, Incomplete) else None,
                )
                for section, result in readiness.sections.items()
            ],
        )


class AccommodationGroupResponse(BaseModel):
    group_code: str
    display_name: str
    description: str | None = None
    per_night_cost: float
    number_of_nights: int
    total_cost: float
    payment_options: list[float]


async def get_invite_accommodation_group(
    bundle: GuestBundleDTO, read_model: GuestDataReadModel
) -> AccommodationGroupDTO | None:
    if not bundle.invite.accommodation_group:
        return None
    return await read_model.get_accommodation_group(bundle.invite.accommodation_group)


@router.post(RSVP_READINESS_URL, response_model=ReadinessResponse)
async def check_readiness(
    form: RsvpFormRequest,
    bundle: GuestBundleDTO = Depends(get_guest_bundle),
    read_model: GuestDataReadModel = Depends(get_guest_data_read_model),
) -> ReadinessResponse:
    """Evaluate which sections of the RSVP form are complete."""
    group = await get_invite_accommodation_group(bundle, read_model)
    try:
        state = build_form_state(form, bundle, group)
    except OutOfInviteScopeError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return ReadinessResponse.from_readiness(evaluate_readiness(state))


@router.get(RSVP_ACCOMMODATION_GROUP_URL, response_model=AccommodationGroupResponse)
async def get_accommodation_group(
    bundle: GuestBundleDTO = Depends(get_guest_bundle),
    read_model: GuestDataReadModel = Depends(get_guest_data_read_model),
) -> AccommodationGroupResponse:
    group = await get_invite_accommodation_group(bundle, read_model)
    if group is None:
        raise HTTPException(status_code=404, detail="No accommodation group for this invitation")
    return AccommodationGroupResponse(
        group_code=group.group_code,
        display_name=group.display_name,
        description=group.description,
        per_night_cost=float(group.per_night_cost),
        number_of_nights=group.number_of_nights,
        total_cost=float(group.total_cost),
        payment_options=list(group.payment_options),
    )
