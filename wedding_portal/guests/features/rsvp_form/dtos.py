from uuid import UUID

from pydantic import BaseModel

from wedding_portal.guests.dtos import (
    AccommodationGroupDTO,
    ContributionTier,
    GuestBundleDTO,
    InviteType,
)
from wedding_portal.guests.features.rsvp_form.readiness import GuestAnswers, RsvpFormState
from wedding_portal.guests.scope import InviteScope


class GuestAnswersRequest(BaseModel):
    guest_id: UUID
    selected: bool = False
    # form labels, e.g. ["Vegan", "Gluten-Free"] or ["__none__"]
    dietary_restrictions: list[str] = []
    dietary_notes: str | None = None


class RsvpFormRequest(BaseModel):
    """Current state of the RSVP form."""

    attending: bool | None = None
    guests: list[GuestAnswersRequest] = []
    plus_one_form_open: bool = False
    plus_one_first_name: str = ""
    plus_one_last_name: str = ""
    accommodation_needed: bool | None = None
    accommodation_tier: ContributionTier | None = None
    atitlan_attending: bool | None = None
    atitlan_guest_ids: list[UUID] = []
    atitlan_tiers: dict[UUID, ContributionTier] = {}


def build_form_state(
    form: RsvpFormRequest,
    bundle: GuestBundleDTO,
    accommodation_group: AccommodationGroupDTO | None = None,
) -> RsvpFormState:
    """
    Combine the submitted form with what the server knows about the invite.
    Raises OutOfInviteScopeError for guests outside the caller's invite.
    """
    scope = InviteScope.from_bundle(bundle)
    scope.ensure_guests(answer.guest_id for answer in form.guests)
    scope.ensure_guests(form.atitlan_guest_ids)
    scope.ensure_guests(form.atitlan_tiers)

    answers = {answer.guest_id: answer for answer in form.guests}
    # single and plusone invites have no guest selection, every guest attends with the invite
    preselected = bundle.invite.invite_type in (InviteType.SINGLE, InviteType.PLUSONE)

    guests = []
    for guest in bundle.all_guests:
        answer = answers.get(guest.id)
        guests.append(
            GuestAnswers(
                guest_id=guest.id,
                selected=preselected or (answer.selected if answer else False),
                dietary_restrictions=tuple(answer.dietary_restrictions) if answer else (),
                dietary_notes=answer.dietary_notes if answer else None,
            )
        )

    return RsvpFormState(
        invite_type=bundle.invite.invite_type,
        attending=form.attending,
        guests=tuple(guests),
        plus_one_form_open=form.plus_one_form_open,
        plus_one_first_name=form.plus_one_first_name,
        plus_one_last_name=form.plus_one_last_name,
        accommodation_needed=form.accommodation_needed,
        accommodation_tier=form.accommodation_tier,
        accommodation_options=accommodation_group.payment_options if accommodation_group else (),
        invited_to_atitlan=bundle.invite.invited_to_atitlan,
        atitlan_attending=form.atitlan_attending,
        atitlan_guest_ids=frozenset(form.atitlan_guest_ids),
        atitlan_tiers=dict(form.atitlan_tiers),
    )
