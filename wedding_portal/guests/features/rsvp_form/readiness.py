"""Completion rules of the RSVP form.

Each section maps the current form state to ``Ready()`` or
``Incomplete(reason)``; the form may be submitted only when every
applicable section is ready. Declining skips everything after attendance.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from wedding_portal.guests.dtos import (
    DIETARY_MISSING_MESSAGE,
    PLUS_ONE_NAME_MISSING_MESSAGE,
    ContributionTier,
    InviteType,
)


class Section(str, Enum):
    ATTENDANCE = "attendance"
    GUEST_SELECTION = "guest_selection"
    DIETARY = "dietary"
    ACCOMMODATION = "accommodation"
    EXCURSION = "excursion"


@dataclass(frozen=True)
class Ready:
    is_ready = True


@dataclass(frozen=True)
class Incomplete:
    reason: str
    is_ready = False


SectionResult = Ready | Incomplete

READY = Ready()


@dataclass(frozen=True)
class GuestAnswers:
    guest_id: UUID
    selected: bool = False
    dietary_restrictions: tuple[str, ...] = ()
    dietary_notes: str | None = None


@dataclass(frozen=True)
class RsvpFormState:
    invite_type: InviteType
    attending: bool | None = None
    guests: tuple[GuestAnswers, ...] = ()
    plus_one_form_open: bool = False
    plus_one_first_name: str = ""
    plus_one_last_name: str = ""
    accommodation_needed: bool | None = None
    accommodation_tier: ContributionTier | None = None
    # fractions published by the invite's accommodation group, empty when unknown
    accommodation_options: tuple[float, ...] = ()
    invited_to_atitlan: bool = False
    atitlan_attending: bool | None = None
    atitlan_guest_ids: frozenset[UUID] = frozenset()
    atitlan_tiers: Mapping[UUID, ContributionTier] = field(default_factory=dict)

    @property
    def attending_guests(self) -> tuple[GuestAnswers, ...]:
        if not self.attending:
            return ()
        return tuple(guest for guest in self.guests if guest.selected)


def excursion_guest_ids(state: RsvpFormState) -> frozenset[UUID]:
    """Guests joining the excursion. A sole attending guest is implicitly selected."""
    if not (state.attending and state.invited_to_atitlan and state.atitlan_attending):
        return frozenset()
    attending_ids = [guest.guest_id for guest in state.attending_guests]
    if len(attending_ids) == 1:
        return frozenset(attending_ids)
    return frozenset(state.atitlan_guest_ids) & frozenset(attending_ids)


def check_attendance(state: RsvpFormState) -> SectionResult:
    if state.attending is None:
        return Incomplete("Please let us know whether you can attend")
    return READY


def check_guest_selection(state: RsvpFormState) -> SectionResult:
    if state.invite_type == InviteType.SINGLE:
        return READY
    if state.invite_type == InviteType.PLUSONE:
        if state.plus_one_form_open and not (
            state.plus_one_first_name.strip() and state.plus_one_last_name.strip()
        ):
            return Incomplete(PLUS_ONE_NAME_MISSING_MESSAGE)
        return READY
    if not state.attending_guests:
        return Incomplete("Please select at least one guest who will attend")
    return READY


def check_dietary(state: RsvpFormState) -> SectionResult:
    for guest in state.attending_guests:
        if not guest.dietary_restrictions:
            return Incomplete(DIETARY_MISSING_MESSAGE)
    return READY


def check_accommodation(state: RsvpFormState) -> SectionResult:
    if state.accommodation_needed is None:
        return Incomplete("Please let us know whether you need accommodation")
    if not state.accommodation_needed:
        return READY
    if state.accommodation_tier is None:
        return Incomplete("Please choose a contribution level for your accommodation")
    if state.accommodation_options and (
        float(state.accommodation_tier.fraction) not in state.accommodation_options
    ):
        return Incomplete("That contribution level is not offered for your accommodation")
    return READY


def check_excursion(state: RsvpFormState) -> SectionResult:
    if not state.invited_to_atitlan:
        return READY
    if state.atitlan_attending is None:
        return Incomplete("Please let us know whether you will join the Atitlan excursion")
    if not state.atitlan_attending:
        return READY

    attending_ids = {guest.guest_id for guest in state.attending_guests}
    if len(attending_ids) == 1:
        (guest_id,) = attending_ids
        if guest_id not in state.atitlan_tiers:
            return Incomplete("Please choose a contribution level for the excursion")
        return READY

    if not state.atitlan_guest_ids:
        return Incomplete("Please select who will join the Atitlan excursion")
    if not state.atitlan_guest_ids <= attending_ids:
        return Incomplete("Only attending guests can join the Atitlan excursion")
    for guest_id in state.atitlan_guest_ids:
        if guest_id not in state.atitlan_tiers:
            return Incomplete("Please choose a contribution level for each excursion guest")
    return READY


_SECTION_CHECKS = (
    (Section.GUEST_SELECTION, check_guest_selection),
    (Section.DIETARY, check_dietary),
    (Section.ACCOMMODATION, check_accommodation),
    (Section.EXCURSION, check_excursion),
)


@dataclass(frozen=True)
class FormReadiness:
    sections: dict[Section, SectionResult]
    declining: bool = False

    @property
    def is_ready(self) -> bool:
        return all(result.is_ready for result in self.sections.values())

    @property
    def first_incomplete(self) -> tuple[Section, Incomplete] | None:
        for section, result in self.sections.items():
            if isinstance(result, Incomplete):
                return section, result
        return None


def evaluate_readiness(state: RsvpFormState) -> FormReadiness:
    attendance = check_attendance(state)
    if state.attending is not True:
        # undecided, or declining: nothing past attendance applies
        return FormReadiness(
            sections={Section.ATTENDANCE: attendance},
            declining=state.attending is False,
        )

    sections: dict[Section, SectionResult] = {Section.ATTENDANCE: attendance}
    for section, check in _SECTION_CHECKS:
        sections[section] = check(state)
    return FormReadiness(sections=sections)
