"""Pure aggregations over admin report rows."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from wedding_portal.admin.features.reports.read_model import (
    DietaryEntryDTO,
    GuestRowDTO,
    PaymentRowDTO,
    RsvpRowDTO,
    StatsSourceDTO,
)
from wedding_portal.guests.dtos import PaymentType, RsvpStatus
from wedding_portal.guests.features.rsvp_form.dietary import NO_RESTRICTIONS_TAG, display_name


class AttendingFilter(str, Enum):
    YES = "yes"
    NO = "no"
    UNANSWERED = "unanswered"


@dataclass(frozen=True)
class GuestFilters:
    status: RsvpStatus | None = None
    accommodation_group: str | None = None
    attending: AttendingFilter | None = None
    search: str | None = None


def _matches_attending(row: GuestRowDTO, wanted: AttendingFilter) -> bool:
    if wanted == AttendingFilter.UNANSWERED:
        return row.attending is None
    return row.attending is (wanted == AttendingFilter.YES)


def _matches_search(row: GuestRowDTO, term: str) -> bool:
    term = term.lower()
    return any(term in (value or "").lower() for value in (row.first_name, row.last_name, row.email))


def filter_guests(rows: Iterable[GuestRowDTO], filters: GuestFilters) -> list[GuestRowDTO]:
    filtered = list(rows)
    if filters.status is not None:
        filtered = [row for row in filtered if row.rsvp_status == filters.status]
    if filters.accommodation_group:
        filtered = [row for row in filtered if row.accommodation_group == filters.accommodation_group]
    if filters.attending is not None:
        filtered = [row for row in filtered if _matches_attending(row, filters.attending)]
    if filters.search and filters.search.strip():
        filtered = [row for row in filtered if _matches_search(row, filters.search.strip())]
    return filtered


def confirmed_rsvps(rows: Iterable[RsvpRowDTO]) -> list[RsvpRowDTO]:
    """Attending guests of confirmed invites."""
    return [row for row in rows if row.rsvp_status == RsvpStatus.CONFIRMED and row.attending]


@dataclass(frozen=True)
class DietaryGuest:
    name: str
    notes: str


@dataclass(frozen=True)
class DietarySummaryItem:
    restriction: str
    guests: tuple[DietaryGuest, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.guests)


def summarize_dietary(entries: Iterable[DietaryEntryDTO]) -> list[DietarySummaryItem]:
    """Guests per restriction, most common first. Explicit "no restrictions" answers are left out."""
    by_tag: dict[str, list[DietaryGuest]] = {}
    for entry in entries:
        for tag in entry.restrictions:
            if not tag or tag == NO_RESTRICTIONS_TAG:
                continue
            by_tag.setdefault(tag, []).append(DietaryGuest(name=entry.guest_name, notes=entry.notes or ""))

    items = [
        DietarySummaryItem(restriction=display_name(tag), guests=tuple(guests))
        for tag, guests in by_tag.items()
    ]
    # stable sort keeps first-seen order among equal counts
    return sorted(items, key=lambda item: item.count, reverse=True)


@dataclass(frozen=True)
class PaymentSummary:
    total_accommodation_committed: Decimal = Decimal("0")
    total_atitlan_committed: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_outstanding: Decimal = Decimal("0")


def summarize_payments(rows: Iterable[PaymentRowDTO]) -> PaymentSummary:
    accommodation = Decimal("0")
    atitlan = Decimal("0")
    paid = Decimal("0")
    outstanding = Decimal("0")
    for row in rows:
        if row.payment_type == PaymentType.ACCOMMODATION:
            accommodation += row.amount_committed
        elif row.payment_type == PaymentType.ATITLAN:
            atitlan += row.amount_committed
        paid += row.amount_paid
        outstanding += row.balance
    return PaymentSummary(
        total_accommodation_committed=accommodation,
        total_atitlan_committed=atitlan,
        total_paid=paid,
        total_outstanding=outstanding,
    )


@dataclass(frozen=True)
class NamedCount:
    name: str
    value: int


@dataclass(frozen=True)
class TimelinePoint:
    date: date
    count: int


@dataclass(frozen=True)
class DashboardStats:
    total_guests: int
    rsvp_status_counts: dict[RsvpStatus, int]
    by_accommodation_group: list[NamedCount]
    by_invite_type: list[NamedCount]
    rsvp_timeline: list[TimelinePoint]
    dietary_restrictions: list[NamedCount]


def cumulative_timeline(submitted: Iterable[date]) -> list[TimelinePoint]:
    """Running total of submitted RSVPs, one point per day."""
    per_day = Counter(submitted)
    points = []
    running = 0
    for day in sorted(per_day):
        running += per_day[day]
        points.append(TimelinePoint(date=day, count=running))
    return points


def compute_stats(source: StatsSourceDTO) -> DashboardStats:
    status_counts = Counter(invite.rsvp_status for invite in source.invites)
    group_counts = Counter(
        invite.accommodation_group for invite in source.invites if invite.accommodation_group
    )
    type_counts = Counter(invite.invite_type for invite in source.invites)
    dietary_counts = Counter(
        tag
        for tags in source.dietary_restrictions
        for tag in tags
        if tag and tag != NO_RESTRICTIONS_TAG
    )

    return DashboardStats(
        total_guests=source.total_guests,
        rsvp_status_counts={status: status_counts.get(status, 0) for status in RsvpStatus},
        by_accommodation_group=[
            NamedCount(name=name, value=value) for name, value in group_counts.items()
        ],
        by_invite_type=[
            NamedCount(name=invite_type.value.capitalize(), value=value)
            for invite_type, value in type_counts.items()
        ],
        rsvp_timeline=cumulative_timeline(
            invite.rsvp_submitted_at.date()
            for invite in source.invites
            if invite.rsvp_submitted_at is not None
        ),
        dietary_restrictions=[
            NamedCount(name=display_name(tag), value=value) for tag, value in dietary_counts.items()
        ],
    )
