from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from wedding_portal.guests.repository.orm_models import (
        Guest,
        Invite,
        Payment,
        RsvpResponse,
        TravelDetails,
    )
    from wedding_portal.models import AccommodationGroup


class GuestDataUnavailableError(Exception):
    """Raised when a guest's invite or co-invited guests cannot be resolved."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unable to load guest information: {reason}")


class OutOfInviteScopeError(Exception):
    """Raised when a caller touches a guest that does not belong to their invite."""

    def __init__(self, guest_id: UUID) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest '{guest_id}' is not part of this invitation")


PLUS_ONE_NAME_MISSING_MESSAGE = "Please enter first and last name for your guest"


class PlusOneNameMissingError(ValueError):
    def __init__(self) -> None:
        super().__init__(PLUS_ONE_NAME_MISSING_MESSAGE)


DIETARY_MISSING_MESSAGE = (
    "Please select dietary restrictions for every attending guest (choose None if there are none)"
)


class DietaryMissingError(ValueError):
    def __init__(self) -> None:
        super().__init__(DIETARY_MISSING_MESSAGE)


class InviteType(str, Enum):
    SINGLE = "single"
    COUPLE = "couple"
    PLUSONE = "plusone"


class RsvpStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PARTIAL = "partial"
    DECLINED = "declined"

    @classmethod
    def from_attendance(cls, attending_count: int, guest_count: int) -> "RsvpStatus":
        if attending_count == 0:
            return cls.DECLINED
        if attending_count == guest_count:
            return cls.CONFIRMED
        return cls.PARTIAL


class ContributionTier(str, Enum):
    NONE = "none"
    HALF = "half"
    FULL = "full"

    @property
    def fraction(self) -> Decimal:
        return _TIER_FRACTIONS[self]


_TIER_FRACTIONS = {
    ContributionTier.NONE: Decimal("0"),
    ContributionTier.HALF: Decimal("0.5"),
    ContributionTier.FULL: Decimal("1"),
}


class PaymentType(str, Enum):
    ACCOMMODATION = "accommodation"
    ATITLAN = "atitlan"


@dataclass(frozen=True)
class GuestDTO:
    """DTO for one invitee."""

    id: UUID
    invite_id: UUID
    first_name: str
    last_name: str
    is_primary: bool = False
    email: str | None = None
    user_id: UUID | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_orm(cls, guest: "Guest") -> "GuestDTO":
        return cls(
            id=guest.id,
            invite_id=guest.invite_id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            is_primary=guest.is_primary,
            email=guest.email,
            user_id=guest.user_id,
        )


@dataclass(frozen=True)
class InviteDTO:
    """DTO for an invite, the unit of RSVP."""

    id: UUID
    invite_code: str
    invite_type: InviteType
    accommodation_group: str | None = None
    invited_to_atitlan: bool = False
    rsvp_status: RsvpStatus = RsvpStatus.PENDING
    rsvp_submitted_at: datetime | None = None
    invite_sent: bool = False

    @classmethod
    def from_orm(cls, invite: "Invite") -> "InviteDTO":
        return cls(
            id=invite.id,
            invite_code=invite.invite_code,
            invite_type=InviteType(invite.invite_type),
            accommodation_group=invite.accommodation_group,
            invited_to_atitlan=invite.invited_to_atitlan,
            rsvp_status=RsvpStatus(invite.rsvp_status),
            rsvp_submitted_at=invite.rsvp_submitted_at,
            invite_sent=invite.invite_sent,
        )


@dataclass(frozen=True)
class GuestBundleDTO:
    """The caller's guest record, their invite and every guest on it, primary first."""

    current_guest: GuestDTO
    invite: InviteDTO
    all_guests: tuple[GuestDTO, ...]

    @property
    def guest_ids(self) -> frozenset[UUID]:
        return frozenset(guest.id for guest in self.all_guests)


@dataclass(frozen=True)
class AccommodationGroupDTO:
    id: UUID
    group_code: str
    display_name: str
    per_night_cost: Decimal
    number_of_nights: int
    description: str | None = None
    payment_options: tuple[float, ...] = ()

    @property
    def total_cost(self) -> Decimal:
        return self.per_night_cost * self.number_of_nights

    @classmethod
    def from_orm(cls, group: "AccommodationGroup") -> "AccommodationGroupDTO":
        return cls(
            id=group.id,
            group_code=group.group_code,
            display_name=group.display_name,
            description=group.description,
            per_night_cost=Decimal(group.per_night_cost),
            number_of_nights=group.number_of_nights,
            payment_options=tuple(group.payment_options or ()),
        )


@dataclass(frozen=True)
class RsvpResponseDTO:
    """DTO for one guest's stored RSVP answers."""

    id: UUID
    guest_id: UUID
    attending: bool
    dietary_restrictions: tuple[str, ...] = ()
    dietary_notes: str | None = None
    accommodation_needed: bool = False
    accommodation_payment_level: ContributionTier | None = None
    atitlan_attending: bool = False
    atitlan_payment_level: ContributionTier | None = None

    @classmethod
    def from_orm(cls, response: "RsvpResponse") -> "RsvpResponseDTO":
        return cls(
            id=response.id,
            guest_id=response.guest_id,
            attending=response.attending,
            dietary_restrictions=tuple(response.dietary_restrictions or ()),
            dietary_notes=response.dietary_notes,
            accommodation_needed=response.accommodation_needed,
            accommodation_payment_level=response.accommodation_payment_level,
            atitlan_attending=response.atitlan_attending,
            atitlan_payment_level=response.atitlan_payment_level,
        )


@dataclass(frozen=True)
class TravelDetailsDTO:
    guest_id: UUID
    arrival_date: date | None = None
    arrival_time: time | None = None
    arrival_airline: str | None = None
    arrival_flight_number: str | None = None
    departure_date: date | None = None
    departure_time: time | None = None
    departure_airline: str | None = None
    departure_flight_number: str | None = None
    needs_transfer: bool = False
    notes: str | None = None

    @classmethod
    def from_orm(cls, travel: "TravelDetails") -> "TravelDetailsDTO":
        return cls(
            guest_id=travel.guest_id,
            arrival_date=travel.arrival_date,
            arrival_time=travel.arrival_time,
            arrival_airline=travel.arrival_airline,
            arrival_flight_number=travel.arrival_flight_number,
            departure_date=travel.departure_date,
            departure_time=travel.departure_time,
            departure_airline=travel.departure_airline,
            departure_flight_number=travel.departure_flight_number,
            needs_transfer=travel.needs_transfer,
            notes=travel.notes,
        )


@dataclass(frozen=True)
class PaymentDTO:
    id: UUID
    invite_id: UUID
    payment_type: PaymentType
    amount_committed: Decimal
    amount_paid: Decimal = Decimal("0")
    payment_method: str | None = None
    notes: str | None = None

    @property
    def balance(self) -> Decimal:
        return self.amount_committed - self.amount_paid

    @classmethod
    def from_orm(cls, payment: "Payment") -> "PaymentDTO":
        return cls(
            id=payment.id,
            invite_id=payment.invite_id,
            payment_type=PaymentType(payment.payment_type),
            amount_committed=Decimal(payment.amount_committed),
            amount_paid=Decimal(payment.amount_paid or 0),
            payment_method=payment.payment_method,
            notes=payment.notes,
        )


@dataclass(frozen=True)
class RsvpOutcomeDTO:
    """Result of a submit or decline."""

    message: str
    rsvp_status: RsvpStatus
    payments: list[PaymentDTO] = field(default_factory=list)
