from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from wedding_portal.admin.features.reports.read_model import (
    AdminReportReadModel,
    DietaryEntryDTO,
    GuestRowDTO,
    PaymentRowDTO,
    RsvpRowDTO,
    StatsSourceDTO,
    TravelRowDTO,
)
from wedding_portal.guests.dtos import InviteType, PaymentType, RsvpStatus


def create_guest_row(
    first_name: str = "Ana",
    last_name: str = "Lopez",
    rsvp_status: RsvpStatus = RsvpStatus.PENDING,
    attending: bool | None = None,
    accommodation_group: str | None = "hotel_lago",
    email: str | None = None,
) -> GuestRowDTO:
    return GuestRowDTO(
        id=uuid4(),
        invite_id=uuid4(),
        first_name=first_name,
        last_name=last_name,
        email=email if email is not None else f"{first_name.lower()}@example.com",
        invite_type=InviteType.SINGLE,
        accommodation_group=accommodation_group,
        rsvp_status=rsvp_status,
        attending=attending,
        invited_to_atitlan=False,
    )


def create_rsvp_row(
    guest_name: str = "Ana Lopez",
    rsvp_status: RsvpStatus = RsvpStatus.CONFIRMED,
    attending: bool = True,
    dietary_restrictions: tuple[str, ...] = (),
) -> RsvpRowDTO:
    return RsvpRowDTO(
        response_id=uuid4(),
        guest_id=uuid4(),
        guest_name=guest_name,
        email="ana@example.com",
        submitted_at=datetime(2026, 10, 1, 9, 30, tzinfo=UTC),
        rsvp_status=rsvp_status,
        attending=attending,
        dietary_restrictions=dietary_restrictions,
        dietary_notes=None,
        accommodation_needed=False,
        atitlan_attending=False,
    )


def create_payment_row(
    payment_type: PaymentType = PaymentType.ACCOMMODATION,
    committed: str = "180.00",
    paid: str = "0",
) -> PaymentRowDTO:
    return PaymentRowDTO(
        id=uuid4(),
        invite_id=uuid4(),
        guest_names="Ana Lopez, Luis Perez",
        payment_type=payment_type,
        amount_committed=Decimal(committed),
        amount_paid=Decimal(paid),
        payment_method=None,
        notes=None,
    )


class InMemoryAdminReportReadModel(AdminReportReadModel):
    def __init__(
        self,
        guests: list[GuestRowDTO] | None = None,
        rsvps: list[RsvpRowDTO] | None = None,
        dietary: list[DietaryEntryDTO] | None = None,
        payments: list[PaymentRowDTO] | None = None,
        travel: list[TravelRowDTO] | None = None,
        stats_source: StatsSourceDTO | None = None,
    ) -> None:
        self.guests = guests or []
        self.rsvps = rsvps or []
        self.dietary = dietary or []
        self.payments = payments or []
        self.travel = travel or []
        self.stats_source = stats_source or StatsSourceDTO(
            total_guests=0, invites=(), dietary_restrictions=()
        )

    async def list_guests(self) -> list[GuestRowDTO]:
        return list(self.guests)

    async def list_rsvps(self) -> list[RsvpRowDTO]:
        return list(self.rsvps)

    async def list_dietary_entries(self) -> list[DietaryEntryDTO]:
        return list(self.dietary)

    async def list_payments(self) -> list[PaymentRowDTO]:
        return list(self.payments)

    async def list_travel(self) -> list[TravelRowDTO]:
        return list(self.travel)

    async def get_stats_source(self) -> StatsSourceDTO:
        return self.stats_source
