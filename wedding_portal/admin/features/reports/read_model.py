"""Read model behind the admin back office tables and exports."""

import abc
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from functools import partial
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import (
    InviteDTO,
    InviteType,
    PaymentType,
    RsvpStatus,
    TravelDetailsDTO,
)
from wedding_portal.guests.repository.orm_models import (
    Guest,
    Invite,
    Payment,
    RsvpResponse,
    TravelDetails,
)


def _full_name(first_name: str | None, last_name: str | None) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


@dataclass(frozen=True)
class GuestRowDTO:
    id: UUID
    invite_id: UUID
    first_name: str
    last_name: str
    email: str | None
    invite_type: InviteType
    accommodation_group: str | None
    rsvp_status: RsvpStatus
    # None until the guest has a stored response
    attending: bool | None
    invited_to_atitlan: bool


@dataclass(frozen=True)
class RsvpRowDTO:
    response_id: UUID
    guest_id: UUID
    guest_name: str
    email: str | None
    submitted_at: datetime | None
    rsvp_status: RsvpStatus
    attending: bool
    dietary_restrictions: tuple[str, ...]
    dietary_notes: str | None
    accommodation_needed: bool
    atitlan_attending: bool


@dataclass(frozen=True)
class DietaryEntryDTO:
    guest_name: str
    restrictions: tuple[str, ...]
    notes: str | None


@dataclass(frozen=True)
class PaymentRowDTO:
    id: UUID
    invite_id: UUID
    guest_names: str
    payment_type: PaymentType
    amount_committed: Decimal
    amount_paid: Decimal
    payment_method: str | None
    notes: str | None

    @property
    def balance(self) -> Decimal:
        return self.amount_committed - self.amount_paid


@dataclass(frozen=True)
class TravelRowDTO:
    guest_name: str
    email: str | None
    travel: TravelDetailsDTO


@dataclass(frozen=True)
class StatsSourceDTO:
    total_guests: int
    invites: tuple[InviteDTO, ...]
    dietary_restrictions: tuple[tuple[str, ...], ...]


class AdminReportReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_guests(self) -> list[GuestRowDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_rsvps(self) -> list[RsvpRowDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_dietary_entries(self) -> list[DietaryEntryDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_payments(self) -> list[PaymentRowDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_travel(self) -> list[TravelRowDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_stats_source(self) -> StatsSourceDTO:
        raise NotImplementedError


class SqlAdminReportReadModel(AdminReportReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_guests(self) -> list[GuestRowDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Guest, Invite, RsvpResponse.attending)
                .join(Invite, Guest.invite_id == Invite.id)
                .outerjoin(RsvpResponse, RsvpResponse.guest_id == Guest.id)
                .order_by(Guest.last_name, Guest.first_name)
            )
            return [
                GuestRowDTO(
                    id=guest.id,
                    invite_id=invite.id,
                    first_name=guest.first_name,
                    last_name=guest.last_name,
                    email=guest.email,
                    invite_type=InviteType(invite.invite_type),
                    accommodation_group=invite.accommodation_group,
                    rsvp_status=RsvpStatus(invite.rsvp_status),
                    attending=attending,
                    invited_to_atitlan=invite.invited_to_atitlan,
                )
                for guest, invite, attending in result.all()
            ]

    async def list_rsvps(self) -> list[RsvpRowDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RsvpResponse, Guest, Invite)
                .join(Guest, RsvpResponse.guest_id == Guest.id)
                .join(Invite, Guest.invite_id == Invite.id)
                .order_by(Invite.rsvp_submitted_at, Guest.last_name)
            )
            return [
                RsvpRowDTO(
                    response_id=response.id,
                    guest_id=guest.id,
                    guest_name=_full_name(guest.first_name, guest.last_name),
                    email=guest.email,
                    submitted_at=invite.rsvp_submitted_at,
                    rsvp_status=RsvpStatus(invite.rsvp_status),
                    attending=response.attending,
                    dietary_restrictions=tuple(response.dietary_restrictions or ()),
                    dietary_notes=response.dietary_notes,
                    accommodation_needed=response.accommodation_needed,
                    atitlan_attending=response.atitlan_attending,
                )
                for response, guest, invite in result.all()
            ]

    async def list_dietary_entries(self) -> list[DietaryEntryDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(
                    Guest.first_name,
                    Guest.last_name,
                    RsvpResponse.dietary_restrictions,
                    RsvpResponse.dietary_notes,
                ).join(Guest, RsvpResponse.guest_id == Guest.id)
            )
            return [
                DietaryEntryDTO(
                    guest_name=_full_name(first_name, last_name),
                    restrictions=tuple(restrictions or ()),
                    notes=notes,
                )
                for first_name, last_name, restrictions, notes in result.all()
            ]

    async def list_payments(self) -> list[PaymentRowDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Payment).order_by(Payment.created_at))
            payments = result.scalars().all()

            invite_ids = {payment.invite_id for payment in payments}
            names: dict[UUID, list[str]] = {}
            if invite_ids:
                result = await session.execute(
                    select(Guest.invite_id, Guest.first_name, Guest.last_name)
                    .where(Guest.invite_id.in_(invite_ids))
                    .order_by(Guest.is_primary.desc(), Guest.created_at)
                )
                for invite_id, first_name, last_name in result.all():
                    name = _full_name(first_name, last_name)
                    if name:
                        names.setdefault(invite_id, []).append(name)

            return [
                PaymentRowDTO(
                    id=payment.id,
                    invite_id=payment.invite_id,
                    guest_names=", ".join(names.get(payment.invite_id, [])),
                    payment_type=PaymentType(payment.payment_type),
                    amount_committed=Decimal(payment.amount_committed or 0),
                    amount_paid=Decimal(payment.amount_paid or 0),
                    payment_method=payment.payment_method,
                    notes=payment.notes,
                )
                for payment in payments
            ]

    async def list_travel(self) -> list[TravelRowDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(TravelDetails, Guest)
                .join(Guest, TravelDetails.guest_id == Guest.id)
                .order_by(TravelDetails.arrival_date, Guest.last_name)
            )
            return [
                TravelRowDTO(
                    guest_name=_full_name(guest.first_name, guest.last_name),
                    email=guest.email,
                    travel=TravelDetailsDTO.from_orm(travel),
                )
                for travel, guest in result.all()
            ]

    async def get_stats_source(self) -> StatsSourceDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            total_guests = await session.scalar(select(func.count()).select_from(Guest))

            result = await session.execute(select(Invite))
            invites = tuple(InviteDTO.from_orm(invite) for invite in result.scalars().all())

            result = await session.execute(select(RsvpResponse.dietary_restrictions))
            dietary = tuple(tuple(tags or ()) for tags in result.scalars().all())

        return StatsSourceDTO(
            total_guests=total_guests or 0,
            invites=invites,
            dietary_restrictions=dietary,
        )
