"""Back office corrections to guests, responses and payments."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import InviteType, PaymentDTO, RsvpStatus
from wedding_portal.guests.features.rsvp_form.dietary import encode_restrictions
from wedding_portal.guests.repository.orm_models import Guest, Invite, Payment, RsvpResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestUpdateDTO:
    first_name: str
    last_name: str
    email: str | None
    invite_type: InviteType
    accommodation_group: str | None


@dataclass(frozen=True)
class AdminRsvpUpdateDTO:
    attending: bool
    dietary_restrictions: tuple[str, ...] = ()
    dietary_notes: str | None = None
    accommodation_needed: bool = False
    atitlan_attending: bool = False


@dataclass(frozen=True)
class PaymentUpdateDTO:
    amount_paid: Decimal
    payment_method: str | None = None
    notes: str | None = None


class AdminManageWriteModel(ABC):
    """Every method raises ValueError when the target row does not exist."""

    @abstractmethod
    async def update_guest(self, guest_id: UUID, update: GuestUpdateDTO) -> None:
        """Update the guest's name and email and their invite's type and group."""
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, guest_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_rsvp(self, response_id: UUID, update: AdminRsvpUpdateDTO) -> RsvpStatus:
        raise NotImplementedError

    @abstractmethod
    async def update_payment(self, payment_id: UUID, update: PaymentUpdateDTO) -> PaymentDTO:
        raise NotImplementedError


class SqlAdminManageWriteModel(AdminManageWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def _get_guest(self, session: AsyncSession, guest_id: UUID) -> Guest:
        result = await session.execute(select(Guest).where(Guest.id == guest_id))
        guest = result.scalar_one_or_none()
        if guest is None:
            raise ValueError(f"Guest with ID {guest_id} not found")
        return guest

    async def _rederive_status(self, session: AsyncSession, invite_id: UUID) -> RsvpStatus:
        """Status of an invite that has answered, recomputed from its remaining guests."""
        result = await session.execute(select(Invite).where(Invite.id == invite_id))
        invite = result.scalar_one()
        if invite.rsvp_status == RsvpStatus.PENDING:
            return invite.rsvp_status

        result = await session.execute(
            select(Guest.id, RsvpResponse.attending)
            .outerjoin(RsvpResponse, RsvpResponse.guest_id == Guest.id)
            .where(Guest.invite_id == invite_id)
        )
        attendance = result.all()
        invite.rsvp_status = RsvpStatus.from_attendance(
            sum(1 for _, attending in attendance if attending), len(attendance)
        )
        await session.flush()
        return invite.rsvp_status

    async def update_guest(self, guest_id: UUID, update: GuestUpdateDTO) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await self._get_guest(session, guest_id)
            guest.first_name = update.first_name
            guest.last_name = update.last_name
            guest.email = update.email or None

            result = await session.execute(select(Invite).where(Invite.id == guest.invite_id))
            invite = result.scalar_one()
            invite.invite_type = update.invite_type
            invite.accommodation_group = update.accommodation_group or None
            await session.flush()

    async def delete_guest(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await self._get_guest(session, guest_id)
            invite_id = guest.invite_id
            # response first, it references the guest
            await session.execute(delete(RsvpResponse).where(RsvpResponse.guest_id == guest_id))
            await session.delete(guest)
            await session.flush()
            await self._rederive_status(session, invite_id)
            logger.info("Deleted guest %s from invite %s", guest_id, invite_id)

    async def update_rsvp(self, response_id: UUID, update: AdminRsvpUpdateDTO) -> RsvpStatus:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RsvpResponse).where(RsvpResponse.id == response_id)
            )
            response = result.scalar_one_or_none()
            if response is None:
                raise ValueError(f"RSVP response with ID {response_id} not found")

            response.attending = update.attending
            tags = encode_restrictions(update.dietary_restrictions)
            response.dietary_restrictions = tags if update.attending else []
            response.dietary_notes = (update.dietary_notes or None) if update.attending else None
            response.accommodation_needed = update.attending and update.accommodation_needed
            response.atitlan_attending = update.attending and update.atitlan_attending
            if not response.accommodation_needed:
                response.accommodation_payment_level = None
            if not response.atitlan_attending:
                response.atitlan_payment_level = None
            await session.flush()

            guest = await self._get_guest(session, response.guest_id)
            return await self._rederive_status(session, guest.invite_id)

    async def update_payment(self, payment_id: UUID, update: PaymentUpdateDTO) -> PaymentDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Payment).where(Payment.id == payment_id))
            payment = result.scalar_one_or_none()
            if payment is None:
                raise ValueError(f"Payment with ID {payment_id} not found")

            payment.amount_paid = update.amount_paid
            payment.payment_method = update.payment_method or None
            payment.notes = update.notes or None
            await session.flush()
            return PaymentDTO.from_orm(payment)
