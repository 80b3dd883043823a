"""Write model for RSVP submission and decline.

One RsvpResponse per guest on the invite is upserted (keyed by guest),
the invite's aggregate status is derived from attendance, and non-zero
accommodation/excursion commitments are recorded as payments.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.config.settings import settings
from wedding_portal.guests.dtos import (
    AccommodationGroupDTO,
    ContributionTier,
    PaymentDTO,
    PaymentType,
    RsvpOutcomeDTO,
    RsvpStatus,
)
from wedding_portal.guests.features.rsvp_form.dietary import encode_restrictions
from wedding_portal.guests.features.rsvp_form.readiness import (
    RsvpFormState,
    excursion_guest_ids,
)
from wedding_portal.guests.features.submit_rsvp.commitments import (
    accommodation_commitment,
    excursion_commitment,
)
from wedding_portal.guests.repository.orm_models import Guest, Invite, Payment, RsvpResponse
from wedding_portal.models import AccommodationGroup

logger = logging.getLogger(__name__)

SUBMITTED_MESSAGE = "Thank you for your RSVP!"
DECLINED_MESSAGE = "We will miss you and can't wait to celebrate with you soon!"


@dataclass(frozen=True)
class GuestRsvpInput:
    guest_id: UUID
    attending: bool
    dietary_restrictions: tuple[str, ...] = ()
    dietary_notes: str | None = None
    atitlan_attending: bool = False
    atitlan_payment_level: ContributionTier | None = None


@dataclass(frozen=True)
class RsvpSubmissionDTO:
    invite_id: UUID
    guests: tuple[GuestRsvpInput, ...]
    accommodation_needed: bool = False
    accommodation_payment_level: ContributionTier | None = None

    @classmethod
    def from_form_state(cls, state: RsvpFormState, invite_id: UUID) -> "RsvpSubmissionDTO":
        excursion_ids = excursion_guest_ids(state)
        attending_ids = {guest.guest_id for guest in state.attending_guests}
        accommodation_needed = bool(state.accommodation_needed) and bool(attending_ids)

        guests = []
        for guest in state.guests:
            attending = guest.guest_id in attending_ids
            on_excursion = guest.guest_id in excursion_ids
            guests.append(
                GuestRsvpInput(
                    guest_id=guest.guest_id,
                    attending=attending,
                    dietary_restrictions=(
                        tuple(encode_restrictions(guest.dietary_restrictions)) if attending else ()
                    ),
                    dietary_notes=(guest.dietary_notes or None) if attending else None,
                    atitlan_attending=on_excursion,
                    atitlan_payment_level=(
                        state.atitlan_tiers.get(guest.guest_id, ContributionTier.FULL)
                        if on_excursion
                        else None
                    ),
                )
            )

        return cls(
            invite_id=invite_id,
            guests=tuple(guests),
            accommodation_needed=accommodation_needed,
            accommodation_payment_level=(
                (state.accommodation_tier or ContributionTier.FULL) if accommodation_needed else None
            ),
        )


class RsvpWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(self, submission: RsvpSubmissionDTO) -> RsvpOutcomeDTO:
        raise NotImplementedError

    @abstractmethod
    async def decline_rsvp(self, invite_id: UUID) -> RsvpOutcomeDTO:
        """Mark every guest on the invite as not attending."""
        raise NotImplementedError


class SqlRsvpWriteModel(RsvpWriteModel):
    """SQL implementation of RSVP submission."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        atitlan_cost_per_person: int = settings.atitlan_cost_per_person,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.atitlan_cost_per_person = atitlan_cost_per_person

    async def submit_rsvp(self, submission: RsvpSubmissionDTO) -> RsvpOutcomeDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invite = await self._get_invite(session, submission.invite_id)
            guests = await self._get_guests(session, invite.id)
            inputs = {guest_input.guest_id: guest_input for guest_input in submission.guests}

            attending_count = 0
            for guest in guests:
                guest_input = inputs.get(guest.id) or GuestRsvpInput(guest.id, attending=False)
                if guest_input.attending:
                    attending_count += 1
                    await self._upsert_response(
                        session,
                        guest.id,
                        attending=True,
                        dietary_restrictions=list(guest_input.dietary_restrictions),
                        dietary_notes=guest_input.dietary_notes,
                        accommodation_needed=submission.accommodation_needed,
                        accommodation_payment_level=(
                            submission.accommodation_payment_level
                            if submission.accommodation_needed
                            else None
                        ),
                        atitlan_attending=guest_input.atitlan_attending,
                        atitlan_payment_level=(
                            guest_input.atitlan_payment_level
                            if guest_input.atitlan_attending
                            else None
                        ),
                    )
                else:
                    await self._upsert_not_attending(session, guest.id)

            status = RsvpStatus.from_attendance(attending_count, len(guests))
            invite.rsvp_status = status
            invite.rsvp_submitted_at = datetime.now(UTC)
            await session.flush()
            logger.info(
                "RSVP submitted for invite %s: %s of %s attending (%s)",
                invite.invite_code,
                attending_count,
                len(guests),
                status.value,
            )

            payments = []
            if (
                attending_count
                and submission.accommodation_needed
                and submission.accommodation_payment_level
            ):
                group = await self._get_accommodation_group(session, invite.accommodation_group)
                if group is None:
                    logger.warning(
                        "Invite %s has no accommodation group, skipping commitment",
                        invite.invite_code,
                    )
                else:
                    amount = accommodation_commitment(
                        group, submission.accommodation_payment_level
                    )
                    payment = await self._record_commitment(
                        session, invite.id, PaymentType.ACCOMMODATION, amount
                    )
                    if payment:
                        payments.append(payment)

            excursion_tiers = [
                guest_input.atitlan_payment_level or ContributionTier.FULL
                for guest_input in submission.guests
                if guest_input.attending and guest_input.atitlan_attending
            ]
            if excursion_tiers:
                amount = excursion_commitment(excursion_tiers, self.atitlan_cost_per_person)
                payment = await self._record_commitment(
                    session, invite.id, PaymentType.ATITLAN, amount
                )
                if payment:
                    payments.append(payment)

        return RsvpOutcomeDTO(message=SUBMITTED_MESSAGE, rsvp_status=status, payments=payments)

    async def decline_rsvp(self, invite_id: UUID) -> RsvpOutcomeDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invite = await self._get_invite(session, invite_id)
            for guest in await self._get_guests(session, invite.id):
                await self._upsert_not_attending(session, guest.id)

            invite.rsvp_status = RsvpStatus.DECLINED
            invite.rsvp_submitted_at = datetime.now(UTC)
            await session.flush()
            logger.info("RSVP declined for invite %s", invite.invite_code)

        return RsvpOutcomeDTO(message=DECLINED_MESSAGE, rsvp_status=RsvpStatus.DECLINED)

    async def _get_invite(self, session: AsyncSession, invite_id: UUID) -> Invite:
        result = await session.execute(select(Invite).where(Invite.id == invite_id))
        invite = result.scalar_one_or_none()
        if invite is None:
            raise ValueError(f"Invite with ID {invite_id} not found")
        return invite

    async def _get_guests(self, session: AsyncSession, invite_id: UUID) -> list[Guest]:
        result = await session.execute(select(Guest).where(Guest.invite_id == invite_id))
        return list(result.scalars().all())

    async def _get_accommodation_group(
        self, session: AsyncSession, group_code: str | None
    ) -> AccommodationGroupDTO | None:
        if not group_code:
            return None
        result = await session.execute(
            select(AccommodationGroup).where(AccommodationGroup.group_code == group_code)
        )
        group = result.scalar_one_or_none()
        return AccommodationGroupDTO.from_orm(group) if group else None

    async def _upsert_not_attending(self, session: AsyncSession, guest_id: UUID) -> None:
        await self._upsert_response(
            session,
            guest_id,
            attending=False,
            dietary_restrictions=[],
            dietary_notes=None,
            accommodation_needed=False,
            accommodation_payment_level=None,
            atitlan_attending=False,
            atitlan_payment_level=None,
        )

    async def _upsert_response(self, session: AsyncSession, guest_id: UUID, **values) -> None:
        result = await session.execute(
            select(RsvpResponse).where(RsvpResponse.guest_id == guest_id)
        )
        response = result.scalar_one_or_none()
        if response is None:
            response = RsvpResponse(guest_id=guest_id)
            session.add(response)
        for name, value in values.items():
            setattr(response, name, value)
        await session.flush()

    async def _record_commitment(
        self,
        session: AsyncSession,
        invite_id: UUID,
        payment_type: PaymentType,
        amount: Decimal,
    ) -> PaymentDTO | None:
        """Store a non-zero commitment, reusing the invite's row for that payment type."""
        if amount <= 0:
            return None

        result = await session.execute(
            select(Payment).where(
                Payment.invite_id == invite_id, Payment.payment_type == payment_type
            )
        )
        payment = result.scalars().first()
        if payment is None:
            payment = Payment(
                invite_id=invite_id,
                payment_type=payment_type,
                amount_committed=amount,
                amount_paid=Decimal("0"),
            )
            session.add(payment)
        else:
            payment.amount_committed = amount
        await session.flush()
        return PaymentDTO.from_orm(payment)
