"""Write model for editing RSVP answers after submission."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import ContributionTier, DietaryMissingError, RsvpStatus
from wedding_portal.guests.features.rsvp_form.dietary import encode_restrictions
from wedding_portal.guests.repository.orm_models import Guest, Invite, RsvpResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RsvpResponseUpdateDTO:
    guest_id: UUID
    attending: bool
    dietary_restrictions: tuple[str, ...] = ()
    dietary_notes: str | None = None
    accommodation_needed: bool = False
    accommodation_payment_level: ContributionTier | None = None
    atitlan_attending: bool = False
    atitlan_payment_level: ContributionTier | None = None


def ensure_dietary_answered(updates: list[RsvpResponseUpdateDTO]) -> None:
    # blank entries are dropped on encode, so check what would be stored
    if any(
        update.attending and not encode_restrictions(update.dietary_restrictions)
        for update in updates
    ):
        raise DietaryMissingError()


class RsvpUpdateWriteModel(ABC):
    @abstractmethod
    async def update_responses(
        self, invite_id: UUID, updates: list[RsvpResponseUpdateDTO]
    ) -> RsvpStatus:
        """
        Update stored responses of guests on the invite and re-derive the invite status.
        Raises DietaryMissingError when an attending guest has no dietary selection
        and ValueError when a guest has not answered yet.
        """
        raise NotImplementedError


class SqlRsvpUpdateWriteModel(RsvpUpdateWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def update_responses(
        self, invite_id: UUID, updates: list[RsvpResponseUpdateDTO]
    ) -> RsvpStatus:
        ensure_dietary_answered(updates)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Invite).where(Invite.id == invite_id))
            invite = result.scalar_one_or_none()
            if invite is None:
                raise ValueError(f"Invite with ID {invite_id} not found")

            result = await session.execute(
                select(RsvpResponse)
                .join(Guest, RsvpResponse.guest_id == Guest.id)
                .where(Guest.invite_id == invite_id)
            )
            responses = {response.guest_id: response for response in result.scalars().all()}

            for update in updates:
                response = responses.get(update.guest_id)
                if response is None:
                    raise ValueError(f"No RSVP found for guest {update.guest_id}")

                response.attending = update.attending
                if update.attending:
                    response.dietary_restrictions = encode_restrictions(update.dietary_restrictions)
                    response.dietary_notes = update.dietary_notes or None
                    response.accommodation_needed = update.accommodation_needed
                    response.accommodation_payment_level = (
                        update.accommodation_payment_level if update.accommodation_needed else None
                    )
                    response.atitlan_attending = update.atitlan_attending
                    response.atitlan_payment_level = (
                        update.atitlan_payment_level if update.atitlan_attending else None
                    )
                else:
                    response.dietary_restrictions = []
                    response.dietary_notes = None
                    response.accommodation_needed = False
                    response.accommodation_payment_level = None
                    response.atitlan_attending = False
                    response.atitlan_payment_level = None

            result = await session.execute(
                select(Guest.id).where(Guest.invite_id == invite_id)
            )
            guest_ids = list(result.scalars().all())
            attending_count = sum(
                1 for guest_id in guest_ids if guest_id in responses and responses[guest_id].attending
            )
            invite.rsvp_status = RsvpStatus.from_attendance(attending_count, len(guest_ids))
            await session.flush()
            logger.info(
                "RSVP responses updated for invite %s (%s)",
                invite.invite_code,
                invite.rsvp_status.value,
            )
            return invite.rsvp_status
