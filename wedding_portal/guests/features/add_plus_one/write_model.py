"""Write model for adding a plus-one guest to a plusone invite."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import GuestDTO, InviteType, PlusOneNameMissingError
from wedding_portal.guests.repository.orm_models import Guest, Invite

logger = logging.getLogger(__name__)


class CannotAddPlusOneError(Exception):
    """Raised when the invite does not allow (another) plus-one."""

    pass


class PlusOneWriteModel(ABC):
    @abstractmethod
    async def add_plus_one(self, invite_id: UUID, first_name: str, last_name: str) -> GuestDTO:
        """
        Create a non-primary guest on the invite with no email and no identity.
        Raises PlusOneNameMissingError for blank names.
        """
        raise NotImplementedError


class SqlPlusOneWriteModel(PlusOneWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def add_plus_one(self, invite_id: UUID, first_name: str, last_name: str) -> GuestDTO:
        first_name, last_name = first_name.strip(), last_name.strip()
        if not first_name or not last_name:
            raise PlusOneNameMissingError()

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Invite).where(Invite.id == invite_id))
            invite = result.scalar_one_or_none()
            if invite is None:
                raise ValueError(f"Invite with ID {invite_id} not found")
            if invite.invite_type != InviteType.PLUSONE:
                raise CannotAddPlusOneError("This invitation does not include a plus-one")

            result = await session.execute(
                select(func.count(Guest.id)).where(
                    Guest.invite_id == invite_id, Guest.is_primary.is_(False)
                )
            )
            if result.scalar_one() > 0:
                raise CannotAddPlusOneError("A plus-one has already been added to this invitation")

            guest = Guest(
                invite_id=invite_id,
                first_name=first_name,
                last_name=last_name,
                email=None,
                user_id=None,
                is_primary=False,
            )
            session.add(guest)
            await session.flush()
            logger.info("Plus-one %s added to invite %s", guest.id, invite.invite_code)

            return GuestDTO.from_orm(guest)
