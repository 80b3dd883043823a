import abc
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import (
    AccommodationGroupDTO,
    GuestBundleDTO,
    GuestDataUnavailableError,
    GuestDTO,
    InviteDTO,
)
from wedding_portal.guests.repository.orm_models import Guest, Invite
from wedding_portal.models import AccommodationGroup


class GuestDataReadModel(abc.ABC):
    @abc.abstractmethod
    async def load_guest_data(self, user_id: UUID) -> GuestBundleDTO | None:
        """
        Resolve an identity to its guest record, the shared invite and every guest on it.
        Returns None when the identity has no guest record (e.g. an admin account).
        Raises GuestDataUnavailableError when the invite or its guests are missing.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_accommodation_group(self, group_code: str) -> AccommodationGroupDTO | None:
        raise NotImplementedError


class SqlGuestDataReadModel(GuestDataReadModel):
    """SQL implementation of the guest data loader."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def load_guest_data(self, user_id: UUID) -> GuestBundleDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # 1. identity -> guest
            result = await session.execute(select(Guest).where(Guest.user_id == user_id))
            guest = result.scalars().first()
            if guest is None:
                return None

            # 2. guest -> invite
            result = await session.execute(select(Invite).where(Invite.id == guest.invite_id))
            invite = result.scalar_one_or_none()
            if invite is None:
                raise GuestDataUnavailableError(f"no invite for guest {guest.id}")

            # 3. invite -> all guests, primary first
            result = await session.execute(
                select(Guest)
                .where(Guest.invite_id == invite.id)
                .order_by(Guest.is_primary.desc(), Guest.created_at, Guest.last_name)
            )
            all_guests = result.scalars().all()
            if not all_guests:
                raise GuestDataUnavailableError(f"no guests on invite {invite.id}")

            return GuestBundleDTO(
                current_guest=GuestDTO.from_orm(guest),
                invite=InviteDTO.from_orm(invite),
                all_guests=tuple(GuestDTO.from_orm(g) for g in all_guests),
            )

    async def get_accommodation_group(self, group_code: str) -> AccommodationGroupDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(AccommodationGroup).where(AccommodationGroup.group_code == group_code)
            )
            group = result.scalar_one_or_none()
            return AccommodationGroupDTO.from_orm(group) if group else None
