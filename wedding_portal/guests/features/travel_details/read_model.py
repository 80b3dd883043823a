import abc
from collections.abc import Iterable
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import TravelDetailsDTO
from wedding_portal.guests.repository.orm_models import TravelDetails


class TravelReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_travel_details(self, guest_ids: Iterable[UUID]) -> list[TravelDetailsDTO]:
        raise NotImplementedError


class SqlTravelReadModel(TravelReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_travel_details(self, guest_ids: Iterable[UUID]) -> list[TravelDetailsDTO]:
        guest_ids = list(guest_ids)
        if not guest_ids:
            return []
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(TravelDetails).where(TravelDetails.guest_id.in_(guest_ids))
            )
            return [TravelDetailsDTO.from_orm(travel) for travel in result.scalars().all()]
