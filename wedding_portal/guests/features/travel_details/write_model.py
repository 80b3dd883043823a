from abc import ABC, abstractmethod
from dataclasses import asdict
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import TravelDetailsDTO
from wedding_portal.guests.repository.orm_models import TravelDetails


class TravelWriteModel(ABC):
    @abstractmethod
    async def upsert_travel_details(self, details: TravelDetailsDTO) -> TravelDetailsDTO:
        """Create or replace the travel details of one guest."""
        raise NotImplementedError


class SqlTravelWriteModel(TravelWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def upsert_travel_details(self, details: TravelDetailsDTO) -> TravelDetailsDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(TravelDetails).where(TravelDetails.guest_id == details.guest_id)
            )
            travel = result.scalar_one_or_none()
            if travel is None:
                travel = TravelDetails(guest_id=details.guest_id)
                session.add(travel)

            for name, value in asdict(details).items():
                if name == "guest_id":
                    continue
                if isinstance(value, str):
                    value = value.strip() or None
                setattr(travel, name, value)
            await session.flush()

            return TravelDetailsDTO.from_orm(travel)
