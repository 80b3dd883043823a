import abc
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import PaymentDTO, RsvpResponseDTO, TravelDetailsDTO
from wedding_portal.guests.repository.orm_models import Payment, RsvpResponse, TravelDetails


@dataclass(frozen=True)
class PaymentTotalsDTO:
    committed: Decimal
    paid: Decimal

    @property
    def outstanding(self) -> Decimal:
        return self.committed - self.paid


def payment_totals(payments: Iterable[PaymentDTO]) -> PaymentTotalsDTO:
    committed = Decimal("0")
    paid = Decimal("0")
    for payment in payments:
        committed += payment.amount_committed
        paid += payment.amount_paid
    return PaymentTotalsDTO(committed=committed, paid=paid)


@dataclass(frozen=True)
class DashboardDTO:
    responses: list[RsvpResponseDTO]
    travel_details: list[TravelDetailsDTO]
    payments: list[PaymentDTO]

    @property
    def totals(self) -> PaymentTotalsDTO:
        return payment_totals(self.payments)


class DashboardReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_dashboard(self, invite_id: UUID, guest_ids: Iterable[UUID]) -> DashboardDTO:
        raise NotImplementedError


class SqlDashboardReadModel(DashboardReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_dashboard(self, invite_id: UUID, guest_ids: Iterable[UUID]) -> DashboardDTO:
        guest_ids = list(guest_ids)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(RsvpResponse).where(RsvpResponse.guest_id.in_(guest_ids))
            )
            responses = [RsvpResponseDTO.from_orm(r) for r in result.scalars().all()]

            result = await session.execute(
                select(TravelDetails).where(TravelDetails.guest_id.in_(guest_ids))
            )
            travel = [TravelDetailsDTO.from_orm(t) for t in result.scalars().all()]

            result = await session.execute(
                select(Payment).where(Payment.invite_id == invite_id).order_by(Payment.created_at)
            )
            payments = [PaymentDTO.from_orm(p) for p in result.scalars().all()]

        return DashboardDTO(responses=responses, travel_details=travel, payments=payments)
