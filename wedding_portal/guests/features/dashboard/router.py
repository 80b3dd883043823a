from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wedding_portal.guests.dependencies import get_guest_bundle
from wedding_portal.guests.dtos import (
    ContributionTier,
    GuestBundleDTO,
    PaymentType,
    RsvpStatus,
)
from wedding_portal.guests.features.dashboard.read_model import (
    DashboardReadModel,
    SqlDashboardReadModel,
)
from wedding_portal.guests.features.rsvp_form.dietary import decode_restrictions
from wedding_portal.guests.features.travel_details.router import TravelDetailsResponse
from wedding_portal.guests.urls import DASHBOARD_URL

router = APIRouter()


class DashboardRsvpResponse(BaseModel):
    guest_id: UUID
    guest_name: str
    attending: bool
    dietary_restrictions: list[str]
    dietary_notes: str | None = None
    accommodation_needed: bool
    accommodation_payment_level: ContributionTier | None = None
    atitlan_attending: bool
    atitlan_payment_level: ContributionTier | None = None


class DashboardPaymentResponse(BaseModel):
    payment_type: PaymentType
    amount_committed: float
    amount_paid: float
    balance: float
    payment_method: str | None = None


class DashboardTotalsResponse(BaseModel):
    committed: float
    paid: float
    outstanding: float


class DashboardResponse(BaseModel):
    rsvp_status: RsvpStatus
    responses: list[DashboardRsvpResponse]
    travel_details: list[TravelDetailsResponse]
    payments: list[DashboardPaymentResponse]
    totals: DashboardTotalsResponse


def get_dashboard_read_model() -> DashboardReadModel:
    return SqlDashboardReadModel()


@router.get(DASHBOARD_URL, response_model=DashboardResponse)
async def get_dashboard(
    bundle: GuestBundleDTO = Depends(get_guest_bundle),
    read_model: DashboardReadModel = Depends(get_dashboard_read_model),
) -> DashboardResponse:
    """
    Post-RSVP overview of the caller's invite.
    Dietary restrictions are returned as form selections so they can be edited directly.
    """
    dashboard = await read_model.get_dashboard(bundle.invite.id, bundle.guest_ids)
    names = {guest.id: guest.full_name for guest in bundle.all_guests}
    totals = dashboard.totals

    return DashboardResponse(
        rsvp_status=bundle.invite.rsvp_status,
        responses=[
            DashboardRsvpResponse(
                guest_id=response.guest_id,
                guest_name=names.get(response.guest_id, ""),
                attending=response.attending,
                dietary_restrictions=decode_restrictions(response.dietary_restrictions),
                dietary_notes=response.dietary_notes,
                accommodation_needed=response.accommodation_needed,
                accommodation_payment_level=response.accommodation_payment_level,
                atitlan_attending=response.atitlan_attending,
                atitlan_payment_level=response.atitlan_payment_level,
            )
            for response in dashboard.responses
        ],
        travel_details=[TravelDetailsResponse.from_dto(t) for t in dashboard.travel_details],
        payments=[
            DashboardPaymentResponse(
                payment_type=payment.payment_type,
                amount_committed=float(payment.amount_committed),
                amount_paid=float(payment.amount_paid),
                balance=float(payment.balance),
                payment_method=payment.payment_method,
            )
            for payment in dashboard.payments
        ],
        totals=DashboardTotalsResponse(
            committed=float(totals.committed),
            paid=float(totals.paid),
            outstanding=float(totals.outstanding),
        ),
    )
