from datetime import date, datetime, time
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wedding_portal.admin.features.reports.export import (
    csv_response,
    dietary_csv,
    guests_csv,
    payments_csv,
    rsvps_csv,
    travel_csv,
)
from wedding_portal.admin.features.reports.read_model import (
    AdminReportReadModel,
    GuestRowDTO,
    PaymentRowDTO,
    RsvpRowDTO,
    SqlAdminReportReadModel,
    TravelRowDTO,
)
from wedding_portal.admin.features.reports.summaries import (
    AttendingFilter,
    GuestFilters,
    compute_stats,
    confirmed_rsvps,
    filter_guests,
    summarize_dietary,
    summarize_payments,
)
from wedding_portal.admin.urls import (
    ADMIN_DIETARY_EXPORT_URL,
    ADMIN_DIETARY_URL,
    ADMIN_GUESTS_EXPORT_URL,
    ADMIN_GUESTS_URL,
    ADMIN_PAYMENTS_EXPORT_URL,
    ADMIN_PAYMENTS_URL,
    ADMIN_RSVPS_EXPORT_URL,
    ADMIN_RSVPS_URL,
    ADMIN_STATS_URL,
    ADMIN_TRAVEL_EXPORT_URL,
    ADMIN_TRAVEL_URL,
)
from wedding_portal.auth.dependencies import require_admin
from wedding_portal.guests.dtos import InviteType, PaymentType, RsvpStatus

router = APIRouter(dependencies=[Depends(require_admin)])


def get_admin_report_read_model() -> AdminReportReadModel:
    """Dependency to get admin report read model instance."""
    return SqlAdminReportReadModel()


def get_guest_filters(
    status: RsvpStatus | None = None,
    accommodation_group: str | None = None,
    attending: AttendingFilter | None = None,
    search: str | None = None,
) -> GuestFilters:
    return GuestFilters(
        status=status,
        accommodation_group=accommodation_group,
        attending=attending,
        search=search,
    )


class GuestRowResponse(BaseModel):
    id: UUID
    invite_id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    invite_type: InviteType
    accommodation_group: str | None = None
    rsvp_status: RsvpStatus
    attending: bool | None = None
    invited_to_atitlan: bool

    @classmethod
    def from_dto(cls, row: GuestRowDTO) -> "GuestRowResponse":
        return cls(**row.__dict__)


class GuestListResponse(BaseModel):
    guests: list[GuestRowResponse]
    total: int
    accommodation_groups: list[str]


class RsvpRowResponse(BaseModel):
    response_id: UUID
    guest_id: UUID
    guest_name: str
    email: str | None = None
    submitted_at: datetime | None = None
    rsvp_status: RsvpStatus
    attending: bool
    dietary_restrictions: list[str]
    dietary_notes: str | None = None
    accommodation_needed: bool
    atitlan_attending: bool

    @classmethod
    def from_dto(cls, row: RsvpRowDTO) -> "RsvpRowResponse":
        return cls(**{**row.__dict__, "dietary_restrictions": list(row.dietary_restrictions)})


class DietaryGuestResponse(BaseModel):
    name: str
    notes: str


class DietaryItemResponse(BaseModel):
    restriction: str
    count: int
    guests: list[DietaryGuestResponse]


class PaymentRowResponse(BaseModel):
    id: UUID
    invite_id: UUID
    guest_names: str
    payment_type: PaymentType
    amount_committed: float
    amount_paid: float
    balance: float
    payment_method: str | None = None
    notes: str | None = None

    @classmethod
    def from_dto(cls, row: PaymentRowDTO) -> "PaymentRowResponse":
        return cls(
            id=row.id,
            invite_id=row.invite_id,
            guest_names=row.guest_names,
            payment_type=row.payment_type,
            amount_committed=float(row.amount_committed),
            amount_paid=float(row.amount_paid),
            balance=float(row.balance),
            payment_method=row.payment_method,
            notes=row.notes,
        )


class PaymentSummaryResponse(BaseModel):
    total_accommodation_committed: float
    total_atitlan_committed: float
    total_paid: float
    total_outstanding: float


class PaymentListResponse(BaseModel):
    payments: list[PaymentRowResponse]
    summary: PaymentSummaryResponse


class TravelRowResponse(BaseModel):
    guest_name: str
    email: str | None = None
    arrival_date: date | None = None
    arrival_time: time | None = None
    arrival_airline: str | None = None
    arrival_flight_number: str | None = None
    departure_date: date | None = None
    departure_time: time | None = None
    departure_airline: str | None = None
    departure_flight_number: str | None = None
    needs_transfer: bool
    notes: str | None = None

    @classmethod
    def from_dto(cls, row: TravelRowDTO) -> "TravelRowResponse":
        travel = {key: value for key, value in row.travel.__dict__.items() if key != "guest_id"}
        return cls(guest_name=row.guest_name, email=row.email, **travel)


class NamedCountResponse(BaseModel):
    name: str
    value: int


class TimelinePointResponse(BaseModel):
    date: date
    count: int


class StatsResponse(BaseModel):
    total_guests: int
    confirmed_count: int
    declined_count: int
    pending_count: int
    partial_count: int
    by_accommodation_group: list[NamedCountResponse]
    by_invite_type: list[NamedCountResponse]
    rsvp_timeline: list[TimelinePointResponse]
    dietary_restrictions: list[NamedCountResponse]


@router.get(ADMIN_GUESTS_URL, response_model=GuestListResponse)
async def list_guests(
    filters: GuestFilters = Depends(get_guest_filters),
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> GuestListResponse:
    """Every guest with their invite's status. Filters combine."""
    rows = await read_model.list_guests()
    groups = sorted({row.accommodation_group for row in rows if row.accommodation_group})
    filtered = filter_guests(rows, filters)
    return GuestListResponse(
        guests=[GuestRowResponse.from_dto(row) for row in filtered],
        total=len(rows),
        accommodation_groups=groups,
    )


@router.get(ADMIN_GUESTS_EXPORT_URL)
async def export_guests(
    filters: GuestFilters = Depends(get_guest_filters),
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
):
    rows = filter_guests(await read_model.list_guests(), filters)
    return csv_response(guests_csv(rows), "guests")


@router.get(ADMIN_RSVPS_URL, response_model=list[RsvpRowResponse])
async def list_rsvps(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> list[RsvpRowResponse]:
    """Attending guests of confirmed invites."""
    rows = confirmed_rsvps(await read_model.list_rsvps())
    return [RsvpRowResponse.from_dto(row) for row in rows]


@router.get(ADMIN_RSVPS_EXPORT_URL)
async def export_rsvps(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
):
    rows = confirmed_rsvps(await read_model.list_rsvps())
    return csv_response(rsvps_csv(rows), "rsvps")


@router.get(ADMIN_DIETARY_URL, response_model=list[DietaryItemResponse])
async def dietary_summary(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> list[DietaryItemResponse]:
    summary = summarize_dietary(await read_model.list_dietary_entries())
    return [
        DietaryItemResponse(
            restriction=item.restriction,
            count=item.count,
            guests=[DietaryGuestResponse(name=g.name, notes=g.notes) for g in item.guests],
        )
        for item in summary
    ]


@router.get(ADMIN_DIETARY_EXPORT_URL)
async def export_dietary(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
):
    summary = summarize_dietary(await read_model.list_dietary_entries())
    return csv_response(dietary_csv(summary), "dietary")


@router.get(ADMIN_PAYMENTS_URL, response_model=PaymentListResponse)
async def list_payments(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> PaymentListResponse:
    rows = await read_model.list_payments()
    summary = summarize_payments(rows)
    return PaymentListResponse(
        payments=[PaymentRowResponse.from_dto(row) for row in rows],
        summary=PaymentSummaryResponse(
            total_accommodation_committed=float(summary.total_accommodation_committed),
            total_atitlan_committed=float(summary.total_atitlan_committed),
            total_paid=float(summary.total_paid),
            total_outstanding=float(summary.total_outstanding),
        ),
    )


@router.get(ADMIN_PAYMENTS_EXPORT_URL)
async def export_payments(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
):
    return csv_response(payments_csv(await read_model.list_payments()), "payments")


@router.get(ADMIN_TRAVEL_URL, response_model=list[TravelRowResponse])
async def list_travel(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> list[TravelRowResponse]:
    return [TravelRowResponse.from_dto(row) for row in await read_model.list_travel()]


@router.get(ADMIN_TRAVEL_EXPORT_URL)
async def export_travel(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
):
    return csv_response(travel_csv(await read_model.list_travel()), "travel")


@router.get(ADMIN_STATS_URL, response_model=StatsResponse)
async def stats(
    read_model: AdminReportReadModel = Depends(get_admin_report_read_model),
) -> StatsResponse:
    """Back office dashboard figures."""
    result = compute_stats(await read_model.get_stats_source())
    counts = result.rsvp_status_counts
    return StatsResponse(
        total_guests=result.total_guests,
        confirmed_count=counts[RsvpStatus.CONFIRMED],
        declined_count=counts[RsvpStatus.DECLINED],
        pending_count=counts[RsvpStatus.PENDING],
        partial_count=counts[RsvpStatus.PARTIAL],
        by_accommodation_group=[
            NamedCountResponse(name=c.name, value=c.value) for c in result.by_accommodation_group
        ],
        by_invite_type=[NamedCountResponse(name=c.name, value=c.value) for c in result.by_invite_type],
        rsvp_timeline=[
            TimelinePointResponse(date=p.date, count=p.count) for p in result.rsvp_timeline
        ],
        dietary_restrictions=[
            NamedCountResponse(name=c.name, value=c.value) for c in result.dietary_restrictions
        ],
    )
