from datetime import date, time
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator

from wedding_portal.guests.dependencies import get_invite_scope
from wedding_portal.guests.dtos import OutOfInviteScopeError, TravelDetailsDTO
from wedding_portal.guests.features.travel_details.read_model import (
    SqlTravelReadModel,
    TravelReadModel,
)
from wedding_portal.guests.features.travel_details.write_model import (
    SqlTravelWriteModel,
    TravelWriteModel,
)
from wedding_portal.guests.scope import InviteScope
from wedding_portal.guests.urls import TRAVEL_GUEST_URL, TRAVEL_URL

router = APIRouter()


class TravelDetailsRequest(BaseModel):
    arrival_date: date | None = None
    arrival_time: time | None = None
    arrival_airline: str | None = None
    arrival_flight_number: str | None = None
    departure_date: date | None = None
    departure_time: time | None = None
    departure_airline: str | None = None
    departure_flight_number: str | None = None
    needs_transfer: bool = False
    notes: str | None = None

    @field_validator(
        "arrival_date", "arrival_time", "departure_date", "departure_time", mode="before"
    )
    @classmethod
    def empty_string_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TravelDetailsResponse(TravelDetailsRequest):
    guest_id: UUID

    @classmethod
    def from_dto(cls, dto: TravelDetailsDTO) -> "TravelDetailsResponse":
        return cls(
            guest_id=dto.guest_id,
            arrival_date=dto.arrival_date,
            arrival_time=dto.arrival_time,
            arrival_airline=dto.arrival_airline,
            arrival_flight_number=dto.arrival_flight_number,
            departure_date=dto.departure_date,
            departure_time=dto.departure_time,
            departure_airline=dto.departure_airline,
            departure_flight_number=dto.departure_flight_number,
            needs_transfer=dto.needs_transfer,
            notes=dto.notes,
        )


def get_travel_read_model() -> TravelReadModel:
    return SqlTravelReadModel()


def get_travel_write_model() -> TravelWriteModel:
    return SqlTravelWriteModel()


@router.get(TRAVEL_URL, response_model=list[TravelDetailsResponse])
async def get_travel_details(
    scope: InviteScope = Depends(get_invite_scope),
    read_model: TravelReadModel = Depends(get_travel_read_model),
) -> list[TravelDetailsResponse]:
    """Travel details of every guest on the caller's invite that has some."""
    details = await read_model.get_travel_details(scope.guest_ids)
    return [TravelDetailsResponse.from_dto(dto) for dto in details]


@router.put(TRAVEL_GUEST_URL, response_model=TravelDetailsResponse)
async def save_travel_details(
    guest_id: UUID,
    request: TravelDetailsRequest,
    scope: InviteScope = Depends(get_invite_scope),
    write_model: TravelWriteModel = Depends(get_travel_write_model),
) -> TravelDetailsResponse:
    try:
        scope.ensure_guest(guest_id)
    except OutOfInviteScopeError as e:
        raise HTTPException(status_code=403, detail=str(e))

    saved = await write_model.upsert_travel_details(
        TravelDetailsDTO(guest_id=guest_id, **request.model_dump())
    )
    return TravelDetailsResponse.from_dto(saved)
