from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_portal.auth.dependencies import AuthenticatedCaller, require_identity
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.guests.dependencies import get_guest_bundle
from wedding_portal.guests.dtos import GuestBundleDTO, PlusOneNameMissingError
from wedding_portal.guests.features.add_plus_one.write_model import (
    CannotAddPlusOneError,
    PlusOneWriteModel,
    SqlPlusOneWriteModel,
)
from wedding_portal.guests.urls import RSVP_PLUS_ONE_URL

router = APIRouter()


class PlusOneRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""


class PlusOneResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    is_primary: bool


def get_plus_one_write_model() -> PlusOneWriteModel:
    """Dependency to get plus-one write model instance."""
    return SqlPlusOneWriteModel()


@router.post(RSVP_PLUS_ONE_URL, response_model=PlusOneResponse, status_code=201)
async def add_plus_one(
    request: PlusOneRequest,
    caller: AuthenticatedCaller = Depends(require_identity),
    bundle: GuestBundleDTO = Depends(get_guest_bundle),
    write_model: PlusOneWriteModel = Depends(get_plus_one_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> PlusOneResponse:
    """Add the caller's companion as a guest on their invite."""
    try:
        guest = await write_model.add_plus_one(
            invite_id=bundle.invite.id,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except PlusOneNameMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CannotAddPlusOneError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    cache.invalidate(caller.identity.id)
    return PlusOneResponse(
        id=guest.id,
        first_name=guest.first_name,
        last_name=guest.last_name,
        is_primary=guest.is_primary,
    )
