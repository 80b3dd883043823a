import logging

from fastapi import Depends, HTTPException

from wedding_portal.auth.dependencies import AuthenticatedCaller, require_identity
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.guests.dtos import GuestBundleDTO, GuestDataUnavailableError
from wedding_portal.guests.repository.read_models import (
    GuestDataReadModel,
    SqlGuestDataReadModel,
)
from wedding_portal.guests.scope import InviteScope

logger = logging.getLogger(__name__)

UNABLE_TO_LOAD_MESSAGE = "Unable to load guest information"


def get_guest_data_read_model() -> GuestDataReadModel:
    """Dependency to get the guest data loader."""
    return SqlGuestDataReadModel()


async def load_caller_bundle(
    caller: AuthenticatedCaller,
    read_model: GuestDataReadModel,
    cache: GuestDataCache,
) -> GuestBundleDTO | None:
    cached = cache.get(caller.identity.id, caller.session_id)
    if cached is not None:
        return cached

    bundle = await read_model.load_guest_data(caller.identity.id)
    if bundle is not None:
        cache.put(caller.identity.id, caller.session_id, bundle)
    return bundle


async def get_optional_guest_bundle(
    caller: AuthenticatedCaller = Depends(require_identity),
    read_model: GuestDataReadModel = Depends(get_guest_data_read_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> GuestBundleDTO | None:
    """The caller's bundle, or None for identities without a guest record."""
    try:
        return await load_caller_bundle(caller, read_model, cache)
    except GuestDataUnavailableError as e:
        logger.warning("%s for identity %s", e, caller.identity.id)
        raise HTTPException(status_code=404, detail=UNABLE_TO_LOAD_MESSAGE)


async def get_guest_bundle(
    bundle: GuestBundleDTO | None = Depends(get_optional_guest_bundle),
) -> GuestBundleDTO:
    if bundle is None:
        raise HTTPException(status_code=404, detail=UNABLE_TO_LOAD_MESSAGE)
    return bundle


async def get_invite_scope(bundle: GuestBundleDTO = Depends(get_guest_bundle)) -> InviteScope:
    return InviteScope.from_bundle(bundle)
