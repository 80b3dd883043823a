import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from wedding_portal.api_errors import ApiError
from wedding_portal.auth.dependencies import (
    AuthenticatedCaller,
    find_admin_user,
    get_admin_user_read_model,
    get_identity_provider,
    require_identity,
)
from wedding_portal.auth.identity import IdentityProvider, IdentityProviderError
from wedding_portal.auth.read_models import AdminUserReadModel
from wedding_portal.auth.urls import ADMIN_STATUS_URL, LOGIN_URL, LOGOUT_URL
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.models import AdminRole

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    invite_code: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


class LogoutResponse(BaseModel):
    message: str


class AdminStatusResponse(BaseModel):
    is_admin: bool
    role: AdminRole | None = None


@router.post(LOGIN_URL, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> LoginResponse:
    """Guest sign-in: the invite code is the password."""
    try:
        session = await identity_provider.sign_in_with_password(
            str(request.email), request.invite_code.strip()
        )
    except IdentityProviderError:
        logger.exception("Sign-in failed")
        raise ApiError.internal("Authentication check failed")

    if session is None:
        raise ApiError.unauthorized("Invalid email or invite code")

    cache.invalidate(session.identity.id)
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
    )


@router.post(LOGOUT_URL, response_model=LogoutResponse)
async def logout(
    caller: AuthenticatedCaller = Depends(require_identity),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> LogoutResponse:
    cache.invalidate(caller.identity.id)
    try:
        await identity_provider.sign_out(caller.access_token)
    except IdentityProviderError:
        logger.exception("Sign-out failed for %s", caller.identity.id)
        raise ApiError.internal("Failed to sign out")
    return LogoutResponse(message="Signed out")


@router.get(ADMIN_STATUS_URL, response_model=AdminStatusResponse)
async def admin_status(
    caller: AuthenticatedCaller = Depends(require_identity),
    read_model: AdminUserReadModel = Depends(get_admin_user_read_model),
) -> AdminStatusResponse:
    admin = await find_admin_user(read_model, caller.identity.email)
    if admin is None:
        return AdminStatusResponse(is_admin=False)
    return AdminStatusResponse(is_admin=True, role=admin.role)
