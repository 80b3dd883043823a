import asyncio
import logging
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError

from wedding_portal.api_errors import ApiError
from wedding_portal.auth.identity import (
    IdentityDTO,
    IdentityProvider,
    IdentityProviderError,
    SupabaseIdentityProvider,
)
from wedding_portal.auth.read_models import (
    AdminUserDTO,
    AdminUserReadModel,
    SqlAdminUserReadModel,
)
from wedding_portal.config.settings import settings
from wedding_portal.guests.cache import session_fingerprint

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedCaller:
    identity: IdentityDTO
    access_token: str

    @property
    def session_id(self) -> str:
        return session_fingerprint(self.access_token)


def get_identity_provider() -> IdentityProvider:
    """Dependency to get the session store client. Override in tests."""
    return SupabaseIdentityProvider()


def get_admin_user_read_model() -> AdminUserReadModel:
    """Dependency to get admin user read model instance."""
    return SqlAdminUserReadModel()


async def require_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> AuthenticatedCaller:
    if credentials is None or not credentials.credentials:
        raise ApiError.unauthorized("No authentication token provided")

    try:
        identity = await identity_provider.get_user(credentials.credentials)
    except IdentityProviderError:
        logger.exception("Auth check failed")
        raise ApiError.internal("Authentication check failed")

    if identity is None:
        raise ApiError.unauthorized("Invalid or expired token")

    return AuthenticatedCaller(identity=identity, access_token=credentials.credentials)


async def find_admin_user(read_model: AdminUserReadModel, email: str) -> AdminUserDTO | None:
    """Look up an admin user, racing the query against a fixed timeout."""
    try:
        return await asyncio.wait_for(
            read_model.get_admin_user(email),
            timeout=settings.admin_check_timeout_seconds,
        )
    except TimeoutError:
        logger.error("Query timeout - database may have RLS policy issues")
        raise ApiError.internal("Failed to verify admin status")
    except SQLAlchemyError:
        logger.exception("Admin check error")
        raise ApiError.internal("Failed to verify admin status")


async def require_admin(
    caller: AuthenticatedCaller = Depends(require_identity),
    read_model: AdminUserReadModel = Depends(get_admin_user_read_model),
) -> AdminUserDTO:
    admin = await find_admin_user(read_model, caller.identity.email)
    if admin is None:
        logger.warning("Non-admin %s tried to reach an admin endpoint", caller.identity.email)
        raise ApiError.forbidden("Admin access required")
    return admin
