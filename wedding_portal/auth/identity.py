"""Client for the hosted session store (Supabase GoTrue).

The application never mints or verifies tokens itself: every question about
an identity is answered by the store's HTTP API.
"""

import abc
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

import httpx

from wedding_portal.config.settings import settings

logger = logging.getLogger(__name__)

ADMIN_USERS_PAGE_SIZE = 1000


class IdentityProviderError(Exception):
    """Raised when the session store cannot be reached or rejects an admin call."""


@dataclass(frozen=True)
class IdentityDTO:
    id: UUID
    email: str


@dataclass(frozen=True)
class SessionDTO:
    access_token: str
    refresh_token: str
    expires_in: int
    identity: IdentityDTO


class IdentityProvider(abc.ABC):
    @abc.abstractmethod
    async def get_user(self, access_token: str) -> IdentityDTO | None:
        """Resolve a session token to its identity, None if invalid or expired."""
        raise NotImplementedError

    @abc.abstractmethod
    async def email_exists(self, email: str) -> bool:
        """Case-insensitive check for an existing identity."""
        raise NotImplementedError

    @abc.abstractmethod
    async def create_user(self, email: str, password: str) -> IdentityDTO:
        """Create a confirmed identity that can sign in immediately."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_user(self, user_id: UUID) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> SessionDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def sign_out(self, access_token: str) -> None:
        raise NotImplementedError


class SupabaseConfig(Protocol):
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    identity_request_timeout_seconds: float


def _identity_from_payload(payload: dict[str, Any]) -> IdentityDTO:
    return IdentityDTO(id=UUID(payload["id"]), email=payload.get("email") or "")


class SupabaseIdentityProvider(IdentityProvider):
    def __init__(
        self,
        config: SupabaseConfig = settings,
        http_client_factory: Callable[..., httpx.AsyncClient] = httpx.AsyncClient,
    ) -> None:
        self._config = config
        self._http_client_factory = http_client_factory

    def _client(self) -> httpx.AsyncClient:
        return self._http_client_factory(
            base_url=f"{self._config.supabase_url.rstrip('/')}/auth/v1",
            timeout=self._config.identity_request_timeout_seconds,
        )

    def _anon_headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._config.supabase_anon_key,
            "Authorization": f"Bearer {access_token or self._config.supabase_anon_key}",
        }

    def _service_headers(self) -> dict[str, str]:
        return {
            "apikey": self._config.supabase_service_role_key,
            "Authorization": f"Bearer {self._config.supabase_service_role_key}",
        }

    async def get_user(self, access_token: str) -> IdentityDTO | None:
        try:
            async with self._client() as client:
                response = await client.get("/user", headers=self._anon_headers(access_token))
                if response.status_code in (401, 403):
                    return None
                response.raise_for_status()
                return _identity_from_payload(response.json())
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Failed to resolve session: {e}") from e

    async def email_exists(self, email: str) -> bool:
        wanted = email.strip().lower()
        page = 1
        try:
            async with self._client() as client:
                while True:
                    response = await client.get(
                        "/admin/users",
                        params={"page": page, "per_page": ADMIN_USERS_PAGE_SIZE},
                        headers=self._service_headers(),
                    )
                    response.raise_for_status()
                    users = response.json().get("users", [])
                    if any((user.get("email") or "").lower() == wanted for user in users):
                        return True
                    if len(users) < ADMIN_USERS_PAGE_SIZE:
                        return False
                    page += 1
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Failed to check existing users: {e}") from e

    async def create_user(self, email: str, password: str) -> IdentityDTO:
        try:
            async with self._client() as client:
                response = await client.post(
                    "/admin/users",
                    headers=self._service_headers(),
                    json={"email": email, "password": password, "email_confirm": True},
                )
                response.raise_for_status()
                return _identity_from_payload(response.json())
        except httpx.HTTPError as e:
            raise IdentityProviderError(str(e)) from e

    async def delete_user(self, user_id: UUID) -> None:
        try:
            async with self._client() as client:
                response = await client.delete(
                    f"/admin/users/{user_id}", headers=self._service_headers()
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Failed to delete user {user_id}: {e}") from e

    async def sign_in_with_password(self, email: str, password: str) -> SessionDTO | None:
        try:
            async with self._client() as client:
                response = await client.post(
                    "/token",
                    params={"grant_type": "password"},
                    headers=self._anon_headers(),
                    json={"email": email, "password": password},
                )
                if response.status_code in (400, 401):
                    logger.info("Sign-in rejected for %s", email)
                    return None
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Failed to sign in: {e}") from e

        return SessionDTO(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            expires_in=int(payload.get("expires_in", 0)),
            identity=_identity_from_payload(payload["user"]),
        )

    async def sign_out(self, access_token: str) -> None:
        try:
            async with self._client() as client:
                response = await client.post("/logout", headers=self._anon_headers(access_token))
                if response.status_code in (401, 403):
                    # already expired, nothing to revoke
                    return
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Failed to sign out: {e}") from e
