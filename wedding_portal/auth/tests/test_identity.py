"""Tests for SupabaseIdentityProvider against a mocked session store."""

import json
from dataclasses import dataclass
from uuid import uuid4

import httpx
import pytest

from wedding_portal.auth.identity import (
    ADMIN_USERS_PAGE_SIZE,
    IdentityProviderError,
    SupabaseIdentityProvider,
)


@dataclass
class StoreConfig:
    supabase_url: str = "https://project.supabase.co/"
    supabase_anon_key: str = "anon-key"
    supabase_service_role_key: str = "service-key"
    identity_request_timeout_seconds: float = 5.0


def provider_for(handler) -> SupabaseIdentityProvider:
    transport = httpx.MockTransport(handler)
    return SupabaseIdentityProvider(
        config=StoreConfig(),
        http_client_factory=lambda **kwargs: httpx.AsyncClient(transport=transport, **kwargs),
    )


async def test_get_user_resolves_token():
    user_id = uuid4()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers["Authorization"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(200, json={"id": str(user_id), "email": "ana@example.com"})

    identity = await provider_for(handler).get_user("guest-token")

    assert identity.id == user_id
    assert identity.email == "ana@example.com"
    assert seen["url"] == "https://project.supabase.co/auth/v1/user"
    assert seen["authorization"] == "Bearer guest-token"
    assert seen["apikey"] == "anon-key"


async def test_get_user_with_expired_token():
    provider = provider_for(lambda request: httpx.Response(401, json={"msg": "expired"}))

    assert await provider.get_user("expired-token") is None


async def test_get_user_store_down():
    provider = provider_for(lambda request: httpx.Response(503))

    with pytest.raises(IdentityProviderError):
        await provider.get_user("guest-token")


async def test_email_exists_pages_through_users():
    pages = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer service-key"
        page = int(request.url.params["page"])
        pages.append(page)
        if page == 1:
            users = [
                {"id": str(uuid4()), "email": f"guest{i}@example.com"}
                for i in range(ADMIN_USERS_PAGE_SIZE)
            ]
        else:
            users = [{"id": str(uuid4()), "email": "Ana@Example.com"}]
        return httpx.Response(200, json={"users": users})

    assert await provider_for(handler).email_exists("ana@example.com") is True
    assert pages == [1, 2]


async def test_email_does_not_exist():
    provider = provider_for(lambda request: httpx.Response(200, json={"users": []}))

    assert await provider.email_exists("ana@example.com") is False


async def test_create_user_is_confirmed():
    user_id = uuid4()
    body = {}

    def handler(request: httpx.Request) -> httpx.Response:
        body.update(json.loads(request.content))
        return httpx.Response(200, json={"id": str(user_id), "email": "ana@example.com"})

    identity = await provider_for(handler).create_user("ana@example.com", "ANA2026")

    assert identity.id == user_id
    assert body == {"email": "ana@example.com", "password": "ANA2026", "email_confirm": True}


async def test_create_user_failure():
    provider = provider_for(lambda request: httpx.Response(422, json={"msg": "weak password"}))

    with pytest.raises(IdentityProviderError, match="422") as excinfo:
        await provider.create_user("ana@example.com", "x")

    # the invitation flow adds its own step prefix
    assert "Failed to create authentication account" not in str(excinfo.value)


async def test_sign_in_with_password():
    user_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        return httpx.Response(
            200,
            json={
                "access_token": "access",
                "refresh_token": "refresh",
                "expires_in": 3600,
                "user": {"id": str(user_id), "email": "ana@example.com"},
            },
        )

    session = await provider_for(handler).sign_in_with_password("ana@example.com", "ANA2026")

    assert session.access_token == "access"
    assert session.expires_in == 3600
    assert session.identity.id == user_id


async def test_sign_in_with_wrong_password():
    provider = provider_for(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

    assert await provider.sign_in_with_password("ana@example.com", "wrong") is None


async def test_sign_out_with_expired_token_is_ignored():
    provider = provider_for(lambda request: httpx.Response(401))

    await provider.sign_out("expired-token")


async def test_delete_user():
    user_id = uuid4()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(200, json={})

    await provider_for(handler).delete_user(user_id)

    assert seen == {"method": "DELETE", "path": f"/auth/v1/admin/users/{user_id}"}
