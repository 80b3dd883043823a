import os

# must be set before the engine is created on first import of the package
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./wedding_portal.db"
os.environ["SENTRY_DSN"] = ""
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from contextlib import asynccontextmanager  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from wedding_portal.auth.dependencies import (  # noqa: E402
    get_admin_user_read_model,
    get_identity_provider,
)
from wedding_portal.auth.tests.inmemory_models import (  # noqa: E402
    InMemoryAdminUserReadModel,
    InMemoryIdentityProvider,
)
from wedding_portal.config.database import async_session_maker, engine  # noqa: E402
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache  # noqa: E402
from wedding_portal.guests.repository import orm_models  # noqa: E402, F401
from wedding_portal.main import app  # noqa: E402
from wedding_portal.models import BaseModel  # noqa: E402


@pytest.fixture
async def db_session():
    """A session on a freshly created SQLite schema."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)

    async with async_session_maker() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
def identity_provider():
    return InMemoryIdentityProvider()


@pytest.fixture
def admin_read_model():
    return InMemoryAdminUserReadModel()


@pytest.fixture
def guest_data_cache():
    return GuestDataCache(ttl=timedelta(hours=1))


@pytest.fixture
def client_factory(identity_provider, admin_read_model, guest_data_cache):
    """
    Build a client with dependency overrides. Identity, admin lookup and the
    guest data cache are always replaced by in-memory versions.
    """

    @asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides = {
            get_identity_provider: lambda: identity_provider,
            get_admin_user_read_model: lambda: admin_read_model,
            get_guest_data_cache: lambda: guest_data_cache,
            **(overrides or {}),
        }
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.dependency_overrides = {}

    return _client_factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as client:
        yield client
