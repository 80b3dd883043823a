import asyncio
import logging
from contextlib import asynccontextmanager

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from wedding_portal import __version__
from wedding_portal.admin.routers import router as admin_router
from wedding_portal.api_errors import ApiError, api_error_handler
from wedding_portal.auth.router import router as auth_router
from wedding_portal.config.logging import setup_logging
from wedding_portal.config.settings import Settings, settings
from wedding_portal.guests.routers import router as guests_router
from wedding_portal.routers.healthz.router import router as healthz_router
from wedding_portal.routers.ping.router import router as ping_router

logger = logging.getLogger(__name__)


async def run_migrations() -> None:
    await asyncio.to_thread(command.upgrade, Config("alembic.ini"), "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Upgrading database schema to head")
        await run_migrations()
    yield


def init_sentry(config: Settings) -> None:
    if not config.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.ENVIRONMENT,
        release=f"wedding-portal@{__version__}",
        traces_sample_rate=config.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=config.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # guest names, emails and tokens stay out of reports
        send_default_pii=False,
    )


def create_app(config: Settings = settings) -> FastAPI:
    setup_logging()
    init_sentry(config)

    application = FastAPI(
        title="Wedding Portal API",
        description="Invitations, RSVPs, travel details and contributions for the wedding",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]

    application.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
    application.include_router(ping_router, tags=["Ping"])
    application.include_router(auth_router, tags=["Auth"])
    application.include_router(guests_router, tags=["Guests"])
    application.include_router(admin_router, tags=["Admin"])

    @application.get("/", tags=["Root"])
    async def root():
        return {"message": "Welcome to the Wedding Portal API"}

    return application


app = create_app()
