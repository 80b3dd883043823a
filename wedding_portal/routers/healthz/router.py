from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wedding_portal import __version__
from wedding_portal.config.settings import Settings, get_settings

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    environment: str


@router.get("/", response_model=HealthCheckResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthCheckResponse:
    """Liveness only, the database and session store are not contacted."""
    return HealthCheckResponse(
        status="healthy", version=__version__, environment=settings.ENVIRONMENT
    )
