from fastapi import APIRouter, Depends
from pydantic import BaseModel

from wedding_portal.config.settings import Settings, get_settings

router = APIRouter()

PING_URL = "/api/ping"


class PingResponse(BaseModel):
    message: str


@router.get(PING_URL, response_model=PingResponse)
async def ping(settings: Settings = Depends(get_settings)) -> PingResponse:
    return PingResponse(message=settings.ping_message or "ping")
