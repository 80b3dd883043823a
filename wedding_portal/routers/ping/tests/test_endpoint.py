from wedding_portal.config.settings import Settings, get_settings
from wedding_portal.routers.ping.router import PING_URL


async def test_ping_default_message(client_factory):
    async with client_factory({get_settings: lambda: Settings(ping_message=None)}) as client:
        response = await client.get(PING_URL)

    assert response.status_code == 200
    assert response.json() == {"message": "ping"}


async def test_ping_configured_message(client_factory):
    settings = Settings(ping_message="pong from Atitlan")

    async with client_factory({get_settings: lambda: settings}) as client:
        response = await client.get(PING_URL)

    assert response.json() == {"message": "pong from Atitlan"}
