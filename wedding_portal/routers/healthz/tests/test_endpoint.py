from wedding_portal.config.settings import Settings, get_settings


async def test_health_check(client_factory):
    settings = Settings(ENVIRONMENT="Staging")

    async with client_factory({get_settings: lambda: settings}) as client:
        response = await client.get("/healthz/")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "0.1.0", "environment": "Staging"}


async def test_root_endpoint(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to the Wedding Portal API"
