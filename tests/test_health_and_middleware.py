import pytest
from httpx import ASGITransport, AsyncClient

from helpdesk.core import startup
from helpdesk.core.config import get_settings
from helpdesk.main import create_app
from helpdesk.middleware.rate_limit import LOGIN_LIMIT, reset_limits


@pytest.mark.asyncio
async def test_healthz_and_health(app_client: AsyncClient):
    r = await app_client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

    r = await app_client.get("/health")
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_readyz_after_migrations(app_client: AsyncClient):
    # TESTING 中は upgrade をスキップして完了扱いになる
    startup.run_database_migrations()
    r = await app_client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "db": "up"}


@pytest.mark.asyncio
async def test_readyz_returns_503_before_migrations(app_client: AsyncClient, monkeypatch):
    monkeypatch.setattr("helpdesk.api.routers.readyz.is_migration_completed", lambda: False)
    monkeypatch.setattr("helpdesk.api.routers.readyz.last_migration_error", lambda: None)

    r = await app_client.get("/readyz")
    assert r.status_code == 503
    assert r.json() == {"detail": "Database migrations are still running"}


@pytest.mark.asyncio
async def test_request_id_is_echoed_or_generated(app_client: AsyncClient):
    r = await app_client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"

    r = await app_client.get("/healthz")
    assert r.headers.get("X-Request-ID")


@pytest.mark.asyncio
async def test_security_headers(app_client: AsyncClient, seed):
    r = await app_client.get("/healthz")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"

    r = await app_client.get("/export/reports.csv")
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_unknown_route_is_404_json(app_client: AsyncClient):
    r = await app_client.get("/tidak-ada")
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}


@pytest.mark.asyncio
async def test_cors_allowed_origin(monkeypatch):
    monkeypatch.setenv("ALLOW_ORIGINS", "https://helpdesk.example.id")
    get_settings.cache_clear()
    try:
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            ok = await ac.get("/health", headers={"Origin": "https://helpdesk.example.id"})
            evil = await ac.get("/health", headers={"Origin": "https://evil.example.com"})
    finally:
        monkeypatch.delenv("ALLOW_ORIGINS")
        get_settings.cache_clear()
    assert ok.headers.get("access-control-allow-origin") == "https://helpdesk.example.id"
    assert evil.headers.get("access-control-allow-origin") is None


@pytest.mark.asyncio
async def test_login_rate_limit(app_client: AsyncClient, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")
    reset_limits()
    allowed = int(LOGIN_LIMIT.split("/")[0])
    try:
        for _ in range(allowed):
            r = await app_client.post("/auth/login", json={"username": "x", "password": "y"})
            assert r.status_code == 401
        r = await app_client.post("/auth/login", json={"username": "x", "password": "y"})
        assert r.status_code == 429
        assert r.json() == {"detail": "Too Many Requests"}
        assert r.headers["X-RateLimit-Limit"] == LOGIN_LIMIT

        # 他のエンドポイントは別枠
        assert (await app_client.get("/healthz")).status_code == 200
    finally:
        reset_limits()
