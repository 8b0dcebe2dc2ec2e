"""
Bookshelf Backend — Application Shell Tests
=============================================

What:  Health check, request IDs, rate limiting and configuration checks.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from bookshelf.config import DEFAULT_DATABASE_URL, Settings, settings
from bookshelf.middleware.logging import level_for_status
from bookshelf.middleware.rate_limit import RateLimitMiddleware


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/books")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed(self, test_client):
        response = await test_client.get("/books", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"


class TestRateLimit:

    @pytest.fixture
    def limited_app(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 2)
        monkeypatch.setattr(settings, "rate_limit_window", 60)

        app = FastAPI()
        app.add_middleware(RateLimitMiddleware)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        @app.get("/health")
        async def health():
            return {"ok": True}

        return app

    @pytest.mark.asyncio
    async def test_third_request_is_rejected(self, limited_app):
        transport = ASGITransport(app=limited_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            rejected = await client.get("/ping")

        assert rejected.status_code == 429
        assert rejected.json()["error"] == "RATE_LIMIT_EXCEEDED"
        assert 0 < int(rejected.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self, limited_app):
        transport = ASGITransport(app=limited_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/health")).status_code for _ in range(5)]

        assert statuses == [200] * 5


class TestConfig:

    def test_production_check_rejects_defaults(self):
        with pytest.raises(ValueError, match="DATABASE_URL"):
            Settings(database_url=DEFAULT_DATABASE_URL).validate_required_for_production()

    def test_production_check_rejects_wildcard_cors(self):
        config = Settings(
            database_url="postgresql+asyncpg://u:p@db:5432/books",
            cors_origins="*",
        )
        with pytest.raises(ValueError, match="CORS"):
            config.validate_required_for_production()

    def test_cors_origins_are_split(self):
        config = Settings(cors_origins="http://a.test, http://b.test")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_log_level_is_validated(self):
        with pytest.raises(ValueError):
            Settings(log_level="LOUD")

    def test_sqlite_detection(self):
        assert settings.is_sqlite is True


class TestAccessLogLevel:

    @pytest.mark.parametrize(
        "status, level",
        [(200, "INFO"), (404, "WARNING"), (500, "ERROR")],
    )
    def test_level_for_status(self, status, level):
        import logging

        assert level_for_status(status) == getattr(logging, level)
