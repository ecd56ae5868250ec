"""
Notes API: Middleware Tests
===============================

What:  Tests for the middleware chain (error trap, CORS, request id, logging).

What we test:
    ✅ Unhandled exceptions become a 500 envelope without leaking details
    ✅ That 500 still carries X-Request-ID and CORS headers
    ✅ StorageError becomes 500 "Database operation failed"
    ✅ OPTIONS preflight answered with CORS headers
    ✅ Production allow-list honoured
    ✅ X-Request-ID generated or propagated
    ✅ Credential headers redacted; log level chosen from status
"""

import logging
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport

from notes_api.config import Settings
from notes_api.exceptions import StorageError
from notes_api.main import create_app
from notes_api.middleware.logging import REDACTED, level_for_status, redact_headers


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestErrorTrap:

    @pytest.mark.asyncio
    async def test_unexpected_exception_returns_500_envelope(self, app, caplog):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret internals")

        async with _client(app) as client:
            with caplog.at_level(logging.ERROR):
                response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "INTERNAL_SERVER_ERROR", "message": "Internal server error"}
        }
        assert "secret internals" not in response.text
        assert "secret internals" in caplog.text

    @pytest.mark.asyncio
    async def test_trapped_500_keeps_request_id_and_cors_headers(self, app, caplog):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        async with _client(app) as client:
            with caplog.at_level(logging.ERROR, logger="notes_api.middleware.errors"):
                response = await client.get(
                    "/boom",
                    headers={"X-Request-ID": "abc-123", "Origin": "http://a.example"},
                )

        assert response.status_code == 500
        assert response.headers["x-request-id"] == "abc-123"
        assert response.headers["access-control-allow-origin"] == "http://a.example"
        assert "X-Request-ID" in response.headers["access-control-expose-headers"]
        assert "[abc-123] Unhandled error in request GET /boom" in caplog.text

    @pytest.mark.asyncio
    async def test_trapped_500_generates_request_id(self, app):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        async with _client(app) as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.headers["x-request-id"].startswith("req_")

    @pytest.mark.asyncio
    async def test_storage_error_returns_generic_500(self, test_settings):
        failing = AsyncMock()
        failing.list_all.side_effect = StorageError(context={"operation": "list_all"})
        app = create_app(settings=test_settings, store=failing)

        async with _client(app) as client:
            response = await client.get("/api/notes")

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "Database operation failed",
        }


class TestCors:

    @pytest.mark.asyncio
    async def test_preflight(self, test_client):
        response = await test_client.options(
            "/api/notes",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert "Content-Type" in response.headers["access-control-allow-headers"]
        assert response.headers["access-control-max-age"] == "86400"

    @pytest.mark.asyncio
    async def test_preflight_on_any_path(self, test_client):
        response = await test_client.options("/no/such/route")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_simple_request_annotated(self, test_client):
        response = await test_client.get("/api/notes", headers={"Origin": "http://a.example"})

        assert response.headers["access-control-allow-origin"] == "http://a.example"
        assert "X-Request-ID" in response.headers["access-control-expose-headers"]

    @pytest.mark.asyncio
    async def test_production_allow_list(self, store):
        settings = Settings(
            environment="production",
            cors_origins="https://notes.example.com",
            cors_allow_credentials=True,
            seed_sample_data=False,
        )
        app = create_app(settings=settings, store=store)

        async with _client(app) as client:
            allowed = await client.get(
                "/api/notes", headers={"Origin": "https://notes.example.com"}
            )
            denied = await client.get("/api/notes", headers={"Origin": "https://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "https://notes.example.com"
        assert allowed.headers["access-control-allow-credentials"] == "true"
        assert denied.status_code == 200
        assert "access-control-allow-origin" not in denied.headers


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/api/notes")

        request_id = response.headers["x-request-id"]
        assert request_id.startswith("req_")
        assert len(request_id) == 12

    @pytest.mark.asyncio
    async def test_propagated(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"


class TestRequestLogging:

    @pytest.mark.asyncio
    async def test_access_line_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="notes_api.access"):
            await test_client.get("/api/notes/missing")

        records = [r for r in caplog.records if r.name == "notes_api.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].status == 404
        assert records[0].path == "/api/notes/missing"

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="notes_api.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "notes_api.access"]

    def test_redact_headers(self):
        headers = [
            ("Authorization", "Bearer token"),
            ("cookie", "session=1"),
            ("Content-Type", "application/json"),
        ]

        redacted = redact_headers(headers)

        assert redacted == {
            "Authorization": REDACTED,
            "cookie": REDACTED,
            "Content-Type": "application/json",
        }

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (204, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level
