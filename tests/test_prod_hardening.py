"""
tests/test_prod_hardening.py

Tests for the service plumbing:
  - request id present / propagated
  - unified error handler format
  - health live / ready (catalog reachable, catalog down)
  - JSON log formatter carries request_id
  - /version on the assembled app
"""
from __future__ import annotations

import json
import logging
import uuid
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from homeocore.core.error_handlers import register_error_handlers
from homeocore.core.health import router as health_router
from homeocore.core.logging import _JsonFormatter, request_id_ctx
from homeocore.core.middleware import RequestIDMiddleware


# ── Helper: minimal app factory ──────────────────────────────────────────────

def _base_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    return app


# ═══════════════════════════════════════════════════════════════════
# 1. REQUEST ID
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_request_id_present_in_response():
    app = _base_app()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/ping")

    assert resp.status_code == 200
    assert "x-request-id" in resp.headers, "X-Request-ID header missing"
    assert len(resp.headers["x-request-id"]) == 36


@pytest.mark.asyncio
async def test_request_id_propagated_from_client():
    app = _base_app()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    custom_id = str(uuid.uuid4())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/ping", headers={"X-Request-ID": custom_id})

    assert resp.headers["x-request-id"] == custom_id


# ═══════════════════════════════════════════════════════════════════
# 2. ERROR HANDLER FORMAT
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_error_handler_returns_json_shape_on_500():
    """Unhandled exceptions must return {error, request_id, code}, no traceback."""
    app = _base_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("intentional crash")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/boom")

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == 500
    assert "request_id" in body
    assert "RuntimeError" not in body["error"]
    assert "Traceback" not in body["error"]


@pytest.mark.asyncio
async def test_error_handler_http_exception_shape():
    app = _base_app()

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="Remedy not found")

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/missing")

    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "Remedy not found"
    assert body["code"] == 404
    assert body["request_id"] == resp.headers["x-request-id"]


# ═══════════════════════════════════════════════════════════════════
# 3. HEALTH
# ═══════════════════════════════════════════════════════════════════

def _health_app() -> FastAPI:
    app = _base_app()
    app.include_router(health_router)
    return app


@pytest.mark.asyncio
async def test_health_live():
    transport = ASGITransport(app=_health_app())
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/health/live")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "probe": "live"}


@pytest.mark.asyncio
async def test_health_ready_catalog_reachable(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ready.db'}")
    try:
        with patch("homeocore.core.health.get_catalog_engine", return_value=engine):
            transport = ASGITransport(app=_health_app())
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                resp = await client.get("/health/ready")
    finally:
        await engine.dispose()

    assert resp.status_code == 200
    assert resp.json()["db"] == "reachable"


@pytest.mark.asyncio
async def test_health_ready_catalog_down():
    broken = MagicMock()
    broken.connect.side_effect = ConnectionError("catalog down")

    with patch("homeocore.core.health.get_catalog_engine", return_value=broken):
        transport = ASGITransport(app=_health_app())
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            resp = await client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json()["db"] == "unreachable"


# ═══════════════════════════════════════════════════════════════════
# 4. LOGGING
# ═══════════════════════════════════════════════════════════════════

def test_json_formatter_includes_request_id():
    token = request_id_ctx.set("rid-42")
    try:
        record = logging.LogRecord(
            name="homeocore.suggestions",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="shown=%d",
            args=(3,),
            exc_info=None,
        )
        payload = json.loads(_JsonFormatter().format(record))
    finally:
        request_id_ctx.reset(token)

    assert payload["message"] == "shown=3"
    assert payload["request_id"] == "rid-42"
    assert payload["logger"] == "homeocore.suggestions"
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_carries_known_extra_fields():
    record = logging.LogRecord(
        name="homeocore.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="POST /suggestions 200",
        args=(),
        exc_info=None,
    )
    record.status_code = 200
    record.path = "/suggestions"
    record.remedy_id = "ars"
    record.unrelated = "dropped"

    payload = json.loads(_JsonFormatter().format(record))

    assert payload["status_code"] == 200
    assert payload["path"] == "/suggestions"
    assert payload["remedy_id"] == "ars"
    assert "unrelated" not in payload
    assert "engine_code" not in payload


# ═══════════════════════════════════════════════════════════════════
# 5. ASSEMBLED APP
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_version_endpoint():
    from homeocore.api.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.get("/version")

    assert resp.status_code == 200
    assert resp.json()["engine_version"] == "suggestion_engine_v1"
