"""
src/homeocore/core/health.py

Health + readiness probe endpoints.

GET /health/live : liveness: always 200 (process is alive)
GET /health/ready: readiness: checks the remedy catalog DB with SELECT 1,
                    returns 503 if unreachable within timeout
"""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from homeocore.db import get_catalog_engine
from homeocore.suggestion_engine.catalog import SqlRemedyCatalog

_log = logging.getLogger("homeocore.health")

router = APIRouter(tags=["health"])

_DB_PING_TIMEOUT = 3.0  # seconds


@router.get("/health/live")
async def health_live() -> JSONResponse:
    """Liveness probe, always 200 while the process runs."""
    return JSONResponse(status_code=200, content={"status": "ok", "probe": "live"})


@router.get("/health/ready")
async def health_ready() -> JSONResponse:
    """Readiness probe, 200 only when the remedy catalog answers."""
    catalog = SqlRemedyCatalog(get_catalog_engine())

    try:
        await asyncio.wait_for(catalog.ping(), timeout=_DB_PING_TIMEOUT)
        return JSONResponse(
            status_code=200,
            content={"status": "ok", "probe": "ready", "db": "reachable"},
        )
    except asyncio.TimeoutError:
        _log.error("health_ready: catalog ping timed out after %.1fs", _DB_PING_TIMEOUT)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "probe": "ready", "db": "timeout"},
        )
    except Exception as exc:  # noqa: BLE001
        _log.error("health_ready: catalog unreachable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "probe": "ready", "db": "unreachable"},
        )
