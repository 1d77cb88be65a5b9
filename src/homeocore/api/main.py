# src/homeocore/api/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from homeocore.api.suggestions import router as suggestions_router
from homeocore.config import get_settings
from homeocore.core.error_handlers import register_error_handlers
from homeocore.core.health import router as health_router
from homeocore.core.logging import setup_json_logging
from homeocore.core.middleware import RequestIDMiddleware
from homeocore.suggestion_engine.engine import ENGINE_VERSION

log = logging.getLogger("homeocore.api")

APP_VERSION = "0.1.0"


def create_app() -> FastAPI:
    settings = get_settings()
    setup_json_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=APP_VERSION)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(suggestions_router)

    @app.get("/version")
    async def version():
        return {"api_version": APP_VERSION, "engine_version": ENGINE_VERSION}

    log.info("%s started env=%s", settings.APP_NAME, settings.APP_ENV)
    return app


app = create_app()
