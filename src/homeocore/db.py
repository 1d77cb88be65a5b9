from __future__ import annotations

import sys
import asyncio
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import get_settings


# ─────────────────────────────────────────
# Windows Event Loop Fix (psycopg3 async)
# ─────────────────────────────────────────

def _fix_windows_event_loop() -> None:
    """
    Psycopg async on Windows is not compatible with ProactorEventLoop.
    Force SelectorEventLoop.
    """
    if sys.platform.startswith("win"):
        asyncio.set_event_loop_policy(
            asyncio.WindowsSelectorEventLoopPolicy()
        )


_fix_windows_event_loop()


# ─────────────────────────────────────────
# Remedy catalog engine
# ─────────────────────────────────────────

@lru_cache
def get_catalog_engine() -> AsyncEngine:
    """Created lazily so importing the app never opens a connection."""
    settings = get_settings()
    return create_async_engine(
        settings.REMEDY_DB_URL,
        echo=False,
        pool_pre_ping=True,
    )
