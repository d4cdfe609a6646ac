"""Application lifespan: startup and shutdown.

Wiring of infrastructure only (logging, permission cache, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from debtdesk.core.config import get_settings
from debtdesk.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, Redis permission cache (if enabled).
    Shutdown: cache disconnect, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.redis_enabled:
        from debtdesk.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None

    from debtdesk.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
