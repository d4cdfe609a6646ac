"""Redis-based cache for effective permission maps.

Async Redis with TTL. The cache is optional: every method degrades to a miss
(or a no-op) when Redis is disabled or unreachable, so authorization falls back
to direct store reads. Callers build keys from debtdesk.core.constants.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from debtdesk.core.config import get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache service (implements ICacheService).

    Call connect() at startup and disconnect() at shutdown (see core.lifespan).
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI; marks the
                service connected without a ping.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. No-op when REDIS_ENABLED is false."""
        if not self.settings.redis_enabled or self._connected:
            return
        password = (
            self.settings.redis_password.get_secret_value()
            if self.settings.redis_password
            else None
        )
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Permission cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            logger.info("Redis cache disconnected")
        self.redis = None
        self._connected = False

    async def _reconnect(self) -> bool:
        """Drop the broken client and connect again. Returns True if reconnected."""
        await self.disconnect()
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _call(
        self,
        operation: str,
        key: str,
        command: Callable[[redis.Redis], Awaitable[Any]],
        default: Any,
    ) -> Any:
        """Run a Redis command, retrying once after a reconnect on connection loss."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await command(self.redis)
                except redis.RedisError:
                    logger.exception(
                        "Cache %s error for key %s after reconnect", operation, key
                    )
                    return default
            logger.warning(
                "Cache %s unavailable for key %s (Redis disconnected)", operation, key
            )
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for key %s", operation, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""
        raw = await self._call("get", key, lambda r: r.get(key), None)
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store a JSON-serializable value with TTL (seconds). Returns True on success."""
        seconds = ttl if ttl is not None else self.settings.cache_ttl_permissions
        serialized = json.dumps(value)
        stored = await self._call(
            "set", key, lambda r: r.setex(key, seconds, serialized), False
        )
        if stored:
            logger.debug("Cache SET: %s (TTL: %ss)", key, seconds)
        return bool(stored)

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if a key was deleted."""
        deleted = await self._call("delete", key, lambda r: r.delete(key), 0)
        if deleted:
            logger.debug("Cache DELETE: %s", key)
        return bool(deleted)
