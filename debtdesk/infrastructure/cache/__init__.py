"""Cache: Redis service for effective permission maps."""

from debtdesk.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
