"""Permission evaluator: capability checks with optional caching.

Reads the identity's primary grant's permission map (not the session-selected
grant) and applies the platform-admin override.
"""

from __future__ import annotations

import logging
from typing import Any

from debtdesk.application.interfaces.services import (
    ICacheService,
    IIdentityDirectory,
    ITrustedEvaluator,
)
from debtdesk.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION
from debtdesk.domain.capabilities import KNOWN_CAPABILITIES, all_capabilities_granted
from debtdesk.domain.enums import IdentityStatus
from debtdesk.domain.exceptions import AuthorizationException

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Capability checks per identity; uses cache when available (5 min TTL typical)."""

    def __init__(
        self,
        trusted: ITrustedEvaluator,
        identity_directory: IIdentityDirectory,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.trusted = trusted
        self.identity_directory = identity_directory
        self.cache = cache
        self.cache_ttl = cache_ttl

    @staticmethod
    def _cache_key(identity_id: str) -> str:
        return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{identity_id}"

    async def _is_active_identity(self, identity_id: str) -> bool:
        status = await self.identity_directory.get_identity_status(identity_id)
        return status == IdentityStatus.ACTIVE.value

    async def _permission_state(self, identity_id: str) -> dict[str, Any]:
        """Primary-grant permission map plus the platform-admin flag."""
        key = self._cache_key(identity_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return cached

        primary = await self.trusted.get_primary_grant(identity_id)
        state: dict[str, Any] = {
            "permissions": dict(primary.permissions) if primary else {},
            "is_platform_admin": await self.trusted.is_platform_admin(identity_id),
        }
        if self.cache and self.cache.is_available():
            await self.cache.set(key, state, ttl=self.cache_ttl)
        return state

    async def has_permission(self, identity_id: str, capability: str) -> bool:
        """True if the primary grant grants capability, or the identity is a platform admin."""
        if capability not in KNOWN_CAPABILITIES:
            logger.warning("Permission check for unknown capability %r", capability)
        if not await self._is_active_identity(identity_id):
            return False
        state = await self._permission_state(identity_id)
        if state["permissions"].get(capability) is True:
            return True
        return bool(state["is_platform_admin"])

    async def effective_permissions(self, identity_id: str) -> dict[str, bool]:
        """Primary grant's map, or every capability set to True for a platform admin."""
        if not await self._is_active_identity(identity_id):
            return {}
        state = await self._permission_state(identity_id)
        permissions: dict[str, bool] = dict(state["permissions"])
        if state["is_platform_admin"]:
            return {name: True for name in permissions} | all_capabilities_granted()
        return permissions

    async def require_permission(self, identity_id: str, capability: str) -> None:
        """Raise AuthorizationException if the identity lacks capability."""
        if not await self.has_permission(identity_id, capability):
            raise AuthorizationException(capability=capability)

    async def invalidate_identity_cache(self, identity_id: str) -> None:
        """Drop the cached permission state for one identity."""
        if self.cache and self.cache.is_available():
            await self.cache.delete(self._cache_key(identity_id))
