"""Trusted evaluator: ungated reads over role grants and role sessions.

Queries the Role Store and Session Store directly with no authorization check
of its own. The Access Gate and the resolver call into this module; nothing in
this module may call the Access Gate, which keeps every access decision a
bounded number of store reads.
"""

from __future__ import annotations

from debtdesk.application.dtos.role import (
    OrganizationContext,
    RoleGrantResult,
    RoleSessionRecord,
)
from debtdesk.application.interfaces.repositories import (
    IRoleGrantStore,
    IRoleSessionStore,
)
from debtdesk.domain.enums import RoleType
from debtdesk.shared.utils.datetime import utc_now


class TrustedEvaluator:
    """Privilege-bypassing role/session reads. Single store call per method."""

    def __init__(
        self, grant_store: IRoleGrantStore, session_store: IRoleSessionStore
    ) -> None:
        self.grant_store = grant_store
        self.session_store = session_store

    async def get_grant(self, grant_id: str) -> RoleGrantResult | None:
        return await self.grant_store.find_grant(grant_id)

    async def get_primary_grant(self, identity_id: str) -> RoleGrantResult | None:
        return await self.grant_store.get_primary_grant(identity_id)

    async def get_active_grants(self, identity_id: str) -> list[RoleGrantResult]:
        return await self.grant_store.list_grants(identity_id, active_only=True)

    async def list_grants(
        self, identity_id: str, *, active_only: bool = False
    ) -> list[RoleGrantResult]:
        return await self.grant_store.list_grants(identity_id, active_only=active_only)

    async def is_platform_admin(self, identity_id: str) -> bool:
        """True iff an active platform_admin grant exists (sessions are not considered)."""
        return await self.grant_store.has_active_role_type(
            identity_id, RoleType.PLATFORM_ADMIN.value
        )

    async def get_live_session_grant(
        self, session_token: str
    ) -> tuple[RoleSessionRecord, RoleGrantResult] | None:
        """Return (session, grant) for a token whose expiry is still in the future."""
        return await self.session_store.get_live_with_grant(session_token, utc_now())

    async def get_session(self, session_token: str) -> RoleSessionRecord | None:
        return await self.session_store.get_by_token(session_token)

    async def get_organization_context(
        self, identity_id: str
    ) -> OrganizationContext | None:
        """Organization scope of the identity's active primary grant, or None."""
        primary = await self.grant_store.get_primary_grant(identity_id)
        if primary is None:
            return None
        return OrganizationContext(
            organization_type=primary.organization_type,
            organization_id=primary.organization_id,
            role_type=primary.role_type,
        )
