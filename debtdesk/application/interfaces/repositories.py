"""Repository interfaces (ports) for the Role Store and Session Store.

These two stores are the only mutation entry points for role data. Neither
consults the Access Gate: they are pure storage logic.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from debtdesk.application.dtos.role import (
    RoleGrantResult,
    RoleSessionRecord,
)


class IRoleGrantStore(Protocol):
    """Protocol for the Role Store (role_grant table)."""

    async def create_grant(
        self,
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None,
        permissions: dict[str, bool],
        is_primary: bool = False,
        is_active: bool = True,
    ) -> RoleGrantResult:
        """Insert a grant; raise DuplicateGrantException on the uniqueness tuple."""

    async def deactivate_grant(self, grant_id: str) -> RoleGrantResult:
        """Set is_active = False (idempotent); raise ResourceNotFoundException if missing."""

    async def set_primary(self, identity_id: str, grant_id: str) -> RoleGrantResult:
        """Clear primary on the identity's other grants, then set it on grant_id."""

    async def list_grants(
        self, identity_id: str, *, active_only: bool = False
    ) -> list[RoleGrantResult]:
        """Return the identity's grants in insertion order."""

    async def get_grant(self, grant_id: str) -> RoleGrantResult:
        """Return grant or raise ResourceNotFoundException."""

    async def find_grant(self, grant_id: str) -> RoleGrantResult | None:
        """Return grant or None."""

    async def get_primary_grant(self, identity_id: str) -> RoleGrantResult | None:
        """Return the identity's active primary grant, if any."""

    async def has_active_role_type(self, identity_id: str, role_type: str) -> bool:
        """Return True if the identity holds an active grant of role_type."""

    async def count_grants(self, identity_id: str) -> int:
        """Return how many grants (active or not) the identity holds."""


class IRoleSessionStore(Protocol):
    """Protocol for the Session Store (role_session table, one row per identity)."""

    async def upsert_session(
        self,
        identity_id: str,
        role_grant_id: str,
        session_token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RoleSessionRecord:
        """Insert or replace the identity's session in one statement keyed by identity."""

    async def get_by_token(self, session_token: str) -> RoleSessionRecord | None:
        """Return the session for a token regardless of expiry."""

    async def get_live_with_grant(
        self, session_token: str, now: datetime
    ) -> tuple[RoleSessionRecord, RoleGrantResult] | None:
        """Return (session, grant) for a non-expired token, else None."""

    async def get_for_identity(self, identity_id: str) -> RoleSessionRecord | None:
        """Return the identity's session row (live or expired), if any."""

    async def delete_for_identity(self, identity_id: str) -> bool:
        """Delete the identity's session; return False if there was none."""

    async def purge_expired(self, now: datetime) -> int:
        """Delete sessions with expires_at < now; return the number deleted."""
