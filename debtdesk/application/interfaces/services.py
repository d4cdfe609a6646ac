"""Service interfaces (ports) for the application layer.

Protocols define contracts for external collaborators (identity and
organization directories, cache) and for the Trusted Evaluator (DIP).
"""

from __future__ import annotations

from typing import Any, Protocol

from debtdesk.application.dtos.identity import PortfolioOwnership
from debtdesk.application.dtos.role import (
    OrganizationContext,
    RoleGrantResult,
    RoleSessionRecord,
)


# Identity directory (registration/provisioning collaborator)
class IIdentityDirectory(Protocol):
    """Protocol for reading identity lifecycle status."""

    async def get_identity_status(self, identity_id: str) -> str:
        """Return 'active', 'inactive' or 'suspended'; ResourceNotFoundException if unknown."""


# Organization directory (agency/client/buyer registries)
class IOrganizationDirectory(Protocol):
    """Protocol for resolving organization display names."""

    async def resolve_org_name(
        self, organization_type: str, organization_id: str
    ) -> str | None:
        """Return the display name, or None when the id does not resolve."""


# Client-to-agency directory
class IClientDirectory(Protocol):
    """Protocol for client ownership lookups."""

    async def client_belongs_to_agency(self, client_id: str, agency_id: str) -> bool:
        """Return True if client_id is managed by agency_id."""


# Portfolio directory
class IPortfolioDirectory(Protocol):
    """Protocol for portfolio ownership lookups."""

    async def get_portfolio_ownership(
        self, portfolio_id: str
    ) -> PortfolioOwnership | None:
        """Return owning agency/client of a portfolio, or None if unknown."""


# Trusted evaluator: ungated reads over role and session data
class ITrustedEvaluator(Protocol):
    """Protocol for privilege-bypassing role/session reads.

    Implementations must never call back into the Access Gate.
    """

    async def get_grant(self, grant_id: str) -> RoleGrantResult | None:
        """Return grant by id, or None."""

    async def get_primary_grant(self, identity_id: str) -> RoleGrantResult | None:
        """Return the identity's active primary grant, or None."""

    async def get_active_grants(self, identity_id: str) -> list[RoleGrantResult]:
        """Return the identity's active grants (insertion order)."""

    async def list_grants(
        self, identity_id: str, *, active_only: bool = False
    ) -> list[RoleGrantResult]:
        """Return the identity's grants (insertion order)."""

    async def is_platform_admin(self, identity_id: str) -> bool:
        """Return True iff an active platform_admin grant exists for the identity."""

    async def get_live_session_grant(
        self, session_token: str
    ) -> tuple[RoleSessionRecord, RoleGrantResult] | None:
        """Return (session, grant) for a non-expired token, else None."""

    async def get_session(self, session_token: str) -> RoleSessionRecord | None:
        """Return the session for a token regardless of expiry."""

    async def get_organization_context(
        self, identity_id: str
    ) -> OrganizationContext | None:
        """Return the organization scope of the identity's primary grant."""


# Cache service interface
class ICacheService(Protocol):
    """Minimal cache protocol for permission caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value with optional TTL in seconds."""

    async def delete(self, key: str) -> None:
        """Remove key from cache."""
