"""DTOs for identities and organization-directory lookups (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityResult:
    """Identity read-model. legacy_* fields feed the one-time single-role migration."""

    id: str
    email: str
    display_name: str | None
    status: str
    legacy_role: str | None = None
    legacy_agency_id: str | None = None


@dataclass(frozen=True)
class PortfolioOwnership:
    """Owning agency and client of a portfolio."""

    portfolio_id: str
    agency_id: str | None
    client_id: str | None
