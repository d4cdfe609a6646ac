"""DTOs for role grants, role sessions and resolved roles (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RoleGrantResult:
    """Role grant read-model (Role Store result)."""

    id: str
    identity_id: str
    role_type: str
    organization_type: str
    organization_id: str | None
    is_active: bool
    is_primary: bool
    permissions: dict[str, bool] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass(frozen=True)
class RoleSnapshot:
    """A grant as presented to callers: the grant plus its organization display name."""

    grant: RoleGrantResult
    organization_name: str

    @property
    def id(self) -> str:
        return self.grant.id

    @property
    def role_type(self) -> str:
        return self.grant.role_type


@dataclass(frozen=True)
class RoleSessionRecord:
    """Role session read-model (Session Store result). Never logged: carries the token."""

    id: str
    identity_id: str
    role_grant_id: str
    session_token: str
    expires_at: datetime
    created_at: datetime | None = None


@dataclass(frozen=True)
class RoleSessionResult:
    """Result of a role switch: the bearer token, its expiry, and the pinned role."""

    token: str
    expires_at: datetime
    role: RoleSnapshot


@dataclass(frozen=True)
class OrganizationContext:
    """Organization scope of an identity's primary grant (used by the Access Gate)."""

    organization_type: str
    organization_id: str | None
    role_type: str
