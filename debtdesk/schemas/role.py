"""Role grant, active role and role session API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from debtdesk.application.dtos.role import RoleSnapshot
from debtdesk.domain.enums import OrganizationType, RoleType


class RoleGrantCreateRequest(BaseModel):
    """Request body for granting a role to an identity."""

    role_type: RoleType
    organization_type: OrganizationType
    organization_id: str | None = Field(default=None, min_length=1, max_length=64)
    permissions: dict[str, bool] | None = Field(
        default=None, description="Capability map; the role type's defaults when omitted"
    )
    is_primary: bool = False


class RoleGrantResponse(BaseModel):
    """Role grant list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    identity_id: str
    role_type: str
    organization_type: str
    organization_id: str | None
    is_active: bool
    is_primary: bool
    permissions: dict[str, bool]
    created_at: datetime | None = None


class RoleSnapshotResponse(BaseModel):
    """A role as shown in the role switcher: grant fields plus organization name."""

    id: str
    role_type: str
    organization_type: str
    organization_id: str | None
    organization_name: str
    is_primary: bool
    permissions: dict[str, bool]

    @classmethod
    def from_snapshot(cls, snapshot: RoleSnapshot) -> "RoleSnapshotResponse":
        grant = snapshot.grant
        return cls(
            id=grant.id,
            role_type=grant.role_type,
            organization_type=grant.organization_type,
            organization_id=grant.organization_id,
            organization_name=snapshot.organization_name,
            is_primary=grant.is_primary,
            permissions=grant.permissions,
        )


class AvailableRolesResponse(BaseModel):
    """Response for GET /auth/roles."""

    active_role: RoleSnapshotResponse
    roles: list[RoleSnapshotResponse]


class SwitchRoleRequest(BaseModel):
    """Request body for POST /auth/roles/switch."""

    grant_id: str = Field(..., min_length=1, max_length=64)


class SwitchRoleResponse(BaseModel):
    """Response for POST /auth/roles/switch. Send token back in X-Role-Session-Token."""

    token: str
    expires_at: datetime
    role: RoleSnapshotResponse


class PermissionsResponse(BaseModel):
    """Effective permission map of the caller."""

    identity_id: str
    permissions: dict[str, bool]


class PermissionCheckResponse(BaseModel):
    """Result of a single capability check."""

    capability: str
    allowed: bool


class AccessCheckResponse(BaseModel):
    """Result of an Access Gate check."""

    resource_type: str
    resource_id: str
    allowed: bool
