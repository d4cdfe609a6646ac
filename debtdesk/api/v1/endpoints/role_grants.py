"""Role grant administration API: list, create, set primary, deactivate.

Listing requires a platform admin; mutations require the manage_users
capability. Each mutation drops the target identity's cached permissions.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from debtdesk.api.v1.dependencies import (
    get_role_grant_service,
    require_permission,
    require_platform_admin,
)
from debtdesk.application.services import RoleGrantService
from debtdesk.core.limiter import limit_grant_admin
from debtdesk.schemas.role import RoleGrantCreateRequest, RoleGrantResponse

router = APIRouter()


@router.get(
    "/identities/{identity_id}/role-grants", response_model=list[RoleGrantResponse]
)
@limit_grant_admin
async def list_role_grants(
    request: Request,
    identity_id: str,
    service: Annotated[RoleGrantService, Depends(get_role_grant_service)],
    _: Annotated[str, Depends(require_platform_admin)],
    active_only: bool = False,
):
    """List an identity's grants (active and inactive unless active_only)."""
    grants = await service.list_grants(identity_id, active_only=active_only)
    return [RoleGrantResponse.model_validate(g) for g in grants]


@router.post(
    "/identities/{identity_id}/role-grants",
    response_model=RoleGrantResponse,
    status_code=201,
)
@limit_grant_admin
async def create_role_grant(
    request: Request,
    identity_id: str,
    body: RoleGrantCreateRequest,
    service: Annotated[RoleGrantService, Depends(get_role_grant_service)],
    _: Annotated[str, Depends(require_permission("manage_users"))],
):
    """Grant a role in an organization scope; 409 if the grant already exists."""
    grant = await service.create_grant(
        identity_id,
        body.role_type.value,
        body.organization_type.value,
        body.organization_id,
        body.permissions,
        is_primary=body.is_primary,
    )
    return RoleGrantResponse.model_validate(grant)


@router.post("/role-grants/{grant_id}/primary", response_model=RoleGrantResponse)
@limit_grant_admin
async def set_primary_role_grant(
    request: Request,
    grant_id: str,
    service: Annotated[RoleGrantService, Depends(get_role_grant_service)],
    _: Annotated[str, Depends(require_permission("manage_users"))],
):
    """Make the grant its identity's primary; the previous primary is cleared."""
    grant = await service.get_grant(grant_id)
    updated = await service.set_primary(grant.identity_id, grant_id)
    return RoleGrantResponse.model_validate(updated)


@router.delete("/role-grants/{grant_id}", response_model=RoleGrantResponse)
@limit_grant_admin
async def deactivate_role_grant(
    request: Request,
    grant_id: str,
    service: Annotated[RoleGrantService, Depends(get_role_grant_service)],
    _: Annotated[str, Depends(require_permission("manage_users"))],
):
    """Deactivate (soft-delete) a grant. Sessions pinned to it stop resolving."""
    grant = await service.deactivate_grant(grant_id)
    return RoleGrantResponse.model_validate(grant)
