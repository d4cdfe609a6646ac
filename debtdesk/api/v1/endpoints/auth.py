"""Auth API: available roles, active role, role switching, sign-out, and permissions.

All routes act on the caller identified by the bearer token. The active role
honours the X-Role-Session-Token header when it carries a live session.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from debtdesk.api.v1.dependencies import (
    get_active_role_resolver,
    get_current_identity_id,
    get_permission_evaluator,
    get_role_session_token,
    get_session_manager,
    get_session_validator,
)
from debtdesk.application.services import (
    ActiveRoleResolver,
    PermissionEvaluator,
    SessionManager,
)
from debtdesk.core.limiter import limit_role_list, limit_role_switch
from debtdesk.domain.exceptions import SessionNotFoundException
from debtdesk.schemas.role import (
    AvailableRolesResponse,
    PermissionCheckResponse,
    PermissionsResponse,
    RoleSnapshotResponse,
    SwitchRoleRequest,
    SwitchRoleResponse,
)

router = APIRouter()


@router.get("/roles", response_model=AvailableRolesResponse)
@limit_role_list
async def list_available_roles(
    request: Request,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    session_token: Annotated[str | None, Depends(get_role_session_token)],
    resolver: Annotated[ActiveRoleResolver, Depends(get_active_role_resolver)],
):
    """List the caller's active grants and the role currently in effect."""
    active = await resolver.resolve_active_role(identity_id, session_token)
    roles = await resolver.list_available_roles(identity_id)
    return AvailableRolesResponse(
        active_role=RoleSnapshotResponse.from_snapshot(active),
        roles=[RoleSnapshotResponse.from_snapshot(r) for r in roles],
    )


@router.get("/active-role", response_model=RoleSnapshotResponse)
async def get_active_role(
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    session_token: Annotated[str | None, Depends(get_role_session_token)],
    resolver: Annotated[ActiveRoleResolver, Depends(get_active_role_resolver)],
):
    """Return the role in effect: live session grant, else primary, else highest priority."""
    snapshot = await resolver.resolve_active_role(identity_id, session_token)
    return RoleSnapshotResponse.from_snapshot(snapshot)


@router.post("/roles/switch", response_model=SwitchRoleResponse)
@limit_role_switch
async def switch_role(
    request: Request,
    body: SwitchRoleRequest,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Pin one of the caller's grants as active and return a new role-session token."""
    result = await manager.switch_role(
        identity_id,
        body.grant_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return SwitchRoleResponse(
        token=result.token,
        expires_at=result.expires_at,
        role=RoleSnapshotResponse.from_snapshot(result.role),
    )


@router.get("/roles/session", response_model=RoleSnapshotResponse)
async def get_role_session(
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    session_token: Annotated[str | None, Depends(get_role_session_token)],
    validator: Annotated[SessionManager, Depends(get_session_validator)],
):
    """Return the role pinned by the presented session token (401 if unknown or expired)."""
    if session_token is None:
        raise SessionNotFoundException()
    snapshot = await validator.validate_session(session_token)
    if snapshot.grant.identity_id != identity_id:
        raise SessionNotFoundException()
    return RoleSnapshotResponse.from_snapshot(snapshot)


@router.delete("/roles/session", status_code=204)
async def end_role_session(
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Response:
    """Delete the caller's role session; later requests fall back to the primary role."""
    await manager.invalidate(identity_id)
    return Response(status_code=204)


@router.get("/permissions", response_model=PermissionsResponse)
async def get_my_permissions(
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
):
    """Effective capability map of the caller."""
    permissions = await evaluator.effective_permissions(identity_id)
    return PermissionsResponse(identity_id=identity_id, permissions=permissions)


@router.get("/permissions/{capability}", response_model=PermissionCheckResponse)
async def check_my_permission(
    capability: str,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
):
    """Whether the caller holds one capability."""
    allowed = await evaluator.has_permission(identity_id, capability)
    return PermissionCheckResponse(capability=capability, allowed=allowed)
