"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories, the trusted evaluator and the
role/permission/access services. Routes depend only on these, not on
infrastructure directly.
"""

from .auth import (
    get_current_identity_id,
    get_role_session_token,
    require_permission,
    require_platform_admin,
)
from .db import (
    get_identity_repo,
    get_identity_repo_for_write,
    get_organization_repo,
    get_organization_repo_for_write,
    get_role_grant_repo,
    get_role_grant_repo_for_write,
    get_role_session_repo,
    get_role_session_repo_for_write,
)
from .roles import (
    get_access_gate,
    get_active_role_resolver,
    get_permission_evaluator,
    get_role_grant_service,
    get_session_manager,
    get_session_validator,
    get_trusted_evaluator,
    get_trusted_evaluator_for_write,
)

__all__ = [
    "get_access_gate",
    "get_active_role_resolver",
    "get_current_identity_id",
    "get_identity_repo",
    "get_identity_repo_for_write",
    "get_organization_repo",
    "get_organization_repo_for_write",
    "get_permission_evaluator",
    "get_role_grant_repo",
    "get_role_grant_repo_for_write",
    "get_role_grant_service",
    "get_role_session_repo",
    "get_role_session_repo_for_write",
    "get_role_session_token",
    "get_session_manager",
    "get_session_validator",
    "get_trusted_evaluator",
    "get_trusted_evaluator_for_write",
    "require_permission",
    "require_platform_admin",
]
