"""Application services: role resolution, sessions, permissions, access, grant admin."""

from debtdesk.application.services.access_gate import AccessGate
from debtdesk.application.services.active_role_resolver import ActiveRoleResolver
from debtdesk.application.services.permission_evaluator import PermissionEvaluator
from debtdesk.application.services.role_grant_service import RoleGrantService
from debtdesk.application.services.session_manager import SessionManager

__all__ = [
    "AccessGate",
    "ActiveRoleResolver",
    "PermissionEvaluator",
    "RoleGrantService",
    "SessionManager",
]
