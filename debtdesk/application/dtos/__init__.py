"""Application DTOs (read-models returned by repositories and services)."""

from debtdesk.application.dtos.identity import IdentityResult, PortfolioOwnership
from debtdesk.application.dtos.role import (
    OrganizationContext,
    RoleGrantResult,
    RoleSessionRecord,
    RoleSessionResult,
    RoleSnapshot,
)

__all__ = [
    "IdentityResult",
    "OrganizationContext",
    "PortfolioOwnership",
    "RoleGrantResult",
    "RoleSessionRecord",
    "RoleSessionResult",
    "RoleSnapshot",
]
