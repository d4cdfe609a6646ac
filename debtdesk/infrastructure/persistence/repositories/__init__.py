"""Persistence repositories. Re-exports for dependency injection."""

from debtdesk.infrastructure.persistence.repositories.base import BaseRepository
from debtdesk.infrastructure.persistence.repositories.identity_repo import (
    IdentityRepository,
)
from debtdesk.infrastructure.persistence.repositories.organization_repo import (
    OrganizationRepository,
)
from debtdesk.infrastructure.persistence.repositories.role_grant_repo import (
    RoleGrantRepository,
)
from debtdesk.infrastructure.persistence.repositories.role_session_repo import (
    RoleSessionRepository,
)

__all__ = [
    "BaseRepository",
    "IdentityRepository",
    "OrganizationRepository",
    "RoleGrantRepository",
    "RoleSessionRepository",
]
