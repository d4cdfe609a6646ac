"""Domain layer: enums, capability catalogue, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from debtdesk.domain.enums import (
    ROLE_PRIORITY,
    IdentityStatus,
    OrganizationType,
    RoleType,
    role_priority,
)
from debtdesk.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DebtDeskException,
    DuplicateGrantException,
    InvalidGrantException,
    NoActiveRoleException,
    PrimaryGrantConflictException,
    ResourceNotFoundException,
    SessionExpiredException,
    SessionNotFoundException,
    StoreUnavailableException,
    ValidationException,
)

__all__ = [
    # Enums
    "IdentityStatus",
    "OrganizationType",
    "ROLE_PRIORITY",
    "RoleType",
    "role_priority",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "DebtDeskException",
    "DuplicateGrantException",
    "InvalidGrantException",
    "NoActiveRoleException",
    "PrimaryGrantConflictException",
    "ResourceNotFoundException",
    "SessionExpiredException",
    "SessionNotFoundException",
    "StoreUnavailableException",
    "ValidationException",
]
