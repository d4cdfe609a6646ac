"""Domain exceptions for debtdesk.

Defines domain-level exceptions for role grants, role sessions and access
decisions. These exceptions are independent of infrastructure concerns; the
presentation layer maps them to HTTP responses in exception handlers.

Permission *misses* are never raised from the evaluators (they return False);
only infrastructure failures and invalid requests surface as exceptions, so
callers can tell "denied" apart from "broken".
"""

from typing import Any


class DebtDeskException(Exception):
    """Base exception for all debtdesk errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. identity_id, grant_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DebtDeskException):
    """Raised when input validation fails (e.g. unknown capability, bad scope)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DebtDeskException):
    """Raised when the bearer credential is missing or invalid."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DebtDeskException):
    """Raised by require_* helpers when an access or capability check is denied."""

    def __init__(
        self,
        capability: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional capability name.

        Args:
            capability: Capability that was required (e.g. 'manage_users').
            message: Human-readable message; replaced when capability is given.
        """
        details: dict[str, Any] = {}
        if capability:
            message = f"Permission denied: {capability}"
            details["capability"] = capability
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(DebtDeskException):
    """Raised when a referenced identity or grant does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'identity', 'role_grant').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateGrantException(DebtDeskException):
    """Raised when (identity, organization type, organization id, role type) already exists."""

    def __init__(
        self,
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None,
    ) -> None:
        super().__init__(
            f"Identity {identity_id} already holds {role_type} in "
            f"{organization_type} {organization_id or ''}".rstrip(),
            "DUPLICATE_GRANT",
            {
                "identity_id": identity_id,
                "role_type": role_type,
                "organization_type": organization_type,
                "organization_id": organization_id,
            },
        )


class PrimaryGrantConflictException(DebtDeskException):
    """Raised when a concurrent write left another grant marked primary (single-primary index)."""

    def __init__(self, identity_id: str) -> None:
        super().__init__(
            "Another grant was made primary concurrently; retry.",
            "PRIMARY_GRANT_CONFLICT",
            {"identity_id": identity_id},
        )


class InvalidGrantException(DebtDeskException):
    """Raised when a role grant cannot be used: not owned by the identity, or inactive."""

    def __init__(self, grant_id: str, reason: str) -> None:
        """Initialize with grant and reason.

        Args:
            grant_id: The grant the caller tried to use.
            reason: Short machine-friendly reason ('not_owned', 'inactive', ...).
        """
        super().__init__(
            f"Role grant {grant_id} cannot be used: {reason}",
            "INVALID_GRANT",
            {"grant_id": grant_id, "reason": reason},
        )


class SessionNotFoundException(DebtDeskException):
    """Raised when a role-session token does not exist."""

    def __init__(self) -> None:
        super().__init__("Role session not found", "SESSION_NOT_FOUND")


class SessionExpiredException(DebtDeskException):
    """Raised when a role-session token exists but is past its expiry."""

    def __init__(self, expired_at: str) -> None:
        super().__init__(
            "Role session expired",
            "SESSION_EXPIRED",
            {"expired_at": expired_at},
        )


class NoActiveRoleException(DebtDeskException):
    """Raised when an identity has no active grant (or is not itself active)."""

    def __init__(self, identity_id: str, reason: str = "no_active_grant") -> None:
        super().__init__(
            f"No active role for identity {identity_id}",
            "NO_ACTIVE_ROLE",
            {"identity_id": identity_id, "reason": reason},
        )


class StoreUnavailableException(DebtDeskException):
    """Raised when the role/session store cannot be reached. Always fails closed."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            "Role store is unavailable",
            "STORE_UNAVAILABLE",
            {"operation": operation},
        )
