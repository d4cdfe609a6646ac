"""Domain exception tests: error codes and details used by the HTTP handlers."""

from debtdesk.domain.exceptions import (
    AuthorizationException,
    DebtDeskException,
    DuplicateGrantException,
    InvalidGrantException,
    NoActiveRoleException,
    SessionExpiredException,
    StoreUnavailableException,
)


def test_base_exception_defaults_error_code_to_class_name() -> None:
    exc = DebtDeskException("boom")
    assert exc.error_code == "DebtDeskException"
    assert exc.to_dict() == {"error": "DebtDeskException", "message": "boom", "details": {}}


def test_invalid_grant_carries_reason() -> None:
    exc = InvalidGrantException("g1", "not_owned")
    assert exc.error_code == "INVALID_GRANT"
    assert exc.details == {"grant_id": "g1", "reason": "not_owned"}


def test_duplicate_grant_platform_message() -> None:
    exc = DuplicateGrantException("u1", "platform_admin", "platform", None)
    assert exc.error_code == "DUPLICATE_GRANT"
    assert exc.message == "Identity u1 already holds platform_admin in platform"
    assert exc.details["organization_id"] is None


def test_authorization_exception_names_capability() -> None:
    exc = AuthorizationException(capability="manage_users")
    assert exc.message == "Permission denied: manage_users"
    assert AuthorizationException().details == {}


def test_session_and_role_errors() -> None:
    assert SessionExpiredException("2024-01-01T00:00:00+00:00").error_code == "SESSION_EXPIRED"
    assert NoActiveRoleException("u1").details["reason"] == "no_active_grant"
    assert StoreUnavailableException("list_grants").details == {"operation": "list_grants"}
