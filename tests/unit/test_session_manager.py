"""SessionManager unit tests: switch, validate, invalidate, purge."""

import logging
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from debtdesk.application.dtos.role import (
    RoleGrantResult,
    RoleSessionRecord,
    RoleSnapshot,
)
from debtdesk.application.services.session_manager import SessionManager
from debtdesk.domain.exceptions import (
    InvalidGrantException,
    SessionExpiredException,
    SessionNotFoundException,
)
from debtdesk.shared.utils.datetime import utc_now


def _grant(grant_id: str = "g1", *, identity_id: str = "u1", is_active: bool = True):
    return RoleGrantResult(
        id=grant_id,
        identity_id=identity_id,
        role_type="buyer",
        organization_type="buyer",
        organization_id="b-1",
        is_active=is_active,
        is_primary=False,
        permissions={"place_bids": True},
    )


def _session(expires_in: timedelta, *, grant_id: str = "g1") -> RoleSessionRecord:
    return RoleSessionRecord(
        id="s1",
        identity_id="u1",
        role_grant_id=grant_id,
        session_token="tok",
        expires_at=utc_now() + expires_in,
    )


@pytest.fixture
def session_store():
    store = AsyncMock()
    store.delete_for_identity = AsyncMock(return_value=True)
    store.purge_expired = AsyncMock(return_value=3)
    return store


@pytest.fixture
def trusted():
    mock = AsyncMock()
    mock.get_grant = AsyncMock(return_value=_grant())
    mock.get_session = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def identities():
    mock = AsyncMock()
    mock.get_identity_status = AsyncMock(return_value="active")
    return mock


@pytest.fixture
def resolver():
    mock = AsyncMock()

    async def _describe(grant):
        return RoleSnapshot(grant=grant, organization_name="Debt Buyers Ltd")

    mock.describe = AsyncMock(side_effect=_describe)
    return mock


@pytest.fixture
def manager(session_store, trusted, resolver, identities):
    return SessionManager(
        session_store, trusted, resolver, identities, ttl_hours=24, token_bytes=32
    )


async def test_switch_role_mints_token_and_upserts_session(manager, session_store) -> None:
    before = utc_now()

    result = await manager.switch_role("u1", "g1", ip_address="10.0.0.1", user_agent="pytest")

    assert len(result.token) == 64
    assert result.role.id == "g1"
    assert result.role.organization_name == "Debt Buyers Ltd"
    assert before + timedelta(hours=24) <= result.expires_at
    assert result.expires_at <= utc_now() + timedelta(hours=24)
    session_store.upsert_session.assert_awaited_once()
    args, kwargs = session_store.upsert_session.call_args
    assert args[0] == "u1"
    assert args[1] == "g1"
    assert args[2] == result.token
    assert kwargs == {"ip_address": "10.0.0.1", "user_agent": "pytest"}


async def test_switch_role_tokens_are_unique(manager) -> None:
    first = await manager.switch_role("u1", "g1")
    second = await manager.switch_role("u1", "g1")
    assert first.token != second.token


async def test_switch_role_never_logs_token(manager, caplog) -> None:
    with caplog.at_level(logging.DEBUG):
        result = await manager.switch_role("u1", "g1")
    assert result.token not in caplog.text


@pytest.mark.parametrize(
    ("grant", "reason"),
    [
        (None, "not_found"),
        (_grant(identity_id="u2"), "not_owned"),
        (_grant(is_active=False), "inactive"),
    ],
)
async def test_switch_role_rejects_unusable_grant(
    manager, trusted, session_store, grant, reason
) -> None:
    trusted.get_grant.return_value = grant

    with pytest.raises(InvalidGrantException) as exc_info:
        await manager.switch_role("u1", "g1")

    assert exc_info.value.details["reason"] == reason
    session_store.upsert_session.assert_not_called()


async def test_switch_role_rejects_inactive_identity(manager, identities, session_store) -> None:
    identities.get_identity_status.return_value = "suspended"

    with pytest.raises(InvalidGrantException) as exc_info:
        await manager.switch_role("u1", "g1")

    assert exc_info.value.details["reason"] == "identity_suspended"
    session_store.upsert_session.assert_not_called()


async def test_validate_session_returns_pinned_role(manager, trusted) -> None:
    trusted.get_session.return_value = _session(timedelta(hours=1))

    snapshot = await manager.validate_session("tok")

    assert snapshot.id == "g1"


async def test_validate_session_unknown_token(manager) -> None:
    with pytest.raises(SessionNotFoundException):
        await manager.validate_session("nope")


async def test_validate_session_expired_even_if_row_exists(manager, trusted) -> None:
    trusted.get_session.return_value = _session(timedelta(seconds=-1))

    with pytest.raises(SessionExpiredException):
        await manager.validate_session("tok")
    trusted.get_grant.assert_not_called()


async def test_validate_session_with_deactivated_grant(manager, trusted) -> None:
    trusted.get_session.return_value = _session(timedelta(hours=1))
    trusted.get_grant.return_value = _grant(is_active=False)

    with pytest.raises(InvalidGrantException) as exc_info:
        await manager.validate_session("tok")
    assert exc_info.value.details["reason"] == "inactive"


async def test_invalidate_and_purge_delegate_to_store(manager, session_store) -> None:
    assert await manager.invalidate("u1") is True
    session_store.delete_for_identity.assert_awaited_once_with("u1")

    assert await manager.purge_expired() == 3
    (now,), _ = session_store.purge_expired.call_args
    assert now.tzinfo is not None
