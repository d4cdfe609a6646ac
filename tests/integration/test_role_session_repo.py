"""Session Store integration tests on sqlite: one live session per identity, expiry, purge."""

from datetime import timedelta

import pytest

from debtdesk.infrastructure.persistence.repositories import (
    RoleGrantRepository,
    RoleSessionRepository,
)
from debtdesk.shared.utils.datetime import utc_now


@pytest.fixture
def sessions(db_session) -> RoleSessionRepository:
    return RoleSessionRepository(db_session)


@pytest.fixture
async def grants(db_session, seed):
    repo = RoleGrantRepository(db_session)
    agency = await repo.create_grant(
        seed.agent_id, "agency_user", "agency", seed.agency_id, {}, is_primary=True
    )
    buyer = await repo.create_grant(seed.agent_id, "buyer", "buyer", seed.buyer_id, {})
    admin = await repo.create_grant(seed.admin_id, "platform_admin", "platform", None, {})
    return {"agency": agency, "buyer": buyer, "admin": admin}


async def test_upsert_then_lookup_by_token(sessions, grants, seed) -> None:
    expires_at = utc_now() + timedelta(hours=24)
    record = await sessions.upsert_session(
        seed.agent_id, grants["buyer"].id, "token-1", expires_at, ip_address="10.0.0.1"
    )

    found = await sessions.get_by_token("token-1")
    assert found is not None
    assert found.id == record.id
    assert found.role_grant_id == grants["buyer"].id
    assert found.expires_at == expires_at


async def test_second_switch_replaces_first_session(sessions, grants, seed) -> None:
    expires_at = utc_now() + timedelta(hours=24)
    first = await sessions.upsert_session(seed.agent_id, grants["buyer"].id, "token-1", expires_at)
    second = await sessions.upsert_session(
        seed.agent_id, grants["agency"].id, "token-2", expires_at
    )

    assert second.id == first.id
    assert await sessions.get_by_token("token-1") is None
    current = await sessions.get_for_identity(seed.agent_id)
    assert current is not None
    assert current.session_token == "token-2"
    assert current.role_grant_id == grants["agency"].id


async def test_live_lookup_ignores_expired_sessions(sessions, grants, seed) -> None:
    await sessions.upsert_session(
        seed.agent_id, grants["buyer"].id, "token-old", utc_now() - timedelta(seconds=1)
    )

    assert await sessions.get_live_with_grant("token-old", utc_now()) is None
    assert await sessions.get_by_token("token-old") is not None


async def test_live_lookup_returns_session_and_grant(sessions, grants, seed) -> None:
    await sessions.upsert_session(
        seed.agent_id, grants["buyer"].id, "token-live", utc_now() + timedelta(hours=1)
    )

    live = await sessions.get_live_with_grant("token-live", utc_now())

    assert live is not None
    session, grant = live
    assert session.identity_id == seed.agent_id
    assert grant.id == grants["buyer"].id


async def test_live_lookup_rejects_grant_of_other_identity(sessions, grants, seed) -> None:
    await sessions.upsert_session(
        seed.agent_id, grants["admin"].id, "token-stolen", utc_now() + timedelta(hours=1)
    )

    assert await sessions.get_live_with_grant("token-stolen", utc_now()) is None


async def test_delete_for_identity(sessions, grants, seed) -> None:
    await sessions.upsert_session(
        seed.agent_id, grants["buyer"].id, "token-1", utc_now() + timedelta(hours=1)
    )

    assert await sessions.delete_for_identity(seed.agent_id) is True
    assert await sessions.delete_for_identity(seed.agent_id) is False
    assert await sessions.get_by_token("token-1") is None


async def test_purge_expired_keeps_live_sessions(sessions, grants, seed) -> None:
    now = utc_now()
    await sessions.upsert_session(
        seed.agent_id, grants["buyer"].id, "token-expired", now - timedelta(minutes=5)
    )
    await sessions.upsert_session(
        seed.admin_id, grants["admin"].id, "token-live", now + timedelta(hours=1)
    )

    assert await sessions.purge_expired(now) == 1
    assert await sessions.get_by_token("token-expired") is None
    assert await sessions.get_by_token("token-live") is not None
