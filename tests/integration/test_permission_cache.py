"""Cached permission state across grant mutations, with a concurrent reader."""

from functools import partial

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.application.services import PermissionEvaluator, RoleGrantService
from debtdesk.domain.capabilities import default_permissions_for
from debtdesk.infrastructure.persistence.database import after_commit, run_after_commit
from debtdesk.infrastructure.persistence.repositories import (
    IdentityRepository,
    RoleGrantRepository,
    RoleSessionRepository,
)
from debtdesk.infrastructure.services import TrustedEvaluator


def _evaluator(session: AsyncSession, cache) -> PermissionEvaluator:
    trusted = TrustedEvaluator(RoleGrantRepository(session), RoleSessionRepository(session))
    return PermissionEvaluator(trusted, IdentityRepository(session), cache=cache)


def _service(session: AsyncSession, cache) -> RoleGrantService:
    return RoleGrantService(
        RoleGrantRepository(session),
        IdentityRepository(session),
        _evaluator(session, cache),
        on_commit=partial(after_commit, session),
    )


async def test_deactivated_platform_admin_loses_cached_override(
    file_session_factory, api_seed, memory_cache
) -> None:
    admin = api_seed.admin_id
    async with file_session_factory() as session:
        async with session.begin():
            grant = await RoleGrantRepository(session).create_grant(
                admin,
                "platform_admin",
                "platform",
                None,
                default_permissions_for("platform_admin"),
                is_primary=True,
            )
    async with file_session_factory() as reader:
        assert await _evaluator(reader, memory_cache).has_permission(admin, "place_bids")

    async with file_session_factory() as writer:
        async with writer.begin():
            await _service(writer, memory_cache).deactivate_grant(grant.id)
            # A reader inside the write window still sees the committed grant.
            async with file_session_factory() as reader:
                evaluator = _evaluator(reader, memory_cache)
                assert await evaluator.has_permission(admin, "place_bids") is True
            assert f"permission:{admin}" in memory_cache.store
        await run_after_commit(writer)

    assert f"permission:{admin}" not in memory_cache.store
    async with file_session_factory() as reader:
        evaluator = _evaluator(reader, memory_cache)
        assert await evaluator.trusted.is_platform_admin(admin) is False
        assert await evaluator.has_permission(admin, "place_bids") is False


async def test_rolled_back_mutation_keeps_cache(
    file_session_factory, api_seed, memory_cache
) -> None:
    memory_cache.store[f"permission:{api_seed.agent_id}"] = {
        "permissions": {},
        "is_platform_admin": False,
    }
    async with file_session_factory() as writer:
        with pytest.raises(RuntimeError):
            async with writer.begin():
                await _service(writer, memory_cache).create_grant(
                    api_seed.agent_id, "buyer", "buyer", api_seed.buyer_id
                )
                raise RuntimeError("abort")

    assert f"permission:{api_seed.agent_id}" in memory_cache.store
