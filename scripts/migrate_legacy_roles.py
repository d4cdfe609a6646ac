"""Migrate pre-multi-role identities: turn each legacy role into one primary grant.

Usage:
    python -m scripts.migrate_legacy_roles
Safe to re-run: identities that already hold grants are skipped. Each identity
is migrated in its own transaction so one failure does not block the rest.
Cached permissions of a migrated identity are dropped once its grant commits.
"""

import asyncio
import sys
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import debtdesk.infrastructure.persistence.database as database
from debtdesk.application.interfaces.services import ICacheService
from debtdesk.application.services import PermissionEvaluator, RoleGrantService
from debtdesk.core.config import get_settings
from debtdesk.domain.exceptions import DebtDeskException
from debtdesk.infrastructure.cache.redis_cache import CacheService
from debtdesk.infrastructure.persistence.repositories import (
    IdentityRepository,
    RoleGrantRepository,
    RoleSessionRepository,
)
from debtdesk.infrastructure.services import TrustedEvaluator
from debtdesk.shared.telemetry.logging import setup_logging


def _grant_service(session: AsyncSession, cache: ICacheService | None) -> RoleGrantService:
    grants = RoleGrantRepository(session)
    identities = IdentityRepository(session)
    evaluator = PermissionEvaluator(
        TrustedEvaluator(grants, RoleSessionRepository(session)),
        identities,
        cache=cache,
        cache_ttl=get_settings().cache_ttl_permissions,
    )
    return RoleGrantService(
        grants, identities, evaluator, on_commit=partial(database.after_commit, session)
    )


async def migrate_all(
    session_factory: async_sessionmaker[AsyncSession],
    cache: ICacheService | None = None,
) -> tuple[int, int]:
    """Return (migrated, failed) counts."""
    async with session_factory() as session:
        identities = await IdentityRepository(session).list_with_legacy_role()

    migrated = 0
    failed = 0
    for identity in identities:
        try:
            async with session_factory() as session:
                async with session.begin():
                    grant = await _grant_service(session, cache).migrate_legacy_role(
                        identity
                    )
                await database.run_after_commit(session)
        except DebtDeskException as exc:
            failed += 1
            print(
                f"Identity {identity.id}: {exc.error_code} {exc.message}",
                file=sys.stderr,
            )
            continue
        if grant is not None:
            migrated += 1
            print(f"Identity {identity.id}: {grant.role_type} -> grant {grant.id}")
    return migrated, failed


async def main() -> None:
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)
    cache = CacheService()
    await cache.connect()
    try:
        migrated, failed = await migrate_all(database.AsyncSessionLocal, cache)
    finally:
        await cache.disconnect()
    print(f"Done. Migrated: {migrated}, failed: {failed}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
