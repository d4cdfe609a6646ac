"""Delete role sessions whose expiry has passed.

Usage:
    python -m scripts.purge_expired_role_sessions
Run from an external scheduler (cron, Kubernetes CronJob). Expired sessions
are already ignored at read time; this only reclaims the rows.
"""

import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import debtdesk.infrastructure.persistence.database as database
from debtdesk.application.services import ActiveRoleResolver, SessionManager
from debtdesk.infrastructure.persistence.repositories import (
    IdentityRepository,
    RoleGrantRepository,
    RoleSessionRepository,
)
from debtdesk.infrastructure.services import TrustedEvaluator
from debtdesk.shared.telemetry.logging import setup_logging


async def purge_expired(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Purge expired role sessions in one transaction; return how many were deleted."""
    async with session_factory() as session:
        async with session.begin():
            session_repo = RoleSessionRepository(session)
            identity_repo = IdentityRepository(session)
            trusted = TrustedEvaluator(RoleGrantRepository(session), session_repo)
            manager = SessionManager(
                session_repo,
                trusted,
                ActiveRoleResolver(trusted, identity_repo),
                identity_repo,
            )
            return await manager.purge_expired()


async def main() -> None:
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)
    deleted = await purge_expired(database.AsyncSessionLocal)
    print(f"Done. Expired role sessions deleted: {deleted}")


if __name__ == "__main__":
    asyncio.run(main())
