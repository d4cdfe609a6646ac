"""RoleSession repository (Session Store). One row per identity, replaced on switch."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.application.dtos.role import RoleGrantResult, RoleSessionRecord
from debtdesk.infrastructure.persistence.models.role_grant import RoleGrant
from debtdesk.infrastructure.persistence.models.role_session import RoleSession
from debtdesk.infrastructure.persistence.repositories.base import BaseRepository
from debtdesk.infrastructure.persistence.repositories.role_grant_repo import (
    grant_to_result,
)
from debtdesk.shared.utils.datetime import ensure_utc, utc_now
from debtdesk.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _session_to_record(s: RoleSession) -> RoleSessionRecord:
    """Map ORM RoleSession to application RoleSessionRecord."""
    return RoleSessionRecord(
        id=s.id,
        identity_id=s.identity_id,
        role_grant_id=s.role_grant_id,
        session_token=s.session_token,
        expires_at=ensure_utc(s.expires_at),
        created_at=ensure_utc(s.created_at),
    )


class RoleSessionRepository(BaseRepository[RoleSession]):
    """Session Store. Writes are single upserts keyed by identity_id (last switch wins)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RoleSession)

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        return pg_insert if dialect == "postgresql" else sqlite_insert

    async def upsert_session(
        self,
        identity_id: str,
        role_grant_id: str,
        session_token: str,
        expires_at: datetime,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RoleSessionRecord:
        """Insert or replace the identity's session in one INSERT .. ON CONFLICT statement."""
        created_at = utc_now()
        insert = self._insert()
        stmt = insert(RoleSession).values(
            id=generate_cuid(),
            identity_id=identity_id,
            role_grant_id=role_grant_id,
            session_token=session_token,
            expires_at=expires_at,
            created_at=created_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[RoleSession.identity_id],
            set_={
                "role_grant_id": stmt.excluded.role_grant_id,
                "session_token": stmt.excluded.session_token,
                "expires_at": stmt.excluded.expires_at,
                "created_at": stmt.excluded.created_at,
                "ip_address": stmt.excluded.ip_address,
                "user_agent": stmt.excluded.user_agent,
            },
        ).returning(RoleSession.id)
        result = await self._execute(stmt, "upsert_session")
        session_id = result.scalar_one()
        return RoleSessionRecord(
            id=session_id,
            identity_id=identity_id,
            role_grant_id=role_grant_id,
            session_token=session_token,
            expires_at=ensure_utc(expires_at),
            created_at=created_at,
        )

    async def get_by_token(self, session_token: str) -> RoleSessionRecord | None:
        result = await self._execute(
            select(RoleSession)
            .where(RoleSession.session_token == session_token)
            .execution_options(populate_existing=True),
            "get_session_by_token",
        )
        session = result.scalar_one_or_none()
        return _session_to_record(session) if session else None

    async def get_live_with_grant(
        self, session_token: str, now: datetime
    ) -> tuple[RoleSessionRecord, RoleGrantResult] | None:
        """Return (session, grant) for a non-expired token whose grant has the same identity."""
        result = await self._execute(
            select(RoleSession, RoleGrant)
            .join(
                RoleGrant,
                (RoleGrant.id == RoleSession.role_grant_id)
                & (RoleGrant.identity_id == RoleSession.identity_id),
            )
            .where(
                RoleSession.session_token == session_token,
                RoleSession.expires_at > now,
            )
            .execution_options(populate_existing=True),
            "get_live_session",
        )
        row = result.first()
        if row is None:
            return None
        session, grant = row
        return _session_to_record(session), grant_to_result(grant)

    async def get_for_identity(self, identity_id: str) -> RoleSessionRecord | None:
        result = await self._execute(
            select(RoleSession)
            .where(RoleSession.identity_id == identity_id)
            .execution_options(populate_existing=True),
            "get_session_for_identity",
        )
        session = result.scalar_one_or_none()
        return _session_to_record(session) if session else None

    async def delete_for_identity(self, identity_id: str) -> bool:
        result = await self._execute(
            delete(RoleSession).where(RoleSession.identity_id == identity_id),
            "delete_session",
        )
        return (result.rowcount or 0) > 0

    async def purge_expired(self, now: datetime) -> int:
        """Delete sessions whose expires_at is before now. Returns rows deleted."""
        result = await self._execute(
            delete(RoleSession)
            .where(RoleSession.expires_at < now)
            .execution_options(synchronize_session=False),
            "purge_expired_sessions",
        )
        deleted = result.rowcount or 0
        logger.info("Purged %d expired role sessions", deleted)
        return deleted
