"""RoleGrant repository (Role Store). Interface methods return application DTOs.

Pure storage logic: no method here consults the Access Gate. Only the Trusted
Evaluator and administrative services call it.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.application.dtos.role import RoleGrantResult
from debtdesk.domain.enums import OrganizationType
from debtdesk.domain.exceptions import (
    DuplicateGrantException,
    InvalidGrantException,
    PrimaryGrantConflictException,
    ResourceNotFoundException,
)
from debtdesk.infrastructure.persistence.models.role_grant import (
    SINGLE_PRIMARY_INDEX,
    RoleGrant,
)
from debtdesk.infrastructure.persistence.repositories.base import BaseRepository
from debtdesk.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def grant_to_result(g: RoleGrant) -> RoleGrantResult:
    """Map ORM RoleGrant to application RoleGrantResult."""
    return RoleGrantResult(
        id=g.id,
        identity_id=g.identity_id,
        role_type=g.role_type,
        organization_type=g.organization_type,
        organization_id=g.organization_id,
        is_active=g.is_active,
        is_primary=g.is_primary,
        permissions=dict(g.permissions or {}),
        created_at=ensure_utc(g.created_at),
    )


def _violates_single_primary(exc: IntegrityError) -> bool:
    """True if the IntegrityError came from the one-primary-per-identity index.

    PostgreSQL names the index; SQLite reports only the indexed column.
    """
    message = str(exc.orig)
    if SINGLE_PRIMARY_INDEX in message:
        return True
    return message.strip().endswith("UNIQUE constraint failed: role_grant.identity_id")


class RoleGrantRepository(BaseRepository[RoleGrant]):
    """Role Store: create, deactivate, set primary, list and get role grants."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RoleGrant)

    @staticmethod
    def _ordered(stmt: Any) -> Any:
        return stmt.order_by(RoleGrant.created_at.asc(), RoleGrant.id.asc())

    async def find_grant(self, grant_id: str) -> RoleGrantResult | None:
        grant = await super().get_by_id(grant_id)
        return grant_to_result(grant) if grant else None

    async def get_grant(self, grant_id: str) -> RoleGrantResult:
        grant = await super().get_by_id(grant_id)
        if grant is None:
            raise ResourceNotFoundException("role_grant", grant_id)
        return grant_to_result(grant)

    async def list_grants(
        self, identity_id: str, *, active_only: bool = False
    ) -> list[RoleGrantResult]:
        """Return the identity's grants in insertion order (created_at, then id)."""
        stmt = select(RoleGrant).where(RoleGrant.identity_id == identity_id)
        if active_only:
            stmt = stmt.where(RoleGrant.is_active.is_(True))
        result = await self._execute(self._ordered(stmt), "list_grants")
        return [grant_to_result(g) for g in result.scalars().all()]

    async def get_primary_grant(self, identity_id: str) -> RoleGrantResult | None:
        result = await self._execute(
            select(RoleGrant).where(
                RoleGrant.identity_id == identity_id,
                RoleGrant.is_primary.is_(True),
                RoleGrant.is_active.is_(True),
            ),
            "get_primary_grant",
        )
        grant = result.scalar_one_or_none()
        return grant_to_result(grant) if grant else None

    async def has_active_role_type(self, identity_id: str, role_type: str) -> bool:
        result = await self._execute(
            select(RoleGrant.id)
            .where(
                RoleGrant.identity_id == identity_id,
                RoleGrant.role_type == role_type,
                RoleGrant.is_active.is_(True),
            )
            .limit(1),
            "has_active_role_type",
        )
        return result.scalar_one_or_none() is not None

    async def count_grants(self, identity_id: str) -> int:
        result = await self._execute(
            select(func.count(RoleGrant.id)).where(RoleGrant.identity_id == identity_id),
            "count_grants",
        )
        return int(result.scalar_one())

    async def _find_by_scope(
        self,
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None,
    ) -> RoleGrant | None:
        org_clause = (
            RoleGrant.organization_id.is_(None)
            if organization_id is None
            else RoleGrant.organization_id == organization_id
        )
        result = await self._execute(
            select(RoleGrant).where(
                RoleGrant.identity_id == identity_id,
                RoleGrant.role_type == role_type,
                RoleGrant.organization_type == organization_type,
                org_clause,
            ),
            "find_grant_by_scope",
        )
        return result.scalar_one_or_none()

    async def _clear_primary(self, identity_id: str, keep_id: str | None = None) -> None:
        stmt = update(RoleGrant).where(
            RoleGrant.identity_id == identity_id,
            RoleGrant.is_primary.is_(True),
        )
        if keep_id is not None:
            stmt = stmt.where(RoleGrant.id != keep_id)
        await self._execute(stmt.values(is_primary=False), "clear_primary")

    async def create_grant(
        self,
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None,
        permissions: dict[str, bool],
        is_primary: bool = False,
        is_active: bool = True,
    ) -> RoleGrantResult:
        """Insert a grant. Clears other primaries first when is_primary (same transaction).

        Raises:
            DuplicateGrantException: the (identity, org type, org id, role) tuple exists,
                active or not.
            PrimaryGrantConflictException: a concurrent writer set another primary.
        """
        if organization_type == OrganizationType.PLATFORM.value:
            organization_id = None
        existing = await self._find_by_scope(
            identity_id, role_type, organization_type, organization_id
        )
        if existing is not None:
            raise DuplicateGrantException(
                identity_id, role_type, organization_type, organization_id
            )
        if is_primary:
            await self._clear_primary(identity_id)
        grant = RoleGrant(
            identity_id=identity_id,
            role_type=role_type,
            organization_type=organization_type,
            organization_id=organization_id,
            permissions=dict(permissions),
            is_primary=is_primary,
            is_active=is_active,
        )
        self.db.add(grant)
        try:
            await self._flush("create_grant")
        except IntegrityError as exc:
            if is_primary and _violates_single_primary(exc):
                raise PrimaryGrantConflictException(identity_id) from None
            raise DuplicateGrantException(
                identity_id, role_type, organization_type, organization_id
            ) from None
        await self.db.refresh(grant)
        logger.info(
            "Created role grant %s (%s, %s %s) for identity %s primary=%s",
            grant.id,
            role_type,
            organization_type,
            organization_id or "-",
            identity_id,
            is_primary,
        )
        return grant_to_result(grant)

    async def deactivate_grant(self, grant_id: str) -> RoleGrantResult:
        """Set is_active = False. Idempotent; grants are never hard-deleted."""
        grant = await super().get_by_id(grant_id)
        if grant is None:
            raise ResourceNotFoundException("role_grant", grant_id)
        if grant.is_active:
            grant.is_active = False
            await self._flush("deactivate_grant")
            await self.db.refresh(grant)
            logger.info(
                "Deactivated role grant %s for identity %s", grant.id, grant.identity_id
            )
        return grant_to_result(grant)

    async def set_primary(self, identity_id: str, grant_id: str) -> RoleGrantResult:
        """Make grant_id the identity's only primary grant.

        Clear and set run in the caller's transaction; the single-primary index
        turns a conflicting concurrent write into PrimaryGrantConflictException.
        """
        grant = await super().get_by_id(grant_id)
        if grant is None:
            raise ResourceNotFoundException("role_grant", grant_id)
        if grant.identity_id != identity_id:
            raise InvalidGrantException(grant_id, "not_owned")
        if not grant.is_active:
            raise InvalidGrantException(grant_id, "inactive")
        if grant.is_primary:
            return grant_to_result(grant)
        await self._clear_primary(identity_id, keep_id=grant_id)
        grant.is_primary = True
        try:
            await self._flush("set_primary")
        except IntegrityError:
            raise PrimaryGrantConflictException(identity_id) from None
        await self.db.refresh(grant)
        logger.info("Set role grant %s primary for identity %s", grant_id, identity_id)
        return grant_to_result(grant)
