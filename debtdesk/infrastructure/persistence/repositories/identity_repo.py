"""Identity repository (Identity Directory). Read-only from the core's point of view."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.application.dtos.identity import IdentityResult
from debtdesk.domain.exceptions import ResourceNotFoundException
from debtdesk.infrastructure.persistence.models.identity import Identity
from debtdesk.infrastructure.persistence.repositories.base import BaseRepository


def _identity_to_result(i: Identity) -> IdentityResult:
    return IdentityResult(
        id=i.id,
        email=i.email,
        display_name=i.display_name,
        status=i.status,
        legacy_role=i.legacy_role,
        legacy_agency_id=i.legacy_agency_id,
    )


class IdentityRepository(BaseRepository[Identity]):
    """Identity lookups: lifecycle status and legacy single-role data."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Identity)

    async def get_identity(self, identity_id: str) -> IdentityResult | None:
        identity = await super().get_by_id(identity_id)
        return _identity_to_result(identity) if identity else None

    async def get_identity_status(self, identity_id: str) -> str:
        """Return the identity's status; raise ResourceNotFoundException if unknown."""
        result = await self._execute(
            select(Identity.status).where(Identity.id == identity_id),
            "get_identity_status",
        )
        status = result.scalar_one_or_none()
        if status is None:
            raise ResourceNotFoundException("identity", identity_id)
        return status

    async def list_with_legacy_role(self) -> list[IdentityResult]:
        """Identities that still carry a pre-multi-role single role."""
        result = await self._execute(
            select(Identity)
            .where(Identity.legacy_role.is_not(None))
            .order_by(Identity.created_at.asc(), Identity.id.asc()),
            "list_legacy_identities",
        )
        return [_identity_to_result(i) for i in result.scalars().all()]
