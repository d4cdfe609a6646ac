"""Organization directory repository: agency/client/buyer names and ownership links."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.application.dtos.identity import PortfolioOwnership
from debtdesk.domain.enums import OrganizationType
from debtdesk.infrastructure.persistence.models.organization import (
    Agency,
    Buyer,
    Client,
    Portfolio,
)
from debtdesk.infrastructure.persistence.repositories.base import BaseRepository

_NAME_COLUMNS: dict[str, Any] = {
    OrganizationType.AGENCY.value: (Agency.id, Agency.name),
    OrganizationType.CLIENT.value: (Client.id, Client.name),
    OrganizationType.BUYER.value: (Buyer.id, Buyer.company_name),
}


class OrganizationRepository(BaseRepository[Agency]):
    """Read-only lookups over the agency, client, buyer and portfolio registries."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Agency)

    async def resolve_org_name(
        self, organization_type: str, organization_id: str
    ) -> str | None:
        columns = _NAME_COLUMNS.get(organization_type)
        if columns is None:
            return None
        id_column, name_column = columns
        result = await self._execute(
            select(name_column).where(id_column == organization_id),
            "resolve_org_name",
        )
        return result.scalar_one_or_none()

    async def client_belongs_to_agency(self, client_id: str, agency_id: str) -> bool:
        result = await self._execute(
            select(Client.id).where(Client.id == client_id, Client.agency_id == agency_id),
            "client_belongs_to_agency",
        )
        return result.scalar_one_or_none() is not None

    async def get_portfolio_ownership(
        self, portfolio_id: str
    ) -> PortfolioOwnership | None:
        result = await self._execute(
            select(Portfolio.id, Portfolio.agency_id, Portfolio.client_id).where(
                Portfolio.id == portfolio_id
            ),
            "get_portfolio_ownership",
        )
        row = result.first()
        if row is None:
            return None
        return PortfolioOwnership(
            portfolio_id=row.id, agency_id=row.agency_id, client_id=row.client_id
        )
