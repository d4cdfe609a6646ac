"""Access Gate: the single authorization entry point for the rest of the back office.

Every decision is answered from the trusted evaluator plus the organization
directories in a fixed number of store reads. Denials are returned as False;
only infrastructure failures raise.
"""

from __future__ import annotations

import logging

from debtdesk.application.interfaces.services import (
    IClientDirectory,
    IIdentityDirectory,
    IPortfolioDirectory,
    ITrustedEvaluator,
)
from debtdesk.domain.enums import IdentityStatus, OrganizationType
from debtdesk.domain.exceptions import AuthorizationException

logger = logging.getLogger(__name__)


class AccessGate:
    """Answers "may this identity touch that agency / client / portfolio"."""

    def __init__(
        self,
        trusted: ITrustedEvaluator,
        identity_directory: IIdentityDirectory,
        client_directory: IClientDirectory,
        portfolio_directory: IPortfolioDirectory,
    ) -> None:
        self.trusted = trusted
        self.identity_directory = identity_directory
        self.client_directory = client_directory
        self.portfolio_directory = portfolio_directory

    async def _is_active_identity(self, identity_id: str) -> bool:
        status = await self.identity_directory.get_identity_status(identity_id)
        return status == IdentityStatus.ACTIVE.value

    async def is_platform_admin(self, identity_id: str) -> bool:
        if not await self._is_active_identity(identity_id):
            return False
        return await self.trusted.is_platform_admin(identity_id)

    async def can_access_agency(self, identity_id: str, agency_id: str) -> bool:
        if not await self._is_active_identity(identity_id):
            return False
        if await self.trusted.is_platform_admin(identity_id):
            return True
        context = await self.trusted.get_organization_context(identity_id)
        return (
            context is not None
            and context.organization_type == OrganizationType.AGENCY.value
            and context.organization_id == agency_id
        )

    async def can_access_client(self, identity_id: str, client_id: str) -> bool:
        """Platform admin, the client itself, or the agency that manages the client."""
        if not await self._is_active_identity(identity_id):
            return False
        if await self.trusted.is_platform_admin(identity_id):
            return True
        context = await self.trusted.get_organization_context(identity_id)
        if context is None or context.organization_id is None:
            return False
        if context.organization_type == OrganizationType.CLIENT.value:
            return context.organization_id == client_id
        if context.organization_type == OrganizationType.AGENCY.value:
            return await self.client_directory.client_belongs_to_agency(
                client_id, context.organization_id
            )
        return False

    async def can_access_portfolio(self, identity_id: str, portfolio_id: str) -> bool:
        """Platform admin, the owning agency, or the owning client."""
        if not await self._is_active_identity(identity_id):
            return False
        if await self.trusted.is_platform_admin(identity_id):
            return True
        context = await self.trusted.get_organization_context(identity_id)
        if context is None or context.organization_id is None:
            return False
        ownership = await self.portfolio_directory.get_portfolio_ownership(portfolio_id)
        if ownership is None:
            return False
        if context.organization_type == OrganizationType.AGENCY.value:
            return ownership.agency_id == context.organization_id
        if context.organization_type == OrganizationType.CLIENT.value:
            return ownership.client_id == context.organization_id
        return False

    async def require_platform_admin(self, identity_id: str) -> None:
        """Raise AuthorizationException unless the identity is a platform admin."""
        if not await self.is_platform_admin(identity_id):
            logger.info("Platform admin required; denied identity %s", identity_id)
            raise AuthorizationException(message="Platform admin required")
