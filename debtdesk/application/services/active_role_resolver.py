"""Active-role resolution: the single effective role grant for an identity on a request.

Order: live session grant, then active primary grant, then the highest-ranked
active grant (ROLE_PRIORITY, then created_at, then id). Reads go through the
trusted evaluator only; nothing here touches the Access Gate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from debtdesk.application.dtos.role import RoleGrantResult, RoleSnapshot
from debtdesk.application.interfaces.services import (
    IIdentityDirectory,
    IOrganizationDirectory,
    ITrustedEvaluator,
)
from debtdesk.domain.enums import IdentityStatus, OrganizationType, role_priority
from debtdesk.domain.exceptions import NoActiveRoleException

logger = logging.getLogger(__name__)

PLATFORM_LABEL = "Platform"

_ORGANIZATION_LABELS: dict[str, str] = {
    OrganizationType.AGENCY.value: "Agency",
    OrganizationType.CLIENT.value: "Client",
    OrganizationType.BUYER.value: "Buyer",
}

_EARLIEST = datetime.min.replace(tzinfo=UTC)


def fallback_organization_name(
    organization_type: str, organization_id: str | None
) -> str:
    """Synthesized display name used when the organization directory has none."""
    if organization_type == OrganizationType.PLATFORM.value or not organization_id:
        return PLATFORM_LABEL
    label = _ORGANIZATION_LABELS.get(organization_type, organization_type.title())
    return f"{label} {organization_id}"


def _fallback_sort_key(grant: RoleGrantResult) -> tuple[int, datetime, str]:
    return (role_priority(grant.role_type), grant.created_at or _EARLIEST, grant.id)


def highest_priority_grant(
    grants: Iterable[RoleGrantResult],
) -> RoleGrantResult | None:
    """Pick the most privileged active grant; ties by earliest creation, then id."""
    candidates = [g for g in grants if g.is_active]
    if not candidates:
        return None
    return min(candidates, key=_fallback_sort_key)


class ActiveRoleResolver:
    """Computes the active role for (identity, optional session token)."""

    def __init__(
        self,
        trusted: ITrustedEvaluator,
        identity_directory: IIdentityDirectory,
        organization_directory: IOrganizationDirectory | None = None,
    ) -> None:
        self.trusted = trusted
        self.identity_directory = identity_directory
        self.organization_directory = organization_directory

    async def _require_active_identity(self, identity_id: str) -> None:
        status = await self.identity_directory.get_identity_status(identity_id)
        if status != IdentityStatus.ACTIVE.value:
            raise NoActiveRoleException(identity_id, reason=f"identity_{status}")

    async def _session_grant(
        self, identity_id: str, session_token: str
    ) -> RoleGrantResult | None:
        live = await self.trusted.get_live_session_grant(session_token)
        if live is None:
            return None
        session, grant = live
        if session.identity_id != identity_id:
            logger.warning(
                "Ignoring role session %s presented by identity %s (owned by %s)",
                session.id,
                identity_id,
                session.identity_id,
            )
            return None
        if not grant.is_active:
            logger.debug(
                "Role session %s points at inactive grant %s", session.id, grant.id
            )
            return None
        return grant

    async def resolve_grant(
        self, identity_id: str, session_token: str | None = None
    ) -> RoleGrantResult:
        """Return the effective grant.

        An expired, unknown or revoked session token is treated as no token.

        Raises:
            NoActiveRoleException: identity is not active or has no active grant.
            ResourceNotFoundException: identity does not exist.
            StoreUnavailableException: role/session store unreachable.
        """
        await self._require_active_identity(identity_id)
        if session_token:
            grant = await self._session_grant(identity_id, session_token)
            if grant is not None:
                return grant
        primary = await self.trusted.get_primary_grant(identity_id)
        if primary is not None:
            return primary
        chosen = highest_priority_grant(await self.trusted.get_active_grants(identity_id))
        if chosen is None:
            raise NoActiveRoleException(identity_id)
        return chosen

    async def resolve_active_role(
        self, identity_id: str, session_token: str | None = None
    ) -> RoleSnapshot:
        grant = await self.resolve_grant(identity_id, session_token)
        return await self.describe(grant)

    async def list_available_roles(self, identity_id: str) -> list[RoleSnapshot]:
        """Active grants of the identity with display names, in insertion order."""
        await self._require_active_identity(identity_id)
        grants = await self.trusted.get_active_grants(identity_id)
        return [await self.describe(g) for g in grants]

    async def describe(self, grant: RoleGrantResult) -> RoleSnapshot:
        return RoleSnapshot(
            grant=grant, organization_name=await self._organization_name(grant)
        )

    async def _organization_name(self, grant: RoleGrantResult) -> str:
        if (
            grant.organization_type == OrganizationType.PLATFORM.value
            or not grant.organization_id
            or self.organization_directory is None
        ):
            return fallback_organization_name(
                grant.organization_type, grant.organization_id
            )
        try:
            name = await self.organization_directory.resolve_org_name(
                grant.organization_type, grant.organization_id
            )
        except Exception as exc:
            # Display names never block authorization.
            logger.warning(
                "Organization name lookup failed for %s %s: %s",
                grant.organization_type,
                grant.organization_id,
                getattr(exc, "error_code", exc.__class__.__name__),
            )
            name = None
        return name or fallback_organization_name(
            grant.organization_type, grant.organization_id
        )
