"""Role grant administration: create, set primary, deactivate, list, and legacy migration.

Validates input against the domain enums and capability catalogue, writes
through the Role Store, and drops the identity's cached permission state after
every mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from debtdesk.application.dtos.identity import IdentityResult
from debtdesk.application.dtos.role import RoleGrantResult
from debtdesk.application.interfaces.repositories import IRoleGrantStore
from debtdesk.application.interfaces.services import IIdentityDirectory
from debtdesk.application.services.permission_evaluator import PermissionEvaluator
from debtdesk.domain.capabilities import default_permissions_for, unknown_capabilities
from debtdesk.domain.enums import IdentityStatus, OrganizationType, RoleType
from debtdesk.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

_LEGACY_SCOPES: dict[str, str] = {
    "agency_": OrganizationType.AGENCY.value,
    "client_": OrganizationType.CLIENT.value,
}


class RoleGrantService:
    """Administrative operations on role grants (the Role Store's only other caller)."""

    def __init__(
        self,
        grant_store: IRoleGrantStore,
        identity_directory: IIdentityDirectory,
        permission_evaluator: PermissionEvaluator | None = None,
        on_commit: Callable[[Callable[[], Awaitable[None]]], None] | None = None,
    ) -> None:
        """on_commit queues a callback until the write transaction commits.

        Without it, cached permissions are dropped immediately.
        """
        self.grant_store = grant_store
        self.identity_directory = identity_directory
        self.permission_evaluator = permission_evaluator
        self.on_commit = on_commit

    async def _invalidate(self, identity_id: str) -> None:
        if self.permission_evaluator is None:
            return
        drop = partial(self.permission_evaluator.invalidate_identity_cache, identity_id)
        if self.on_commit is not None:
            # Must follow the commit: readers in between re-cache old grants.
            self.on_commit(drop)
        else:
            await drop()

    async def create_grant(
        self,
        identity_id: str,
        role_type: str,
        organization_type: str,
        organization_id: str | None = None,
        permissions: dict[str, bool] | None = None,
        is_primary: bool = False,
    ) -> RoleGrantResult:
        """Grant role_type in (organization_type, organization_id) to an identity.

        When permissions is None the role type's default map is stored.

        Raises:
            ValidationException: unknown role/organization type, missing
                organization id, or unknown capability names.
            ResourceNotFoundException: identity does not exist.
            DuplicateGrantException: the grant tuple already exists.
        """
        if role_type not in RoleType.values():
            raise ValidationException(f"Unknown role type: {role_type}", field="role_type")
        if organization_type not in OrganizationType.values():
            raise ValidationException(
                f"Unknown organization type: {organization_type}",
                field="organization_type",
            )
        if organization_type == OrganizationType.PLATFORM.value:
            organization_id = None
        elif not organization_id:
            raise ValidationException(
                f"organization_id is required for {organization_type} scope",
                field="organization_id",
            )
        if permissions is None:
            permissions = default_permissions_for(role_type)
        else:
            unknown = unknown_capabilities(permissions)
            if unknown:
                raise ValidationException(
                    f"Unknown capabilities: {', '.join(unknown)}", field="permissions"
                )

        await self.identity_directory.get_identity_status(identity_id)
        grant = await self.grant_store.create_grant(
            identity_id,
            role_type,
            organization_type,
            organization_id,
            permissions,
            is_primary=is_primary,
        )
        await self._invalidate(identity_id)
        return grant

    async def set_primary(self, identity_id: str, grant_id: str) -> RoleGrantResult:
        grant = await self.grant_store.set_primary(identity_id, grant_id)
        await self._invalidate(identity_id)
        return grant

    async def deactivate_grant(self, grant_id: str) -> RoleGrantResult:
        grant = await self.grant_store.deactivate_grant(grant_id)
        await self._invalidate(grant.identity_id)
        return grant

    async def get_grant(self, grant_id: str) -> RoleGrantResult:
        return await self.grant_store.get_grant(grant_id)

    async def list_grants(
        self, identity_id: str, *, active_only: bool = False
    ) -> list[RoleGrantResult]:
        await self.identity_directory.get_identity_status(identity_id)
        return await self.grant_store.list_grants(identity_id, active_only=active_only)

    async def migrate_legacy_role(self, identity: IdentityResult) -> RoleGrantResult | None:
        """Turn a pre-multi-role single role into one primary grant.

        Identities that already hold grants, or whose legacy role is not a known
        role type, are skipped (returns None).
        """
        legacy_role = identity.legacy_role
        if not legacy_role:
            return None
        if legacy_role not in RoleType.values():
            logger.warning(
                "Skipping legacy role %r for identity %s: unknown role type",
                legacy_role,
                identity.id,
            )
            return None
        if await self.grant_store.count_grants(identity.id) > 0:
            return None

        organization_type = next(
            (
                scope
                for prefix, scope in _LEGACY_SCOPES.items()
                if legacy_role.startswith(prefix)
            ),
            OrganizationType.PLATFORM.value,
        )
        organization_id = (
            identity.legacy_agency_id
            if organization_type == OrganizationType.AGENCY.value
            else None
        )
        grant = await self.grant_store.create_grant(
            identity.id,
            legacy_role,
            organization_type,
            organization_id,
            default_permissions_for(legacy_role),
            is_primary=True,
            is_active=identity.status == IdentityStatus.ACTIVE.value,
        )
        await self._invalidate(identity.id)
        logger.info(
            "Migrated legacy role %s for identity %s into grant %s",
            legacy_role,
            identity.id,
            grant.id,
        )
        return grant
