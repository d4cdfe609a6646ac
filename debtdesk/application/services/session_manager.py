"""Role session management: switch, validate, invalidate, and purge role sessions.

The session row for an identity is written with one upsert keyed by identity,
so concurrent switches leave exactly one row (last switch wins). Tokens are
never logged.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from debtdesk.application.dtos.role import RoleSessionResult, RoleSnapshot
from debtdesk.application.interfaces.repositories import IRoleSessionStore
from debtdesk.application.interfaces.services import (
    IIdentityDirectory,
    ITrustedEvaluator,
)
from debtdesk.application.services.active_role_resolver import ActiveRoleResolver
from debtdesk.domain.enums import IdentityStatus
from debtdesk.domain.exceptions import (
    InvalidGrantException,
    SessionExpiredException,
    SessionNotFoundException,
)
from debtdesk.shared.utils.datetime import utc_now
from debtdesk.shared.utils.generators import (
    DEFAULT_SESSION_TOKEN_BYTES,
    generate_session_token,
)

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_HOURS = 24


class SessionManager:
    """Creates and checks the token-addressable pointer to an identity's chosen grant."""

    def __init__(
        self,
        session_store: IRoleSessionStore,
        trusted: ITrustedEvaluator,
        resolver: ActiveRoleResolver,
        identity_directory: IIdentityDirectory,
        *,
        ttl_hours: int = DEFAULT_SESSION_TTL_HOURS,
        token_bytes: int = DEFAULT_SESSION_TOKEN_BYTES,
    ) -> None:
        self.session_store = session_store
        self.trusted = trusted
        self.resolver = resolver
        self.identity_directory = identity_directory
        self.ttl = timedelta(hours=ttl_hours)
        self.token_bytes = token_bytes

    async def switch_role(
        self,
        identity_id: str,
        grant_id: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RoleSessionResult:
        """Pin grant_id as the identity's active role and mint a new session token.

        Replaces any previous session of the identity.

        Raises:
            InvalidGrantException: grant unknown, owned by another identity,
                inactive, or identity not active.
            ResourceNotFoundException: identity does not exist.
        """
        status = await self.identity_directory.get_identity_status(identity_id)
        if status != IdentityStatus.ACTIVE.value:
            raise InvalidGrantException(grant_id, f"identity_{status}")
        grant = await self.trusted.get_grant(grant_id)
        if grant is None:
            raise InvalidGrantException(grant_id, "not_found")
        if grant.identity_id != identity_id:
            raise InvalidGrantException(grant_id, "not_owned")
        if not grant.is_active:
            raise InvalidGrantException(grant_id, "inactive")

        token = generate_session_token(self.token_bytes)
        expires_at = utc_now() + self.ttl
        await self.session_store.upsert_session(
            identity_id,
            grant.id,
            token,
            expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.info(
            "Identity %s switched active role to grant %s (%s), expires %s",
            identity_id,
            grant.id,
            grant.role_type,
            expires_at.isoformat(),
        )
        snapshot = await self.resolver.describe(grant)
        return RoleSessionResult(token=token, expires_at=expires_at, role=snapshot)

    async def validate_session(self, session_token: str) -> RoleSnapshot:
        """Return the pinned role for a live token.

        Raises:
            SessionNotFoundException: unknown token.
            SessionExpiredException: token past its expiry (even if still stored).
            InvalidGrantException: the pinned grant was deactivated.
        """
        session = await self.trusted.get_session(session_token)
        if session is None:
            raise SessionNotFoundException()
        if session.expires_at <= utc_now():
            raise SessionExpiredException(session.expires_at.isoformat())
        grant = await self.trusted.get_grant(session.role_grant_id)
        if grant is None or grant.identity_id != session.identity_id:
            raise InvalidGrantException(session.role_grant_id, "not_found")
        if not grant.is_active:
            raise InvalidGrantException(grant.id, "inactive")
        return await self.resolver.describe(grant)

    async def invalidate(self, identity_id: str) -> bool:
        """Delete the identity's session (sign-out). Returns False if there was none."""
        deleted = await self.session_store.delete_for_identity(identity_id)
        if deleted:
            logger.info("Role session invalidated for identity %s", identity_id)
        return deleted

    async def purge_expired(self) -> int:
        """Delete sessions whose expiry has passed. Invoked by an external scheduler."""
        return await self.session_store.purge_expired(utc_now())
