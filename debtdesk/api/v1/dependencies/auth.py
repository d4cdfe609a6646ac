"""Caller identity and authorization dependencies.

The identity comes from the identity provider's bearer JWT (sub claim); the
optional role-session token comes from the configured session header.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from debtdesk.application.services import AccessGate, PermissionEvaluator
from debtdesk.core.config import get_settings
from debtdesk.domain.exceptions import AuthenticationException
from debtdesk.infrastructure.security.jwt import verify_token

from .roles import get_access_gate, get_permission_evaluator

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_identity_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Return the identity id from the bearer JWT; raise 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise AuthenticationException("Invalid or expired token") from exc
    return str(payload["sub"])


def get_role_session_token(request: Request) -> str | None:
    """Role-session token from the session header, or None when absent/blank."""
    token = request.headers.get(get_settings().role_session_header)
    if token is None or not token.strip():
        return None
    return token.strip()


def require_permission(capability: str):
    """Dependency factory: require bearer auth and that the caller holds capability."""

    async def _require(
        identity_id: Annotated[str, Depends(get_current_identity_id)],
        evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    ) -> str:
        await evaluator.require_permission(identity_id, capability)
        return identity_id

    return _require


async def require_platform_admin(
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> str:
    """Require bearer auth and an active platform_admin grant."""
    await gate.require_platform_admin(identity_id)
    return identity_id
