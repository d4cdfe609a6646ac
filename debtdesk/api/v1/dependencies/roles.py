"""Role resolution, session, permission and access service dependencies (composition root)."""

from __future__ import annotations

from functools import partial
from typing import Annotated

from fastapi import Depends, Request

from debtdesk.application.services import (
    AccessGate,
    ActiveRoleResolver,
    PermissionEvaluator,
    RoleGrantService,
    SessionManager,
)
from debtdesk.core.config import get_settings
from debtdesk.infrastructure.persistence.database import after_commit
from debtdesk.infrastructure.persistence.repositories import (
    IdentityRepository,
    OrganizationRepository,
    RoleGrantRepository,
    RoleSessionRepository,
)
from debtdesk.infrastructure.services import TrustedEvaluator

from . import db as db_deps


def get_trusted_evaluator(
    grant_repo: Annotated[RoleGrantRepository, Depends(db_deps.get_role_grant_repo)],
    session_repo: Annotated[
        RoleSessionRepository, Depends(db_deps.get_role_session_repo)
    ],
) -> TrustedEvaluator:
    """Ungated role/session reads on the request's read session."""
    return TrustedEvaluator(grant_repo, session_repo)


def get_trusted_evaluator_for_write(
    grant_repo: Annotated[
        RoleGrantRepository, Depends(db_deps.get_role_grant_repo_for_write)
    ],
    session_repo: Annotated[
        RoleSessionRepository, Depends(db_deps.get_role_session_repo_for_write)
    ],
) -> TrustedEvaluator:
    """Ungated role/session reads inside the write transaction."""
    return TrustedEvaluator(grant_repo, session_repo)


def get_active_role_resolver(
    trusted: Annotated[TrustedEvaluator, Depends(get_trusted_evaluator)],
    identity_repo: Annotated[IdentityRepository, Depends(db_deps.get_identity_repo)],
    organization_repo: Annotated[
        OrganizationRepository, Depends(db_deps.get_organization_repo)
    ],
) -> ActiveRoleResolver:
    return ActiveRoleResolver(trusted, identity_repo, organization_repo)


def get_session_manager(
    session_repo: Annotated[
        RoleSessionRepository, Depends(db_deps.get_role_session_repo_for_write)
    ],
    trusted: Annotated[TrustedEvaluator, Depends(get_trusted_evaluator_for_write)],
    identity_repo: Annotated[
        IdentityRepository, Depends(db_deps.get_identity_repo_for_write)
    ],
    organization_repo: Annotated[
        OrganizationRepository, Depends(db_deps.get_organization_repo_for_write)
    ],
) -> SessionManager:
    """Session manager bound to the write transaction (switch, sign-out)."""
    settings = get_settings()
    resolver = ActiveRoleResolver(trusted, identity_repo, organization_repo)
    return SessionManager(
        session_repo,
        trusted,
        resolver,
        identity_repo,
        ttl_hours=settings.role_session_ttl_hours,
        token_bytes=settings.role_session_token_bytes,
    )


def get_session_validator(
    session_repo: Annotated[
        RoleSessionRepository, Depends(db_deps.get_role_session_repo)
    ],
    trusted: Annotated[TrustedEvaluator, Depends(get_trusted_evaluator)],
    resolver: Annotated[ActiveRoleResolver, Depends(get_active_role_resolver)],
    identity_repo: Annotated[IdentityRepository, Depends(db_deps.get_identity_repo)],
) -> SessionManager:
    """Session manager on the read session, for validate_session only."""
    settings = get_settings()
    return SessionManager(
        session_repo,
        trusted,
        resolver,
        identity_repo,
        ttl_hours=settings.role_session_ttl_hours,
        token_bytes=settings.role_session_token_bytes,
    )


def get_permission_evaluator(
    request: Request,
    trusted: Annotated[TrustedEvaluator, Depends(get_trusted_evaluator)],
    identity_repo: Annotated[IdentityRepository, Depends(db_deps.get_identity_repo)],
) -> PermissionEvaluator:
    """Build PermissionEvaluator with optional cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise cache is None and permission checks hit the Role Store only.
    """
    settings = get_settings()
    cache = getattr(request.app.state, "cache", None)
    return PermissionEvaluator(
        trusted,
        identity_repo,
        cache=cache,
        cache_ttl=settings.cache_ttl_permissions,
    )


def get_access_gate(
    trusted: Annotated[TrustedEvaluator, Depends(get_trusted_evaluator)],
    identity_repo: Annotated[IdentityRepository, Depends(db_deps.get_identity_repo)],
    organization_repo: Annotated[
        OrganizationRepository, Depends(db_deps.get_organization_repo)
    ],
) -> AccessGate:
    return AccessGate(trusted, identity_repo, organization_repo, organization_repo)


def get_role_grant_service(
    grant_repo: Annotated[
        RoleGrantRepository, Depends(db_deps.get_role_grant_repo_for_write)
    ],
    identity_repo: Annotated[
        IdentityRepository, Depends(db_deps.get_identity_repo_for_write)
    ],
    permission_evaluator: Annotated[
        PermissionEvaluator, Depends(get_permission_evaluator)
    ],
) -> RoleGrantService:
    """Grant administration service. Cached permissions are dropped after commit."""
    return RoleGrantService(
        grant_repo,
        identity_repo,
        permission_evaluator,
        on_commit=partial(after_commit, grant_repo.db),
    )
