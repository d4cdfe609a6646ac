"""Repository dependencies (composition root).

Read repositories share the request's get_db session; *_for_write variants
share the get_db_transactional session so a write and its follow-up reads
see the same transaction.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from debtdesk.infrastructure.persistence.database import get_db, get_db_transactional
from debtdesk.infrastructure.persistence.repositories import (
    IdentityRepository,
    OrganizationRepository,
    RoleGrantRepository,
    RoleSessionRepository,
)


async def get_role_grant_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleGrantRepository:
    """Role grant repository for read operations."""
    return RoleGrantRepository(db)


async def get_role_grant_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleGrantRepository:
    """Role grant repository for create/set-primary/deactivate (transactional)."""
    return RoleGrantRepository(db)


async def get_role_session_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleSessionRepository:
    """Role session repository for token lookups."""
    return RoleSessionRepository(db)


async def get_role_session_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleSessionRepository:
    """Role session repository for switch/sign-out (transactional)."""
    return RoleSessionRepository(db)


async def get_identity_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IdentityRepository:
    return IdentityRepository(db)


async def get_identity_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IdentityRepository:
    return IdentityRepository(db)


async def get_organization_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationRepository:
    """Agency/client/buyer/portfolio lookups used by the resolver and Access Gate."""
    return OrganizationRepository(db)


async def get_organization_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> OrganizationRepository:
    return OrganizationRepository(db)
