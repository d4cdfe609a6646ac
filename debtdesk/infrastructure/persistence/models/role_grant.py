"""RoleGrant ORM model: one identity, one role type, one organization scope."""

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from debtdesk.infrastructure.persistence.database import Base
from debtdesk.infrastructure.persistence.models.mixins import IdentifiedModel

SINGLE_PRIMARY_INDEX = "uq_role_grant_single_primary"
PLATFORM_SCOPE_INDEX = "uq_role_grant_platform_scope"


class RoleGrant(IdentifiedModel, Base):
    """Role grant. Table: role_grant.

    Unique (identity_id, organization_type, organization_id, role_type).
    Partial unique indexes keep at most one primary grant per identity and
    cover platform-scope grants, whose NULL organization_id a plain UNIQUE
    would treat as distinct.
    """

    __tablename__ = "role_grant"

    identity_id: Mapped[str] = mapped_column(
        String, ForeignKey("identity.id", ondelete="CASCADE"), nullable=False
    )
    role_type: Mapped[str] = mapped_column(String, nullable=False)
    organization_type: Mapped[str] = mapped_column(String, nullable=False)
    organization_id: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    __table_args__ = (
        UniqueConstraint(
            "identity_id",
            "organization_type",
            "organization_id",
            "role_type",
            name="uq_role_grant_identity_org_role",
        ),
        Index(
            SINGLE_PRIMARY_INDEX,
            "identity_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary = 1"),
        ),
        Index(
            PLATFORM_SCOPE_INDEX,
            "identity_id",
            "role_type",
            unique=True,
            postgresql_where=text("organization_id IS NULL"),
            sqlite_where=text("organization_id IS NULL"),
        ),
        Index("ix_role_grant_identity_active", "identity_id", "is_active"),
    )
