"""add_multi_role_tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 09:12:44.201337

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - identity, organization directory, role_grant, role_session."""

    op.create_table(
        "identity",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("legacy_role", sa.String(), nullable=True),
        sa.Column("legacy_agency_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_identity_email"),
    )

    op.create_table(
        "agency",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "client",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("agency_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["agency_id"], ["agency.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_client_agency_id", "client", ["agency_id"])
    op.create_table(
        "buyer",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_name", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "portfolio",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("agency_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["agency_id"], ["agency.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["client_id"], ["client.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_portfolio_agency_id", "portfolio", ["agency_id"])
    op.create_index("ix_portfolio_client_id", "portfolio", ["client_id"])

    # Role grants
    op.create_table(
        "role_grant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("identity_id", sa.String(), nullable=False),
        sa.Column("role_type", sa.String(), nullable=False),
        sa.Column("organization_type", sa.String(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("permissions", sa.JSON(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["identity_id"], ["identity.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "identity_id",
            "organization_type",
            "organization_id",
            "role_type",
            name="uq_role_grant_identity_org_role",
        ),
    )
    op.create_index(
        "uq_role_grant_single_primary",
        "role_grant",
        ["identity_id"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
    )
    op.create_index(
        "uq_role_grant_platform_scope",
        "role_grant",
        ["identity_id", "role_type"],
        unique=True,
        postgresql_where=sa.text("organization_id IS NULL"),
    )
    op.create_index(
        "ix_role_grant_identity_active", "role_grant", ["identity_id", "is_active"]
    )

    # Role sessions (one row per identity)
    op.create_table(
        "role_session",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("identity_id", sa.String(), nullable=False),
        sa.Column("role_grant_id", sa.String(), nullable=False),
        sa.Column("session_token", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["identity_id"], ["identity.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["role_grant_id"], ["role_grant.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint("identity_id", name="uq_role_session_identity_id"),
        sa.UniqueConstraint("session_token", name="uq_role_session_session_token"),
    )
    op.create_index("ix_role_session_expires_at", "role_session", ["expires_at"])


def downgrade() -> None:
    """Downgrade schema - drop multi-role and organization directory tables."""
    op.drop_index("ix_role_session_expires_at", table_name="role_session")
    op.drop_table("role_session")
    op.drop_index("ix_role_grant_identity_active", table_name="role_grant")
    op.drop_index("uq_role_grant_platform_scope", table_name="role_grant")
    op.drop_index("uq_role_grant_single_primary", table_name="role_grant")
    op.drop_table("role_grant")
    op.drop_index("ix_portfolio_client_id", table_name="portfolio")
    op.drop_index("ix_portfolio_agency_id", table_name="portfolio")
    op.drop_table("portfolio")
    op.drop_table("buyer")
    op.drop_index("ix_client_agency_id", table_name="client")
    op.drop_table("client")
    op.drop_table("agency")
    op.drop_table("identity")
