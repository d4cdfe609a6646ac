"""RoleSession ORM model: the grant an identity explicitly pinned as active."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from debtdesk.infrastructure.persistence.database import Base
from debtdesk.infrastructure.persistence.models.mixins import CuidMixin
from debtdesk.shared.utils.datetime import utc_now


class RoleSession(CuidMixin, Base):
    """Role session. Table: role_session. One row per identity (upsert target)."""

    __tablename__ = "role_session"

    identity_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("identity.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    role_grant_id: Mapped[str] = mapped_column(
        String, ForeignKey("role_grant.id", ondelete="CASCADE"), nullable=False
    )
    session_token: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    ip_address: Mapped[str | None] = mapped_column(String, nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (Index("ix_role_session_expires_at", "expires_at"),)
