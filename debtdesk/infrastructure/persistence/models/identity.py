"""Identity ORM model. Provisioned externally; the core only reads status."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from debtdesk.infrastructure.persistence.database import Base
from debtdesk.infrastructure.persistence.models.mixins import IdentifiedModel


class Identity(IdentifiedModel, Base):
    """Identity. Table: identity. Unique email.

    legacy_role / legacy_agency_id hold the pre-multi-role single role and are
    only read by the one-time legacy migration.
    """

    __tablename__ = "identity"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    legacy_role: Mapped[str | None] = mapped_column(String, nullable=True)
    legacy_agency_id: Mapped[str | None] = mapped_column(String, nullable=True)
