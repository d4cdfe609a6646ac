"""Organization directory ORM models (agency, client, buyer, portfolio).

Owned by the surrounding back-office CRUD; the authorization core only reads
names and ownership links from them.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from debtdesk.infrastructure.persistence.database import Base
from debtdesk.infrastructure.persistence.models.mixins import IdentifiedModel


class Agency(IdentifiedModel, Base):
    """Collection agency. Table: agency."""

    __tablename__ = "agency"

    name: Mapped[str] = mapped_column(String, nullable=False)


class Client(IdentifiedModel, Base):
    """Creditor client managed by an agency. Table: client."""

    __tablename__ = "client"

    name: Mapped[str] = mapped_column(String, nullable=False)
    agency_id: Mapped[str] = mapped_column(
        String, ForeignKey("agency.id", ondelete="CASCADE"), nullable=False, index=True
    )


class Buyer(IdentifiedModel, Base):
    """Portfolio buyer. Table: buyer."""

    __tablename__ = "buyer"

    company_name: Mapped[str] = mapped_column(String, nullable=False)


class Portfolio(IdentifiedModel, Base):
    """Debt portfolio. Table: portfolio."""

    __tablename__ = "portfolio"

    name: Mapped[str] = mapped_column(String, nullable=False)
    agency_id: Mapped[str] = mapped_column(
        String, ForeignKey("agency.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("client.id", ondelete="SET NULL"), nullable=True, index=True
    )
