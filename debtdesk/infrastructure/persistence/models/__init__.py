"""Persistence models: ORM entities and mixins."""

from debtdesk.infrastructure.persistence.models.identity import Identity
from debtdesk.infrastructure.persistence.models.mixins import (
    CuidMixin,
    IdentifiedModel,
    TimestampMixin,
)
from debtdesk.infrastructure.persistence.models.organization import (
    Agency,
    Buyer,
    Client,
    Portfolio,
)
from debtdesk.infrastructure.persistence.models.role_grant import RoleGrant
from debtdesk.infrastructure.persistence.models.role_session import RoleSession

__all__ = [
    "Agency",
    "Buyer",
    "Client",
    "CuidMixin",
    "IdentifiedModel",
    "Identity",
    "Portfolio",
    "RoleGrant",
    "RoleSession",
    "TimestampMixin",
]
