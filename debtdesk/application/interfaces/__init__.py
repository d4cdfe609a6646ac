"""Application interfaces (ports) implemented by infrastructure."""

from debtdesk.application.interfaces.repositories import (
    IRoleGrantStore,
    IRoleSessionStore,
)
from debtdesk.application.interfaces.services import (
    ICacheService,
    IClientDirectory,
    IIdentityDirectory,
    IOrganizationDirectory,
    IPortfolioDirectory,
    ITrustedEvaluator,
)

__all__ = [
    "ICacheService",
    "IClientDirectory",
    "IIdentityDirectory",
    "IOrganizationDirectory",
    "IPortfolioDirectory",
    "IRoleGrantStore",
    "IRoleSessionStore",
    "ITrustedEvaluator",
]
