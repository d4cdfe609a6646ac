"""Capability catalogue and default permission maps per role type.

Permission maps stay open (capability name -> bool) on each grant; this module
only lists the names the back office knows about so typos can be caught where
grants are written.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from debtdesk.domain.enums import RoleType

KNOWN_CAPABILITIES: frozenset[str] = frozenset(
    {
        "view_users",
        "manage_users",
        "view_agencies",
        "manage_agencies",
        "view_clients",
        "manage_clients",
        "view_portfolios",
        "manage_portfolios",
        "view_sales",
        "manage_sales",
        "view_debtors",
        "manage_debtors",
        "view_reports",
        "manage_reports",
        "view_settings",
        "manage_settings",
        "place_bids",
    }
)


def _grant(*names: str) -> Mapping[str, bool]:
    return MappingProxyType({name: True for name in names})


DEFAULT_ROLE_PERMISSIONS: Mapping[str, Mapping[str, bool]] = MappingProxyType(
    {
        RoleType.PLATFORM_ADMIN.value: _grant(
            *sorted(KNOWN_CAPABILITIES - {"place_bids"})
        ),
        RoleType.AGENCY_ADMIN.value: _grant(
            "view_users",
            "manage_users",
            "view_clients",
            "manage_clients",
            "view_portfolios",
            "manage_portfolios",
            "view_sales",
            "manage_sales",
            "view_debtors",
            "manage_debtors",
            "view_reports",
            "view_settings",
        ),
        RoleType.AGENCY_USER.value: _grant(
            "view_clients",
            "view_portfolios",
            "view_sales",
            "manage_sales",
            "view_debtors",
            "manage_debtors",
            "view_reports",
        ),
        RoleType.CLIENT_ADMIN.value: _grant(
            "view_portfolios",
            "manage_portfolios",
            "view_sales",
            "view_debtors",
            "view_reports",
        ),
        RoleType.CLIENT_USER.value: _grant(
            "view_portfolios",
            "view_sales",
            "view_debtors",
            "view_reports",
        ),
        RoleType.BUYER.value: _grant(
            "view_portfolios",
            "view_sales",
            "place_bids",
        ),
    }
)


def default_permissions_for(role_type: str) -> dict[str, bool]:
    """Return a mutable copy of the default permission map for role_type ({} if unknown)."""
    return dict(DEFAULT_ROLE_PERMISSIONS.get(role_type, {}))


def all_capabilities_granted() -> dict[str, bool]:
    """Sentinel map reported for platform admins: every known capability set to True."""
    return {name: True for name in sorted(KNOWN_CAPABILITIES)}


def unknown_capabilities(names: Iterable[str]) -> list[str]:
    """Return the names in an iterable that are not in KNOWN_CAPABILITIES (sorted)."""
    return sorted(n for n in names if n not in KNOWN_CAPABILITIES)
