"""Domain enumerations: role types, organization scopes, identity status.

ROLE_PRIORITY is the privilege ranking used when no role has been pinned
explicitly (lower rank = higher privilege). Adding a role type is a one-line
change to RoleType plus one entry here.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoleType(_ValuesMixin, str, Enum):
    """Closed set of role types a grant can carry."""

    PLATFORM_ADMIN = "platform_admin"
    AGENCY_ADMIN = "agency_admin"
    AGENCY_USER = "agency_user"
    CLIENT_ADMIN = "client_admin"
    CLIENT_USER = "client_user"
    BUYER = "buyer"


class OrganizationType(_ValuesMixin, str, Enum):
    """Organization scope of a grant."""

    PLATFORM = "platform"
    AGENCY = "agency"
    CLIENT = "client"
    BUYER = "buyer"


class IdentityStatus(_ValuesMixin, str, Enum):
    """Lifecycle status of an identity. Only ACTIVE identities have roles honored."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


ROLE_PRIORITY: dict[str, int] = {
    RoleType.PLATFORM_ADMIN.value: 1,
    RoleType.AGENCY_ADMIN.value: 2,
    RoleType.AGENCY_USER.value: 3,
    RoleType.CLIENT_ADMIN.value: 4,
    RoleType.CLIENT_USER.value: 5,
    RoleType.BUYER.value: 6,
}

UNRANKED_ROLE_PRIORITY = 7


def role_priority(role_type: str) -> int:
    """Return the privilege rank for a role type; unknown types rank last."""
    return ROLE_PRIORITY.get(role_type, UNRANKED_ROLE_PRIORITY)
