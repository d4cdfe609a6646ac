"""Role types, priority ranking, capability catalogue and default permission maps."""

from debtdesk.domain.capabilities import (
    DEFAULT_ROLE_PERMISSIONS,
    KNOWN_CAPABILITIES,
    all_capabilities_granted,
    default_permissions_for,
    unknown_capabilities,
)
from debtdesk.domain.enums import (
    ROLE_PRIORITY,
    IdentityStatus,
    OrganizationType,
    RoleType,
    role_priority,
)


def test_every_role_type_is_ranked_and_platform_admin_is_first() -> None:
    assert set(ROLE_PRIORITY) == set(RoleType.values())
    ranked = sorted(RoleType.values(), key=role_priority)
    assert ranked[0] == "platform_admin"
    assert ranked[-1] == "buyer"


def test_unknown_role_type_ranks_last() -> None:
    assert role_priority("wizard") > max(ROLE_PRIORITY.values())


def test_enum_values() -> None:
    assert OrganizationType.values() == ["platform", "agency", "client", "buyer"]
    assert IdentityStatus.ACTIVE.value == "active"


def test_every_role_type_has_defaults_within_catalogue() -> None:
    assert set(DEFAULT_ROLE_PERMISSIONS) == set(RoleType.values())
    for permissions in DEFAULT_ROLE_PERMISSIONS.values():
        assert set(permissions) <= KNOWN_CAPABILITIES


def test_default_permissions_are_copies() -> None:
    permissions = default_permissions_for("buyer")
    permissions["manage_users"] = True

    assert "manage_users" not in default_permissions_for("buyer")
    assert default_permissions_for("wizard") == {}


def test_buyer_can_bid_and_agency_admin_manages_users() -> None:
    assert default_permissions_for("buyer")["place_bids"] is True
    assert default_permissions_for("agency_admin")["manage_users"] is True
    assert "place_bids" not in default_permissions_for("agency_admin")


def test_all_capabilities_granted_and_unknown_names() -> None:
    granted = all_capabilities_granted()
    assert set(granted) == KNOWN_CAPABILITIES
    assert all(granted.values())
    assert unknown_capabilities(["view_users", "zap", "abc"]) == ["abc", "zap"]
