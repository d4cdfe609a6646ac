"""Role grant administration API tests: authorization, create, duplicate, primary, deactivate."""

from httpx import AsyncClient


async def test_admin_creates_grant_with_default_permissions(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)

    response = await client.post(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        json={
            "role_type": "agency_user",
            "organization_type": "agency",
            "organization_id": api_seed.agency_id,
        },
        headers=bearer_headers(api_seed.admin_id),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["identity_id"] == api_seed.agent_id
    assert data["is_active"] is True
    assert data["permissions"]["manage_sales"] is True


async def test_duplicate_grant_is_409(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)
    await make_grant(api_seed.agent_id, "buyer", "buyer", api_seed.buyer_id)

    response = await client.post(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        json={
            "role_type": "buyer",
            "organization_type": "buyer",
            "organization_id": api_seed.buyer_id,
        },
        headers=bearer_headers(api_seed.admin_id),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_GRANT"


async def test_unknown_capability_is_rejected(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)

    response = await client.post(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        json={
            "role_type": "buyer",
            "organization_type": "buyer",
            "organization_id": api_seed.buyer_id,
            "permissions": {"place_bids": True, "print_money": True},
        },
        headers=bearer_headers(api_seed.admin_id),
    )

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "permissions"


async def test_unknown_role_type_is_422(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)

    response = await client.post(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        json={"role_type": "overlord", "organization_type": "platform"},
        headers=bearer_headers(api_seed.admin_id),
    )

    assert response.status_code == 422


async def test_grant_admin_requires_manage_users(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.agent_id, "buyer", "buyer", api_seed.buyer_id, is_primary=True)

    response = await client.post(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        json={"role_type": "platform_admin", "organization_type": "platform"},
        headers=bearer_headers(api_seed.agent_id),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_listing_grants_requires_platform_admin(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(
        api_seed.agent_id, "agency_admin", "agency", api_seed.agency_id, is_primary=True
    )
    await make_grant(api_seed.admin_id, "platform_admin", "platform")

    denied = await client.get(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        headers=bearer_headers(api_seed.agent_id),
    )
    allowed = await client.get(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants",
        headers=bearer_headers(api_seed.admin_id),
    )

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert [g["role_type"] for g in allowed.json()] == ["agency_admin"]


async def test_set_primary_and_deactivate(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)
    first = await make_grant(
        api_seed.agent_id, "agency_user", "agency", api_seed.agency_id, is_primary=True
    )
    second = await make_grant(api_seed.agent_id, "buyer", "buyer", api_seed.buyer_id)
    headers = bearer_headers(api_seed.admin_id)

    primary = await client.post(f"/api/v1/role-grants/{second.id}/primary", headers=headers)
    assert primary.status_code == 200
    assert primary.json()["is_primary"] is True

    listed = await client.get(
        f"/api/v1/identities/{api_seed.agent_id}/role-grants", headers=headers
    )
    flags = {g["id"]: g["is_primary"] for g in listed.json()}
    assert flags == {first.id: False, second.id: True}

    deactivated = await client.delete(f"/api/v1/role-grants/{second.id}", headers=headers)
    assert deactivated.status_code == 200
    assert deactivated.json()["is_active"] is False

    active = await client.get(
        "/api/v1/auth/active-role", headers=bearer_headers(api_seed.agent_id)
    )
    assert active.json()["id"] == first.id


async def test_set_primary_unknown_grant_is_404(
    client: AsyncClient, api_seed, make_grant, bearer_headers
) -> None:
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)

    response = await client.post(
        "/api/v1/role-grants/missing/primary", headers=bearer_headers(api_seed.admin_id)
    )

    assert response.status_code == 404


async def test_deactivation_drops_cached_permissions(
    app, client: AsyncClient, api_seed, make_grant, bearer_headers, memory_cache
) -> None:
    app.state.cache = memory_cache
    await make_grant(api_seed.admin_id, "platform_admin", "platform", is_primary=True)
    target = await make_grant(
        api_seed.agent_id, "platform_admin", "platform", is_primary=True
    )
    check_url = "/api/v1/auth/permissions/place_bids"

    before = await client.get(check_url, headers=bearer_headers(api_seed.agent_id))
    assert before.json()["allowed"] is True
    assert f"permission:{api_seed.agent_id}" in memory_cache.store

    response = await client.delete(
        f"/api/v1/role-grants/{target.id}", headers=bearer_headers(api_seed.admin_id)
    )
    assert response.status_code == 200

    after = await client.get(check_url, headers=bearer_headers(api_seed.agent_id))
    assert after.json()["allowed"] is False
