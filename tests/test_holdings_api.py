from __future__ import annotations

import uuid

import pytest


@pytest.mark.asyncio
async def test_list_own_holdings(client, seed, headers_for):
    res = await client.get("/holdings", headers=headers_for(seed.seller))

    assert res.status_code == 200
    ids = {h["id"] for h in res.json()["data"]}
    assert ids == {str(seed.holding.id), str(seed.other_holding.id)}

    res = await client.get("/holdings", headers=headers_for(seed.buyer))
    assert res.json()["data"] == []


@pytest.mark.asyncio
async def test_holding_defaults_are_derived(client, seed, headers_for):
    res = await client.get(
        f"/holdings/{seed.holding.id}", headers=headers_for(seed.seller)
    )
    data = res.json()["data"]

    assert data["lock_in_months"] == 3
    assert data["maturity_date"] is not None
    assert float(data["monthly_earning"]) == 250.0
    assert data["property"]["title"] == seed.property.title


@pytest.mark.asyncio
async def test_holding_visible_to_owner_and_admin_only(client, seed, headers_for):
    url = f"/holdings/{seed.holding.id}"

    assert (await client.get(url, headers=headers_for(seed.admin))).status_code == 200
    assert (await client.get(url, headers=headers_for(seed.buyer))).status_code == 403

    res = await client.get(f"/holdings/{uuid.uuid4()}", headers=headers_for(seed.seller))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    res = await client.get("/health")
    assert res.json() == {"status": "ok"}
