from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from models.models import Holding


async def _create(client, seed, headers_for, price="45000"):
    return await client.post(
        "/transfer-requests",
        json={
            "holdingId": str(seed.holding.id),
            "buyerId": str(seed.buyer.id),
            "salePrice": price,
        },
        headers=headers_for(seed.seller),
    )


@pytest.mark.asyncio
async def test_create_returns_201_envelope(client, seed, headers_for):
    res = await _create(client, seed, headers_for)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["status"] == "pending"
    assert body["data"]["buyer_response"] == "pending"
    assert Decimal(body["data"]["sale_price"]) == Decimal("45000")
    assert body["data"]["seller"]["id"] == str(seed.seller.id)


@pytest.mark.asyncio
async def test_duplicate_active_request_is_409(client, seed, headers_for):
    await _create(client, seed, headers_for)
    res = await _create(client, seed, headers_for, price="46000")

    assert res.status_code == 409
    assert res.json() == {
        "success": False,
        "message": "There is already an active transfer request for this holding",
    }


@pytest.mark.asyncio
async def test_validation_failures_use_error_envelope(client, seed, headers_for):
    res = await _create(client, seed, headers_for, price="100")
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert "Minimum sale price" in res.json()["message"]

    res = await client.post(
        "/transfer-requests",
        json={"holdingId": "not-a-uuid"},
        headers=headers_for(seed.seller),
    )
    assert res.status_code == 422
    assert res.json()["success"] is False
    assert res.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_requires_authentication(client, seed):
    res = await client.get("/transfer-requests/received")
    assert res.status_code == 401
    assert res.json()["success"] is False

    res = await client.get(
        "/transfer-requests/received", headers={"Authorization": "Bearer garbage"}
    )
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_full_flow_through_admin_approval(client, seed, headers_for, fetch):
    created = (await _create(client, seed, headers_for)).json()["data"]
    request_id = created["id"]

    received = await client.get(
        "/transfer-requests/received", headers=headers_for(seed.buyer)
    )
    assert [r["id"] for r in received.json()["data"]] == [request_id]

    res = await client.post(
        f"/transfer-requests/{request_id}/respond",
        json={"response": "accepted"},
        headers=headers_for(seed.buyer),
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "admin_pending"

    res = await client.post(
        f"/admin/transfer-requests/{request_id}/approve",
        json={"adminNotes": "Documents verified"},
        headers=headers_for(seed.buyer),
    )
    assert res.status_code == 403

    res = await client.post(
        f"/admin/transfer-requests/{request_id}/approve",
        json={"adminNotes": "Documents verified"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "completed"
    assert data["admin_notes"] == "Documents verified"

    holding = await fetch(Holding, seed.holding.id)
    assert holding.user_id == seed.buyer.id

    res = await client.post(
        f"/admin/transfer-requests/{request_id}/approve",
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 409
    assert res.json()["success"] is False


@pytest.mark.asyncio
async def test_decline_then_recreate(client, seed, headers_for):
    created = (await _create(client, seed, headers_for)).json()["data"]

    res = await client.post(
        f"/transfer-requests/{created['id']}/respond",
        json={"response": "declined"},
        headers=headers_for(seed.buyer),
    )
    assert res.json()["data"]["status"] == "rejected"

    res = await _create(client, seed, headers_for, price="47000")
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_admin_reject_and_listing(client, seed, headers_for):
    created = (await _create(client, seed, headers_for)).json()["data"]
    await client.post(
        f"/transfer-requests/{created['id']}/respond",
        json={"response": "accepted"},
        headers=headers_for(seed.buyer),
    )

    res = await client.post(
        f"/admin/transfer-requests/{created['id']}/reject",
        json={"adminNotes": "Buyer KYC incomplete"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "admin_rejected"

    res = await client.get(
        "/admin/transfer-requests",
        params={"status": "admin_rejected"},
        headers=headers_for(seed.admin),
    )
    assert [r["id"] for r in res.json()["data"]] == [created["id"]]

    res = await client.get(
        "/admin/transfer-requests",
        params={"status": "nonsense"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_admin_can_create_on_behalf_of_seller(client, seed, headers_for):
    res = await client.post(
        "/admin/transfer-requests",
        json={
            "sellerId": str(seed.seller.id),
            "holdingId": str(seed.holding.id),
            "buyerId": str(seed.buyer.id),
            "salePrice": "45000",
        },
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 201
    assert res.json()["data"]["seller_id"] == str(seed.seller.id)


@pytest.mark.asyncio
async def test_outsiders_cannot_view_or_cancel(client, seed, headers_for):
    created = (await _create(client, seed, headers_for)).json()["data"]

    res = await client.get(
        f"/transfer-requests/{created['id']}", headers=headers_for(seed.outsider)
    )
    assert res.status_code == 403

    res = await client.post(
        f"/transfer-requests/{created['id']}/cancel", headers=headers_for(seed.buyer)
    )
    assert res.status_code == 403

    res = await client.post(
        f"/transfer-requests/{created['id']}/cancel", headers=headers_for(seed.seller)
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "cancelled"

    res = await client.get(
        "/transfer-requests/sent",
        params={"status": "cancelled"},
        headers=headers_for(seed.seller),
    )
    assert [r["id"] for r in res.json()["data"]] == [created["id"]]


@pytest.mark.asyncio
async def test_unknown_request_is_404(client, seed, headers_for):
    res = await client.get(
        f"/transfer-requests/{uuid.uuid4()}", headers=headers_for(seed.seller)
    )
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Transfer request not found"}
