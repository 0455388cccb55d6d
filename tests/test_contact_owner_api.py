from __future__ import annotations

import uuid

import pytest

VALID_MESSAGE = "Could you share the latest occupancy report for this property?"


async def _send(client, seed, headers_for, **overrides):
    payload = {
        "holdingId": str(seed.holding.id),
        "subject": "Occupancy report",
        "message": VALID_MESSAGE,
        "contactPreference": "EMAIL",
    }
    payload.update(overrides)
    return await client.post(
        "/contact-owner", json=payload, headers=headers_for(seed.seller)
    )


@pytest.mark.asyncio
async def test_create_message_returns_201(client, seed, headers_for):
    res = await _send(client, seed, headers_for)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["status"] == "pending"
    assert body["data"]["contact_preference"] == "email"
    assert body["data"]["admin_response"] is None


@pytest.mark.asyncio
async def test_short_message_is_400(client, seed, headers_for):
    res = await _send(client, seed, headers_for, message="x" * 19)
    assert res.status_code == 400
    assert res.json()["success"] is False

    res = await _send(client, seed, headers_for, message="x" * 20)
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_non_holder_is_403(client, seed, headers_for):
    res = await client.post(
        "/contact-owner",
        json={
            "holdingId": str(seed.holding.id),
            "subject": "Hello",
            "message": VALID_MESSAGE,
        },
        headers=headers_for(seed.outsider),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_admin_workflow(client, seed, headers_for):
    created = (await _send(client, seed, headers_for)).json()["data"]
    message_id = created["id"]

    res = await client.get("/admin/contact-owner", headers=headers_for(seed.seller))
    assert res.status_code == 403

    res = await client.post(
        f"/admin/contact-owner/{message_id}/read", headers=headers_for(seed.admin)
    )
    assert res.json()["data"]["status"] == "read"

    res = await client.post(
        f"/admin/contact-owner/{message_id}/respond",
        json={"response": "Report attached to your dashboard.", "adminNotes": "Sent Q3"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "replied"
    assert data["admin_response"]["message"] == "Report attached to your dashboard."
    assert data["admin_response"]["responded_by"] == str(seed.admin.id)

    res = await client.post(
        f"/admin/contact-owner/{message_id}/status",
        json={"status": "read"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 409

    res = await client.post(
        f"/admin/contact-owner/{message_id}/status",
        json={"status": "closed"},
        headers=headers_for(seed.admin),
    )
    assert res.json()["data"]["status"] == "closed"

    res = await client.post(
        f"/admin/contact-owner/{message_id}/respond",
        json={"message": "One more thing"},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_admin_list_has_status_counts(client, seed, headers_for):
    for i in range(3):
        await _send(client, seed, headers_for, subject=f"Question {i}")

    res = await client.get(
        "/admin/contact-owner",
        params={"page": 1, "limit": 2, "propertyId": str(seed.property.id)},
        headers=headers_for(seed.admin),
    )
    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert body["statusCounts"] == {"pending": 3}


@pytest.mark.asyncio
async def test_user_reads_own_messages_only(client, seed, headers_for):
    created = (await _send(client, seed, headers_for)).json()["data"]

    res = await client.get("/contact-owner", headers=headers_for(seed.seller))
    assert res.json()["pagination"]["total"] == 1

    res = await client.get(
        f"/contact-owner/{created['id']}", headers=headers_for(seed.seller)
    )
    assert res.status_code == 200

    res = await client.get(
        f"/contact-owner/{created['id']}", headers=headers_for(seed.buyer)
    )
    assert res.status_code == 403

    res = await client.get(
        f"/admin/contact-owner/{uuid.uuid4()}", headers=headers_for(seed.admin)
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_owner_info(client, seed, headers_for):
    res = await client.get(
        f"/contact-owner/property/{seed.property.id}/owner-info",
        headers=headers_for(seed.seller),
    )
    assert res.status_code == 200
    assert res.json()["data"]["email"] == seed.owner.email

    res = await client.get(
        f"/contact-owner/property/{seed.property.id}/owner-info",
        headers=headers_for(seed.buyer),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_closed_message_reopens_only_as_resolved(client, seed, headers_for):
    created = (await _send(client, seed, headers_for)).json()["data"]
    url = f"/admin/contact-owner/{created['id']}/status"
    admin = headers_for(seed.admin)

    await client.post(url, json={"status": "closed"}, headers=admin)

    res = await client.post(url, json={"status": "read"}, headers=admin)
    assert res.status_code == 409

    res = await client.post(url, json={"status": "resolved"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "resolved"
