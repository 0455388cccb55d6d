from __future__ import annotations

import pytest

from app import app


def test_collection_and_admin_paths_are_registered():
    paths = {
        (method, route.path)
        for route in app.routes
        for method in getattr(route, "methods", ())
    }

    for expected in [
        ("GET", "/holdings"),
        ("POST", "/transfer-requests"),
        ("POST", "/contact-owner"),
        ("GET", "/contact-owner"),
        ("GET", "/admin/transfer-requests"),
        ("POST", "/admin/transfer-requests/{request_id}/approve"),
        ("GET", "/admin/contact-owner"),
        ("POST", "/admin/contact-owner/{message_id}/status"),
    ]:
        assert expected in paths


@pytest.mark.asyncio
async def test_bare_collection_urls_are_served(client, seed, headers_for):
    seller = headers_for(seed.seller)
    admin = headers_for(seed.admin)

    assert (await client.get("/holdings", headers=seller)).status_code == 200
    assert (await client.get("/contact-owner", headers=seller)).status_code == 200
    assert (await client.get("/admin/transfer-requests", headers=admin)).status_code == 200
    assert (await client.get("/admin/contact-owner", headers=admin)).status_code == 200

    res = await client.post(
        "/transfer-requests",
        json={
            "holdingId": str(seed.holding.id),
            "buyerId": str(seed.buyer.id),
            "salePrice": "45000",
        },
        headers=seller,
    )
    assert res.status_code == 201
