# tests/api/test_orders_api.py
from __future__ import annotations

from urllib.parse import quote

import httpx
import pytest

from tests.helpers.fake_admin import line, variant_gid

pytestmark = [pytest.mark.asyncio, pytest.mark.grp_orders]


async def test_orders_list_filters_and_ranks(client: httpx.AsyncClient, fake_platform):
    fake_platform.add_order(3, fulfillment="UNFULFILLED")
    fake_platform.add_order(2, fulfillment="UNFULFILLED", picking="pending")
    fake_platform.add_order(1, fulfillment="FULFILLED", picking="pending")

    r = await client.get("/orders", params={"fulfillment": "unfulfilled"})

    assert r.status_code == 200, r.text
    body = r.json()
    assert [o["label"] for o in body["orders"]] == ["#2", "#3"]
    assert body["orders"][1]["pickingStatus"] is None
    assert body["orders"][0]["customer"] == "Ada Lovelace"
    assert body["appliedFilters"] == {"fulfillment": "unfulfilled", "picking": ""}

    r = await client.get("/orders", params={"status": "bogus"})
    assert len(r.json()["orders"]) == 3
    assert r.json()["appliedFilters"]["picking"] == ""


async def test_order_detail_with_bins(client: httpx.AsyncClient, fake_platform):
    fake_platform.add_order(10, lines=[line(1, 2, "111"), line(2, 1, None)])
    await client.post("/api/bins/assign", json={"variantGid": variant_gid(1), "binCode": "A-01"})

    r = await client.get("/orders/10")

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["pickingStatus"] == "pending"
    assert body["order"]["pickingStatus"] is None
    assert [li["binCode"] for li in body["lineItems"]] == ["A-01", None]
    assert body["progress"] == {
        "completedLines": 0,
        "totalLines": 2,
        "pickedUnits": 0,
        "totalUnits": 3,
        "percent": 0,
        "allComplete": False,
        "noBarcodeCount": 1,
    }
    assert body["guards"] == {"canMarkInProgress": False, "canResetToPending": False}


async def test_order_detail_not_found(client: httpx.AsyncClient):
    r = await client.get("/orders/404")
    assert r.status_code == 404
    assert r.json()["reason"] == "order_not_found"


async def test_scan_flow_to_in_progress(client: httpx.AsyncClient, fake_platform):
    gid = fake_platform.add_order(11, lines=[line(1, 2, "111"), line(2, 1, "222")], picking="pending")
    l1, l2 = "gid://shopify/LineItem/1", "gid://shopify/LineItem/2"

    r = await client.post("/orders/11/picking/scan", json={"barcode": "111", "picked": {}})
    assert r.status_code == 200, r.text
    body = r.json()
    assert (body["outcome"], body["lineItemId"], body["newCount"]) == ("incremented", l1, 1)
    picked = body["picked"]
    assert picked == {l1: 1, l2: 0}

    r = await client.post("/orders/11/picking/scan", json={"barcode": "999", "picked": picked})
    assert r.json()["outcome"] == "no_match"
    assert r.json()["picked"] == picked

    r = await client.post("/orders/11/picking/scan", json={"barcode": "222", "picked": picked})
    body = r.json()
    assert body["outcome"] == "completed"
    # completed lines sink to the bottom
    assert [li["id"] for li in body["lineItems"]] == [l1, l2]
    picked = body["picked"]

    r = await client.post("/orders/11/picking/scan", json={"barcode": "111", "picked": picked})
    body = r.json()
    assert body["outcome"] == "completed"
    assert body["progress"]["percent"] == 100
    assert body["progress"]["allComplete"] is True
    assert body["guards"]["canMarkInProgress"] is True

    r = await client.post("/orders/picking-status", json={"orderId": gid, "status": "in_progress"})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "status": "in_progress"}
    assert fake_platform.metafields[gid] == "in_progress"

    r = await client.get("/orders/11")
    assert r.json()["pickingStatus"] == "in_progress"
    assert r.json()["guards"]["canResetToPending"] is True


async def test_picking_status_failures_are_results(client: httpx.AsyncClient, fake_platform):
    fake_platform.add_order(12)

    r = await client.post("/orders/picking-status", json={"orderId": "12", "status": "shipped"})
    assert r.status_code == 200
    assert r.json() == {"ok": False, "error": "Invalid status", "reason": "validation_error"}

    r = await client.post("/orders/picking-status", json={"status": "pending"})
    assert r.json()["error"] == "Missing orderId"

    fake_platform.user_errors = [{"field": ["ownerId"], "message": "Owner does not exist"}]
    r = await client.post("/orders/picking-status", json={"orderId": "12", "status": "pending"})
    assert r.json() == {"ok": False, "error": "Owner does not exist", "reason": "validation_error"}


async def test_full_gid_order_ref(client: httpx.AsyncClient, fake_platform):
    gid = fake_platform.add_order(13, lines=[line(1, 1, "111")])
    ref = quote(gid, safe="")

    r = await client.get(f"/orders/{ref}")
    assert r.status_code == 200, r.text
    assert r.json()["order"]["id"] == gid

    r = await client.post(f"/orders/{ref}/picking/scan", json={"barcode": "111", "picked": {}})
    assert r.status_code == 200, r.text
    assert r.json()["outcome"] == "completed"
    assert r.json()["order"]["id"] == gid

    r = await client.get(f"/orders/{quote('gid://shopify/Order/404', safe='')}")
    assert r.status_code == 404
    assert r.json()["reason"] == "order_not_found"
