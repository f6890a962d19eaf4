# tests/services/test_order_feed.py
from __future__ import annotations

import pytest

from binpick.core.errors import ExternalServiceError, NotFound, ValidationError
from binpick.services.order_feed import get_order, list_orders
from binpick.services.platform_types import NO_CUSTOMER
from tests.helpers.fake_admin import line

pytestmark = [pytest.mark.asyncio, pytest.mark.grp_orders]


def _seed(fake_platform):
    fake_platform.add_order(6, fulfillment="UNFULFILLED")
    fake_platform.add_order(5, fulfillment="UNFULFILLED", picking="in_progress")
    fake_platform.add_order(4, fulfillment="FULFILLED", picking="in_progress")
    fake_platform.add_order(3, fulfillment="PARTIALLY_FULFILLED", picking="pending")
    fake_platform.add_order(2, fulfillment="UNFULFILLED", picking="pending", customer=None)


async def test_list_orders_ranks_and_reports_filters(fake_platform, admin_api):
    _seed(fake_platform)

    feed = await list_orders(admin_api, "unfulfilled", None, page_size=50)

    assert [o.label for o in feed.orders] == ["#2", "#5", "#6"]
    assert feed.applied_filters == {"fulfillment": "unfulfilled", "picking": ""}
    assert feed.orders[0].customer_name == NO_CUSTOMER
    assert fake_platform.calls == [("OrdersWithPickingStatus", {"first": 50})]


async def test_list_orders_loose_and_picking_filter(fake_platform, admin_api):
    _seed(fake_platform)

    feed = await list_orders(admin_api, "unfulfilled", "pending", unfulfilled_mode="loose")
    assert [o.label for o in feed.orders] == ["#3", "#2"]

    feed = await list_orders(admin_api, "nonsense", "empty")
    assert [o.label for o in feed.orders] == ["#6"]
    assert feed.applied_filters == {"fulfillment": "", "picking": "empty"}


async def test_list_orders_external_error(fake_platform, admin_api):
    fake_platform.graphql_errors = [{"message": "Throttled"}]
    with pytest.raises(ExternalServiceError):
        await list_orders(admin_api)


async def test_get_order(fake_platform, admin_api):
    gid = fake_platform.add_order(7, lines=[line(1, 2, "111"), line(2, 1, None)], picking="pending")

    order = await get_order(admin_api, gid, line_items=25)

    assert order.id == gid
    assert order.summary.picking_status == "pending"
    assert [li.quantity for li in order.line_items] == [2, 1]
    assert order.line_items[1].variant_barcode is None
    assert fake_platform.calls[-1] == ("OrderDetail", {"id": gid, "lines": 25})


async def test_get_order_missing(fake_platform, admin_api):
    with pytest.raises(NotFound) as ei:
        await get_order(admin_api, "gid://shopify/Order/404")
    assert ei.value.reason == "order_not_found"

    with pytest.raises(ValidationError):
        await get_order(admin_api, None)
