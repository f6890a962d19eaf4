import pytest

from binpick.services.order_intake import order_gid_from_payload
from binpick.services.platform_types import NO_CUSTOMER, LineItem, OrderDetail, OrderSummary, order_gid

pytestmark = pytest.mark.grp_orders


def test_order_gid_normalisation():
    assert order_gid("1001") == "gid://shopify/Order/1001"
    assert order_gid(1001) == "gid://shopify/Order/1001"
    assert order_gid("gid://shopify/Order/7") == "gid://shopify/Order/7"
    assert order_gid("  ") is None
    assert order_gid(None) is None


def test_webhook_payload_gid():
    assert order_gid_from_payload({"admin_graphql_api_id": "gid://shopify/Order/5", "id": 9}) == (
        "gid://shopify/Order/5"
    )
    assert order_gid_from_payload({"id": 9}) == "gid://shopify/Order/9"
    assert order_gid_from_payload({}) is None
    assert order_gid_from_payload(None) is None


def test_order_summary_defaults():
    s = OrderSummary.from_node({"id": "gid://shopify/Order/1", "name": "#1", "customer": None, "metafield": None})
    assert s.customer_name == NO_CUSTOMER == "—"
    assert s.picking_status is None
    assert s.fulfillment_status is None


def test_order_detail_parses_line_items():
    node = {
        "id": "gid://shopify/Order/1",
        "name": "#1",
        "displayFulfillmentStatus": "UNFULFILLED",
        "customer": {"displayName": "Grace"},
        "metafield": {"value": "pending"},
        "lineItems": {
            "nodes": [
                {
                    "id": "gid://shopify/LineItem/1",
                    "title": "Mug",
                    "quantity": 2,
                    "variant": {"id": "gid://shopify/ProductVariant/3", "sku": "MUG", "barcode": "123"},
                    "image": {"url": "https://cdn.example/m.jpg"},
                },
                {"id": "gid://shopify/LineItem/2", "title": "Gift card", "quantity": 1, "variant": None},
            ]
        },
    }
    d = OrderDetail.from_node(node)
    assert d.id == "gid://shopify/Order/1"
    assert d.summary.picking_status == "pending"
    assert d.summary.customer_name == "Grace"
    assert d.line_items[0] == LineItem(
        id="gid://shopify/LineItem/1",
        title="Mug",
        quantity=2,
        variant_id="gid://shopify/ProductVariant/3",
        variant_sku="MUG",
        variant_barcode="123",
        image_url="https://cdn.example/m.jpg",
    )
    assert d.line_items[1].variant_id is None
    assert d.line_items[1].variant_barcode is None
