# binpick/services/platform_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

NO_CUSTOMER = "—"


@dataclass(frozen=True)
class CatalogVariant:
    """Catalog variant as returned by the admin platform (read-only here)."""

    id: str
    barcode: Optional[str]
    sku: Optional[str]
    title: Optional[str]
    product_title: Optional[str]
    image_url: Optional[str] = None
    image_alt: Optional[str] = None

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "CatalogVariant":
        product = node.get("product") or {}
        image = node.get("image") or {}
        return cls(
            id=str(node.get("id") or ""),
            barcode=node.get("barcode"),
            sku=node.get("sku"),
            title=node.get("title"),
            product_title=product.get("title"),
            image_url=image.get("url"),
            image_alt=image.get("altText"),
        )


@dataclass(frozen=True)
class LineItem:
    id: str
    title: str
    quantity: int
    variant_id: Optional[str] = None
    variant_sku: Optional[str] = None
    variant_barcode: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "LineItem":
        variant = node.get("variant") or {}
        image = node.get("image") or {}
        return cls(
            id=str(node.get("id") or ""),
            title=str(node.get("title") or ""),
            quantity=int(node.get("quantity") or 0),
            variant_id=variant.get("id"),
            variant_sku=variant.get("sku"),
            variant_barcode=variant.get("barcode"),
            image_url=image.get("url"),
        )


def _metafield_value(node: Dict[str, Any]) -> Optional[str]:
    mf = node.get("metafield") or {}
    return mf.get("value") or None


@dataclass(frozen=True)
class OrderSummary:
    """
    One row of the order worklist.

    picking_status: None (never seeded) | "pending" | "in_progress" | "done"
    """

    id: str
    label: str
    created_at: Optional[str]
    fulfillment_status: Optional[str]
    customer_name: str
    picking_status: Optional[str]

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "OrderSummary":
        customer = node.get("customer") or {}
        return cls(
            id=str(node.get("id") or ""),
            label=str(node.get("name") or ""),
            created_at=node.get("createdAt"),
            fulfillment_status=node.get("displayFulfillmentStatus"),
            customer_name=customer.get("displayName") or NO_CUSTOMER,
            picking_status=_metafield_value(node),
        )


@dataclass(frozen=True)
class OrderDetail:
    summary: OrderSummary
    line_items: List[LineItem] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.summary.id

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "OrderDetail":
        nodes = (node.get("lineItems") or {}).get("nodes") or []
        return cls(
            summary=OrderSummary.from_node(node),
            line_items=[LineItem.from_node(n) for n in nodes],
        )


ORDER_GID_PREFIX = "gid://shopify/Order/"


def order_gid(ref: Any) -> Optional[str]:
    """
    Normalise an order reference to its admin gid.
    Accepts a full gid or a numeric / legacy id; blank → None.
    """
    if ref is None:
        return None
    s = str(ref).strip()
    if not s:
        return None
    if s.startswith("gid://"):
        return s
    return f"{ORDER_GID_PREFIX}{s}"
