# binpick/services/order_feed.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from binpick.adapters.base import AdminApi, first_error_message
from binpick.adapters.queries import ORDER_DETAIL, ORDERS_WITH_PICKING_STATUS
from binpick.core.errors import ExternalServiceError, NotFound, ValidationError
from binpick.services.platform_types import OrderDetail, OrderSummary

FULFILLED = "FULFILLED"
UNFULFILLED = "UNFULFILLED"

FULFILLMENT_FILTERS = ("fulfilled", "unfulfilled")
PICKING_FILTERS = ("pending", "in_progress", "empty")

UNFULFILLED_STRICT = "strict"  # only UNFULFILLED
UNFULFILLED_LOOSE = "loose"  # anything not FULFILLED

# worklist order; None = never seeded
PICKING_RANK: Dict[Optional[str], int] = {
    "pending": 0,
    "in_progress": 1,
    None: 2,
    "done": 3,
}
_UNKNOWN_RANK = 99


@dataclass
class FeedResult:
    orders: List[OrderSummary] = field(default_factory=list)
    applied_filters: Dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# pure filter / sort contracts
# ---------------------------------------------------------------------------
def normalize_filter(value: Optional[str], allowed: Sequence[str]) -> str:
    """Unknown or blank values mean "no filter" ("")."""
    v = str(value or "").strip()
    return v if v in allowed else ""


def filter_by_fulfillment(
    orders: Sequence[OrderSummary],
    fulfillment_filter: Optional[str],
    *,
    unfulfilled_mode: str = UNFULFILLED_STRICT,
) -> List[OrderSummary]:
    f = normalize_filter(fulfillment_filter, FULFILLMENT_FILTERS)
    if f == "fulfilled":
        return [o for o in orders if o.fulfillment_status == FULFILLED]
    if f == "unfulfilled":
        if unfulfilled_mode == UNFULFILLED_LOOSE:
            return [o for o in orders if o.fulfillment_status != FULFILLED]
        return [o for o in orders if o.fulfillment_status == UNFULFILLED]
    return list(orders)


def filter_by_picking(
    orders: Sequence[OrderSummary], picking_filter: Optional[str]
) -> List[OrderSummary]:
    f = normalize_filter(picking_filter, PICKING_FILTERS)
    if f == "empty":
        return [o for o in orders if not o.picking_status]
    if f:
        return [o for o in orders if o.picking_status == f]
    return list(orders)


def picking_rank(status: Optional[str]) -> int:
    return PICKING_RANK.get(status or None, _UNKNOWN_RANK)


def sort_by_picking_rank(orders: Sequence[OrderSummary]) -> List[OrderSummary]:
    # sorted() is stable: recency order from the fetch survives within a rank
    return sorted(orders, key=lambda o: picking_rank(o.picking_status))


def apply_feed_filters(
    orders: Sequence[OrderSummary],
    fulfillment_filter: Optional[str] = None,
    picking_filter: Optional[str] = None,
    *,
    unfulfilled_mode: str = UNFULFILLED_STRICT,
) -> List[OrderSummary]:
    """Fulfillment first, then picking, then rank."""
    out = filter_by_fulfillment(orders, fulfillment_filter, unfulfilled_mode=unfulfilled_mode)
    out = filter_by_picking(out, picking_filter)
    return sort_by_picking_rank(out)


# ---------------------------------------------------------------------------
# admin API reads
# ---------------------------------------------------------------------------
async def list_orders(
    api: AdminApi,
    fulfillment_filter: Optional[str] = None,
    picking_filter: Optional[str] = None,
    *,
    page_size: int = 100,
    unfulfilled_mode: str = UNFULFILLED_STRICT,
) -> FeedResult:
    """Most recent page of orders, annotated with picking status, filtered and ranked."""
    payload = await api.graphql(ORDERS_WITH_PICKING_STATUS, {"first": page_size})
    err = first_error_message(payload)
    if err:
        raise ExternalServiceError(err)

    nodes = ((payload.get("data") or {}).get("orders") or {}).get("nodes") or []
    summaries = [OrderSummary.from_node(n) for n in nodes]

    return FeedResult(
        orders=apply_feed_filters(
            summaries,
            fulfillment_filter,
            picking_filter,
            unfulfilled_mode=unfulfilled_mode,
        ),
        applied_filters={
            "fulfillment": normalize_filter(fulfillment_filter, FULFILLMENT_FILTERS),
            "picking": normalize_filter(picking_filter, PICKING_FILTERS),
        },
    )


async def get_order(api: AdminApi, order_id: Optional[str], *, line_items: int = 50) -> OrderDetail:
    if not order_id:
        raise ValidationError("Missing orderId", reason="missing_order_id")

    payload = await api.graphql(ORDER_DETAIL, {"id": order_id, "lines": line_items})
    err = first_error_message(payload)
    if err:
        raise ExternalServiceError(err)

    node = (payload.get("data") or {}).get("order")
    if not node:
        raise NotFound("Order not found", reason="order_not_found")
    return OrderDetail.from_node(node)
