# binpick/api/routers/orders_schemas.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from binpick.services.picking_session import PickingSession, ScanResult
from binpick.services.picking_status import (
    can_mark_in_progress,
    can_reset_to_pending,
    effective_status,
)
from binpick.services.platform_types import LineItem, OrderDetail, OrderSummary


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==========================
# worklist
# ==========================


class OrderSummaryOut(_Camel):
    id: str
    label: str
    created_at: Optional[str] = None
    fulfillment_status: Optional[str] = None
    customer: str
    picking_status: Optional[str] = Field(None, description="null = never seeded")

    @classmethod
    def of(cls, o: OrderSummary) -> "OrderSummaryOut":
        return cls(
            id=o.id,
            label=o.label,
            created_at=o.created_at,
            fulfillment_status=o.fulfillment_status,
            customer=o.customer_name,
            picking_status=o.picking_status,
        )


class AppliedFilters(_Camel):
    fulfillment: str = ""
    picking: str = ""


class OrderListOut(_Camel):
    orders: List[OrderSummaryOut]
    applied_filters: AppliedFilters


# ==========================
# order detail + picking session
# ==========================


class LineItemOut(_Camel):
    id: str
    title: str
    quantity: int
    sku: Optional[str] = None
    barcode: Optional[str] = None
    variant_id: Optional[str] = None
    image_url: Optional[str] = None
    bin_code: Optional[str] = None
    picked: int = 0
    complete: bool = False


class ProgressOut(_Camel):
    completed_lines: int
    total_lines: int
    picked_units: int
    total_units: int
    percent: int
    all_complete: bool
    no_barcode_count: int


class GuardsOut(_Camel):
    can_mark_in_progress: bool
    can_reset_to_pending: bool


class PickingViewOut(_Camel):
    order: OrderSummaryOut
    picking_status: str = Field(..., description="unset displays as pending")
    line_items: List[LineItemOut]
    picked: Dict[str, int]
    progress: ProgressOut
    guards: GuardsOut


class ScanIn(_Camel):
    barcode: Optional[str] = None
    # counters the client holds for this order view
    picked: Dict[str, int] = Field(default_factory=dict)


class ScanOut(PickingViewOut):
    outcome: str
    line_item_id: Optional[str] = None
    new_count: Optional[int] = None


class PickingStatusIn(_Camel):
    order_id: Optional[str] = None
    status: Optional[str] = None


class PickingStatusOut(_Camel):
    ok: bool
    status: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None


def _line_out(li: LineItem, sess: PickingSession, bins: Dict[str, str]) -> LineItemOut:
    return LineItemOut(
        id=li.id,
        title=li.title,
        quantity=li.quantity,
        sku=li.variant_sku,
        barcode=li.variant_barcode,
        variant_id=li.variant_id,
        image_url=li.image_url,
        bin_code=bins.get(li.variant_id or ""),
        picked=sess.picked_count(li.id),
        complete=sess.is_line_complete(li),
    )


def picking_view(order: OrderDetail, sess: PickingSession, bins: Dict[str, str]) -> Dict:
    """Shared body of the order detail and scan responses."""
    status = order.summary.picking_status
    return {
        "order": OrderSummaryOut.of(order.summary),
        "picking_status": effective_status(status),
        "line_items": [_line_out(li, sess, bins) for li in sess.sorted_line_items()],
        "picked": sess.snapshot(),
        "progress": ProgressOut(
            completed_lines=sess.completed_line_count,
            total_lines=sess.total_line_count,
            picked_units=sess.picked_units,
            total_units=sess.total_units,
            percent=sess.progress_percent,
            all_complete=sess.all_complete,
            no_barcode_count=sess.no_barcode_count,
        ),
        "guards": GuardsOut(
            can_mark_in_progress=can_mark_in_progress(sess.all_complete, status),
            can_reset_to_pending=can_reset_to_pending(status),
        ),
    }


def scan_view(
    order: OrderDetail, sess: PickingSession, bins: Dict[str, str], res: ScanResult
) -> ScanOut:
    return ScanOut(
        **picking_view(order, sess, bins),
        outcome=res.outcome.value,
        line_item_id=res.line_item.id if res.line_item else None,
        new_count=res.new_count,
    )
