# binpick/api/routers/orders.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.adapters.base import AdminApi
from binpick.api.deps import get_admin_api, get_session, get_shop_domain
from binpick.api.routers.orders_schemas import (
    AppliedFilters,
    OrderListOut,
    OrderSummaryOut,
    PickingStatusIn,
    PickingStatusOut,
    PickingViewOut,
    ScanIn,
    ScanOut,
    picking_view,
    scan_view,
)
from binpick.core.config import AppSettings, get_settings
from binpick.metrics import SCANS
from binpick.services.order_feed import get_order, list_orders
from binpick.services.picking_session import PickingSession
from binpick.services.picking_status import PickingStatusMachine
from binpick.services.platform_types import OrderDetail, order_gid
from binpick.services.variant_bin_service import VariantBinService

log = logging.getLogger("binpick.orders")

router = APIRouter(prefix="/orders", tags=["orders"])


async def _load_order(api: AdminApi, order_ref: str, settings: AppSettings) -> OrderDetail:
    return await get_order(api, order_gid(order_ref), line_items=settings.LINE_ITEMS_PAGE_SIZE)


async def _bins_for(session: AsyncSession, shop: str, order: OrderDetail):
    return await VariantBinService.bins_for_variants(
        session,
        shop_id=shop,
        variant_gids=[li.variant_id for li in order.line_items],
    )


# ---------- worklist ----------


@router.get("", response_model=OrderListOut)
async def orders_list(
    fulfillment: Optional[str] = Query(None, description="fulfilled | unfulfilled"),
    status: Optional[str] = Query(None, description="pending | in_progress | empty"),
    api: AdminApi = Depends(get_admin_api),
    settings: AppSettings = Depends(get_settings),
):
    feed = await list_orders(
        api,
        fulfillment,
        status,
        page_size=settings.ORDERS_PAGE_SIZE,
        unfulfilled_mode=settings.UNFULFILLED_FILTER_MODE,
    )
    return OrderListOut(
        orders=[OrderSummaryOut.of(o) for o in feed.orders],
        applied_filters=AppliedFilters(**feed.applied_filters),
    )


# ---------- status transition ----------


@router.post("/picking-status", response_model=PickingStatusOut, response_model_exclude_none=True)
async def set_picking_status(
    body: PickingStatusIn,
    api: AdminApi = Depends(get_admin_api),
):
    """
    Explicit failure result instead of an HTTP error, so the picking UI can render
    the message. Completeness is the caller's guard, not re-checked here.
    """
    res = await PickingStatusMachine(api).set_status(order_gid(body.order_id), body.status)
    return PickingStatusOut(**res.to_dict())


# ---------- order detail / picking session ----------
# order_ref: numeric id or full gid (gid://shopify/Order/N, slashes included).
# The scan route must be registered before the catch-all detail route.


@router.post("/{order_ref:path}/picking/scan", response_model=ScanOut)
async def picking_scan(
    order_ref: str,
    body: ScanIn,
    shop: str = Depends(get_shop_domain),
    api: AdminApi = Depends(get_admin_api),
    session: AsyncSession = Depends(get_session),
    settings: AppSettings = Depends(get_settings),
):
    """
    Stateless scan step: the client sends the counters it holds, gets them back
    updated. Nothing is stored server side.
    """
    order = await _load_order(api, order_ref, settings)
    sess = PickingSession.for_order(order, body.picked)
    res = sess.record_scan(body.barcode or "")
    SCANS.labels(outcome=res.outcome.value).inc()
    if res.line_item is None:
        log.info("scan no match order=%s barcode=%r", order.id, body.barcode)

    bins = await _bins_for(session, shop, order)
    return scan_view(order, sess, bins, res)


@router.get("/{order_ref:path}", response_model=PickingViewOut)
async def order_detail(
    order_ref: str,
    shop: str = Depends(get_shop_domain),
    api: AdminApi = Depends(get_admin_api),
    session: AsyncSession = Depends(get_session),
    settings: AppSettings = Depends(get_settings),
):
    order = await _load_order(api, order_ref, settings)
    bins = await _bins_for(session, shop, order)
    return PickingViewOut(**picking_view(order, PickingSession.for_order(order), bins))
