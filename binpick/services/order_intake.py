# binpick/services/order_intake.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from binpick.adapters.base import AdminApi
from binpick.core.errors import PickingError
from binpick.metrics import INTAKES
from binpick.services.picking_status import PickingStatusMachine
from binpick.services.platform_types import order_gid

log = logging.getLogger("binpick.intake")


def order_gid_from_payload(payload: Optional[Dict[str, Any]]) -> Optional[str]:
    """orders/create payload → order gid (admin_graphql_api_id, else built from id)."""
    if not payload:
        return None
    gid = payload.get("admin_graphql_api_id")
    if gid:
        return str(gid)
    return order_gid(payload.get("id"))


async def handle_order_created(api: AdminApi, payload: Optional[Dict[str, Any]]) -> str:
    """
    orders/create notification → intake().

    Delivery is at-least-once, so duplicates are expected; intake's read-before-write
    keeps a status the operator already advanced. Failures are logged and reported
    as "failed", never raised: the notifier must always get a success answer.

    Returns "ignored" | "seeded" | "skipped" | "failed".
    """
    gid = order_gid_from_payload(payload)
    if not gid:
        log.warning("orders/create without order id shop=%s", api.shop_domain)
        INTAKES.labels(outcome="ignored").inc()
        return "ignored"

    try:
        outcome = await PickingStatusMachine(api).intake(gid)
    except PickingError as exc:
        log.error(
            "orders/create intake failed shop=%s order=%s code=%s: %s",
            api.shop_domain,
            gid,
            exc.code,
            exc.message,
        )
        outcome = "failed"

    INTAKES.labels(outcome=outcome).inc()
    return outcome
