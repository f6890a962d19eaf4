# binpick/api/routers/webhooks.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from binpick.adapters.base import AdminApi
from binpick.api.deps import get_webhook_admin_api
from binpick.services.order_intake import handle_order_created

log = logging.getLogger("binpick.webhooks")

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _ack() -> PlainTextResponse:
    return PlainTextResponse("OK", status_code=200)


@router.post("/orders/create", response_class=PlainTextResponse)
async def orders_create(
    request: Request,
    api: Optional[AdminApi] = Depends(get_webhook_admin_api),
):
    """
    Always 200 "OK": a non-2xx answer makes the platform redeliver without end.
    Internal failures are only logged.
    """
    if api is None:
        log.warning("orders/create without shop domain header")
        return _ack()

    try:
        payload = await request.json()
    except ValueError:
        log.warning("orders/create with a non-JSON body shop=%s", api.shop_domain)
        return _ack()

    try:
        outcome = await handle_order_created(api, payload if isinstance(payload, dict) else None)
        log.info("orders/create shop=%s outcome=%s", api.shop_domain, outcome)
    except Exception:
        log.exception("orders/create handler crashed shop=%s", api.shop_domain)
    return _ack()
