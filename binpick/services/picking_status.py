# binpick/services/picking_status.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from binpick.adapters.base import AdminApi, first_error_message
from binpick.adapters.queries import (
    PICKING_KEY,
    PICKING_METAFIELD_TYPE,
    PICKING_NAMESPACE,
    PICKING_STATUS_OF,
    SET_PICKING_STATUS,
)
from binpick.core.errors import ExternalServiceError, NotFound, ValidationError
from binpick.metrics import STATUS_WRITES

log = logging.getLogger("binpick.picking.status")


class PickingStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    # recognised for filtering / ranking; nothing in this service produces it
    DONE = "done"


ALLOWED_STATUSES = frozenset(s.value for s in PickingStatus)


@dataclass(frozen=True)
class StatusWriteResult:
    ok: bool
    status: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "status": self.status}
        return {"ok": False, "error": self.error, "reason": self.reason}


# ---------------------------------------------------------------------------
# call-site guards (the storage write itself is unconditional)
# ---------------------------------------------------------------------------
def effective_status(raw: Optional[str]) -> str:
    """Unset displays as pending (storage still distinguishes the two)."""
    return raw or PickingStatus.PENDING.value


def can_mark_in_progress(all_complete: bool, status: Optional[str]) -> bool:
    return bool(all_complete) and effective_status(status) != PickingStatus.IN_PROGRESS.value


def can_reset_to_pending(status: Optional[str]) -> bool:
    return effective_status(status) != PickingStatus.PENDING.value


class PickingStatusMachine:
    """
    Order picking status kept in the order metafield picking.status.

    Transitions:
      intake            unset → pending (read-before-write, no-op once any value exists)
      mark_in_progress  any   → in_progress
      reset_to_pending  any   → pending

    Writes are last-write-wins overwrites (metafieldsSet), no version token.
    Re-applying the same target state is a no-op in effect, so writes are safe to retry.
    """

    def __init__(self, api: AdminApi) -> None:
        self.api = api

    async def current_status(self, order_id: str) -> Optional[str]:
        payload = await self.api.graphql(PICKING_STATUS_OF, {"id": order_id})
        err = first_error_message(payload)
        if err:
            raise ExternalServiceError(err)
        order = (payload.get("data") or {}).get("order")
        if order is None:
            raise NotFound(f"order {order_id} not found", reason="order_not_found")
        return ((order.get("metafield") or {}).get("value")) or None

    async def intake(self, order_id: str) -> str:
        """
        Seed "pending" on a freshly created order.

        Returns "seeded" or "skipped"; raises PickingError subclasses on failure.
        """
        if not order_id:
            raise ValidationError("Missing orderId", reason="missing_order_id")

        current = await self.current_status(order_id)
        if current:
            log.info("intake skipped order=%s status=%s", order_id, current)
            return "skipped"

        res = await self.set_status(order_id, PickingStatus.PENDING.value)
        if not res.ok:
            if res.reason == "validation_error":
                raise ValidationError(res.error or "metafieldsSet rejected", reason=res.reason)
            raise ExternalServiceError(res.error or "metafieldsSet failed")
        return "seeded"

    async def mark_in_progress(self, order_id: str) -> StatusWriteResult:
        return await self.set_status(order_id, PickingStatus.IN_PROGRESS.value)

    async def reset_to_pending(self, order_id: str) -> StatusWriteResult:
        return await self.set_status(order_id, PickingStatus.PENDING.value)

    async def set_status(self, order_id: Optional[str], status: Optional[str]) -> StatusWriteResult:
        """
        Unconditional write of one allowed status. Never raises: failures come back
        as StatusWriteResult(ok=False) so a UI can show the message.
        """
        oid = str(order_id or "").strip()
        st = str(status or "").strip()
        if not oid:
            return StatusWriteResult(ok=False, error="Missing orderId", reason="validation_error")
        if st not in ALLOWED_STATUSES:
            return StatusWriteResult(ok=False, error="Invalid status", reason="validation_error")

        variables = {
            "metafields": [
                {
                    "ownerId": oid,
                    "namespace": PICKING_NAMESPACE,
                    "key": PICKING_KEY,
                    "type": PICKING_METAFIELD_TYPE,
                    "value": st,
                }
            ]
        }

        try:
            payload = await self.api.graphql(SET_PICKING_STATUS, variables)
        except ExternalServiceError as exc:
            STATUS_WRITES.labels(status=st, ok="false").inc()
            return StatusWriteResult(ok=False, error=exc.message, reason="external_error")

        err = first_error_message(payload)
        if err:
            log.warning("metafieldsSet failed order=%s: %s", oid, err)
            STATUS_WRITES.labels(status=st, ok="false").inc()
            return StatusWriteResult(ok=False, error=err, reason="external_error")

        result = (payload.get("data") or {}).get("metafieldsSet") or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            msg = str(user_errors[0].get("message") or "metafieldsSet rejected")
            log.warning("metafieldsSet user error order=%s: %s", oid, msg)
            STATUS_WRITES.labels(status=st, ok="false").inc()
            return StatusWriteResult(ok=False, error=msg, reason="validation_error")

        log.info("picking status order=%s -> %s", oid, st)
        STATUS_WRITES.labels(status=st, ok="true").inc()
        return StatusWriteResult(ok=True, status=st)
