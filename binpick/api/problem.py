# binpick/api/problem.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from fastapi import Request
from fastapi.responses import JSONResponse

from binpick.core.errors import AmbiguousMatch, PickingError


class NextAction(TypedDict, total=False):
    action: str
    label: str


@dataclass(frozen=True)
class Problem:
    reason: str
    error_code: str
    message: str
    http_status: int
    context: Optional[Dict[str, Any]] = None
    next_actions: Optional[List[NextAction]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "ok": False,
            "reason": self.reason,
            "error_code": self.error_code,
            "message": self.message,
            "http_status": int(self.http_status),
        }
        if self.context:
            out["context"] = self.context
        if self.next_actions:
            out["next_actions"] = self.next_actions
        return out


def make_problem(
    *,
    status_code: int,
    reason: str,
    error_code: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    next_actions: Optional[Sequence[NextAction]] = None,
) -> Dict[str, Any]:
    p = Problem(
        reason=str(reason),
        error_code=str(error_code),
        message=str(message),
        http_status=int(status_code),
        context=context,
        next_actions=list(next_actions) if next_actions else None,
    )
    return p.to_dict()


# scanner hints per reason
_NEXT_ACTIONS: Dict[str, List[NextAction]] = {
    "not_found": [{"action": "rescan", "label": "Scan again"}],
    "duplicate_barcode": [{"action": "choose_variant", "label": "Pick the right variant"}],
    "external_error": [{"action": "retry", "label": "Retry"}],
}


def _variant_out(v: Any) -> Dict[str, Any]:
    return {
        "id": v.id,
        "barcode": v.barcode,
        "sku": v.sku,
        "title": v.title,
        "productTitle": v.product_title,
        "imageUrl": v.image_url,
    }


def problem_for(exc: PickingError) -> Dict[str, Any]:
    body = make_problem(
        status_code=exc.status,
        reason=exc.reason,
        error_code=exc.code,
        message=exc.message,
        context=exc.context(),
        next_actions=_NEXT_ACTIONS.get(exc.reason),
    )
    if isinstance(exc, AmbiguousMatch):
        body["variants"] = [_variant_out(v) for v in exc.candidates]
    return body


async def picking_error_handler(_req: Request, exc: PickingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status, content=problem_for(exc))
