# binpick/core/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class PickingError(Exception):
    """
    Base of the error taxonomy.

    - code   : stable machine code (error_code in the problem body)
    - status : HTTP status used by the API layer
    - reason : short snake_case reason the scanner client switches on
    """

    code = "PICKING_ERROR"
    status = 400
    reason = "error"

    def __init__(self, message: str, *, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if reason:
            self.reason = reason

    def context(self) -> Optional[Dict[str, Any]]:
        return None


class ValidationError(PickingError):
    code = "VALIDATION_ERROR"
    status = 400
    reason = "invalid"


class NotFound(PickingError):
    code = "NOT_FOUND"
    status = 404
    reason = "not_found"


class AmbiguousMatch(PickingError):
    """More than one catalog variant answered the same barcode."""

    code = "AMBIGUOUS_MATCH"
    status = 409
    reason = "duplicate_barcode"

    def __init__(
        self,
        message: str,
        *,
        candidates: List[Any],
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, reason=reason)
        self.candidates = list(candidates)

    def context(self) -> Optional[Dict[str, Any]]:
        return {"candidates": len(self.candidates)}


class ExternalServiceError(PickingError):
    """Network / API failure talking to the admin platform."""

    code = "EXTERNAL_SERVICE_ERROR"
    status = 502
    reason = "external_error"
