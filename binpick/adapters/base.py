# binpick/adapters/base.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

GraphQLPayload = Dict[str, Any]


class AdminApi(Protocol):
    """
    Admin platform seam (minimal shape):
    - one GraphQL round trip per call
    - returns the raw response body: {"data": ..., "errors": [...]}
    - transport failures raise ExternalServiceError; GraphQL errors are left in the body
    """

    shop_domain: str

    async def graphql(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> GraphQLPayload:
        ...


def first_error_message(payload: GraphQLPayload) -> Optional[str]:
    """Message of the first top-level GraphQL error, or None when there is none."""
    errors = payload.get("errors") or []
    if not errors:
        return None
    first = errors[0]
    if isinstance(first, dict):
        return str(first.get("message") or "GraphQL error")
    return str(first)
