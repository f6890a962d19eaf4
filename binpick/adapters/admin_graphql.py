# binpick/adapters/admin_graphql.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from binpick.adapters.base import GraphQLPayload
from binpick.core.errors import ExternalServiceError
from binpick.metrics import EXTERNAL_ERRORS

log = logging.getLogger("binpick.adapters.admin")


class AdminGraphQLClient:
    """
    httpx client for the shop's Admin GraphQL endpoint.

    One short-lived AsyncClient per call; no retries (callers retry whole operations).
    `transport` lets tests plug in httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        shop_domain: str,
        access_token: str,
        api_version: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.shop_domain = shop_domain
        self._access_token = access_token
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self._api_version}/graphql.json"

    async def graphql(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> GraphQLPayload:
        body: Dict[str, Any] = {"query": query, "variables": variables or {}}
        headers = {
            "X-Shopify-Access-Token": self._access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self.endpoint, json=body, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            EXTERNAL_ERRORS.labels(kind="http_status").inc()
            log.warning(
                "admin graphql HTTP %s shop=%s", exc.response.status_code, self.shop_domain
            )
            raise ExternalServiceError(
                f"admin API responded {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            EXTERNAL_ERRORS.labels(kind="transport").inc()
            log.warning("admin graphql transport error shop=%s: %s", self.shop_domain, exc)
            raise ExternalServiceError(f"admin API unreachable: {exc}") from exc
        except ValueError as exc:
            EXTERNAL_ERRORS.labels(kind="decode").inc()
            raise ExternalServiceError("admin API returned a non-JSON body") from exc

        if not isinstance(data, dict):
            EXTERNAL_ERRORS.labels(kind="decode").inc()
            raise ExternalServiceError("admin API returned an unexpected body")
        if data.get("errors"):
            EXTERNAL_ERRORS.labels(kind="graphql").inc()
        return data
