# binpick/services/catalog_resolver.py
from __future__ import annotations

import logging

from binpick.adapters.base import AdminApi, first_error_message
from binpick.adapters.queries import VARIANT_BY_BARCODE
from binpick.core.errors import AmbiguousMatch, ExternalServiceError, NotFound, ValidationError
from binpick.services.platform_types import CatalogVariant

log = logging.getLogger("binpick.catalog")


class CatalogResolver:
    """
    Barcode → catalog variant, read-through over the admin API.

    Every call is a fresh query (no cache, no retry). Several variants sharing one
    barcode is a first-class outcome: AmbiguousMatch carries all of them so the
    operator can choose.
    """

    def __init__(self, api: AdminApi, *, search_limit: int = 10) -> None:
        self.api = api
        self.search_limit = search_limit

    async def find_by_barcode(self, barcode: str) -> CatalogVariant:
        clean = str(barcode if barcode is not None else "").strip()
        if not clean:
            raise ValidationError("barcode is required", reason="missing_barcode")

        payload = await self.api.graphql(
            VARIANT_BY_BARCODE,
            {"q": f"barcode:{clean}", "first": self.search_limit},
        )
        err = first_error_message(payload)
        if err:
            raise ExternalServiceError(err)

        data = payload.get("data") or {}
        nodes = (data.get("productVariants") or {}).get("nodes") or []

        if not nodes:
            raise NotFound(f"no variant with barcode {clean!r}", reason="not_found")
        if len(nodes) > 1:
            candidates = [CatalogVariant.from_node(n) for n in nodes]
            log.info("barcode %s matches %d variants", clean, len(candidates))
            raise AmbiguousMatch(
                f"{len(candidates)} variants share barcode {clean!r}",
                candidates=candidates,
            )
        return CatalogVariant.from_node(nodes[0])
