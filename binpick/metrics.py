# binpick/metrics.py
from __future__ import annotations

import os

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import REGISTRY, CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest, multiprocess

# picking / assignment business counters
SCANS = Counter("picking_scans_total", "Order picking scans", ["outcome"])
BIN_ASSIGNMENTS = Counter("bin_assignments_total", "Variant to bin assignments", ["status"])
STATUS_WRITES = Counter("picking_status_writes_total", "Picking status writes", ["status", "ok"])
INTAKES = Counter("order_intakes_total", "orders/create webhook outcomes", ["outcome"])
EXTERNAL_ERRORS = Counter("admin_api_errors_total", "Admin API failures", ["kind"])

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """
    Single process: export the default REGISTRY.
    Multi process (PROMETHEUS_MULTIPROC_DIR set): merge the shards into a fresh registry.
    """
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        payload = generate_latest(registry)
    else:
        payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
