# binpick/router_mount.py
from __future__ import annotations

from fastapi import FastAPI


def mount_routers(app: FastAPI) -> None:
    # ---------------------------------------------------------------------------
    # routers imports
    # ---------------------------------------------------------------------------
    from binpick.api.routers.bins import router as bins_router
    from binpick.api.routers.health import router as health_router
    from binpick.api.routers.orders import router as orders_router
    from binpick.api.routers.webhooks import router as webhooks_router
    from binpick.metrics import router as metrics_router

    # ---------------------------------------------------------------------------
    # include
    # ---------------------------------------------------------------------------
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(bins_router)
    app.include_router(orders_router)
    app.include_router(webhooks_router)
