# binpick/api/routers/health.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.api.deps import get_session

log = logging.getLogger("binpick.health")

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"ok": True}


@router.get("/health/db")
async def health_db(session: AsyncSession = Depends(get_session)):
    """DB ping; reports the driver protocol, never the DSN."""
    protocol = session.get_bind().url.drivername.split("+")[0]
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        log.warning("db health failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "protocol": protocol, "error": str(exc.__class__.__name__)},
        )
    return {"ok": True, "protocol": protocol}
