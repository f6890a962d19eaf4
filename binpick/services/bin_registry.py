# binpick/services/bin_registry.py
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.core.errors import ValidationError
from binpick.db.upsert import insert_for
from binpick.models.bin_location import BinLocation

log = logging.getLogger("binpick.bins")


def clean_code(value: object) -> str:
    return str(value if value is not None else "").strip()


class BinRegistry:
    """
    Bin registry: (shop_id, code) → BinLocation.

    ensure_bin is an upsert on uq_bin_locations_shop_code, never check-then-insert,
    so concurrent first use of a code cannot produce two rows.
    The caller owns the transaction (commit / rollback).
    """

    @staticmethod
    async def ensure_bin(session: AsyncSession, *, shop_id: str, code: str) -> BinLocation:
        c = clean_code(code)
        if not c:
            raise ValidationError("bin code is required", reason="missing_bin")

        ins = insert_for(session)(BinLocation.__table__).values(shop_id=shop_id, code=c)
        ins = ins.on_conflict_do_nothing(index_elements=["shop_id", "code"])
        res = await session.execute(ins)
        if res.rowcount:
            log.info("bin created shop=%s code=%s", shop_id, c)

        row = await session.execute(
            select(BinLocation).where(BinLocation.shop_id == shop_id, BinLocation.code == c)
        )
        return row.scalar_one()
