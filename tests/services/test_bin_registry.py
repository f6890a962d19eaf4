# tests/services/test_bin_registry.py
from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.core.errors import ValidationError
from binpick.models import BinLocation
from binpick.services.bin_registry import BinRegistry

pytestmark = [pytest.mark.asyncio, pytest.mark.grp_bins]

SHOP = "test-shop.myshopify.com"


async def _count(session: AsyncSession) -> int:
    return (await session.execute(select(func.count()).select_from(BinLocation))).scalar_one()


async def test_ensure_bin_creates_once(session: AsyncSession):
    first = await BinRegistry.ensure_bin(session, shop_id=SHOP, code="A-01-03")
    again = await BinRegistry.ensure_bin(session, shop_id=SHOP, code="  A-01-03 ")

    assert first.id == again.id
    assert again.code == "A-01-03"
    assert await _count(session) == 1


async def test_codes_are_case_sensitive_and_per_shop(session: AsyncSession):
    a = await BinRegistry.ensure_bin(session, shop_id=SHOP, code="a-1")
    b = await BinRegistry.ensure_bin(session, shop_id=SHOP, code="A-1")
    c = await BinRegistry.ensure_bin(session, shop_id="other.myshopify.com", code="a-1")

    assert len({a.id, b.id, c.id}) == 3
    assert await _count(session) == 3


@pytest.mark.parametrize("code", ["", "   ", None])
async def test_blank_code_rejected(session: AsyncSession, code):
    with pytest.raises(ValidationError) as ei:
        await BinRegistry.ensure_bin(session, shop_id=SHOP, code=code)
    assert ei.value.reason == "missing_bin"
    assert await _count(session) == 0


async def test_ensure_bin_survives_separate_transactions(async_session_maker):
    async with async_session_maker() as s1:
        b1 = await BinRegistry.ensure_bin(s1, shop_id=SHOP, code="B-7")
        await s1.commit()

    async with async_session_maker() as s2:
        b2 = await BinRegistry.ensure_bin(s2, shop_id=SHOP, code="B-7")
        await s2.commit()
        assert b2.id == b1.id
        assert await _count(s2) == 1


async def test_concurrent_first_use_yields_one_bin(async_session_maker):
    async def _resolve():
        async with async_session_maker() as s:
            b = await BinRegistry.ensure_bin(s, shop_id=SHOP, code="RACE-1")
            await s.commit()
            return b.id

    ids = await asyncio.gather(*(_resolve() for _ in range(5)))

    assert len(set(ids)) == 1
    async with async_session_maker() as s:
        assert await _count(s) == 1
