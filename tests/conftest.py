# tests/conftest.py
from __future__ import annotations

import os
from typing import AsyncGenerator, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# ============================================================
# The app engine is built at import time: point it at a throwaway DB
# before importing binpick.main. Tests use their own engine below.
# ============================================================
os.environ["BINPICK_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SHOP_DOMAIN"] = ""

from binpick.api import deps  # noqa: E402
from binpick.db.base import Base, init_models  # noqa: E402
from binpick.main import app  # noqa: E402
from tests.helpers.fake_admin import SHOP, FakeAdminPlatform  # noqa: E402

# Optional: BINPICK_TEST_DATABASE_URL=postgresql+psycopg://... runs the DB tests on PostgreSQL
TEST_DATABASE_URL = os.getenv("BINPICK_TEST_DATABASE_URL")


# =========================================
# one engine per test (NullPool, no cross-loop reuse)
# =========================================
@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'binpick.db'}"
    engine = create_async_engine(url, poolclass=NullPool, future=True)
    init_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def async_session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def session(async_session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Standard session (commit on success, rollback on error)."""
    async with async_session_maker() as sess:
        try:
            yield sess
            if sess.in_transaction():
                await sess.commit()
        except Exception:
            if sess.in_transaction():
                await sess.rollback()
            raise


# =========================================
# admin platform
# =========================================
@pytest.fixture
def fake_platform() -> FakeAdminPlatform:
    return FakeAdminPlatform()


@pytest.fixture
def admin_api(fake_platform: FakeAdminPlatform):
    return fake_platform.client(SHOP)


# =========================================
# FastAPI / httpx AsyncClient
# =========================================
@pytest_asyncio.fixture(scope="function")
async def client(
    async_session_maker, fake_platform: FakeAdminPlatform
) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as sess:
            yield sess

    def _admin_api(shop: str = Depends(deps.get_shop_domain)):
        return fake_platform.client(shop)

    def _webhook_admin_api(
        x_shopify_shop_domain: Optional[str] = Header(default=None),
        x_shop_domain: Optional[str] = Header(default=None),
    ):
        shop = (x_shopify_shop_domain or x_shop_domain or "").strip().lower()
        return fake_platform.client(shop) if shop else None

    app.dependency_overrides[deps.get_session] = _session
    app.dependency_overrides[deps.get_admin_api] = _admin_api
    app.dependency_overrides[deps.get_webhook_admin_api] = _webhook_admin_api

    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(
            transport=transport,
            base_url="http://testserver",
            headers={"X-Shop-Domain": SHOP},
            timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=5.0, pool=5.0),
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
