# binpick/db/session.py
# Async engine / session factory + FastAPI dependency (get_session)
from __future__ import annotations

import logging
import os
import re
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from binpick.core.config import get_settings

log = logging.getLogger("binpick.db")


# ---- DSN normalisation: postgres → psycopg3, sqlite → aiosqlite ----
def normalize_async_dsn(url: str) -> str:
    if url.startswith("sqlite:///"):
        return "sqlite+aiosqlite://" + url[len("sqlite:///") - 1 :]
    if url.startswith("postgresql+asyncpg://") or url.startswith("postgres+asyncpg://"):
        return re.sub(r"^postgres(?:ql)?\+asyncpg://", "postgresql+psycopg://", url)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _raw_dsn() -> str:
    # BINPICK_DATABASE_URL wins over the settings value (tests / alembic runs)
    raw = (os.getenv("BINPICK_DATABASE_URL") or get_settings().DATABASE_URL).strip()
    # some shells leave the value quoted
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()
    return raw


ASYNC_URL = normalize_async_dsn(_raw_dsn())


def make_engine(url: str, *, echo: bool = False, **kwargs) -> AsyncEngine:
    return create_async_engine(normalize_async_dsn(url), future=True, echo=echo, **kwargs)


async_engine: AsyncEngine = make_engine(
    ASYNC_URL,
    echo=get_settings().SQL_ECHO,
    pool_pre_ping=True,
)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---- FastAPI dependency ----
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Dev/test bootstrap; real deployments run the Alembic migrations."""
    from binpick.db.base import Base, init_models

    init_models()
    async with (engine or async_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("tables ensured on %s", (engine or async_engine).url.render_as_string(hide_password=True))


async def close_engines() -> None:
    await async_engine.dispose()
