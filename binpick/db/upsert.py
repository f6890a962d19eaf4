# binpick/db/upsert.py
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def insert_for(session: AsyncSession) -> Callable[..., Any]:
    """
    Dialect INSERT supporting ON CONFLICT (PostgreSQL in production, SQLite in tests).
    """
    name = session.get_bind().dialect.name
    try:
        return _INSERTS[name]
    except KeyError:
        raise RuntimeError(f"ON CONFLICT upsert not supported on dialect {name!r}") from None
