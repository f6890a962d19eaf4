# binpick/db/base.py
from __future__ import annotations

import importlib
import logging
from typing import Iterable, List

from sqlalchemy.orm import DeclarativeBase, configure_mappers

log = logging.getLogger("binpick.models")


class Base(DeclarativeBase):
    """Single ORM Base for the whole service."""

    pass


_INITIALIZED: bool = False

_MODEL_MODULES = (
    "binpick.models.bin_location",
    "binpick.models.variant_bin",
)


def init_models(*, extra_modules: Iterable[str] | None = None, force: bool = False) -> None:
    """
    Import every model module so Base.metadata is complete, then configure mappers.
    Used by table bootstrap, Alembic and the test fixtures.
    """
    global _INITIALIZED
    if _INITIALIZED and not force:
        log.debug("init_models() called again; already initialized, skipping.")
        return

    loaded: List[str] = []
    for mod in [*_MODEL_MODULES, *(extra_modules or [])]:
        importlib.import_module(mod)
        loaded.append(mod)

    configure_mappers()
    _INITIALIZED = True
    log.info("ORM models initialized & mappers configured (loaded %d modules)", len(loaded))
