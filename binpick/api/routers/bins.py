# binpick/api/routers/bins.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.adapters.base import AdminApi
from binpick.api.deps import get_admin_api, get_session, get_shop_domain
from binpick.api.routers.bins_schemas import (
    BinAssignIn,
    BinAssignOut,
    BinOut,
    BinResolveIn,
    BinResolveOut,
    VariantLookupIn,
    VariantLookupOut,
    VariantOut,
)
from binpick.core.config import AppSettings, get_settings
from binpick.services.bin_registry import BinRegistry
from binpick.services.catalog_resolver import CatalogResolver
from binpick.services.variant_bin_service import VariantBinService

router = APIRouter(prefix="/api", tags=["bins"])


# ---------- bin resolve (lazy create) ----------


@router.post("/bins/resolve", response_model=BinResolveOut)
async def resolve_bin(
    body: BinResolveIn,
    shop: str = Depends(get_shop_domain),
    session: AsyncSession = Depends(get_session),
):
    try:
        bin_row = await BinRegistry.ensure_bin(session, shop_id=shop, code=body.bin_code or "")
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return BinResolveOut(bin=BinOut.model_validate(bin_row))


# ---------- variant → bin ----------


@router.post("/bins/assign", response_model=BinAssignOut)
async def assign_bin(
    body: BinAssignIn,
    shop: str = Depends(get_shop_domain),
    session: AsyncSession = Depends(get_session),
):
    try:
        res = await VariantBinService.assign(
            session,
            shop_id=shop,
            variant_gid=body.variant_gid or "",
            bin_code=body.bin_code or "",
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return BinAssignOut(
        status=res.status,
        bin_code=res.bin.code,
        previous_bin_code=res.previous_bin_code,
    )


# ---------- barcode → variant ----------


@router.post("/variants/by-barcode", response_model=VariantLookupOut)
async def variant_by_barcode(
    body: VariantLookupIn,
    api: AdminApi = Depends(get_admin_api),
    settings: AppSettings = Depends(get_settings),
):
    resolver = CatalogResolver(api, search_limit=settings.VARIANT_SEARCH_LIMIT)
    variant = await resolver.find_by_barcode(body.barcode or "")
    return VariantLookupOut(shop=api.shop_domain, variant=VariantOut(**asdict(variant)))
