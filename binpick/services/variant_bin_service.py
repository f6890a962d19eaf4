# binpick/services/variant_bin_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.core.errors import ValidationError
from binpick.db.upsert import insert_for
from binpick.metrics import BIN_ASSIGNMENTS
from binpick.models.bin_location import BinLocation
from binpick.models.variant_bin import VariantBin
from binpick.services.bin_registry import BinRegistry, clean_code

log = logging.getLogger("binpick.bins")

UNCHANGED = "unchanged"
CREATED = "created"
UPDATED = "updated"


@dataclass(frozen=True)
class AssignResult:
    """
    status:
      "created"   : variant had no bin, row inserted
      "unchanged" : variant already pointed at this bin, nothing written
      "updated"   : variant moved, previous_bin_code is the bin it left
    """

    status: str
    bin: BinLocation
    previous_bin_code: Optional[str] = None


class VariantBinService:
    """
    Variant → bin assignment store (one current bin per shop + variant, no history).
    """

    @staticmethod
    async def assign(
        session: AsyncSession,
        *,
        shop_id: str,
        variant_gid: str,
        bin_code: str,
    ) -> AssignResult:
        """
        Resolve-then-assign as one transaction:

        1) conditional insert on uq_variant_bins_shop_variant (RETURNING id → created)
        2) otherwise lock the existing row (FOR UPDATE) and compare against the target bin
        3) same bin → unchanged; different bin → overwrite, report the previous code

        Step 2 runs under the row lock taken in this transaction, so two concurrent
        assignments of one variant serialize on the database.
        """
        vgid = clean_code(variant_gid)
        code = clean_code(bin_code)
        if not vgid:
            raise ValidationError("variant id is required", reason="missing_variantGid")
        if not code:
            raise ValidationError("bin code is required", reason="missing_bin")

        bin_row = await BinRegistry.ensure_bin(session, shop_id=shop_id, code=code)

        ins = (
            insert_for(session)(VariantBin.__table__)
            .values(shop_id=shop_id, variant_gid=vgid, bin_location_id=bin_row.id)
            .on_conflict_do_nothing(index_elements=["shop_id", "variant_gid"])
            .returning(VariantBin.__table__.c.id)
        )
        created_id = (await session.execute(ins)).scalar_one_or_none()
        if created_id is not None:
            log.info("variant bin created shop=%s variant=%s bin=%s", shop_id, vgid, code)
            BIN_ASSIGNMENTS.labels(status=CREATED).inc()
            return AssignResult(status=CREATED, bin=bin_row, previous_bin_code=None)

        current = (
            await session.execute(
                select(VariantBin.id, VariantBin.bin_location_id, BinLocation.code)
                .join(BinLocation, BinLocation.id == VariantBin.bin_location_id)
                .where(VariantBin.shop_id == shop_id, VariantBin.variant_gid == vgid)
                .with_for_update(of=VariantBin)
            )
        ).one()

        if current.bin_location_id == bin_row.id:
            BIN_ASSIGNMENTS.labels(status=UNCHANGED).inc()
            return AssignResult(status=UNCHANGED, bin=bin_row, previous_bin_code=None)

        await session.execute(
            update(VariantBin)
            .where(VariantBin.id == current.id)
            .values(bin_location_id=bin_row.id, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        log.info(
            "variant bin updated shop=%s variant=%s %s -> %s",
            shop_id,
            vgid,
            current.code,
            code,
        )
        BIN_ASSIGNMENTS.labels(status=UPDATED).inc()
        return AssignResult(status=UPDATED, bin=bin_row, previous_bin_code=current.code)

    @staticmethod
    async def bins_for_variants(
        session: AsyncSession,
        *,
        shop_id: str,
        variant_gids: Iterable[Optional[str]],
    ) -> Dict[str, str]:
        """variant_gid → bin code for the given variants (unassigned variants are absent)."""
        ids = sorted({clean_code(v) for v in variant_gids if v and clean_code(v)})
        if not ids:
            return {}

        rows = (
            await session.execute(
                select(VariantBin.variant_gid, BinLocation.code)
                .join(BinLocation, BinLocation.id == VariantBin.bin_location_id)
                .where(VariantBin.shop_id == shop_id)
                .where(VariantBin.variant_gid.in_(ids))
            )
        ).all()
        return {str(vgid): str(code) for vgid, code in rows}
