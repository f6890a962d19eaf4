# binpick/models/variant_bin.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from binpick.db.base import Base


class VariantBin(Base):
    """
    Current bin of a catalog variant (one row per shop + variant).

    No history: a reassignment overwrites bin_location_id in place.
    """

    __tablename__ = "variant_bins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    shop_id: Mapped[str] = mapped_column(Text, nullable=False)

    # external catalog id, e.g. gid://shopify/ProductVariant/123
    variant_gid: Mapped[str] = mapped_column(Text, nullable=False)

    bin_location_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("bin_locations.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("shop_id", "variant_gid", name="uq_variant_bins_shop_variant"),
        Index("ix_variant_bins_bin_location_id", "bin_location_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<VariantBin id={self.id} shop={self.shop_id!r} "
            f"variant={self.variant_gid!r} bin={self.bin_location_id}>"
        )
