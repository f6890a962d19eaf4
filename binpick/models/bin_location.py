# binpick/models/bin_location.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from binpick.db.base import Base


class BinLocation(Base):
    """
    Physical storage bin, identified by the code printed on its label.

    - created lazily the first time a code is referenced (resolve / assign)
    - never renamed or deleted
    """

    __tablename__ = "bin_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # tenant: shop domain
    shop_id: Mapped[str] = mapped_column(Text, nullable=False)

    code: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (UniqueConstraint("shop_id", "code", name="uq_bin_locations_shop_code"),)

    def __repr__(self) -> str:
        return f"<BinLocation id={self.id} shop={self.shop_id!r} code={self.code!r}>"
