# binpick/services/picking_session.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from binpick.services.platform_types import LineItem, OrderDetail


class ScanOutcome(str, Enum):
    NO_MATCH = "no_match"
    INCREMENTED = "incremented"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ScanResult:
    outcome: ScanOutcome
    line_item: Optional[LineItem] = None
    new_count: Optional[int] = None


class PickingSession:
    """
    Units picked per line item while one operator has one order open.

    Lives only as long as that view: never persisted, never shared, rebuilt from
    zero (or from the counters the client echoes back) on every request.
    Counters stay within 0..quantity.
    """

    def __init__(
        self,
        line_items: Sequence[LineItem],
        picked: Optional[Mapping[str, int]] = None,
    ) -> None:
        self.line_items: List[LineItem] = list(line_items)
        self._picked: Dict[str, int] = {}
        if picked:
            by_id = {li.id: li for li in self.line_items}
            for line_id, count in picked.items():
                li = by_id.get(str(line_id))
                if li is None:
                    continue
                self._picked[li.id] = max(0, min(int(count or 0), li.quantity))

    @classmethod
    def for_order(
        cls, order: OrderDetail, picked: Optional[Mapping[str, int]] = None
    ) -> "PickingSession":
        return cls(order.line_items, picked)

    # ------------------------------------------------------------------
    # scan
    # ------------------------------------------------------------------
    def match(self, barcode: str) -> Optional[LineItem]:
        """First line whose variant barcode equals the scan exactly (case-sensitive)."""
        for li in self.line_items:
            if li.variant_barcode is not None and li.variant_barcode == barcode:
                return li
        return None

    def record_scan(self, barcode: str) -> ScanResult:
        code = str(barcode if barcode is not None else "").strip()
        if not code:
            return ScanResult(ScanOutcome.NO_MATCH)

        li = self.match(code)
        if li is None:
            return ScanResult(ScanOutcome.NO_MATCH)

        new_count = min(self.picked_count(li.id) + 1, li.quantity)
        self._picked[li.id] = new_count

        # reported on every scan at the cap, not only when crossing it
        outcome = ScanOutcome.INCREMENTED if new_count < li.quantity else ScanOutcome.COMPLETED
        return ScanResult(outcome, line_item=li, new_count=new_count)

    # ------------------------------------------------------------------
    # derived state
    # ------------------------------------------------------------------
    def picked_count(self, line_id: str) -> int:
        return self._picked.get(line_id, 0)

    def is_line_complete(self, li: LineItem) -> bool:
        return self.picked_count(li.id) >= li.quantity

    @property
    def total_line_count(self) -> int:
        return len(self.line_items)

    @property
    def completed_line_count(self) -> int:
        return sum(1 for li in self.line_items if self.is_line_complete(li))

    @property
    def total_units(self) -> int:
        return sum(li.quantity for li in self.line_items)

    @property
    def picked_units(self) -> int:
        return sum(min(self.picked_count(li.id), li.quantity) for li in self.line_items)

    @property
    def progress_percent(self) -> int:
        total = self.total_units
        if total <= 0:
            return 0
        # round half up: floor(100 * picked / total + 0.5)
        percent = (200 * self.picked_units + total) // (2 * total)
        # 100 is reserved for a fully picked order (199/200 would round up)
        return percent if self.all_complete else min(percent, 99)

    @property
    def all_complete(self) -> bool:
        return self.total_line_count > 0 and self.completed_line_count == self.total_line_count

    @property
    def no_barcode_count(self) -> int:
        return sum(1 for li in self.line_items if not li.variant_barcode)

    def sorted_line_items(self) -> List[LineItem]:
        """Incomplete lines first, each group in line-item order."""
        return sorted(self.line_items, key=self.is_line_complete)

    def snapshot(self) -> Dict[str, int]:
        return {li.id: self.picked_count(li.id) for li in self.line_items}
