"""
Panel Accumulator — per-panel-type dual-bucket panel demand.

Small pieces (< SMALL_AREA_THRESHOLD_M2) are pooled as fractional panels and
rounded once at finalisation so offcuts amortise; larger areas are bought as
discrete panels and rounded per contribution.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from tablayeso.config import PANEL_YIELD_M2, SMALL_AREA_THRESHOLD_M2
from tablayeso.models.materials import PanelType, panel_material_name
from tablayeso.services.rounding import ceil_round

logger = logging.getLogger("tablayeso-engine")


@dataclass
class PanelBuckets:
    fractional_small: float = 0.0
    rounded_other: int = 0

    def total(self) -> int:
        # 9 d.p. keeps the pooled sum independent of float summation order
        return ceil_round(round(self.fractional_small, 9)) + self.rounded_other


class PanelAccumulator:
    """
    Accumulates panel demand for one calculation run (or one item).

    Item calculators fill a private accumulator which the quantity engine
    merges into the run accumulator only when the item succeeds.
    """

    def __init__(self) -> None:
        self._buckets: Dict[PanelType, PanelBuckets] = {pt: PanelBuckets() for pt in PanelType}

    def add(self, panel_type: Optional[PanelType], area: float) -> None:
        """Add the panel demand of one face/segment of raw area ``area`` (m²)."""
        if panel_type is None or area is None or area <= 0:
            return
        panels = area / PANEL_YIELD_M2
        bucket = self._buckets[panel_type]
        if area < SMALL_AREA_THRESHOLD_M2:
            bucket.fractional_small += panels
        else:
            bucket.rounded_other += ceil_round(panels)

    def add_whole(self, panel_type: Optional[PanelType], count: int) -> None:
        """Add whole panels that are bought as-is (two-face returns, trim boxes)."""
        if panel_type is None or count <= 0:
            return
        self._buckets[panel_type].rounded_other += int(count)

    def merge(self, other: "PanelAccumulator") -> None:
        for panel_type, bucket in other._buckets.items():
            mine = self._buckets[panel_type]
            mine.fractional_small += bucket.fractional_small
            mine.rounded_other += bucket.rounded_other

    def buckets(self, panel_type: PanelType) -> PanelBuckets:
        return self._buckets[panel_type]

    def is_empty(self) -> bool:
        return all(b.fractional_small == 0 and b.rounded_other == 0 for b in self._buckets.values())

    def finalize(self) -> Dict[str, int]:
        """Whole panels per type, keyed by bill-of-materials name; zero types omitted."""
        totals: Dict[str, int] = {}
        for panel_type, bucket in self._buckets.items():
            count = bucket.total()
            if count > 0:
                totals[panel_material_name(panel_type)] = count
        logger.debug("Panel totals finalised: %s", totals)
        return totals
