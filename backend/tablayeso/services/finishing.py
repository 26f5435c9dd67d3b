"""
Shared per-item material tally and the finishing-material rules.

The finishing family of a panel type (light: compound + paper tape, heavy:
basecoat + mesh) is looked up once in ``PANEL_FAMILY`` and applied the same
way by the wall, ceiling and trim calculators.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from tablayeso.config import (
    BASECOAT_M2_PER_SACK,
    COMPOUND_M2_PER_BOX,
    MESH_TAPE_M_PER_M2,
    PANEL_SCREWS_PER_PANEL,
    PANEL_YIELD_M2,
    PANELS_PER_SANDPAPER_SHEET,
    PAPER_TAPE_M_PER_PANEL,
)
from tablayeso.models.item_schema import ItemSpec
from tablayeso.models.materials import Material, PanelType, is_heavy
from tablayeso.services.panel_accumulator import PanelAccumulator
from tablayeso.services.rounding import ceil_round


class MaterialTally:
    """Un-rounded material quantities of a single item."""

    def __init__(self) -> None:
        self._quantities: Dict[Material, float] = {}

    def add(self, material: Material, quantity: float) -> None:
        self._quantities[material] = self._quantities.get(material, 0.0) + quantity

    def get(self, material: Material) -> float:
        return self._quantities.get(material, 0.0)

    def rounded(self, material: Material) -> int:
        return ceil_round(self.get(material))

    def items(self) -> Iterator[Tuple[Material, float]]:
        return iter(self._quantities.items())

    def as_dict(self) -> Dict[str, float]:
        return {m.value: q for m, q in self._quantities.items()}


@dataclass
class ItemCalculation:
    """What one item contributes to the run: its spec, materials and panels, or its errors."""
    spec: Optional[ItemSpec] = None
    materials: MaterialTally = field(default_factory=MaterialTally)
    panels: PanelAccumulator = field(default_factory=PanelAccumulator)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.spec is not None


def panel_screw_material(panel_type: PanelType) -> Material:
    """1" screws that fix this panel type: drill point for heavy boards, fine point otherwise."""
    return Material.SCREWS_1IN_DRILL if is_heavy(panel_type) else Material.SCREWS_1IN_FINE


def add_finishing(
    tally: MaterialTally,
    panel_type: Optional[PanelType],
    area: float,
    include_panel_screws: bool = True,
) -> None:
    """
    Finishing materials for ``area`` m² of one face of ``panel_type``:

        light → Pasta area/22, Cinta de Papel area × 7/2.98,
                Lija panels/2, 1" fine screws panels × 40
        heavy → Basecoat area/8, Cinta malla area × 1,
                1" drill-point screws panels × 40

    where panels = area / 2.98.
    """
    if panel_type is None or area <= 0:
        return
    panels = area / PANEL_YIELD_M2
    if is_heavy(panel_type):
        tally.add(Material.BASECOAT, area / BASECOAT_M2_PER_SACK)
        tally.add(Material.MESH_TAPE, area * MESH_TAPE_M_PER_M2)
    else:
        tally.add(Material.COMPOUND, area / COMPOUND_M2_PER_BOX)
        tally.add(Material.PAPER_TAPE, area * (PAPER_TAPE_M_PER_PANEL / PANEL_YIELD_M2))
        tally.add(Material.SANDPAPER, panels / PANELS_PER_SANDPAPER_SHEET)
    if include_panel_screws:
        tally.add(panel_screw_material(panel_type), panels * PANEL_SCREWS_PER_PANEL)
