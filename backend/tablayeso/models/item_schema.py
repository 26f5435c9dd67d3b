"""
Item input and calculation output schemas.

Input records are deliberately lenient: dimension and option fields coerce
anything non-numeric to ``None`` so that the quantity engine, not the schema
layer, reports the problem as a segment or configuration error tied to the
owning item.
"""
import math
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field

from tablayeso.models.materials import ItemKind, material_unit


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_integer(value: Any) -> Optional[int]:
    number = _coerce_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _coerce_label(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


Dimension = Annotated[Optional[float], BeforeValidator(_coerce_number)]
WholeNumber = Annotated[Optional[int], BeforeValidator(coerce_integer)]
Label = Annotated[Optional[str], BeforeValidator(_coerce_label)]


# ── Segments ──────────────────────────────────────────────────────────────────

class WallSegmentIn(BaseModel):
    width: Dimension = None
    height: Dimension = None


class CeilingSegmentIn(BaseModel):
    width: Dimension = None
    length: Dimension = None


class TrimSegmentIn(BaseModel):
    length: Dimension = None
    width: Dimension = None
    height: Dimension = None


# ── Items ─────────────────────────────────────────────────────────────────────

class WallItemIn(BaseModel):
    """Drywall partition ("muro")."""
    kind: Literal["wall"] = "wall"
    number: WholeNumber = None           # position in the request when unset
    segments: List[WallSegmentIn] = Field(default_factory=list)
    faces: WholeNumber = 1
    face1_panel_type: Label = "Normal"
    face2_panel_type: Label = None       # read only when faces == 2
    post_spacing: Dimension = 0.40
    double_structure: bool = False


class CeilingItemIn(BaseModel):
    """Suspended ceiling ("cielo falso")."""
    kind: Literal["ceiling"] = "ceiling"
    number: WholeNumber = None           # position in the request when unset
    segments: List[CeilingSegmentIn] = Field(default_factory=list)
    panel_type: Label = "Normal"
    plenum: Dimension = 0.0
    angular_deduction: Dimension = 0.0   # metres of perimeter angle not needed


class TrimItemIn(BaseModel):
    """Trim box / bulkhead ("cenefa")."""
    kind: Literal["trim"] = "trim"
    number: WholeNumber = None           # position in the request when unset
    segments: List[TrimSegmentIn] = Field(default_factory=list)
    orientation: Label = "horizontal"
    panel_type: Label = "Normal"
    sides: WholeNumber = 1
    furring_spacing: Dimension = None    # None or ≤ 0 → standard 0.40 m


ItemIn = Annotated[Union[WallItemIn, CeilingItemIn, TrimItemIn], Field(discriminator="kind")]


class CalculationRequest(BaseModel):
    """
    Items stay raw mappings here; each one is validated against ``ItemIn``
    inside the quantity engine so a malformed item is reported on its own.
    """
    work_area: str = ""
    items: List[Dict[str, Any]] = Field(default_factory=list)


# ── Outputs ───────────────────────────────────────────────────────────────────

class SegmentSpec(BaseModel):
    """A validated segment; dimensions are the raw measured values."""
    number: int
    width: Optional[float] = None
    height: Optional[float] = None
    length: Optional[float] = None
    area: float = 0.0                       # after the minimum-dimension rule
    panel_area: Optional[float] = None      # trim only: area × sides


class ItemSpec(BaseModel):
    """Denormalised record of one successfully calculated item, for reporting."""
    number: int
    kind: ItemKind
    segments: List[SegmentSpec] = Field(default_factory=list)
    # Wall
    faces: Optional[int] = None
    face1_panel_type: Optional[str] = None
    face2_panel_type: Optional[str] = None
    post_spacing: Optional[float] = None
    double_structure: bool = False
    # Ceiling / trim
    panel_type: Optional[str] = None
    plenum: Optional[float] = None
    angular_deduction: Optional[float] = None
    orientation: Optional[str] = None
    sides: Optional[int] = None
    furring_spacing: Optional[float] = None
    # Totals
    total_area: Optional[float] = None
    total_width: Optional[float] = None
    total_perimeter: Optional[float] = None
    total_length_sum: Optional[float] = None
    total_width_sum: Optional[float] = None
    total_height_sum: Optional[float] = None
    total_panel_area: Optional[float] = None


class BillLine(BaseModel):
    material: str
    quantity: int
    unit: str


class CalculationResult(BaseModel):
    work_area: str = ""
    bill_of_materials: Dict[str, int] = Field(default_factory=dict)
    item_specs: List[ItemSpec] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def has_materials(self) -> bool:
        return bool(self.bill_of_materials)

    def sorted_lines(self) -> List[BillLine]:
        return [
            BillLine(material=name, quantity=qty, unit=material_unit(name).value)
            for name, qty in sorted(self.bill_of_materials.items())
        ]
