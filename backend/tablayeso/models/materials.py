"""
Closed catalogue of panel types, item kinds and materials.

Every quantity the engine emits is keyed by a ``Material`` (or by a panel
type through ``panel_material_name``) so the set of billable materials is
enumerable and every line has a fixed unit of measure.
"""
from enum import Enum
from typing import Dict, Optional


class PanelType(str, Enum):
    NORMAL = "Normal"
    MOISTURE_RESISTANT = "Resistente a la Humedad"
    FIRE_RESISTANT = "Resistente al Fuego"
    HIGH_IMPACT = "Alta Resistencia"
    EXTERIOR = "Exterior"
    DUROCK = "Durock"


class FinishingFamily(str, Enum):
    """Light panels take joint compound and paper tape; heavy panels take basecoat and mesh."""
    LIGHT = "light"
    HEAVY = "heavy"


PANEL_FAMILY: Dict[PanelType, FinishingFamily] = {
    PanelType.NORMAL: FinishingFamily.LIGHT,
    PanelType.MOISTURE_RESISTANT: FinishingFamily.LIGHT,
    PanelType.FIRE_RESISTANT: FinishingFamily.LIGHT,
    PanelType.HIGH_IMPACT: FinishingFamily.LIGHT,
    PanelType.EXTERIOR: FinishingFamily.HEAVY,
    PanelType.DUROCK: FinishingFamily.HEAVY,
}


def is_heavy(panel_type: PanelType) -> bool:
    return PANEL_FAMILY[panel_type] is FinishingFamily.HEAVY


class ItemKind(str, Enum):
    WALL = "wall"
    CEILING = "ceiling"
    TRIM = "trim"


ITEM_KIND_NAMES: Dict[ItemKind, str] = {
    ItemKind.WALL: "Muro",
    ItemKind.CEILING: "Cielo Falso",
    ItemKind.TRIM: "Cenefa",
}


class TrimOrientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Unit(str, Enum):
    UNIT = "Und"
    BOX = "Caja"
    LINEAR_METER = "m"
    SHEET = "Pliego"
    SACK = "Saco"


class Material(str, Enum):
    # Wall framing
    POSTS = "Postes"
    POSTS_HEAVY = "Postes Calibre 20"
    CHANNELS = "Canales"
    CHANNELS_HEAVY = "Canales Calibre 20"
    # Ceiling framing
    FURRING_CHANNEL = "Canal Listón"
    SUPPORT_CHANNEL = "Canal Soporte"
    ANGLE = "Angular de Lámina"
    HANGERS = "Patas"
    HANGER_FURRING = "Canal Listón (para cuelgue)"
    # Trim framing
    TRIM_FURRING_HORIZONTAL = "Canal Listón (Cenefa Horizontal)"
    TRIM_ANGLE = "Angular de Lámina (Cenefa)"
    # Finishing, light family
    COMPOUND = "Pasta"
    PAPER_TAPE = "Cinta de Papel"
    SANDPAPER = "Lija Grano 120"
    # Finishing, heavy family
    BASECOAT = "Basecoat"
    MESH_TAPE = "Cinta malla"
    # Fasteners
    NAILS_WITH_WASHER = "Clavos con Roldana"
    POWDER_LOADS = "Fulminantes"
    SCREWS_1IN_FINE = 'Tornillos de 1" punta fina'
    SCREWS_HALF_IN_FINE = 'Tornillos de 1/2" punta fina'
    SCREWS_1IN_DRILL = 'Tornillos de 1" punta broca'
    SCREWS_HALF_IN_DRILL = 'Tornillos de 1/2" punta broca'


MATERIAL_UNITS: Dict[Material, Unit] = {
    Material.COMPOUND: Unit.BOX,
    Material.PAPER_TAPE: Unit.LINEAR_METER,
    Material.SANDPAPER: Unit.SHEET,
    Material.BASECOAT: Unit.SACK,
    Material.MESH_TAPE: Unit.LINEAR_METER,
}

PANEL_MATERIAL_PREFIX = "Paneles de "


def panel_material_name(panel_type: PanelType) -> str:
    return f"{PANEL_MATERIAL_PREFIX}{panel_type.value}"


def material_unit(name: str) -> Unit:
    """Unit of measure for a bill-of-materials line name."""
    if name.startswith(PANEL_MATERIAL_PREFIX):
        return Unit.UNIT
    try:
        material = Material(name)
    except ValueError:
        return Unit.UNIT
    return MATERIAL_UNITS.get(material, Unit.UNIT)


def coerce_panel_type(value) -> Optional[PanelType]:
    """Panel type for a display value, or None when it is not in the catalogue."""
    if isinstance(value, PanelType):
        return value
    try:
        return PanelType(value)
    except ValueError:
        return None
