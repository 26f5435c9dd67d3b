"""
Quantity Engine — aggregates a list of items into one bill of materials.

Each item is calculated by the calculator registered for its kind inside its
own failure boundary. A failing item contributes nothing; the rest of the run
carries on and the failure is reported next to the partial result.

Panels are pooled across every successful item in a run accumulator and
rounded once at the end; every other material is ceiling-rounded per item
and then summed.
"""
import logging
import time
from typing import Any, Dict, List, Mapping, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from tablayeso.models.item_schema import CalculationResult, ItemIn, ItemSpec, coerce_integer
from tablayeso.models.materials import ITEM_KIND_NAMES, ItemKind
from tablayeso.services.ceiling_engine import CeilingEngine
from tablayeso.services.panel_accumulator import PanelAccumulator
from tablayeso.services.rounding import ceil_round
from tablayeso.services.trim_engine import TrimEngine
from tablayeso.services.wall_engine import WallEngine

logger = logging.getLogger("tablayeso-engine")

NO_ITEMS_ERROR = "No hay ítems agregados para calcular."

_ITEM_ADAPTER = TypeAdapter(ItemIn)


def item_kind_name(kind: Any) -> str:
    """Display name of an item kind ("Muro", "Cielo Falso", "Cenefa"); unknown kinds echo back."""
    try:
        return ITEM_KIND_NAMES[ItemKind(kind)]
    except ValueError:
        return str(kind)


def _raw_kind(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("kind", "")
    return getattr(raw, "kind", "")


def _raw_number(raw: Any, position: int) -> int:
    if isinstance(raw, Mapping):
        number = coerce_integer(raw.get("number"))
    else:
        number = getattr(raw, "number", None)
    return position if number is None else number


def _validation_message(exc: ValidationError) -> str:
    fields = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        fields.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Datos inválidos (" + "; ".join(fields) + ")"


class QuantityEngine:
    """
    Runs the wall, ceiling and trim calculators over a list of items.

    Usage:
        engine = QuantityEngine()
        result = engine.calculate(items, work_area="Nivel 2")
        result.bill_of_materials   # {"Paneles de Normal": 12, "Postes": 30, ...}
        result.errors              # ["Error en Muro #2: ...", ...]
    """

    def __init__(self):
        self._calculators = {
            ItemKind.WALL: WallEngine(),
            ItemKind.CEILING: CeilingEngine(),
            ItemKind.TRIM: TrimEngine(),
        }

    def calculate(
        self,
        items: Sequence[Union[Mapping[str, Any], Any]],
        work_area: str = "",
    ) -> CalculationResult:
        work_area = (work_area or "").strip()
        if not items:
            logger.warning("Calculation requested with no items")
            return CalculationResult(work_area=work_area, errors=[NO_ITEMS_ERROR])

        started = time.perf_counter()
        run_panels = PanelAccumulator()
        other_materials: Dict[str, int] = {}
        specs: List[ItemSpec] = []
        errors: List[str] = []

        logger.info(
            "Calculation started: %d items, work area %r", len(items), work_area,
            extra={"item_count": len(items), "work_area": work_area},
        )

        for position, raw in enumerate(items, start=1):
            number = _raw_number(raw, position)
            kind_name = item_kind_name(_raw_kind(raw))
            try:
                item = self._validate_item(raw, position)
            except ValidationError as e:
                logger.warning(
                    "Item %s #%s rejected by validation: %d errors", kind_name, number, e.error_count(),
                    extra={"item_number": number},
                )
                errors.append(f"Error en {kind_name} #{number}: {_validation_message(e)}")
                continue

            number = item.number
            kind_name = item_kind_name(item.kind)
            try:
                calc = self._calculators[ItemKind(item.kind)].calculate(item)
            except Exception as e:
                logger.exception(
                    "Unexpected error processing item %s #%s", kind_name, number,
                    extra={"item_number": number},
                )
                errors.append(f"Error inesperado procesando Ítem {kind_name} #{number}: {e}")
                continue

            if not calc.ok:
                logger.warning(
                    "Item %s #%s excluded: %s", kind_name, number, "; ".join(calc.errors),
                    extra={"item_number": number},
                )
                errors.append(f"Error en {kind_name} #{number}: {', '.join(calc.errors)}")
                continue

            run_panels.merge(calc.panels)
            for material, quantity in calc.materials.items():
                rounded = ceil_round(quantity)
                other_materials[material.value] = other_materials.get(material.value, 0) + rounded
            specs.append(calc.spec)
            logger.debug(
                "Item %s #%s contributed %d materials", kind_name, number, len(calc.materials.as_dict()),
                extra={"item_number": number},
            )

        bill: Dict[str, int] = {}
        bill.update(run_panels.finalize())
        for name, quantity in other_materials.items():
            bill[name] = bill.get(name, 0) + quantity
        bill = {name: quantity for name, quantity in bill.items() if quantity > 0}

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "Calculation finished: %d materials, %d items ok, %d errors",
            len(bill), len(specs), len(errors),
            extra={
                "duration_ms": duration_ms,
                "material_count": len(bill),
                "error_count": len(errors),
            },
        )
        return CalculationResult(
            work_area=work_area,
            bill_of_materials=bill,
            item_specs=specs,
            errors=errors,
        )

    @staticmethod
    def _validate_item(raw: Any, position: int) -> Any:
        item = _ITEM_ADAPTER.validate_python(dict(raw) if isinstance(raw, Mapping) else raw)
        if item.number is None:
            item = item.model_copy(update={"number": position})
        return item


# ── Item summaries ────────────────────────────────────────────────────────────

def _m(value: float) -> str:
    return f"{value:.2f} m"


def describe_item(spec: ItemSpec) -> List[str]:
    """
    Human-readable summary lines of one calculated item, in the order they
    are printed on reports. Segment lines are prefixed with "- ".
    """
    lines = [f"Tipo: {ITEM_KIND_NAMES[spec.kind]}"]

    if spec.kind is ItemKind.WALL:
        lines.append(f"Nº Caras: {spec.faces}")
        lines.append(f"Panel Cara 1: {spec.face1_panel_type}")
        if spec.faces == 2 and spec.face2_panel_type:
            lines.append(f"Panel Cara 2: {spec.face2_panel_type}")
        lines.append(f"Espaciamiento Postes: {_m(spec.post_spacing)}")
        lines.append(f"Estructura Doble: {'Sí' if spec.double_structure else 'No'}")
        lines.append("Segmentos:")
        for seg in spec.segments:
            lines.append(f"- Segmento {seg.number}: {_m(seg.width)} (Ancho) x {_m(seg.height)} (Alto)")
        lines.append(f"- Área Total Segmentos: {spec.total_area:.2f} m²")
        lines.append(f"- Ancho Total Segmentos: {_m(spec.total_width)}")

    elif spec.kind is ItemKind.CEILING:
        lines.append(f"Tipo de Panel: {spec.panel_type}")
        lines.append(f"Pleno: {_m(spec.plenum)}")
        if spec.angular_deduction:
            lines.append(f"Descuento Angular: {_m(spec.angular_deduction)}")
        lines.append("Segmentos:")
        for seg in spec.segments:
            lines.append(f"- Segmento {seg.number}: {_m(seg.width)} (Ancho) x {_m(seg.length)} (Largo)")
        lines.append(f"- Área Total Segmentos: {spec.total_area:.2f} m²")
        lines.append(f"- Suma Perímetros Segmentos: {_m(spec.total_perimeter)}")

    else:
        lines.append(f"Orientación Principal: {spec.orientation}")
        lines.append(f"Tipo de Panel: {spec.panel_type}")
        lines.append(f"Nº de Lados/Caras con Panel: {spec.sides}")
        lines.append(f"Espaciamiento Canal Listón: {_m(spec.furring_spacing)}")
        lines.append("Segmentos:")
        for seg in spec.segments:
            lines.append(
                f"- Segmento {seg.number}: {_m(seg.length)} (Largo) x "
                f"{_m(seg.width)} (Ancho) x {_m(seg.height)} (Alto)"
            )
        lines.append(f"- Área Total Panel (con lados): {spec.total_panel_area:.2f} m²")
        lines.append(f"- Suma Largo Segmentos: {_m(spec.total_length_sum)}")
        lines.append(f"- Suma Ancho Segmentos: {_m(spec.total_width_sum)}")
        lines.append(f"- Suma Alto Segmentos: {_m(spec.total_height_sum)}")

    return lines
