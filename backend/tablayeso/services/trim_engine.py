"""
Trim Engine — trim box / bulkhead ("cenefa") takeoff.

Trim panels are cut from whole boards with a 15 % waste allowance and are
always bought as whole panels (at least one), bypassing the small-area pool.
"""
import logging
import math
from typing import List, Optional

from tablayeso.config import (
    ANCHORS_PER_ANGLE,
    ANGLE_SCREWS_PER_PIECE,
    ANGLE_SPLICE_M,
    ANGLE_STANDARD_LENGTH_M,
    CHANNEL_STANDARD_LENGTH_M,
    FURRING_SPACING_M,
    PANEL_SCREWS_PER_PANEL,
    PANEL_YIELD_M2,
    POST_SPLICE_M,
    STRUCTURE_SCREWS_PER_POST,
    TRIM_WASTE_FACTOR,
)
from tablayeso.models.item_schema import ItemSpec, SegmentSpec, TrimItemIn
from tablayeso.models.materials import ItemKind, Material, TrimOrientation, coerce_panel_type
from tablayeso.services.finishing import ItemCalculation, add_finishing, panel_screw_material
from tablayeso.services.rounding import apply_minimum_dimension_rule, ceil_round
from tablayeso.services.segment_validator import TrimSegment, validate_trim_segments

logger = logging.getLogger("tablayeso-engine")


def trim_panel_count(total_panel_area: float) -> int:
    """Whole panels for ``total_panel_area`` m² with 15 % waste; never 0 for a non-empty trim."""
    if total_panel_area <= 0:
        return 0
    with_waste = total_panel_area / PANEL_YIELD_M2 * (1 + TRIM_WASTE_FACTOR)
    if with_waste <= 1:
        return 1
    return ceil_round(with_waste)


def horizontal_furring_pieces(total_length: float, total_width: float, spacing: float) -> float:
    """
    Furring runs across the trim width every ``spacing`` metres of length.
    Runs wider than one channel piece add a 0.30 m splice per joint.
    """
    if total_length <= 0 or total_width <= 0 or spacing <= 0:
        return 0.0
    lines = total_length / spacing
    per_line = total_width + (math.ceil(total_width / CHANNEL_STANDARD_LENGTH_M) - 1) * POST_SPLICE_M
    return lines * max(per_line, 0.0) / CHANNEL_STANDARD_LENGTH_M


def angle_pieces(total_length: float) -> float:
    """Angle along top and bottom edges plus 0.15 m per splice."""
    if total_length <= 0:
        return 0.0
    pieces = math.ceil(total_length / ANGLE_STANDARD_LENGTH_M) * 2
    splices = max(0, pieces - 1)
    return (total_length * 2 + splices * ANGLE_SPLICE_M) / ANGLE_STANDARD_LENGTH_M


def _orientation(value: Optional[str]) -> Optional[TrimOrientation]:
    if value is None:
        return None
    try:
        return TrimOrientation(value.lower())
    except ValueError:
        return None


class TrimEngine:

    kind = ItemKind.TRIM

    def calculate(self, item: TrimItemIn) -> ItemCalculation:
        validation = validate_trim_segments(item.segments)
        errors: List[str] = list(validation.errors)

        orientation = _orientation(item.orientation)
        if orientation is None:
            errors.append("Orientación Principal de Cenefa inválida.")
        panel_type = coerce_panel_type(item.panel_type)
        if panel_type is None:
            errors.append("Tipo de Panel de Cenefa inválido.")
        sides = item.sides
        if sides is None or sides < 1:
            errors.append("Nº de Lados/Caras de Cenefa inválido (debe ser > 0).")
        spacing = item.furring_spacing
        if spacing is None or spacing <= 0:
            spacing = FURRING_SPACING_M

        if errors:
            return ItemCalculation(errors=errors)

        result = ItemCalculation()
        tally = result.materials
        segments: List[TrimSegment] = validation.segments

        total_panel_area = 0.0
        length_sum = 0.0
        width_sum = 0.0
        height_sum = 0.0
        segment_specs = []

        for seg in segments:
            panel_area = seg.area(orientation.value) * sides
            total_panel_area += panel_area
            length_sum += seg.rule_length
            width_sum += seg.rule_width
            height_sum += seg.rule_height
            segment_specs.append(
                SegmentSpec(
                    number=seg.number,
                    length=seg.length,
                    width=seg.width,
                    height=seg.height,
                    area=seg.area(orientation.value),
                    panel_area=panel_area,
                )
            )

        screw_material = panel_screw_material(panel_type)

        panels = trim_panel_count(total_panel_area)
        if panels > 0:
            result.panels.add_whole(panel_type, panels)
            tally.add(screw_material, panels * PANEL_SCREWS_PER_PANEL)

        length_rule = apply_minimum_dimension_rule(length_sum)
        width_rule = apply_minimum_dimension_rule(width_sum)

        if orientation is TrimOrientation.HORIZONTAL:
            tally.add(
                Material.TRIM_FURRING_HORIZONTAL,
                horizontal_furring_pieces(length_rule, width_rule, spacing),
            )
            tally.add(
                Material.SCREWS_HALF_IN_FINE,
                tally.rounded(Material.TRIM_FURRING_HORIZONTAL) * STRUCTURE_SCREWS_PER_POST,
            )

        if length_rule > 0:
            angles = angle_pieces(length_rule)
            tally.add(Material.TRIM_ANGLE, angles)
            angle_length = apply_minimum_dimension_rule(angles * ANGLE_STANDARD_LENGTH_M)
            tally.add(screw_material, angle_length * (ANGLE_SCREWS_PER_PIECE / ANGLE_STANDARD_LENGTH_M))
            anchors = ceil_round(angles) * ANCHORS_PER_ANGLE
            tally.add(Material.NAILS_WITH_WASHER, anchors)
            tally.add(Material.POWDER_LOADS, anchors)

        add_finishing(
            tally,
            panel_type,
            apply_minimum_dimension_rule(total_panel_area),
            include_panel_screws=False,
        )

        logger.debug(
            "Trim #%s: panel_area=%.2f panels=%d length=%.2f width=%.2f",
            item.number, total_panel_area, panels, length_sum, width_sum,
        )
        result.spec = ItemSpec(
            number=item.number,
            kind=ItemKind.TRIM,
            segments=segment_specs,
            panel_type=panel_type.value,
            orientation=orientation.value,
            sides=sides,
            furring_spacing=spacing,
            total_length_sum=length_sum,
            total_width_sum=width_sum,
            total_height_sum=height_sum,
            total_panel_area=total_panel_area,
        )
        return result
