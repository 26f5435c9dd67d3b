"""
Ceiling Engine — suspended ceiling ("cielo falso") takeoff.

Grid: support channels ("Canal Soporte") run across the longer span at
0.90 m and are cut to the shorter span; furring channels ("Canal Listón")
run at 0.40 m; hangers ("Patas") sit on a 0.90 m grid and, when there is a
plenum, each hanger takes a furring drop of plenum + 0.10 m. The perimeter
gets sheet-metal angle less any length the user deducts.
"""
import logging
import math
from typing import List

from tablayeso.config import (
    ANCHORS_PER_ANGLE,
    ANCHORS_PER_CHANNEL,
    ANGLE_STANDARD_LENGTH_M,
    CHANNEL_STANDARD_LENGTH_M,
    FURRING_SCREWS_PER_PIECE,
    FURRING_SPACING_M,
    HANGER_EXTRA_M,
    HANGER_SCREWS_PER_PIECE,
    SUPPORT_CHANNEL_STANDARD_LENGTH_M,
    SUPPORT_SPACING_M,
)
from tablayeso.models.item_schema import CeilingItemIn, ItemSpec, SegmentSpec
from tablayeso.models.materials import ItemKind, Material, coerce_panel_type
from tablayeso.services.finishing import ItemCalculation, add_finishing
from tablayeso.services.rounding import apply_minimum_dimension_rule
from tablayeso.services.segment_validator import CeilingSegment, validate_ceiling_segments

logger = logging.getLogger("tablayeso-engine")


def support_channel_meters(segment: CeilingSegment) -> float:
    """(floor(longer / 0.90) + 1) channels, each cut to the shorter span; raw dimensions."""
    shorter = min(segment.width, segment.length)
    longer = max(segment.width, segment.length)
    return (math.floor(longer / SUPPORT_SPACING_M) + 1) * shorter


def segment_hangers(segment: CeilingSegment) -> int:
    return math.floor(segment.rule_length / SUPPORT_SPACING_M) * math.floor(
        segment.rule_width / SUPPORT_SPACING_M
    )


class CeilingEngine:

    kind = ItemKind.CEILING

    def calculate(self, item: CeilingItemIn) -> ItemCalculation:
        validation = validate_ceiling_segments(item.segments)
        errors: List[str] = list(validation.errors)

        if item.plenum is None or item.plenum < 0:
            errors.append("Pleno inválido (debe ser >= 0)")
        panel_type = coerce_panel_type(item.panel_type)
        if panel_type is None:
            errors.append("Tipo de Panel de Cielo inválido.")
        deduction = item.angular_deduction
        if deduction is None or deduction < 0:
            errors.append("Metros a descontar de Angular inválido (debe ser >= 0).")

        if errors:
            return ItemCalculation(errors=errors)

        result = ItemCalculation()
        tally = result.materials
        segments: List[CeilingSegment] = validation.segments

        total_area = 0.0
        total_perimeter = 0.0
        support_meters = 0.0
        hangers = 0
        segment_specs = []

        for seg in segments:
            support_meters += support_channel_meters(seg)
            total_area += seg.area
            total_perimeter += seg.perimeter
            hangers += segment_hangers(seg)
            result.panels.add(panel_type, seg.raw_area)
            segment_specs.append(
                SegmentSpec(number=seg.number, width=seg.width, length=seg.length, area=seg.area)
            )

        area_rule = apply_minimum_dimension_rule(total_area)
        perimeter_rule = apply_minimum_dimension_rule(total_perimeter)

        if area_rule > 0:
            tally.add(Material.FURRING_CHANNEL, (area_rule / FURRING_SPACING_M) / CHANNEL_STANDARD_LENGTH_M)
        tally.add(Material.SUPPORT_CHANNEL, support_meters / SUPPORT_CHANNEL_STANDARD_LENGTH_M)
        tally.add(Material.ANGLE, max(0.0, perimeter_rule - deduction) / ANGLE_STANDARD_LENGTH_M)
        tally.add(Material.HANGERS, hangers)

        hanger_count = tally.rounded(Material.HANGERS)
        if item.plenum > 0 and hanger_count > 0:
            tally.add(
                Material.HANGER_FURRING,
                hanger_count * (item.plenum + HANGER_EXTRA_M) / CHANNEL_STANDARD_LENGTH_M,
            )

        add_finishing(tally, panel_type, area_rule)

        if area_rule > 0 or perimeter_rule > 0:
            angles = tally.rounded(Material.ANGLE)
            supports = tally.rounded(Material.SUPPORT_CHANNEL)
            anchors = angles * ANCHORS_PER_ANGLE + supports * ANCHORS_PER_CHANNEL
            tally.add(Material.NAILS_WITH_WASHER, anchors)
            tally.add(Material.POWDER_LOADS, anchors)
            tally.add(
                Material.SCREWS_HALF_IN_FINE,
                tally.rounded(Material.FURRING_CHANNEL) * FURRING_SCREWS_PER_PIECE
                + hanger_count * HANGER_SCREWS_PER_PIECE
                + tally.rounded(Material.HANGER_FURRING) * HANGER_SCREWS_PER_PIECE,
            )

        logger.debug(
            "Ceiling #%s: area=%.2f perimeter=%.2f support_m=%.2f hangers=%d",
            item.number, total_area, total_perimeter, support_meters, hangers,
        )
        result.spec = ItemSpec(
            number=item.number,
            kind=ItemKind.CEILING,
            segments=segment_specs,
            panel_type=panel_type.value,
            plenum=item.plenum,
            angular_deduction=deduction,
            total_area=total_area,
            total_perimeter=total_perimeter,
        )
        return result
