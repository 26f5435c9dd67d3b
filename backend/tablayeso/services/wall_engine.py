"""
Wall Engine — drywall partition ("muro") takeoff.

Derives panels, studs ("Postes"), tracks ("Canales"), finishing materials and
fasteners from the validated segments of one wall item.

Studs and tracks come in two gauges: the standard profile for light boards
and the Calibre 20 profile for heavy boards (Exterior, Durock). A double
structure wall whose faces differ in gauge carries a full structure of each.
"""
import logging
import math
from typing import List

from tablayeso.config import (
    ANCHORS_PER_CHANNEL,
    CHANNEL_STANDARD_LENGTH_M,
    POST_SPLICE_M,
    POST_STANDARD_LENGTH_M,
    SHORT_DOUBLE_WALL_WIDTH_M,
    STRUCTURE_SCREWS_PER_POST,
    TWO_FACE_MAX_HEIGHT_M,
    TWO_FACE_MAX_WIDTH_M,
)
from tablayeso.models.item_schema import ItemSpec, SegmentSpec, WallItemIn
from tablayeso.models.materials import ItemKind, Material, coerce_panel_type, is_heavy
from tablayeso.services.finishing import ItemCalculation, add_finishing
from tablayeso.services.rounding import apply_minimum_dimension_rule
from tablayeso.services.segment_validator import WallSegment, validate_wall_segments

logger = logging.getLogger("tablayeso-engine")


def segment_posts(segment: WallSegment, post_spacing: float) -> float:
    """
    Studs for one segment of a single structure.

    Across the width: 2 when the raw width is under one spacing, otherwise
    floor(width / spacing) + 1. Walls taller than a standard stud are
    spliced, scaling the count by (height + 0.30) / 3.66.
    """
    if 0 < segment.width < post_spacing:
        across = 2
    else:
        across = math.floor(segment.rule_width / post_spacing) + 1
    if segment.rule_height <= POST_STANDARD_LENGTH_M:
        return float(across)
    return across * (segment.rule_height + POST_SPLICE_M) / POST_STANDARD_LENGTH_M


def is_two_face_return(segment: WallSegment, faces: int) -> bool:
    """A narrow 2-face return is wrapped by a single panel."""
    return (
        faces == 2
        and segment.width <= TWO_FACE_MAX_WIDTH_M
        and segment.height <= TWO_FACE_MAX_HEIGHT_M
    )


class WallEngine:

    kind = ItemKind.WALL

    def calculate(self, item: WallItemIn) -> ItemCalculation:
        validation = validate_wall_segments(item.segments)
        errors: List[str] = list(validation.errors)

        faces = item.faces
        if faces not in (1, 2):
            errors.append("Nº Caras inválido (debe ser 1 o 2)")
        spacing = item.post_spacing
        if spacing is None or spacing <= 0:
            errors.append("Espaciamiento Postes inválido (debe ser > 0)")
        face1 = coerce_panel_type(item.face1_panel_type)
        if face1 is None:
            errors.append("Tipo de Panel Cara 1 inválido.")
        face2 = None
        if faces == 2:
            face2 = coerce_panel_type(item.face2_panel_type)
            if face2 is None:
                errors.append("Tipo de Panel Cara 2 inválido para 2 caras.")

        if errors:
            return ItemCalculation(errors=errors)

        result = ItemCalculation()
        tally = result.materials
        segments: List[WallSegment] = validation.segments

        total_area = 0.0
        total_width = 0.0
        total_raw_width = 0.0
        posts_single = 0.0
        segment_specs = []

        for seg in segments:
            if is_two_face_return(seg, faces):
                result.panels.add_whole(face1, 1)
                logger.debug("Wall #%s segment %s: one panel covers both faces", item.number, seg.number)
            else:
                result.panels.add(face1, seg.raw_area)
                if face2 is not None:
                    result.panels.add(face2, seg.raw_area)

            total_area += seg.area
            total_width += seg.rule_width
            total_raw_width += seg.width
            posts_single += segment_posts(seg, spacing)
            segment_specs.append(
                SegmentSpec(number=seg.number, width=seg.width, height=seg.height, area=seg.area)
            )

        face1_heavy = is_heavy(face1)
        face2_heavy = is_heavy(face2) if face2 is not None else False
        mixed_gauge = item.double_structure and faces == 2 and face1_heavy != face2_heavy
        structure_factor = 2 if item.double_structure else 1

        # Studs
        if mixed_gauge:
            tally.add(Material.POSTS, posts_single)
            tally.add(Material.POSTS_HEAVY, posts_single)
        else:
            post_material = Material.POSTS_HEAVY if face1_heavy else Material.POSTS
            tally.add(post_material, posts_single * structure_factor)

        # Tracks: top and bottom
        channels_single = apply_minimum_dimension_rule(total_width) * 2 / CHANNEL_STANDARD_LENGTH_M
        if mixed_gauge:
            tally.add(Material.CHANNELS, channels_single)
            tally.add(Material.CHANNELS_HEAVY, channels_single)
        else:
            if item.double_structure and total_raw_width < SHORT_DOUBLE_WALL_WIDTH_M:
                needed = total_raw_width * 4
                channels = 1.0 if needed <= CHANNEL_STANDARD_LENGTH_M else needed / CHANNEL_STANDARD_LENGTH_M
            else:
                channels = channels_single * structure_factor
            channel_material = Material.CHANNELS_HEAVY if face1_heavy else Material.CHANNELS
            tally.add(channel_material, channels)

        # Finishing, once per face
        area_rule = apply_minimum_dimension_rule(total_area)
        add_finishing(tally, face1, area_rule)
        if face2 is not None:
            add_finishing(tally, face2, area_rule)

        # Fasteners from whole members
        if total_width > 0:
            channel_count = tally.rounded(Material.CHANNELS) + tally.rounded(Material.CHANNELS_HEAVY)
            tally.add(Material.NAILS_WITH_WASHER, channel_count * ANCHORS_PER_CHANNEL)
            tally.add(Material.POWDER_LOADS, channel_count * ANCHORS_PER_CHANNEL)
            tally.add(Material.SCREWS_HALF_IN_FINE, tally.rounded(Material.POSTS) * STRUCTURE_SCREWS_PER_POST)
            tally.add(
                Material.SCREWS_HALF_IN_DRILL,
                tally.rounded(Material.POSTS_HEAVY) * STRUCTURE_SCREWS_PER_POST,
            )

        result.spec = ItemSpec(
            number=item.number,
            kind=ItemKind.WALL,
            segments=segment_specs,
            faces=faces,
            face1_panel_type=face1.value,
            face2_panel_type=face2.value if face2 is not None else None,
            post_spacing=spacing,
            double_structure=item.double_structure,
            total_area=total_area,
            total_width=total_width,
        )
        return result
