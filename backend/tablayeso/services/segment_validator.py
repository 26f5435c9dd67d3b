"""
Segment Validator — turns raw segment inputs into immutable geometric records.

Every segment is checked; an invalid one yields an error string and is left
out of the item's geometry while validation continues with the rest.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from tablayeso.models.item_schema import CeilingSegmentIn, TrimSegmentIn, WallSegmentIn
from tablayeso.services.rounding import apply_minimum_dimension_rule


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


@dataclass(frozen=True)
class WallSegment:
    number: int
    width: float
    height: float

    @property
    def rule_width(self) -> float:
        return apply_minimum_dimension_rule(self.width)

    @property
    def rule_height(self) -> float:
        return apply_minimum_dimension_rule(self.height)

    @property
    def raw_area(self) -> float:
        return self.width * self.height

    @property
    def area(self) -> float:
        return self.rule_width * self.rule_height


@dataclass(frozen=True)
class CeilingSegment:
    number: int
    width: float
    length: float

    @property
    def rule_width(self) -> float:
        return apply_minimum_dimension_rule(self.width)

    @property
    def rule_length(self) -> float:
        return apply_minimum_dimension_rule(self.length)

    @property
    def raw_area(self) -> float:
        return self.width * self.length

    @property
    def area(self) -> float:
        return self.rule_width * self.rule_length

    @property
    def perimeter(self) -> float:
        return 2 * (self.rule_width + self.rule_length)


@dataclass(frozen=True)
class TrimSegment:
    number: int
    length: float
    width: float
    height: float

    @property
    def rule_length(self) -> float:
        return apply_minimum_dimension_rule(self.length)

    @property
    def rule_width(self) -> float:
        return apply_minimum_dimension_rule(self.width)

    @property
    def rule_height(self) -> float:
        return apply_minimum_dimension_rule(self.height)

    def area(self, orientation: str) -> float:
        """Panel face of one side: length × height when horizontal, length × width when vertical."""
        if orientation == "horizontal":
            return self.rule_length * self.rule_height
        if orientation == "vertical":
            return self.rule_length * self.rule_width
        return 0.0


@dataclass
class SegmentValidation:
    segments: list = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def has_valid_segment(self) -> bool:
        return bool(self.segments)


def _finish(result: SegmentValidation, submitted: int, item_label: str, segment_label: str) -> SegmentValidation:
    if submitted == 0:
        result.errors.append(f"{item_label} debe tener al menos un segmento de medida.")
    elif not result.segments:
        result.errors.append(f"Ningún segmento de {segment_label} tiene dimensiones válidas (> 0).")
    return result


def validate_wall_segments(segments: Sequence[WallSegmentIn]) -> SegmentValidation:
    result = SegmentValidation()
    for index, seg in enumerate(segments, start=1):
        if not (_positive(seg.width) and _positive(seg.height)):
            result.errors.append(f"Segmento {index}: Dimensiones inválidas (Ancho y Alto deben ser > 0)")
            continue
        result.segments.append(WallSegment(number=index, width=seg.width, height=seg.height))
    return _finish(result, len(segments), "Muro", "muro")


def validate_ceiling_segments(segments: Sequence[CeilingSegmentIn]) -> SegmentValidation:
    result = SegmentValidation()
    for index, seg in enumerate(segments, start=1):
        if not (_positive(seg.width) and _positive(seg.length)):
            result.errors.append(f"Segmento {index}: Dimensiones inválidas (Ancho y Largo deben ser > 0)")
            continue
        result.segments.append(CeilingSegment(number=index, width=seg.width, length=seg.length))
    return _finish(result, len(segments), "Cielo Falso", "cielo falso")


def validate_trim_segments(segments: Sequence[TrimSegmentIn]) -> SegmentValidation:
    result = SegmentValidation()
    for index, seg in enumerate(segments, start=1):
        if not (_positive(seg.length) and _positive(seg.width) and _positive(seg.height)):
            result.errors.append(
                f"Segmento {index}: Dimensiones inválidas (Largo, Ancho y Alto deben ser > 0)"
            )
            continue
        result.segments.append(
            TrimSegment(number=index, length=seg.length, width=seg.width, height=seg.height)
        )
    return _finish(result, len(segments), "Cenefa", "cenefa")
