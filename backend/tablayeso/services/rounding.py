"""Numeric rules shared by every calculator."""
import math
from typing import Any


def apply_minimum_dimension_rule(value: Any) -> float:
    """
    Bill any metraje under one metre as one metre.

    Returns 0.0 for anything that is not a positive number, 1.0 for
    0 < value < 1, and the value unchanged otherwise. Applied to lengths and
    areas that feed framing and finishing formulas, never to panel counts.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number <= 0:
        return 0.0
    return 1.0 if number < 1 else number


def ceil_round(value: float) -> int:
    """Smallest integer >= value."""
    return int(math.ceil(value))
