"""
test_rounding.py — minimum-dimension rule and ceiling rounding.
"""

import math
import pytest

from tablayeso.services.rounding import apply_minimum_dimension_rule, ceil_round


class TestMinimumDimensionRule:

    @pytest.mark.parametrize("value", [0.01, 0.5, 0.999])
    def test_below_one_metre_bills_as_one(self, value):
        assert apply_minimum_dimension_rule(value) == 1.0

    @pytest.mark.parametrize("value", [1.0, 1.2, 3.66, 250.0])
    def test_one_metre_and_above_unchanged(self, value):
        assert apply_minimum_dimension_rule(value) == value

    @pytest.mark.parametrize("value", [0, 0.0, -0.5, -10])
    def test_zero_or_negative_is_zero(self, value):
        assert apply_minimum_dimension_rule(value) == 0.0

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), True, [1]])
    def test_non_numeric_is_zero(self, value):
        assert apply_minimum_dimension_rule(value) == 0.0

    def test_numeric_string_accepted(self):
        assert apply_minimum_dimension_rule("2.5") == 2.5


class TestCeilRound:

    def test_exact_integer_unchanged(self):
        assert ceil_round(2.0) == 2

    def test_fraction_rounds_up(self):
        assert ceil_round(2.0001) == 3
        assert ceil_round(0.01) == 1

    def test_zero(self):
        assert ceil_round(0.0) == 0

    @pytest.mark.parametrize("value", [0.0, 0.2, 1.0, 2.0001, 7.72, 30.5])
    def test_idempotent(self, value):
        assert ceil_round(ceil_round(value)) == ceil_round(value)

    def test_returns_int(self):
        assert isinstance(ceil_round(1.5), int)
        assert ceil_round(1.5) == math.ceil(1.5)
