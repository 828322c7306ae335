"""
Tests for the numeric rules: sizes, strict @fluid arguments, rounding and
number formatting.
"""

import pytest

from fluidclamp.units import (
    format_number,
    parse_fluid_number,
    parse_size,
    round_half_away,
)


class TestParseSize:
    """clamp() bounds in px, rem and em."""

    @pytest.mark.parametrize("token, expected", [
        ("16px", 16.0),
        ("1rem", 16.0),
        ("0.5rem", 8.0),
        ("2em", 32.0),
        (".5px", 0.5),
        ("  2rem  ", 32.0),
    ])
    def test_supported_units(self, token, expected):
        assert parse_size(token) == expected

    @pytest.mark.parametrize("token", [
        "1vw",
        "50%",
        "1REM",
        "-1px",
        "px",
        "1.2.3px",
        ".px",
        "calc",
        "1 rem",
        "",
    ])
    def test_unparseable(self, token):
        """Anything else is None, never an exception."""
        assert parse_size(token) is None


class TestParseFluidNumber:
    """Only canonical decimal text is a valid @fluid argument."""

    @pytest.mark.parametrize("token, expected", [
        ("320", 320.0),
        ("0", 0.0),
        ("-4", -4.0),
        ("0.5", 0.5),
        ("1024.25", 1024.25),
    ])
    def test_canonical(self, token, expected):
        assert parse_fluid_number(token) == expected

    @pytest.mark.parametrize("token", [
        "22rq3112",
        "320px",
        "0320",
        "1.50",
        "1.",
        ".5",
        "+1",
        "-0",
        "1e3",
        "",
        "abc",
        "9007199254740993",
    ])
    def test_rejected(self, token):
        assert parse_fluid_number(token) is None


class TestRounding:
    """Five-decimal rounding, halves away from zero."""

    def test_rounds_to_five_places(self):
        assert round_half_away(2.0833333333) == 2.08333
        assert round_half_away(2.272727272727) == 2.27273

    def test_half_rounds_away_from_zero(self):
        assert round_half_away(0.000005) == 0.00001
        assert round_half_away(-0.000005) == -0.00001

    def test_tiny_values_round_to_zero(self):
        assert round_half_away(1.7e-15) == 0.0

    def test_custom_precision(self):
        assert round_half_away(1.25, places=1) == 1.3

    def test_rounds_the_stored_binary_value(self):
        # 1.234565 and 2.000005 are stored just below the half
        assert round_half_away(1.234565) == 1.23456
        assert round_half_away(2.000005) == 2.0


class TestFormatNumber:
    """Output text for numbers."""

    @pytest.mark.parametrize("value, expected", [
        (16.0, "16"),
        (16, "16"),
        (8.72727, "8.72727"),
        (-2.27273, "-2.27273"),
        (-0.0, "0"),
        (0.0000001, "0.0000001"),
        (1e22, "10000000000000000000000"),
    ])
    def test_format(self, value, expected):
        assert format_number(value) == expected
