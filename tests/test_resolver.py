"""
Tests for the Fluid Resolver.

Covers:
    - The documented rewrite scenarios
    - Argument validation and diagnostics (per match, only when enabled)
    - Defaults and positional overrides
    - Silent skips for anything that is not clamp(a, @fluid(...), b)
    - Idempotence and byte-identical passthrough
"""

import pytest

from fluidclamp.config import FluidConfig
from fluidclamp.resolver import DiagnosticKind, LinearMapping, resolve
from fluidclamp.units import round_half_away


WARN = FluidConfig(warnings=True)


class TestScenarios:
    """The documented input/output pairs."""

    def test_default_arguments(self):
        """@fluid() uses 768px..1536px."""
        resolution = resolve("clamp(1rem, @fluid(), 2rem)", WARN)
        assert resolution.value == "clamp(1rem, calc(0px + 2.08333vw), 2rem)"
        assert resolution.changed
        assert resolution.diagnostics == []

    def test_two_arguments(self):
        """@fluid(minWidth, maxWidth)."""
        resolution = resolve("clamp(1rem, @fluid(320, 1024), 2rem)", WARN)
        assert resolution.value == "clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)"
        assert resolution.diagnostics == []

    def test_three_arguments(self):
        """@fluid(minWidth, maxWidth, baseFontSize)."""
        resolution = resolve("clamp(1rem, @fluid(320, 1024, 16), 2rem)", WARN)
        assert resolution.value == "clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)"

    def test_pixel_bounds(self):
        """px bounds behave like their rem equivalents."""
        resolution = resolve("clamp(16px, @fluid(), 32px)", WARN)
        assert resolution.value == "clamp(16px, calc(0px + 2.08333vw), 32px)"

    def test_px_bounds_with_three_arguments(self):
        resolution = resolve("clamp(10px, @fluid(320, 1024, 16), 20px)", WARN)
        assert resolution.value == "clamp(10px, calc(5.45455px + 1.42045vw), 20px)"

    def test_whole_numbers_print_without_fraction(self):
        resolution = resolve("clamp(0.5rem, @fluid(400, 1200), 1rem)", WARN)
        assert resolution.value == "clamp(0.5rem, calc(4px + 1vw), 1rem)"

    def test_invalid_argument(self):
        """A malformed number leaves the value untouched and warns once."""
        value = "clamp(1rem, @fluid(320, 22rq3112), 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == value
        assert not resolution.changed
        assert len(resolution.diagnostics) == 1
        diagnostic = resolution.diagnostics[0]
        assert diagnostic.kind == DiagnosticKind.INVALID_ARGUMENTS
        assert diagnostic.text == "@fluid function contains invalid numerical arguments."
        assert diagnostic.plugin == "fluid-clamp"

    def test_one_argument(self):
        """A single argument is the wrong count."""
        value = "clamp(1rem, @fluid(320), 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == value
        assert len(resolution.diagnostics) == 1
        assert resolution.diagnostics[0].kind == DiagnosticKind.WRONG_ARGUMENT_COUNT
        assert resolution.diagnostics[0].text == (
            "@fluid function requires either 0, 2, or 3 numerical arguments, "
            "but received 1."
        )

    def test_four_arguments(self):
        value = "clamp(1rem, @fluid(320, 1024, 16, 24), 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == value
        assert len(resolution.diagnostics) == 1
        assert "but received 4." in resolution.diagnostics[0].text

    def test_equal_widths(self):
        """minWidth == maxWidth substitutes the base font size."""
        resolution = resolve("clamp(1rem, @fluid(768, 768, 16), 2rem)", WARN)
        assert resolution.value == "clamp(1rem, 16px, 2rem)"
        assert resolution.changed
        assert len(resolution.diagnostics) == 1
        assert resolution.diagnostics[0].kind == DiagnosticKind.DEGENERATE_WIDTH_RANGE
        assert resolution.diagnostics[0].text == (
            "minScreen (768px) and maxScreen (768px) are equal. Using minSize (16px)."
        )

    def test_no_fluid(self):
        """A plain clamp() is left alone."""
        value = "clamp(1rem, 1.5rem, 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == value
        assert not resolution.changed
        assert resolution.diagnostics == []


class TestDiagnostics:
    """Diagnostics are optional and counted per @fluid call."""

    def test_disabled_by_default(self):
        """Invalid input is silent unless warnings are enabled."""
        value = "clamp(1rem, @fluid(320), 2rem)"
        resolution = resolve(value)
        assert resolution.value == value
        assert resolution.diagnostics == []

    def test_degenerate_rewrite_happens_without_warnings(self):
        resolution = resolve("clamp(1rem, @fluid(500, 500), 2rem)", FluidConfig())
        assert resolution.value == "clamp(1rem, 16px, 2rem)"
        assert resolution.diagnostics == []

    def test_each_invalid_call_warns(self):
        """Two bad @fluid calls in one value produce two diagnostics."""
        value = "clamp(1rem, @fluid(1), 2rem) clamp(1rem, @fluid(a, b), 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == value
        kinds = [d.kind for d in resolution.diagnostics]
        assert kinds == [DiagnosticKind.WRONG_ARGUMENT_COUNT, DiagnosticKind.INVALID_ARGUMENTS]

    def test_invalid_call_does_not_block_valid_one(self):
        value = "clamp(1rem, @fluid(1), 2rem) clamp(1rem, @fluid(), 2rem)"
        resolution = resolve(value, WARN)
        assert resolution.value == (
            "clamp(1rem, @fluid(1), 2rem) clamp(1rem, calc(0px + 2.08333vw), 2rem)"
        )
        assert len(resolution.diagnostics) == 1

    def test_diagnostic_has_no_position(self):
        """Position is only known to the stylesheet processor."""
        diagnostic = resolve("clamp(1rem, @fluid(1), 2rem)", WARN).diagnostics[0]
        assert diagnostic.line is None
        assert diagnostic.prop is None
        assert str(diagnostic).startswith("fluid-clamp: ")


class TestConfiguration:
    """Configured defaults and positional overrides."""

    def test_configured_widths(self):
        """@fluid() picks up configured widths."""
        config = FluidConfig(min_width=320, max_width=1024)
        resolution = resolve("clamp(1rem, @fluid(), 2rem)", config)
        assert resolution.value == "clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)"

    def test_two_arguments_keep_configured_base_size(self):
        config = FluidConfig(warnings=True, base_font_size=20)
        resolution = resolve("clamp(1rem, @fluid(500, 500), 2rem)", config)
        assert resolution.value == "clamp(1rem, 20px, 2rem)"
        assert resolution.diagnostics[0].text == (
            "minScreen (500px) and maxScreen (500px) are equal. Using minSize (20px)."
        )

    def test_three_arguments_override_base_size(self):
        config = FluidConfig(base_font_size=20)
        resolution = resolve("clamp(1rem, @fluid(500, 500, 18), 2rem)", config)
        assert resolution.value == "clamp(1rem, 18px, 2rem)"

    def test_configured_equal_widths(self):
        config = FluidConfig(min_width=1000, max_width=1000, base_font_size=14.5)
        resolution = resolve("clamp(1rem, @fluid(), 2rem)", config)
        assert resolution.value == "clamp(1rem, 14.5px, 2rem)"


class TestSkips:
    """Shapes that are not ours are left exactly as written."""

    @pytest.mark.parametrize("value", [
        "1rem",
        "",
        "calc(1rem + 2vw)",
        "clamp(1rem, @fluid())",
        "clamp(1rem, @fluid(), 2rem, 3rem)",
        "clamp(1rem 1px, @fluid(), 2rem)",
        "clamp(1vw, @fluid(), 2rem)",
        "clamp(1rem, @fluid(), 50%)",
        "clamp(var(--min), @fluid(), 2rem)",
        "clamp(@fluid(), 1rem, 2rem)",
        "CLAMP(1rem, @fluid(), 2rem)",
        "clamp(1rem, @FLUID(), 2rem)",
        "min(1rem, @fluid(), 2rem)",
        "'clamp(1rem, @fluid(), 2rem)'",
    ])
    def test_unchanged(self, value):
        resolution = resolve(value, WARN)
        assert resolution.value is value
        assert not resolution.changed
        assert resolution.diagnostics == []


class TestRewrite:
    """Placement and formatting of the replacement."""

    def test_nested_clamp(self):
        """A clamp() inside another function is still found."""
        resolution = resolve("calc(clamp(1rem, @fluid(), 2rem) + 1px)")
        assert resolution.value == "calc(clamp(1rem, calc(0px + 2.08333vw), 2rem) + 1px)"

    def test_surrounding_whitespace_kept(self):
        resolution = resolve("clamp( 1rem ,@fluid( ) , 2rem )")
        assert resolution.value == "clamp( 1rem ,calc(0px + 2.08333vw) , 2rem )"

    def test_space_separated_arguments(self):
        """Arguments are counted as words, commas are optional."""
        resolution = resolve("clamp(1rem, @fluid(320 1024), 2rem)")
        assert resolution.value == "clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)"

    def test_shrinking_size(self):
        """A larger min bound gives a negative slope."""
        resolution = resolve("clamp(2rem, @fluid(320, 1024), 1rem)")
        assert resolution.value == "clamp(2rem, calc(39.27273px + -2.27273vw), 1rem)"

    def test_rest_of_value_untouched(self):
        resolution = resolve("0 clamp(1rem, @fluid(), 2rem) /* keep */ auto")
        assert resolution.value == "0 clamp(1rem, calc(0px + 2.08333vw), 2rem) /* keep */ auto"

    def test_second_pass_is_noop(self):
        """Output never contains @fluid, so resolving it again changes nothing."""
        first = resolve("clamp(1rem, @fluid(320, 1024), 2rem), clamp(1rem, @fluid(), 2rem)")
        second = resolve(first.value, WARN)
        assert "@fluid" not in first.value
        assert second.value == first.value
        assert not second.changed
        assert second.diagnostics == []


class TestLinearMapping:
    """Slope and intercept of the interpolation line."""

    @pytest.mark.parametrize("min_width, max_width", [
        (320, 1024),
        (400, 1200),
        (768, 1536),
        (375, 1440),
        (1024, 320),
    ])
    def test_matches_formula(self, min_width, max_width):
        min_size, max_size = 16.0, 32.0
        slope = (max_size - min_size) / (max_width - min_width)
        intercept = min_size - slope * min_width

        mapping = LinearMapping.between(min_size, max_size, min_width, max_width)
        assert mapping.slope == slope
        assert mapping.intercept == intercept

        resolution = resolve(f"clamp(1rem, @fluid({min_width}, {max_width}), 2rem)")
        expected_vw = round_half_away(slope * 100)
        expected_px = round_half_away(intercept)
        calc = resolution.value[len("clamp(1rem, "):-len(", 2rem)")]
        px_text, vw_text = calc[len("calc("):-len("vw)")].split("px + ")
        assert float(px_text) == expected_px
        assert float(vw_text) == expected_vw

    def test_passes_through_both_bounds(self):
        mapping = LinearMapping.between(16, 32, 320, 1024)
        assert mapping.intercept + mapping.slope * 320 == pytest.approx(16)
        assert mapping.intercept + mapping.slope * 1024 == pytest.approx(32)

    def test_to_calc(self):
        assert LinearMapping(slope=0.01, intercept=4).to_calc() == "calc(4px + 1vw)"

    def test_intercept_just_below_half_rounds_down(self):
        result = resolve("clamp(0.5rem, @fluid(342, 1366), 0.8rem)")
        assert result.value == "clamp(0.5rem, calc(6.39687px + 0.46875vw), 0.8rem)"
