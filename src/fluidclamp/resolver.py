"""
Fluid Resolver (Layer 2: Declaration Value → Rewritten Value).

For every 3-argument ``clamp()`` whose arguments contain an ``@fluid()``
call, the ``@fluid()`` node is replaced by a ``calc()`` expression that
interpolates linearly between the two clamp bounds across a range of
viewport widths:

    clamp(1rem, @fluid(320, 1024), 2rem)
        → clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)

@fluid() accepts 0, 2 or 3 numeric arguments:
    @fluid()                                 configured widths and base size
    @fluid(minWidth, maxWidth)               configured base size
    @fluid(minWidth, maxWidth, baseFontSize)

ERROR POLICY:
    resolve() never raises on CSS input.
    Anything that is not our pattern is left alone without a word.
    Invalid @fluid() arguments are left alone and, when the config enables
    warnings, reported as a Diagnostic.
    Equal min and max widths still rewrite (to the base font size).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from fluidclamp.config import DEFAULT_CONFIG, FluidConfig
from fluidclamp.units import format_number, parse_fluid_number, parse_size, round_half_away
from fluidclamp.value_parser import (
    DivNode,
    FunctionNode,
    Node,
    WordNode,
    parse,
    stringify,
    walk,
)


logger = logging.getLogger(__name__)

PLUGIN_NAME = "fluid-clamp"
CLAMP_FUNCTION = "clamp"
FLUID_FUNCTION = "@fluid"
VALID_ARGUMENT_COUNTS = (0, 2, 3)


class DiagnosticKind(Enum):
    INVALID_ARGUMENTS = "invalid-arguments"
    WRONG_ARGUMENT_COUNT = "wrong-argument-count"
    DEGENERATE_WIDTH_RANGE = "degenerate-width-range"


@dataclass(frozen=True)
class Diagnostic:
    """
    An advisory message about one @fluid() call.

    ``prop``, ``line`` and ``column`` are filled in by the stylesheet
    processor; the resolver alone only knows the value text.
    """
    kind: DiagnosticKind
    text: str
    plugin: str = PLUGIN_NAME
    prop: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.plugin}: {self.text}"


@dataclass
class Resolution:
    """Outcome of resolving one declaration value."""
    value: str
    changed: bool = False
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class LinearMapping:
    """
    The line ``size = intercept + slope * viewport_width`` (all in px).

    Properties:
        slope: Pixels of size per pixel of viewport width
        intercept: Size in px at a zero-width viewport
    """
    slope: float
    intercept: float

    @classmethod
    def between(cls, min_size: float, max_size: float,
                min_width: float, max_width: float) -> LinearMapping:
        slope = (max_size - min_size) / (max_width - min_width)
        intercept = min_size - slope * min_width
        return cls(slope=slope, intercept=intercept)

    def is_finite(self) -> bool:
        return math.isfinite(self.slope) and math.isfinite(self.intercept)

    def to_calc(self) -> str:
        # 1vw is 1% of the viewport width
        intercept_px = format_number(round_half_away(self.intercept))
        slope_vw = format_number(round_half_away(self.slope * 100))
        return f"calc({intercept_px}px + {slope_vw}vw)"


def _fluid_arguments(fluid: FunctionNode) -> Optional[List[float]]:
    """
    Numeric arguments of an @fluid() call.

    Only word children count. Returns None if any word is not a canonical
    number.
    """
    numbers: List[float] = []
    for child in fluid.nodes:
        if not isinstance(child, WordNode):
            continue
        number = parse_fluid_number(child.value)
        if number is None:
            return None
        numbers.append(number)
    return numbers


def _resolve_widths(numbers: List[float], config: FluidConfig) -> Tuple[float, float, float]:
    """(min_width, max_width, base_font_size) after positional overrides."""
    min_width = config.min_width
    max_width = config.max_width
    base_font_size = config.base_font_size

    if len(numbers) >= 2:
        min_width, max_width = numbers[0], numbers[1]
    if len(numbers) == 3:
        base_font_size = numbers[2]

    return min_width, max_width, base_font_size


def _size_of(node: Node) -> Optional[float]:
    if not isinstance(node, WordNode):
        return None
    return parse_size(node.value)


def _replace_child(parent: FunctionNode, child: Node, text: str) -> None:
    """Swap ``child`` for a literal word at the same position in ``parent``."""
    for index, node in enumerate(parent.nodes):
        if node is child:
            parent.nodes[index] = WordNode(text)
            return


def _warn(resolution: Resolution, config: FluidConfig,
          kind: DiagnosticKind, text: str) -> None:
    if config.warnings:
        resolution.diagnostics.append(Diagnostic(kind=kind, text=text))


def _resolve_clamp(clamp: FunctionNode, config: FluidConfig, resolution: Resolution) -> None:
    """Rewrite the @fluid() argument of one clamp() node if it qualifies."""
    args = [child for child in clamp.nodes if not isinstance(child, DivNode)]
    if len(args) != 3:
        logger.debug("Skipping clamp() with %d arguments", len(args))
        return

    fluid = next(
        (arg for arg in args if isinstance(arg, FunctionNode) and arg.name == FLUID_FUNCTION),
        None,
    )
    if fluid is None:
        return

    numbers = _fluid_arguments(fluid)
    if numbers is None:
        _warn(resolution, config, DiagnosticKind.INVALID_ARGUMENTS,
              "@fluid function contains invalid numerical arguments.")
        return

    if len(numbers) not in VALID_ARGUMENT_COUNTS:
        _warn(resolution, config, DiagnosticKind.WRONG_ARGUMENT_COUNT,
              "@fluid function requires either 0, 2, or 3 numerical arguments, "
              f"but received {len(numbers)}.")
        return

    min_width, max_width, base_font_size = _resolve_widths(numbers, config)

    min_size = _size_of(args[0])
    max_size = _size_of(args[2])
    if min_size is None or max_size is None:
        logger.debug("Skipping clamp() with unsupported bounds: %s", stringify([clamp]))
        return

    if max_width - min_width == 0:
        _replace_child(clamp, fluid, f"{format_number(base_font_size)}px")
        _warn(resolution, config, DiagnosticKind.DEGENERATE_WIDTH_RANGE,
              f"minScreen ({format_number(min_width)}px) and "
              f"maxScreen ({format_number(max_width)}px) are equal. "
              f"Using minSize ({format_number(base_font_size)}px).")
        resolution.changed = True
        return

    mapping = LinearMapping.between(min_size, max_size, min_width, max_width)
    if not mapping.is_finite():
        logger.debug("Skipping clamp() with non-finite interpolation: %s", mapping)
        return

    _replace_child(clamp, fluid, mapping.to_calc())
    resolution.changed = True


def resolve(value: str, config: Optional[FluidConfig] = None) -> Resolution:
    """
    Resolve every ``clamp(..., @fluid(...), ...)`` in a declaration value.

    Args:
        value: Declaration value text (without ``!important``)
        config: Defaults and warning switch; DEFAULT_CONFIG when omitted

    Returns:
        Resolution. ``value`` is the input text unchanged (same object)
        unless at least one @fluid() call was rewritten.
    """
    if config is None:
        config = DEFAULT_CONFIG

    resolution = Resolution(value=value)
    tree = parse(value)

    def visit(node: Node, index: int, siblings: List[Node]) -> None:
        if isinstance(node, FunctionNode) and node.name == CLAMP_FUNCTION:
            _resolve_clamp(node, config, resolution)

    walk(tree, visit)

    if resolution.changed:
        resolution.value = stringify(tree)
        logger.debug("Resolved %r -> %r", value, resolution.value)

    return resolution


__all__ = [
    "PLUGIN_NAME",
    "DiagnosticKind",
    "Diagnostic",
    "Resolution",
    "LinearMapping",
    "resolve",
]
