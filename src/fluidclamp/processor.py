"""
Stylesheet processor (Layer 3: Stylesheet Text → Declarations → Resolver).

Finds every ``property: value`` declaration inside a rule block, hands its
value to the Fluid Resolver and splices rewritten values back into the
sheet. Everything that is not a rewritten value is copied through byte for
byte, so formatting, comments and unrelated declarations never change.

Scanner rules:
    - ``/* ... */`` comments and quoted strings are opaque
    - ``{`` opens a block, ``}`` closes one (at-rules and nested rules included)
    - ``;`` ends a declaration unless it sits inside parentheses
    - a statement inside a block ending in ``;`` or ``}`` with a top-level
      ``:`` is a declaration; one ending in ``{`` is a selector or at-rule
    - ``!important`` is kept out of the value handed to the resolver
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from fluidclamp.config import DEFAULT_CONFIG, FluidConfig
from fluidclamp.resolver import PLUGIN_NAME, Diagnostic, resolve


logger = logging.getLogger(__name__)

_PROPERTY_RE = re.compile(r'^[*_]?-{0,2}[A-Za-z_][-\w]*$')
_IMPORTANT_RE = re.compile(r'\s*!\s*important\s*$', re.IGNORECASE)
_WHITESPACE = " \t\n\r\f"


@dataclass(frozen=True)
class Declaration:
    """
    One declaration located in a stylesheet.

    Properties:
        prop: Property name as written
        value: Value text, without surrounding whitespace or !important
        start: Offset of the first value character in the sheet
        end: Offset just past the last value character
        line: 1-based line of the property name
        column: 1-based column of the property name
    """
    prop: str
    value: str
    start: int
    end: int
    line: int
    column: int


@dataclass
class ProcessResult:
    """Processed stylesheet plus the diagnostics raised along the way."""
    css: str
    warnings: List[Diagnostic] = field(default_factory=list)
    changed_declarations: int = 0

    def warn(self, diagnostic: Diagnostic) -> None:
        self.warnings.append(diagnostic)


def _skip_string(css: str, pos: int) -> int:
    """Offset just past the string starting at ``pos``."""
    quote = css[pos]
    pos += 1
    while pos < len(css):
        ch = css[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos + 1
        if ch == "\n":
            # Unterminated string ends at the line break
            return pos
        pos += 1
    return len(css)


def _skip_comment(css: str, pos: int) -> int:
    end = css.find("*/", pos + 2)
    return len(css) if end == -1 else end + 2


def _skip_trivia(css: str, pos: int, end: int) -> int:
    """Skip whitespace and comments between ``pos`` and ``end``."""
    while pos < end:
        if css[pos] in _WHITESPACE:
            pos += 1
        elif css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
        else:
            break
    return min(pos, end)


def _find_colon(css: str, pos: int, end: int) -> Optional[int]:
    """First ``:`` outside strings, comments and parentheses."""
    depth = 0
    while pos < end:
        ch = css[pos]
        if css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
            continue
        if ch in "\"'":
            pos = _skip_string(css, pos)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        elif ch == ":" and depth == 0:
            return pos
        pos += 1
    return None


def _position(css: str, offset: int) -> Tuple[int, int]:
    line = css.count("\n", 0, offset) + 1
    column = offset - css.rfind("\n", 0, offset)
    return line, column


def _declaration(css: str, start: int, end: int) -> Optional[Declaration]:
    """Interpret ``css[start:end]`` as a declaration, or return None."""
    name_start = _skip_trivia(css, start, end)
    if name_start >= end or css[name_start] == "@":
        return None

    colon = _find_colon(css, name_start, end)
    if colon is None:
        return None

    prop = css[name_start:colon].strip()
    if not _PROPERTY_RE.match(prop):
        return None

    value_start = colon + 1
    while value_start < end and css[value_start] in _WHITESPACE:
        value_start += 1

    raw = css[value_start:end]
    important = _IMPORTANT_RE.search(raw)
    if important:
        value_end = value_start + important.start()
    else:
        value_end = value_start + len(raw.rstrip(_WHITESPACE))

    line, column = _position(css, name_start)
    return Declaration(
        prop=prop,
        value=css[value_start:value_end],
        start=value_start,
        end=value_end,
        line=line,
        column=column,
    )


def iter_declarations(css: str) -> Iterator[Declaration]:
    """Yield the declarations of a stylesheet in document order."""
    depth = 0
    parens = 0
    statement_start = 0
    pos = 0

    while pos < len(css):
        ch = css[pos]

        if css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
            continue
        if ch in "\"'":
            pos = _skip_string(css, pos)
            continue
        if ch == "\\":
            pos += 2
            continue

        if ch == "(":
            parens += 1
        elif ch == ")" and parens:
            parens -= 1
        elif ch == "{":
            depth += 1
            parens = 0
            statement_start = pos + 1
        elif ch == "}" or (ch == ";" and parens == 0):
            if depth > 0:
                declaration = _declaration(css, statement_start, pos)
                if declaration is not None:
                    yield declaration
            if ch == "}":
                depth = max(depth - 1, 0)
                parens = 0
            statement_start = pos + 1
        pos += 1

    # Declaration left open at the end of an unterminated block
    if depth > 0:
        declaration = _declaration(css, statement_start, len(css))
        if declaration is not None:
            yield declaration


class FluidClamp:
    """
    The fluid-clamp plugin.

    Configure it once, then run it over any number of stylesheets:

        plugin = FluidClamp(warnings=True, min_width=320)
        result = plugin.process(css)
        result.css, result.warnings

    Options are those of FluidConfig (camelCase aliases accepted).
    """

    name = PLUGIN_NAME

    def __init__(self, config: Optional[FluidConfig] = None, **options):
        if config is not None and options:
            config = FluidConfig.from_dict({**config.to_dict(), **options})
        elif config is None:
            config = FluidConfig.from_dict(options)
        self.config = config

    @classmethod
    def from_config(cls, config: FluidConfig) -> FluidClamp:
        """Plugin for an already-built config, e.g. one from load_config()."""
        return cls(config)

    def declaration(self, declaration: Declaration, result: ProcessResult) -> str:
        """
        Resolve one declaration.

        Diagnostics are stamped with the declaration's position and added
        to ``result``. Returns the value to write back (the original value
        when nothing was rewritten).
        """
        resolution = resolve(declaration.value, self.config)
        for diagnostic in resolution.diagnostics:
            result.warn(replace(
                diagnostic,
                prop=declaration.prop,
                line=declaration.line,
                column=declaration.column,
            ))
        if resolution.changed:
            result.changed_declarations += 1
        return resolution.value

    def process(self, css: str) -> ProcessResult:
        result = ProcessResult(css=css)
        pieces: List[str] = []
        copied_to = 0

        for declaration in iter_declarations(css):
            value = self.declaration(declaration, result)
            if value == declaration.value:
                continue
            pieces.append(css[copied_to:declaration.start])
            pieces.append(value)
            copied_to = declaration.end

        if pieces:
            pieces.append(css[copied_to:])
            result.css = "".join(pieces)

        logger.info(
            "%s: rewrote %d declaration(s), %d warning(s)",
            self.name, result.changed_declarations, len(result.warnings),
        )
        return result

    def process_file(self, path: Union[str, Path]) -> ProcessResult:
        """Process a UTF-8 stylesheet file. The file itself is not modified."""
        return self.process(Path(path).read_text(encoding="utf-8"))


def process(css: str, config: Optional[FluidConfig] = None) -> ProcessResult:
    """Run the plugin over a stylesheet with ``config`` (defaults if omitted)."""
    return FluidClamp(config or DEFAULT_CONFIG).process(css)


__all__ = [
    "Declaration",
    "ProcessResult",
    "FluidClamp",
    "iter_declarations",
    "process",
]
