"""
Command line front-end: ``fluid-clamp [FILE ...]``.

Reads stylesheets (stdin when no file or ``-`` is given), rewrites
``clamp(..., @fluid(...), ...)`` values and writes the result to stdout or
to ``--output``. Diagnostics go to stderr as ``file:line:column: text``.

Exit status:
    0   success
    1   unreadable input, unwritable output, invalid options, or
        --output with more than one input
    2   --strict and at least one diagnostic was emitted
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fluidclamp import __version__
from fluidclamp.config import FluidConfig, load_config
from fluidclamp.errors import ConfigError
from fluidclamp.processor import FluidClamp, ProcessResult


logger = logging.getLogger("fluidclamp")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DIAGNOSTICS = 2

STDIN = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fluid-clamp",
        description="Replace @fluid(...) inside clamp() with an equivalent calc() expression.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE",
                        help="Stylesheets to process (default: stdin)")
    parser.add_argument("-o", "--output", help="Write the result here instead of stdout")
    parser.add_argument("-c", "--config", help="YAML or JSON options file")
    parser.add_argument("--warnings", action="store_true", default=None,
                        help="Report invalid or ambiguous @fluid() calls")
    parser.add_argument("--min-width", type=float, help="Default minimum viewport width in px")
    parser.add_argument("--max-width", type=float, help="Default maximum viewport width in px")
    parser.add_argument("--base-font-size", type=float,
                        help="Size in px used when min and max width are equal")
    parser.add_argument("--strict", action="store_true",
                        help="Exit with status 2 if any diagnostic is reported (implies --warnings)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v) or resolver details (-vv)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbosity: int) -> None:
    """Log to stderr; WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )


def _build_config(args: argparse.Namespace) -> FluidConfig:
    config = load_config(args.config) if args.config else FluidConfig()
    return config.with_overrides(
        warnings=True if (args.warnings or args.strict) else None,
        min_width=args.min_width,
        max_width=args.max_width,
        base_font_size=args.base_font_size,
    )


def _read(source: str) -> str:
    if source == STDIN:
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _report(source: str, result: ProcessResult) -> None:
    name = "<stdin>" if source == STDIN else source
    for diagnostic in result.warnings:
        logger.warning("%s:%s:%s: %s", name, diagnostic.line, diagnostic.column, diagnostic.text)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    sources = args.files or [STDIN]
    if args.output and len(sources) > 1:
        logger.error("--output can only be used with a single input")
        return EXIT_ERROR

    try:
        config = _build_config(args)
    except ConfigError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    plugin = FluidClamp(config)
    diagnostics = 0

    for source in sources:
        try:
            css = _read(source)
        except OSError as e:
            logger.error("Cannot read %s: %s", source, e)
            return EXIT_ERROR

        result = plugin.process(css)
        _report(source, result)
        diagnostics += len(result.warnings)

        if args.output:
            try:
                Path(args.output).write_text(result.css, encoding="utf-8")
            except OSError as e:
                logger.error("Cannot write %s: %s", args.output, e)
                return EXIT_ERROR
        else:
            sys.stdout.write(result.css)

    if args.strict and diagnostics:
        return EXIT_DIAGNOSTICS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
