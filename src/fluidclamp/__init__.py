"""
fluidclamp: fluid typography for CSS clamp().

Rewrites

    clamp(1rem, @fluid(320, 1024), 2rem)

into

    clamp(1rem, calc(8.72727px + 2.27273vw), 2rem)

so a size grows linearly from its minimum at one viewport width to its
maximum at another.

Layers:
    value_parser   CSS value text <-> value tree
    resolver       the @fluid() rewrite on one declaration value
    processor      whole stylesheets (declarations, diagnostics)
    cli            the fluid-clamp command
"""

__version__ = "0.1.0"

from fluidclamp.config import FluidConfig, load_config
from fluidclamp.errors import ConfigError, FluidClampError
from fluidclamp.processor import FluidClamp, ProcessResult, process
from fluidclamp.resolver import Diagnostic, DiagnosticKind, Resolution, resolve

__all__ = [
    "__version__",
    "FluidConfig",
    "load_config",
    "ConfigError",
    "FluidClampError",
    "FluidClamp",
    "ProcessResult",
    "process",
    "Diagnostic",
    "DiagnosticKind",
    "Resolution",
    "resolve",
]
