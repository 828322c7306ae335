"""Exceptions raised by fluidclamp."""


class FluidClampError(Exception):
    """Base class for all fluidclamp errors."""
    pass


class ConfigError(FluidClampError):
    """Raised when plugin options or an options file are invalid."""
    pass
