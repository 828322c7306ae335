"""
Plugin configuration.

FluidConfig holds the process-wide defaults used when an ``@fluid()`` call
does not supply its own arguments:

    warnings        emit diagnostics for invalid or ambiguous input
    min_width       viewport width (px) where the minimum size applies
    max_width       viewport width (px) where the maximum size applies
    base_font_size  size (px) substituted when min_width == max_width

The record is immutable. Build it once, share it between declarations.

Options can be read from a YAML or JSON mapping. Keys may be snake_case
or camelCase (``minWidth``, ``maxWidth``, ``baseFontSize``).
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from fluidclamp.errors import ConfigError


_ALIASES = {
    "minWidth": "min_width",
    "maxWidth": "max_width",
    "baseFontSize": "base_font_size",
}


@dataclass(frozen=True)
class FluidConfig:
    warnings: bool = False
    min_width: float = 768
    max_width: float = 1536
    base_font_size: float = 16

    def __post_init__(self) -> None:
        if not isinstance(self.warnings, bool):
            raise ConfigError(f"'warnings' must be a boolean, got {self.warnings!r}")
        for name in ("min_width", "max_width", "base_font_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"'{name}' must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"'{name}' must be finite, got {value!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> FluidConfig:
        """
        Build a config from a plain mapping.

        Args:
            data: Option mapping (may be None or empty for all defaults)

        Returns:
            FluidConfig

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Options must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f"Unknown option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warnings": self.warnings,
            "min_width": self.min_width,
            "max_width": self.max_width,
            "base_font_size": self.base_font_size,
        }

    def with_overrides(self, **overrides: Any) -> FluidConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise ConfigError(str(e)) from e


DEFAULT_CONFIG = FluidConfig()


def config_from_yaml(text: str) -> FluidConfig:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML options: {e}") from e
    return FluidConfig.from_dict(data)


def config_from_json(text: str) -> FluidConfig:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON options: {e}") from e
    return FluidConfig.from_dict(data)


def load_config(path: Union[str, Path]) -> FluidConfig:
    """
    Load options from a ``.json``, ``.yml`` or ``.yaml`` file.

    Any other suffix is read as YAML (JSON documents are valid YAML).

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Options file not found: {path}")
    except OSError as e:
        raise ConfigError(f"Cannot read options file {path}: {e}") from e

    if path.suffix.lower() == ".json":
        return config_from_json(text)
    return config_from_yaml(text)


__all__ = [
    "FluidConfig",
    "DEFAULT_CONFIG",
    "config_from_yaml",
    "config_from_json",
    "load_config",
]
