"""
Runtime settings for rendering and export.

PlotSettings is a frozen dataclass; loaders apply precedence env > TOML > defaults.
TOML is read from ./gglayers.toml (top-level keys or a [gglayers] table) or from
[tool.gglayers] in ./pyproject.toml.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib
from typing import Any

PRESET_NAMES = ("gray", "grey", "bw", "minimal", "classic")
UNITS = ("in", "cm", "mm", "px")


@dataclass(frozen=True)
class PlotSettings:
    """
    Attributes:
        default_theme (str): Complete theme every plot starts from before its own theme directives.
        base_size (float): Base font size handed to the default theme.
        font_family (str): Font family used for all text.
        width (float): Default export width, in `units`.
        height (float): Default export height, in `units`.
        units (str): One of "in", "cm", "mm", "px".
        dpi (int): Default export resolution for raster formats.
    """

    default_theme: str = "gray"
    base_size: float = 11.0
    font_family: str = 'Arial, "Open Sans", verdana, sans-serif'
    width: float = 7.0
    height: float = 7.0
    units: str = "in"
    dpi: int = 300

    @classmethod
    def _apply_mapping(cls, base: PlotSettings, cfg: dict[str, Any] | None) -> PlotSettings:
        """Apply a loose config mapping, skipping values that do not parse."""
        if not isinstance(cfg, dict):
            return base

        s = base

        theme = cfg.get("default_theme")
        if isinstance(theme, str) and theme.strip().lower() in PRESET_NAMES:
            s = replace(s, default_theme=theme.strip().lower())

        units = cfg.get("units")
        if isinstance(units, str) and units.strip().lower() in UNITS:
            s = replace(s, units=units.strip().lower())

        if isinstance(cfg.get("font_family"), str):
            s = replace(s, font_family=cfg["font_family"])

        for key in ("base_size", "width", "height"):
            if key in cfg:
                try:
                    value = float(cfg[key])
                except (TypeError, ValueError):
                    continue
                if value > 0:
                    s = replace(s, **{key: value})

        if "dpi" in cfg:
            try:
                dpi = int(cfg["dpi"])
            except (TypeError, ValueError):
                dpi = 0
            if dpi > 0:
                s = replace(s, dpi=dpi)

        return s

    @classmethod
    def from_env(cls, base: PlotSettings | None = None, prefix: str = "GGLAYERS_") -> PlotSettings:
        """
        Recognized variables: GGLAYERS_DEFAULT_THEME, GGLAYERS_BASE_SIZE, GGLAYERS_FONT_FAMILY,
        GGLAYERS_WIDTH, GGLAYERS_HEIGHT, GGLAYERS_UNITS, GGLAYERS_DPI.
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("default_theme", "base_size", "font_family", "width", "height", "units", "dpi"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> PlotSettings:
        s = cls()
        candidates = [Path(path)] if path is not None else [Path.cwd() / "gglayers.toml", Path.cwd() / "pyproject.toml"]

        for p in candidates:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                data = tomllib.load(fh)
            if p.name == "pyproject.toml":
                cfg = data.get("tool", {}).get("gglayers")
            else:
                cfg = data.get("gglayers", data)
            if cfg:
                return cls._apply_mapping(s, cfg)

        return s

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> PlotSettings:
        return cls.from_env(base=cls.from_toml(path))
