from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import logging
from pathlib import Path
import tomllib
from typing import Any

from curvelab.errors import ConfigError, ViewError
from curvelab.series import RGBA
from curvelab.transform import ViewWindow
from curvelab.view import DEFAULT_WINDOW


LOGGER = logging.getLogger(__name__)


def parse_color(value: Any) -> RGBA:
    """Accept `#rgb`, `#rrggbb`, `#rrggbbaa`, or a 3/4-tuple of 0-255 ints."""

    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) not in (6, 8):
            raise ConfigError(f"invalid color: {value!r}")
        try:
            channels = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError as exc:
            raise ConfigError(f"invalid color: {value!r}") from exc
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        if not all(isinstance(c, int) and 0 <= c <= 255 for c in value):
            raise ConfigError(f"color channels must be ints in [0, 255]: {value!r}")
        r, g, b = value[0], value[1], value[2]
        a = value[3] if len(value) == 4 else 255
        return (r, g, b, a)
    raise ConfigError(f"unsupported color value: {value!r}")


@dataclass(frozen=True)
class Theme:
    background: RGBA = (15, 17, 21, 255)
    grid: RGBA = (42, 47, 58, 255)
    axis: RGBA = (107, 114, 128, 255)
    text: RGBA = (230, 230, 230, 255)
    accent: RGBA = (63, 167, 255, 255)
    marker_ring: RGBA = (255, 255, 255, 255)
    error_text: RGBA = (255, 107, 107, 255)
    error_band: RGBA = (255, 107, 107, 20)


@dataclass(frozen=True)
class PlotterConfig:
    sample_budget: int = 1200
    polar_steps: int = 1000
    grid_cols: int = 48
    grid_rows: int = 32
    bisection_iterations: int = 20
    bisection_tolerance: float = 1e-9
    dedupe_px: float = 6.0
    hit_threshold_px: float = 12.0
    marker_radius_px: float = 6.0
    default_window: ViewWindow = DEFAULT_WINDOW
    theme: Theme = field(default_factory=Theme)

    def __post_init__(self) -> None:
        for name in ("sample_budget", "polar_steps", "grid_cols", "grid_rows", "bisection_iterations"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0")
        for name in ("bisection_tolerance", "dedupe_px", "hit_threshold_px", "marker_radius_px"):
            if not getattr(self, name) > 0:
                raise ConfigError(f"{name} must be > 0")


_SECTION_KEYS: dict[str, tuple[str, ...]] = {
    "sampling": ("sample_budget", "polar_steps", "grid_cols", "grid_rows"),
    "roots": ("bisection_iterations", "bisection_tolerance", "dedupe_px"),
    "interaction": ("hit_threshold_px", "marker_radius_px"),
}
_INT_KEYS = {"sample_budget", "polar_steps", "grid_cols", "grid_rows", "bisection_iterations"}


def load_config(path: str | Path) -> PlotterConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc
    return config_from_mapping(raw, source=str(config_path))


def config_from_mapping(raw: dict[str, Any], *, source: str = "<mapping>") -> PlotterConfig:
    known = set(_SECTION_KEYS) | {"view", "theme"}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown config section(s): {', '.join(unknown)}")

    overrides: dict[str, Any] = {}
    for section, keys in _SECTION_KEYS.items():
        table = _coerce_table(raw.get(section, {}), section)
        for key, value in table.items():
            if key not in keys:
                raise ConfigError(f"{source}: unknown key `{section}.{key}`")
            overrides[key] = _coerce_number(value, f"{section}.{key}", integer=key in _INT_KEYS)

    view = _coerce_table(raw.get("view", {}), "view")
    if view:
        overrides["default_window"] = window_from_mapping(view, source=source)

    theme_table = _coerce_table(raw.get("theme", {}), "theme")
    if theme_table:
        theme_fields = {f.name for f in fields(Theme)}
        colors: dict[str, RGBA] = {}
        for key, value in theme_table.items():
            if key not in theme_fields:
                raise ConfigError(f"{source}: unknown key `theme.{key}`")
            colors[key] = parse_color(value)
        overrides["theme"] = replace(Theme(), **colors)

    config = PlotterConfig(**overrides)
    LOGGER.debug("loaded config from %s: %s", source, config)
    return config


def window_from_mapping(view: dict[str, Any], *, source: str = "<mapping>") -> ViewWindow:
    allowed = {"x_min", "x_max", "y_min", "y_max"}
    extra = sorted(set(view) - allowed)
    if extra:
        raise ConfigError(f"{source}: unknown view key(s): {', '.join(extra)}")
    base = DEFAULT_WINDOW
    values = {
        key: _coerce_number(view.get(key, getattr(base, key)), f"view.{key}", integer=False)
        for key in ("x_min", "x_max", "y_min", "y_max")
    }
    try:
        return ViewWindow.from_bounds(values["x_min"], values["x_max"], values["y_min"], values["y_max"])
    except ViewError as exc:
        raise ConfigError(f"{source}: {exc}") from exc


def _coerce_table(value: object, field_name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a table")
    return value


def _coerce_number(value: object, field_name: str, *, integer: bool) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"`{field_name}` must be a number")
    if integer:
        if isinstance(value, float) and not value.is_integer():
            raise ConfigError(f"`{field_name}` must be an integer")
        return int(value)
    return float(value)
