from __future__ import annotations

from dataclasses import dataclass, replace
import math

import numpy as np

from curvelab.errors import ViewError


DEGENERATE_SPAN_NUDGE = 1e-6


def normalize_bounds(lo: float, hi: float, *, axis: str = "x") -> tuple[float, float]:
    lo = float(lo)
    hi = float(hi)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ViewError(f"{axis} bounds must be finite: ({lo}, {hi})")
    if lo == hi:
        hi = lo + DEGENERATE_SPAN_NUDGE
        if hi == lo:
            # Nudge is below float resolution at this magnitude.
            hi = math.nextafter(lo, math.inf)
    lo, hi = min(lo, hi), max(lo, hi)
    if not math.isfinite(hi - lo):
        raise ViewError(f"{axis} span overflows: ({lo}, {hi})")
    return (lo, hi)


@dataclass(frozen=True)
class ViewWindow:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self) -> None:
        for name in ("x_min", "x_max", "y_min", "y_max"):
            if not math.isfinite(getattr(self, name)):
                raise ViewError(f"{name} must be finite")
        if not self.x_min < self.x_max:
            raise ViewError("x_min must be < x_max")
        if not self.y_min < self.y_max:
            raise ViewError("y_min must be < y_max")
        if not (math.isfinite(self.x_max - self.x_min) and math.isfinite(self.y_max - self.y_min)):
            raise ViewError("window span must be finite")

    @classmethod
    def from_bounds(cls, x_min: float, x_max: float, y_min: float, y_max: float) -> "ViewWindow":
        xa, xb = normalize_bounds(x_min, x_max, axis="x")
        ya, yb = normalize_bounds(y_min, y_max, axis="y")
        return cls(x_min=xa, x_max=xb, y_min=ya, y_max=yb)

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min

    def with_domain(self, x_min: float, x_max: float) -> "ViewWindow":
        xa, xb = normalize_bounds(x_min, x_max, axis="x")
        return replace(self, x_min=xa, x_max=xb)

    def with_range(self, y_min: float, y_max: float) -> "ViewWindow":
        ya, yb = normalize_bounds(y_min, y_max, axis="y")
        return replace(self, y_min=ya, y_max=yb)

    def contains_x(self, x: float) -> bool:
        return self.x_min <= x <= self.x_max

    def contains_y(self, y: float) -> bool:
        return self.y_min <= y <= self.y_max


@dataclass(frozen=True)
class CanvasSize:
    """Drawing size in CSS pixels plus the backing-store pixel ratio."""

    width: float
    height: float
    device_pixel_ratio: float = 1.0

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError("canvas width/height must be > 0")
        if not self.device_pixel_ratio > 0:
            raise ValueError("device_pixel_ratio must be > 0")

    def backing_store_size(self) -> tuple[int, int]:
        dpr = self.device_pixel_ratio
        width = max(1, int(round(math.floor(self.width) * dpr)))
        height = max(1, int(round(math.floor(self.height) * dpr)))
        return (width, height)


def world_to_screen(window: ViewWindow, canvas: CanvasSize, x: float, y: float) -> tuple[float, float]:
    sx = (x - window.x_min) / window.x_span * canvas.width
    sy = canvas.height - (y - window.y_min) / window.y_span * canvas.height
    return (sx, sy)


def screen_to_world(window: ViewWindow, canvas: CanvasSize, sx: float, sy: float) -> tuple[float, float]:
    x = window.x_min + (sx / canvas.width) * window.x_span
    y = window.y_min + ((canvas.height - sy) / canvas.height) * window.y_span
    return (x, y)


def world_to_screen_arrays(
    window: ViewWindow,
    canvas: CanvasSize,
    xs: np.ndarray,
    ys: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    sx = (np.asarray(xs, dtype=np.float64) - window.x_min) / window.x_span * canvas.width
    sy = canvas.height - (np.asarray(ys, dtype=np.float64) - window.y_min) / window.y_span * canvas.height
    return sx, sy


def pixels_per_unit(window: ViewWindow, canvas: CanvasSize) -> tuple[float, float]:
    return (canvas.width / window.x_span, canvas.height / window.y_span)
