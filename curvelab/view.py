from __future__ import annotations

import logging
import math

from curvelab.errors import ViewError
from curvelab.transform import CanvasSize, ViewWindow, screen_to_world, world_to_screen


LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW = ViewWindow(x_min=-10.0, x_max=10.0, y_min=-6.0, y_max=6.0)

WHEEL_ZOOM_BASE = 1.035
WHEEL_ZOOM_CLAMP = 1.08
WHEEL_LINE_PX = 16.0
DOM_DELTA_LINE = 1


def zoom_for_wheel(delta: float, *, delta_mode: int = 0) -> float:
    """Map a wheel delta to a zoom scale; positive deltas zoom out."""

    px = float(delta) * WHEEL_LINE_PX if delta_mode == DOM_DELTA_LINE else float(delta)
    scale = WHEEL_ZOOM_BASE ** (-px / 100.0)
    return min(WHEEL_ZOOM_CLAMP, max(1.0 / WHEEL_ZOOM_CLAMP, scale))


class ViewState:
    """Owns the view window and canvas size; the only mutator of either."""

    def __init__(
        self,
        canvas: CanvasSize,
        window: ViewWindow = DEFAULT_WINDOW,
        *,
        default_window: ViewWindow | None = None,
    ) -> None:
        self._canvas = canvas
        self._window = window
        self._default_window = default_window or window

    @property
    def window(self) -> ViewWindow:
        return self._window

    @property
    def canvas(self) -> CanvasSize:
        return self._canvas

    def set_domain(self, x_min: float, x_max: float) -> ViewWindow:
        self._window = self._window.with_domain(x_min, x_max)
        return self._window

    def set_range(self, y_min: float, y_max: float) -> ViewWindow:
        self._window = self._window.with_range(y_min, y_max)
        return self._window

    set_y_range = set_range

    def set_window(self, window: ViewWindow) -> ViewWindow:
        self._window = window
        return self._window

    def reset(self) -> ViewWindow:
        self._window = self._default_window
        return self._window

    def resize(self, width: float, height: float, device_pixel_ratio: float | None = None) -> CanvasSize:
        dpr = self._canvas.device_pixel_ratio if device_pixel_ratio is None else device_pixel_ratio
        self._canvas = CanvasSize(width=float(width), height=float(height), device_pixel_ratio=float(dpr))
        return self._canvas

    def zoom_at(self, sx: float, sy: float, scale: float) -> ViewWindow:
        if not math.isfinite(scale) or scale <= 0:
            raise ViewError(f"zoom scale must be finite and > 0, got {scale!r}")
        w = self._window
        # The anchor keeps its screen position: both sides of it shrink by 1/scale.
        cx, cy = self.screen_to_world(sx, sy)
        self._window = ViewWindow.from_bounds(
            cx - (cx - w.x_min) / scale,
            cx + (w.x_max - cx) / scale,
            cy - (cy - w.y_min) / scale,
            cy + (w.y_max - cy) / scale,
        )
        LOGGER.debug("zoom_at(%.1f, %.1f, %.4f) -> %s", sx, sy, scale, self._window)
        return self._window

    def zoom_wheel(self, sx: float, sy: float, delta: float, *, delta_mode: int = 0) -> ViewWindow:
        return self.zoom_at(sx, sy, zoom_for_wheel(delta, delta_mode=delta_mode))

    def pan_by(self, dx_screen: float, dy_screen: float) -> ViewWindow:
        w = self._window
        dx = (dx_screen / self._canvas.width) * w.x_span
        dy = (dy_screen / self._canvas.height) * w.y_span
        # Screen y grows downward, world y grows upward.
        self._window = ViewWindow.from_bounds(w.x_min - dx, w.x_max - dx, w.y_min + dy, w.y_max + dy)
        return self._window

    def world_to_screen(self, x: float, y: float) -> tuple[float, float]:
        return world_to_screen(self._window, self._canvas, x, y)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return screen_to_world(self._window, self._canvas, sx, sy)
