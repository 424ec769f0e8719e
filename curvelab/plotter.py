from __future__ import annotations

import logging
from typing import Sequence

from curvelab.config import PlotterConfig
from curvelab.frame import FrameResult, compute_frame
from curvelab.hit_test import InterceptHit, nearest_intercept_at
from curvelab.renderer import Renderer
from curvelab.series import SeriesDefinition
from curvelab.surface import DrawingSurface
from curvelab.transform import CanvasSize, ViewWindow
from curvelab.view import ViewState


LOGGER = logging.getLogger(__name__)


class Plotter:
    """Single-threaded plotting facade: navigation mutators redraw synchronously."""

    def __init__(
        self,
        surface: DrawingSurface,
        config: PlotterConfig | None = None,
        *,
        window: ViewWindow | None = None,
    ) -> None:
        self._config = config or PlotterConfig()
        self._surface = surface
        width, height = surface.size
        canvas = CanvasSize(width=width, height=height, device_pixel_ratio=surface.device_pixel_ratio)
        self._view = ViewState(
            canvas,
            window or self._config.default_window,
            default_window=self._config.default_window,
        )
        self._renderer = Renderer(theme=self._config.theme, marker_radius_px=self._config.marker_radius_px)
        self._series: tuple[SeriesDefinition, ...] = ()
        self._last_frame: FrameResult | None = None

    @property
    def config(self) -> PlotterConfig:
        return self._config

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def window(self) -> ViewWindow:
        return self._view.window

    @property
    def series(self) -> tuple[SeriesDefinition, ...]:
        return self._series

    @property
    def last_frame(self) -> FrameResult | None:
        return self._last_frame

    def set_series(self, series: Sequence[SeriesDefinition] | None) -> FrameResult:
        self._series = tuple(series or ())
        return self.draw()

    def set_domain(self, x_min: float, x_max: float) -> FrameResult:
        self._view.set_domain(x_min, x_max)
        return self.draw()

    def set_y_range(self, y_min: float, y_max: float) -> FrameResult:
        self._view.set_range(y_min, y_max)
        return self.draw()

    def reset_view(self) -> FrameResult:
        self._view.reset()
        return self.draw()

    def zoom_at(self, sx: float, sy: float, scale: float) -> FrameResult:
        self._view.zoom_at(sx, sy, scale)
        return self.draw()

    def zoom_wheel(self, sx: float, sy: float, delta: float, *, delta_mode: int = 0) -> FrameResult:
        self._view.zoom_wheel(sx, sy, delta, delta_mode=delta_mode)
        return self.draw()

    def pan_by(self, dx_screen: float, dy_screen: float) -> FrameResult:
        self._view.pan_by(dx_screen, dy_screen)
        return self.draw()

    def resize(self, width: float, height: float, device_pixel_ratio: float | None = None) -> FrameResult:
        dpr = self._surface.device_pixel_ratio if device_pixel_ratio is None else device_pixel_ratio
        self._surface.resize(width, height, dpr)
        self._view.resize(width, height, dpr)
        return self.draw()

    def draw(self, error_message: str | None = None) -> FrameResult:
        window = self._view.window
        canvas = self._view.canvas
        if error_message:
            frame = FrameResult.with_error(window, canvas, error_message)
        else:
            try:
                frame = compute_frame(self._series, window, canvas, self._config)
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("render pass failed: %s", exc)
                frame = FrameResult.with_error(window, canvas, str(exc) or type(exc).__name__)
        self._renderer.draw(self._surface, frame)
        self._last_frame = frame
        return frame

    def get_intercept_at_screen(self, sx: float, sy: float, threshold_px: float | None = None) -> InterceptHit | None:
        frame = self._last_frame
        if frame is None or frame.failed:
            return None
        threshold = self._config.hit_threshold_px if threshold_px is None else threshold_px
        return nearest_intercept_at(frame.intercepts, frame.intersections, sx, sy, threshold)

    def world_to_screen(self, x: float, y: float) -> tuple[float, float]:
        return self._view.world_to_screen(x, y)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return self._view.screen_to_world(sx, sy)
