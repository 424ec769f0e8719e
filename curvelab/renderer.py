from __future__ import annotations

from dataclasses import dataclass, field
import math

from curvelab.config import Theme
from curvelab.frame import FrameResult
from curvelab.hit_test import FramePoint
from curvelab.scales import compute_nice_step, format_number, grid_values
from curvelab.surface import DrawingSurface
from curvelab.transform import CanvasSize, ViewWindow, world_to_screen, world_to_screen_arrays


GRID_LINE_WIDTH = 1.0
AXIS_LINE_WIDTH = 1.5
TICK_FONT_PX = 12.0
ERROR_FONT_PX = 13.0
MARKER_ALPHA = 0.92
MARKER_RING_WIDTH = 2.0
ERROR_BAND_MAX_WIDTH = 560.0
ERROR_BAND_HEIGHT = 70.0
ERROR_BAND_BOTTOM_GAP = 10.0
ERROR_TEXT_INSET = 12.0
ZERO_LABEL_EPS = 1e-12


@dataclass
class Renderer:
    """Draws a computed frame; holds no numerical logic of its own."""

    theme: Theme = field(default_factory=Theme)
    marker_radius_px: float = 6.0

    def draw(self, surface: DrawingSurface, frame: FrameResult) -> None:
        window, canvas = frame.window, frame.canvas
        self.draw_background(surface, canvas)
        self.draw_grid_and_axes(surface, window, canvas)
        if frame.failed:
            self.draw_error_overlay(surface, canvas, frame.error or "")
            return
        self.draw_series(surface, frame)
        self.draw_markers(surface, [*frame.intercepts, *frame.intersections])

    def draw_background(self, surface: DrawingSurface, canvas: CanvasSize) -> None:
        surface.set_global_alpha(1.0)
        surface.clear_rect(0.0, 0.0, canvas.width, canvas.height)
        surface.set_fill_style(self.theme.background)
        surface.fill_rect(0.0, 0.0, canvas.width, canvas.height)

    def draw_grid_and_axes(self, surface: DrawingSurface, window: ViewWindow, canvas: CanvasSize) -> None:
        w, h = canvas.width, canvas.height
        x_ticks = grid_values(window.x_min, window.x_max, compute_nice_step(window.x_span))
        y_ticks = grid_values(window.y_min, window.y_max, compute_nice_step(window.y_span))

        surface.set_stroke_style(self.theme.grid)
        surface.set_line_width(GRID_LINE_WIDTH)
        surface.begin_path()
        for xv in x_ticks.tolist():
            sx, _ = world_to_screen(window, canvas, xv, 0.0)
            surface.move_to(round(sx) + 0.5, 0.0)
            surface.line_to(round(sx) + 0.5, h)
        for yv in y_ticks.tolist():
            _, sy = world_to_screen(window, canvas, 0.0, yv)
            surface.move_to(0.0, round(sy) + 0.5)
            surface.line_to(w, round(sy) + 0.5)
        surface.stroke()

        origin_sx, origin_sy = world_to_screen(window, canvas, 0.0, 0.0)
        surface.set_stroke_style(self.theme.axis)
        surface.set_line_width(AXIS_LINE_WIDTH)
        surface.begin_path()
        if 0.0 <= origin_sy <= h:
            surface.move_to(0.0, round(origin_sy) + 0.5)
            surface.line_to(w, round(origin_sy) + 0.5)
        if 0.0 <= origin_sx <= w:
            surface.move_to(round(origin_sx) + 0.5, 0.0)
            surface.line_to(round(origin_sx) + 0.5, h)
        surface.stroke()

        # Labels hug the axes and stay on-screen when an axis is out of view.
        surface.set_fill_style(self.theme.text)
        label_y = min(h - 14.0, max(2.0, origin_sy + 4.0))
        for xv in x_ticks.tolist():
            if abs(xv) < ZERO_LABEL_EPS:
                continue
            sx, _ = world_to_screen(window, canvas, xv, 0.0)
            surface.fill_text(format_number(xv), sx, label_y, font_size_px=TICK_FONT_PX, align="center", baseline="top")
        label_x = min(w - 2.0, origin_sx - 4.0)
        for yv in y_ticks.tolist():
            if abs(yv) < ZERO_LABEL_EPS:
                continue
            _, sy = world_to_screen(window, canvas, 0.0, yv)
            surface.fill_text(format_number(yv), label_x, sy, font_size_px=TICK_FONT_PX, align="right", baseline="middle")

    def draw_series(self, surface: DrawingSurface, frame: FrameResult) -> None:
        for sampled in frame.sampled:
            surface.set_stroke_style(sampled.style.color)
            surface.set_line_width(max(1, sampled.style.line_width))
            # One path per series: every polyline (or contour segment) shares a single stroke.
            surface.begin_path()
            for polyline in sampled.polylines:
                if len(polyline) < 2:
                    continue
                sxs, sys_ = world_to_screen_arrays(frame.window, frame.canvas, polyline.xs, polyline.ys)
                surface.move_to(float(sxs[0]), float(sys_[0]))
                for sx, sy in zip(sxs[1:].tolist(), sys_[1:].tolist(), strict=False):
                    surface.line_to(sx, sy)
            surface.stroke()

    def draw_markers(self, surface: DrawingSurface, points: list[FramePoint]) -> None:
        surface.set_line_width(MARKER_RING_WIDTH)
        surface.set_stroke_style(self.theme.marker_ring)
        surface.set_global_alpha(MARKER_ALPHA)
        for point in points:
            if not (math.isfinite(point.sx) and math.isfinite(point.sy)):
                continue
            surface.set_fill_style(point.color or self.theme.accent)
            surface.begin_path()
            surface.arc(point.sx, point.sy, self.marker_radius_px)
            surface.fill()
            surface.stroke()
        surface.set_global_alpha(1.0)

    def draw_error_overlay(self, surface: DrawingSurface, canvas: CanvasSize, message: str) -> None:
        top = canvas.height - ERROR_BAND_HEIGHT - ERROR_BAND_BOTTOM_GAP
        surface.set_fill_style(self.theme.error_band)
        surface.fill_rect(0.0, top, min(canvas.width, ERROR_BAND_MAX_WIDTH), ERROR_BAND_HEIGHT)
        surface.set_fill_style(self.theme.error_text)
        surface.fill_text(message, ERROR_TEXT_INSET, top + 10.0, font_size_px=ERROR_FONT_PX, baseline="top")
