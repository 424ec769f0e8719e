from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

import numpy as np
from PIL import Image, ImageDraw

from curvelab.raster import (
    blend_mask,
    clear_rect,
    draw_disc,
    draw_polylines,
    draw_ring,
    draw_text,
    fill_rect,
    new_canvas,
    text_size,
    with_alpha,
)
from curvelab.raster.canvas import RGBA
from curvelab.raster.draw_text import DEFAULT_FONT_SIZE_PX


TextAlign = Literal["left", "center", "right"]
TextBaseline = Literal["top", "middle", "bottom"]


class DrawingSurface(Protocol):
    """2D drawing context in CSS-pixel coordinates (origin top-left)."""

    @property
    def size(self) -> tuple[float, float]:
        ...

    @property
    def device_pixel_ratio(self) -> float:
        ...

    def resize(self, width: float, height: float, device_pixel_ratio: float) -> None:
        ...

    def set_stroke_style(self, color: RGBA) -> None:
        ...

    def set_fill_style(self, color: RGBA) -> None:
        ...

    def set_line_width(self, width: float) -> None:
        ...

    def set_global_alpha(self, alpha: float) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def arc(self, cx: float, cy: float, radius: float) -> None:
        ...

    def stroke(self) -> None:
        ...

    def fill(self) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size_px: float = DEFAULT_FONT_SIZE_PX,
        align: TextAlign = "left",
        baseline: TextBaseline = "top",
    ) -> None:
        ...


@dataclass
class _PathState:
    subpaths: list[list[tuple[float, float]]] = field(default_factory=list)
    circles: list[tuple[float, float, float]] = field(default_factory=list)


class RasterSurface:
    """DrawingSurface backed by an (H, W, 4) uint8 numpy canvas."""

    def __init__(self, width: float, height: float, device_pixel_ratio: float = 1.0) -> None:
        self._stroke: RGBA = (0, 0, 0, 255)
        self._fill: RGBA = (0, 0, 0, 255)
        self._line_width = 1.0
        self._alpha = 1.0
        self._path = _PathState()
        self.resize(width, height, device_pixel_ratio)

    @property
    def size(self) -> tuple[float, float]:
        return (self._width, self._height)

    @property
    def device_pixel_ratio(self) -> float:
        return self._dpr

    def resize(self, width: float, height: float, device_pixel_ratio: float = 1.0) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("surface width/height must be > 0")
        if device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be > 0")
        self._width = float(width)
        self._height = float(height)
        self._dpr = float(device_pixel_ratio)
        backing_w = max(1, int(round(int(width) * self._dpr)))
        backing_h = max(1, int(round(int(height) * self._dpr)))
        self._canvas = new_canvas(backing_w, backing_h, color=(0, 0, 0, 0))

    def set_stroke_style(self, color: RGBA) -> None:
        self._stroke = color

    def set_fill_style(self, color: RGBA) -> None:
        self._fill = color

    def set_line_width(self, width: float) -> None:
        if width <= 0:
            raise ValueError("line width must be > 0")
        self._line_width = float(width)

    def set_global_alpha(self, alpha: float) -> None:
        self._alpha = max(0.0, min(1.0, float(alpha)))

    def begin_path(self) -> None:
        self._path = _PathState()

    def move_to(self, x: float, y: float) -> None:
        self._path.subpaths.append([(x, y)])

    def line_to(self, x: float, y: float) -> None:
        if not self._path.subpaths:
            self._path.subpaths.append([(x, y)])
            return
        self._path.subpaths[-1].append((x, y))

    def arc(self, cx: float, cy: float, radius: float) -> None:
        self._path.circles.append((cx, cy, radius))

    def stroke(self) -> None:
        color = with_alpha(self._stroke, self._alpha)
        width = max(1, int(round(self._line_width * self._dpr)))
        paths: list[tuple[np.ndarray, np.ndarray]] = []
        for points in self._path.subpaths:
            if len(points) < 2:
                continue
            pts = np.asarray(points, dtype=np.float64) * self._dpr
            paths.append((pts[:, 0], pts[:, 1]))
        if paths:
            draw_polylines(self._canvas, paths, color, width=width)
        for cx, cy, radius in self._path.circles:
            draw_ring(
                self._canvas,
                cx * self._dpr,
                cy * self._dpr,
                radius * self._dpr,
                color,
                width=self._line_width * self._dpr,
            )

    def fill(self) -> None:
        color = with_alpha(self._fill, self._alpha)
        for points in self._path.subpaths:
            if len(points) < 3:
                continue
            self._fill_polygon(points, color)
        for cx, cy, radius in self._path.circles:
            draw_disc(self._canvas, cx * self._dpr, cy * self._dpr, radius * self._dpr, color)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0, x1, y1 = self._device_rect(x, y, width, height)
        fill_rect(self._canvas, x0, y0, x1, y1, with_alpha(self._fill, self._alpha))

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0, x1, y1 = self._device_rect(x, y, width, height)
        clear_rect(self._canvas, x0, y0, x1, y1)

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size_px: float = DEFAULT_FONT_SIZE_PX,
        align: TextAlign = "left",
        baseline: TextBaseline = "top",
    ) -> None:
        if not text:
            return
        size_px = font_size_px * self._dpr
        tw, th = text_size(text, font_size_px=size_px)
        left = x * self._dpr
        top = y * self._dpr
        if align == "center":
            left -= tw / 2.0
        elif align == "right":
            left -= tw
        if baseline == "middle":
            top -= th / 2.0
        elif baseline == "bottom":
            top -= th
        draw_text(
            self._canvas,
            int(round(left)),
            int(round(top)),
            text,
            with_alpha(self._fill, self._alpha),
            font_size_px=size_px,
        )

    def to_rgba(self) -> np.ndarray:
        return self._canvas.copy()

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self._canvas).save(out, format="PNG")
        return out

    def _device_rect(self, x: float, y: float, width: float, height: float) -> tuple[int, int, int, int]:
        d = self._dpr
        return (
            int(round(x * d)),
            int(round(y * d)),
            int(round((x + width) * d)),
            int(round((y + height) * d)),
        )

    def _fill_polygon(self, points: list[tuple[float, float]], color: RGBA) -> None:
        pts = np.asarray(points, dtype=np.float64) * self._dpr
        if not np.all(np.isfinite(pts)):
            return
        h, w = self._canvas.shape[0], self._canvas.shape[1]
        x0 = max(0, int(np.floor(pts[:, 0].min())))
        y0 = max(0, int(np.floor(pts[:, 1].min())))
        x1 = min(w, int(np.ceil(pts[:, 0].max())) + 1)
        y1 = min(h, int(np.ceil(pts[:, 1].max())) + 1)
        if x1 <= x0 or y1 <= y0:
            return
        mask_image = Image.new("L", (x1 - x0, y1 - y0), 0)
        ImageDraw.Draw(mask_image).polygon([(px - x0, py - y0) for px, py in pts.tolist()], fill=255)
        blend_mask(self._canvas, x0, y0, np.asarray(mask_image, dtype=np.uint8), color)
