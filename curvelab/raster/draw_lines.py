from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from curvelab.raster.canvas import RGBA, blend_mask


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Stroke connected segments through (xs, ys) in pixel coordinates."""

    draw_polylines(dst, [(xs, ys)], color, width=width)


def draw_polylines(
    dst: np.ndarray,
    paths: Iterable[tuple[np.ndarray, np.ndarray]],
    color: RGBA,
    width: int = 1,
) -> None:
    """Stroke several polylines as one path.

    Segments are clipped to the canvas (plus brush margin) before rasterizing,
    so far off-screen vertices cost nothing. Coverage for every segment goes
    into one mask sized to the clipped bounding box, so overlapping brush
    stamps do not darken translucent strokes and compositing only touches the
    pixels the stroke can reach.
    """

    h, w = dst.shape[0], dst.shape[1]
    radius = max(0, int(width) // 2)
    segments: list[tuple[int, int, int, int]] = []
    for xs, ys in paths:
        for i in range(xs.size - 1):
            clipped = clip_segment(
                float(xs[i]),
                float(ys[i]),
                float(xs[i + 1]),
                float(ys[i + 1]),
                xmin=-radius - 1.0,
                ymin=-radius - 1.0,
                xmax=w + radius + 1.0,
                ymax=h + radius + 1.0,
            )
            if clipped is None:
                continue
            x0, y0, x1, y1 = clipped
            segments.append((int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1))))
    if not segments:
        return

    ends = np.asarray(segments, dtype=np.int64)
    bx0 = max(0, int(min(ends[:, 0].min(), ends[:, 2].min())) - radius)
    by0 = max(0, int(min(ends[:, 1].min(), ends[:, 3].min())) - radius)
    bx1 = min(w, int(max(ends[:, 0].max(), ends[:, 2].max())) + radius + 1)
    by1 = min(h, int(max(ends[:, 1].max(), ends[:, 3].max())) + radius + 1)
    if bx1 <= bx0 or by1 <= by0:
        return

    mask = np.zeros((by1 - by0, bx1 - bx0), dtype=np.uint8)
    for x0, y0, x1, y1 in segments:
        _stamp_line(mask, x0 - bx0, y0 - by0, x1 - bx0, y1 - by0, radius)
    blend_mask(dst, bx0, by0, mask, color)


def clip_segment(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    *,
    xmin: float,
    ymin: float,
    xmax: float,
    ymax: float,
) -> tuple[float, float, float, float] | None:
    """Liang-Barsky clip of one segment; None when it misses the rect."""

    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return (x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


def _stamp_line(mask: np.ndarray, x0: int, y0: int, x1: int, y1: int, radius: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _stamp_square(mask, x0, y0, radius)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp_square(mask: np.ndarray, x: int, y: int, radius: int) -> None:
    ya = max(0, y - radius)
    yb = min(mask.shape[0], y + radius + 1)
    xa = max(0, x - radius)
    xb = min(mask.shape[1], x + radius + 1)
    if xa < xb and ya < yb:
        mask[ya:yb, xa:xb] = 255
