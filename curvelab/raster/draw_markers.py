from __future__ import annotations

import math

import numpy as np

from curvelab.raster.canvas import RGBA, blend_mask


def draw_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    coverage = _annulus_coverage(cx, cy, inner=None, outer=radius)
    if coverage is not None:
        x0, y0, mask = coverage
        blend_mask(dst, x0, y0, mask, color)


def draw_ring(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA, width: float = 1.0) -> None:
    half = max(0.5, float(width) * 0.5)
    coverage = _annulus_coverage(cx, cy, inner=max(0.0, radius - half), outer=radius + half)
    if coverage is not None:
        x0, y0, mask = coverage
        blend_mask(dst, x0, y0, mask, color)


def _annulus_coverage(
    cx: float,
    cy: float,
    *,
    inner: float | None,
    outer: float,
) -> tuple[int, int, np.ndarray] | None:
    if not (math.isfinite(cx) and math.isfinite(cy)) or outer <= 0:
        return None
    x0 = int(math.floor(cx - outer - 1))
    y0 = int(math.floor(cy - outer - 1))
    size_x = int(math.ceil(cx + outer + 1)) - x0 + 1
    size_y = int(math.ceil(cy + outer + 1)) - y0 + 1
    px = np.arange(size_x, dtype=np.float32) + x0 + 0.5
    py = np.arange(size_y, dtype=np.float32) + y0 + 0.5
    dist = np.hypot(px[None, :] - cx, py[:, None] - cy)
    cov = np.clip(outer + 0.5 - dist, 0.0, 1.0)
    if inner is not None and inner > 0:
        cov = np.minimum(cov, np.clip(dist - inner + 0.5, 0.0, 1.0))
    return x0, y0, np.rint(cov * 255.0).astype(np.uint8)
