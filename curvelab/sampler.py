from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable

import numpy as np

from curvelab.series import SeriesDefinition, SeriesStyle, safe_evaluate
from curvelab.transform import CanvasSize, ViewWindow, pixels_per_unit


LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLE_BUDGET = 1200
DEFAULT_POLAR_STEPS = 1000
DEFAULT_GRID_COLS = 48
DEFAULT_GRID_ROWS = 32
POLAR_THETA_MIN = -2.0 * math.pi
POLAR_THETA_MAX = 2.0 * math.pi
SAMPLE_EDGE_EPS = 1e-9

# Cell corners: 0=(x, y), 1=(x+dx, y), 2=(x+dx, y+dy), 3=(x, y+dy).
# Bit k of the pattern is set when corner k is > 0. Each entry lists the two
# corner pairs whose edges carry the zero crossing. The saddles (5 and 10)
# always resolve to a single segment across the cell, without a centre sample.
MARCHING_SQUARES_EDGES: tuple[tuple[tuple[int, int], ...], ...] = (
    (),
    ((0, 3), (0, 1)),
    ((0, 1), (1, 2)),
    ((0, 3), (1, 2)),
    ((1, 2), (2, 3)),
    ((0, 1), (2, 3)),
    ((0, 1), (2, 3)),
    ((2, 3), (3, 0)),
    ((2, 3), (3, 0)),
    ((0, 1), (2, 3)),
    ((0, 3), (1, 2)),
    ((1, 2), (2, 3)),
    ((0, 3), (1, 2)),
    ((0, 1), (1, 2)),
    ((0, 3), (0, 1)),
    (),
)


@dataclass(frozen=True)
class Polyline:
    xs: np.ndarray
    ys: np.ndarray

    def __len__(self) -> int:
        return int(self.xs.size)


@dataclass(frozen=True)
class SampledSeries:
    series_index: int
    style: SeriesStyle
    polylines: tuple[Polyline, ...]


def cartesian_step(window: ViewWindow, canvas: CanvasSize, sample_budget: int = DEFAULT_SAMPLE_BUDGET) -> float:
    if sample_budget <= 0:
        raise ValueError("sample_budget must be > 0")
    ppx, _ = pixels_per_unit(window, canvas)
    return max(1.0 / ppx, window.x_span / sample_budget)


def split_on_gaps(xs: np.ndarray, ys: np.ndarray) -> list[Polyline]:
    mask = np.isfinite(xs) & np.isfinite(ys)
    return [Polyline(xs=xs[start:stop].copy(), ys=ys[start:stop].copy()) for start, stop in _contiguous_true_runs(mask)]


def sample_cartesian(
    fn: Callable[[float], float],
    window: ViewWindow,
    canvas: CanvasSize,
    *,
    sample_budget: int = DEFAULT_SAMPLE_BUDGET,
) -> list[Polyline]:
    step = cartesian_step(window, canvas, sample_budget)
    count = int(math.floor((window.x_span + SAMPLE_EDGE_EPS) / step)) + 1
    xs = window.x_min + np.arange(count, dtype=np.float64) * step
    ys = np.fromiter((safe_evaluate(fn, float(x)) for x in xs), dtype=np.float64, count=count)
    return split_on_gaps(xs, ys)


def sample_polar(fn: Callable[[float], float], *, steps: int = DEFAULT_POLAR_STEPS) -> list[Polyline]:
    if steps <= 0:
        raise ValueError("steps must be > 0")
    thetas = POLAR_THETA_MIN + (np.arange(steps + 1, dtype=np.float64) / steps) * (POLAR_THETA_MAX - POLAR_THETA_MIN)
    radii = np.fromiter((safe_evaluate(fn, float(t)) for t in thetas), dtype=np.float64, count=thetas.size)
    return split_on_gaps(radii * np.cos(thetas), radii * np.sin(thetas))


def sample_relation(
    fn: Callable[[float, float], float],
    window: ViewWindow,
    *,
    cols: int = DEFAULT_GRID_COLS,
    rows: int = DEFAULT_GRID_ROWS,
) -> list[Polyline]:
    if cols <= 0 or rows <= 0:
        raise ValueError("grid cols/rows must be > 0")
    dx = window.x_span / cols
    dy = window.y_span / rows
    grid_x = window.x_min + np.arange(cols + 1, dtype=np.float64) * dx
    grid_y = window.y_min + np.arange(rows + 1, dtype=np.float64) * dy
    values = np.empty((rows + 1, cols + 1), dtype=np.float64)
    for j, y in enumerate(grid_y.tolist()):
        for i, x in enumerate(grid_x.tolist()):
            values[j, i] = safe_evaluate(fn, x, y)

    segments: list[Polyline] = []
    for j in range(rows):
        y = float(grid_y[j])
        for i in range(cols):
            x = float(grid_x[i])
            v = (values[j, i], values[j, i + 1], values[j + 1, i + 1], values[j + 1, i])
            if not all(math.isfinite(val) for val in v):
                continue
            pattern = 0
            for k in range(4):
                if v[k] > 0:
                    pattern |= 1 << k
            edges = MARCHING_SQUARES_EDGES[pattern]
            if len(edges) != 2:
                continue
            corners = ((x, y), (x + dx, y), (x + dx, y + dy), (x, y + dy))
            pts = [_interpolate_zero(corners[a], corners[b], v[a], v[b]) for a, b in edges]
            segments.append(
                Polyline(
                    xs=np.asarray([pts[0][0], pts[1][0]], dtype=np.float64),
                    ys=np.asarray([pts[0][1], pts[1][1]], dtype=np.float64),
                )
            )
    return segments


def sample_series(
    series: SeriesDefinition,
    window: ViewWindow,
    canvas: CanvasSize,
    *,
    sample_budget: int = DEFAULT_SAMPLE_BUDGET,
    polar_steps: int = DEFAULT_POLAR_STEPS,
    grid_cols: int = DEFAULT_GRID_COLS,
    grid_rows: int = DEFAULT_GRID_ROWS,
) -> list[Polyline]:
    if not series.style.visible:
        return []
    if series.kind == "cartesian":
        return sample_cartesian(series.evaluate, window, canvas, sample_budget=sample_budget)
    if series.kind == "polar":
        return sample_polar(series.evaluate, steps=polar_steps)
    if series.kind == "relation":
        return sample_relation(series.evaluate, window, cols=grid_cols, rows=grid_rows)
    raise ValueError(f"unsupported series kind: {series.kind!r}")


def sample_all_series(
    series_list: list[SeriesDefinition],
    window: ViewWindow,
    canvas: CanvasSize,
    *,
    sample_budget: int = DEFAULT_SAMPLE_BUDGET,
    polar_steps: int = DEFAULT_POLAR_STEPS,
    grid_cols: int = DEFAULT_GRID_COLS,
    grid_rows: int = DEFAULT_GRID_ROWS,
) -> list[SampledSeries]:
    out: list[SampledSeries] = []
    for idx, series in enumerate(series_list):
        if not series.style.visible:
            continue
        polylines = sample_series(
            series,
            window,
            canvas,
            sample_budget=sample_budget,
            polar_steps=polar_steps,
            grid_cols=grid_cols,
            grid_rows=grid_rows,
        )
        LOGGER.debug("series %d (%s): %d polylines", idx, series.kind, len(polylines))
        out.append(SampledSeries(series_index=idx, style=series.style, polylines=tuple(polylines)))
    return out


def _interpolate_zero(
    p1: tuple[float, float],
    p2: tuple[float, float],
    v1: float,
    v2: float,
) -> tuple[float, float]:
    t = 0.5 if v1 == v2 else (0.0 - v1) / (v2 - v1)
    return (p1[0] + t * (p2[0] - p1[0]), p1[1] + t * (p2[1] - p1[1]))


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs
