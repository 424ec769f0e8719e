from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Callable, Literal, Sequence

import numpy as np

from curvelab.series import RGBA, SeriesDefinition, safe_evaluate, series_label, visible_cartesian
from curvelab.transform import CanvasSize, ViewWindow, world_to_screen


LOGGER = logging.getLogger(__name__)

DEFAULT_BISECTION_ITERATIONS = 20
DEFAULT_BISECTION_TOLERANCE = 1e-9
DEFAULT_DEDUPE_PX = 6.0
MIN_SCAN_INTERVALS = 120
MAX_INTERSECTION_INTERVALS = 400

InterceptKind = Literal["x", "y"]


@dataclass(frozen=True)
class InterceptPoint:
    series_index: int
    kind: InterceptKind
    x: float
    y: float
    sx: float
    sy: float
    color: RGBA


@dataclass(frozen=True)
class IntersectionPoint:
    series_index_a: int
    series_index_b: int
    x: float
    y: float
    sx: float
    sy: float
    label_a: str
    label_b: str
    color: RGBA


def intercept_scan_intervals(sample_budget: int) -> int:
    return max(MIN_SCAN_INTERVALS, sample_budget // 5)


def intersection_scan_intervals(sample_budget: int) -> int:
    return min(MAX_INTERSECTION_INTERVALS, max(MIN_SCAN_INTERVALS, sample_budget // 3))


def find_intercepts(
    series_list: Sequence[SeriesDefinition],
    window: ViewWindow,
    canvas: CanvasSize,
    *,
    sample_budget: int = 1200,
) -> list[InterceptPoint]:
    n = intercept_scan_intervals(sample_budget)
    xs = window.x_min + (np.arange(n + 1, dtype=np.float64) / n) * window.x_span
    intercepts: list[InterceptPoint] = []
    for idx, series in visible_cartesian(list(series_list)):
        fn = series.evaluate
        color = series.style.color
        ys = np.fromiter((safe_evaluate(fn, float(x)) for x in xs), dtype=np.float64, count=xs.size)
        for xr in _x_crossings(xs, ys):
            sx, sy = world_to_screen(window, canvas, xr, 0.0)
            intercepts.append(InterceptPoint(series_index=idx, kind="x", x=xr, y=0.0, sx=sx, sy=sy, color=color))

        if window.contains_x(0.0):
            y_int = safe_evaluate(fn, 0.0)
            if math.isfinite(y_int) and window.contains_y(y_int):
                sx, sy = world_to_screen(window, canvas, 0.0, y_int)
                intercepts.append(
                    InterceptPoint(series_index=idx, kind="y", x=0.0, y=y_int, sx=sx, sy=sy, color=color)
                )
    return intercepts


def find_intersections(
    series_list: Sequence[SeriesDefinition],
    window: ViewWindow,
    canvas: CanvasSize,
    *,
    sample_budget: int = 1200,
    iterations: int = DEFAULT_BISECTION_ITERATIONS,
    tolerance: float = DEFAULT_BISECTION_TOLERANCE,
    dedupe_px: float = DEFAULT_DEDUPE_PX,
) -> list[IntersectionPoint]:
    visibles = visible_cartesian(list(series_list))
    if len(visibles) < 2:
        return []
    n = intersection_scan_intervals(sample_budget)
    step = window.x_span / n
    xs = window.x_min + np.arange(n + 1, dtype=np.float64) * step
    sampled = [
        np.fromiter((safe_evaluate(s.evaluate, float(x)) for x in xs), dtype=np.float64, count=xs.size)
        for _, s in visibles
    ]

    results: list[IntersectionPoint] = []
    for a in range(len(visibles)):
        for b in range(a + 1, len(visibles)):
            idx_a, s1 = visibles[a]
            idx_b, s2 = visibles[b]
            g_values = sampled[a] - sampled[b]

            def g(x: float, f1=s1.evaluate, f2=s2.evaluate) -> float:
                return _difference(f1, f2, x)

            for i in range(1, n + 1):
                prev_g = g_values[i - 1]
                cur_g = g_values[i]
                if not (math.isfinite(prev_g) and math.isfinite(cur_g)) or prev_g * cur_g > 0:
                    continue
                xr = bisect_root(g, float(xs[i - 1]), float(xs[i]), iterations=iterations, tolerance=tolerance)
                if xr is None or not window.contains_x(xr):
                    continue
                y = safe_evaluate(s1.evaluate, xr)
                if not math.isfinite(y) or not window.contains_y(y):
                    continue
                sx, sy = world_to_screen(window, canvas, xr, y)
                results.append(
                    IntersectionPoint(
                        series_index_a=idx_a,
                        series_index_b=idx_b,
                        x=xr,
                        y=y,
                        sx=sx,
                        sy=sy,
                        label_a=series_label(s1, idx_a),
                        label_b=series_label(s2, idx_b),
                        color=s1.style.color,
                    )
                )
    deduped = dedupe_close(results, dedupe_px)
    if len(deduped) != len(results):
        LOGGER.debug("merged %d near-coincident intersections", len(results) - len(deduped))
    return deduped


def bisect_root(
    fn: Callable[[float], float],
    a: float,
    b: float,
    *,
    iterations: int = DEFAULT_BISECTION_ITERATIONS,
    tolerance: float = DEFAULT_BISECTION_TOLERANCE,
) -> float | None:
    fa = fn(a)
    fb = fn(b)
    if not (math.isfinite(fa) and math.isfinite(fb)):
        return None
    if fa == 0:
        return a
    if fb == 0:
        return b
    if fa * fb > 0:
        return None
    lo, hi, flo = a, b, fa
    for _ in range(iterations):
        mid = 0.5 * (lo + hi)
        fm = fn(mid)
        if not math.isfinite(fm):
            return None
        if abs(fm) < tolerance:
            return mid
        if flo * fm <= 0:
            hi = mid
        else:
            lo = mid
            flo = fm
    return 0.5 * (lo + hi)


def dedupe_close(points: Sequence[IntersectionPoint], threshold_px: float) -> list[IntersectionPoint]:
    out: list[IntersectionPoint] = []
    for p in points:
        if not any(math.hypot(p.sx - q.sx, p.sy - q.sy) < threshold_px for q in out):
            out.append(p)
    return out


def _x_crossings(xs: np.ndarray, ys: np.ndarray) -> list[float]:
    out: list[float] = []
    if xs.size and ys[0] == 0:
        out.append(float(xs[0]))
    prev = ys[:-1]
    cur = ys[1:]
    finite = np.isfinite(prev) & np.isfinite(cur)
    # A sample landing exactly on a root is reported once, by the pair ending on it.
    crossing = finite & ((prev * cur < 0) | (cur == 0))
    for j in np.flatnonzero(crossing).tolist():
        y0 = float(prev[j])
        y1 = float(cur[j])
        t = 0.5 if y0 == y1 else (0.0 - y0) / (y1 - y0)
        out.append(float(xs[j] + t * (xs[j + 1] - xs[j])))
    return out


def _difference(f1: Callable[[float], float], f2: Callable[[float], float], x: float) -> float:
    a = safe_evaluate(f1, x)
    b = safe_evaluate(f2, x)
    if not (math.isfinite(a) and math.isfinite(b)):
        return math.nan
    return a - b
