from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from curvelab.config import PlotterConfig
from curvelab.roots import InterceptPoint, IntersectionPoint, find_intercepts, find_intersections
from curvelab.sampler import SampledSeries, sample_all_series
from curvelab.series import SeriesDefinition
from curvelab.transform import CanvasSize, ViewWindow


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Everything one render pass computed; discarded on the next pass."""

    window: ViewWindow
    canvas: CanvasSize
    sampled: tuple[SampledSeries, ...] = ()
    intercepts: tuple[InterceptPoint, ...] = ()
    intersections: tuple[IntersectionPoint, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def with_error(cls, window: ViewWindow, canvas: CanvasSize, message: str) -> "FrameResult":
        return cls(window=window, canvas=canvas, error=message)


def compute_frame(
    series: Sequence[SeriesDefinition],
    window: ViewWindow,
    canvas: CanvasSize,
    config: PlotterConfig,
) -> FrameResult:
    series_list = list(series)
    sampled = sample_all_series(
        series_list,
        window,
        canvas,
        sample_budget=config.sample_budget,
        polar_steps=config.polar_steps,
        grid_cols=config.grid_cols,
        grid_rows=config.grid_rows,
    )
    intercepts = find_intercepts(series_list, window, canvas, sample_budget=config.sample_budget)
    intersections = find_intersections(
        series_list,
        window,
        canvas,
        sample_budget=config.sample_budget,
        iterations=config.bisection_iterations,
        tolerance=config.bisection_tolerance,
        dedupe_px=config.dedupe_px,
    )
    LOGGER.debug(
        "frame: %d series, %d polylines, %d intercepts, %d intersections",
        len(sampled),
        sum(len(s.polylines) for s in sampled),
        len(intercepts),
        len(intersections),
    )
    return FrameResult(
        window=window,
        canvas=canvas,
        sampled=tuple(sampled),
        intercepts=tuple(intercepts),
        intersections=tuple(intersections),
    )
