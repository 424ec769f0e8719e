from curvelab.config import PlotterConfig, Theme, load_config, parse_color
from curvelab.errors import ConfigError, CurveLabError, SeriesCompileError, ViewError
from curvelab.expressions import EvaluableExpression, SeriesConfig, compile_series
from curvelab.frame import FrameResult, compute_frame
from curvelab.hit_test import InterceptHit, describe_point, nearest_intercept_at
from curvelab.plotter import Plotter
from curvelab.roots import InterceptPoint, IntersectionPoint, find_intercepts, find_intersections
from curvelab.sampler import Polyline, sample_all_series
from curvelab.scales import compute_nice_step, format_number
from curvelab.series import CartesianSeries, PolarSeries, RelationSeries, SeriesDefinition, SeriesStyle
from curvelab.surface import DrawingSurface, RasterSurface
from curvelab.transform import CanvasSize, ViewWindow, screen_to_world, world_to_screen
from curvelab.view import ViewState

__all__ = [
    "CanvasSize",
    "CartesianSeries",
    "ConfigError",
    "CurveLabError",
    "DrawingSurface",
    "EvaluableExpression",
    "FrameResult",
    "InterceptHit",
    "InterceptPoint",
    "IntersectionPoint",
    "PlotterConfig",
    "Plotter",
    "PolarSeries",
    "Polyline",
    "RasterSurface",
    "RelationSeries",
    "SeriesCompileError",
    "SeriesConfig",
    "SeriesDefinition",
    "SeriesStyle",
    "Theme",
    "ViewError",
    "ViewState",
    "ViewWindow",
    "compile_series",
    "compute_frame",
    "compute_nice_step",
    "describe_point",
    "find_intercepts",
    "find_intersections",
    "format_number",
    "load_config",
    "nearest_intercept_at",
    "parse_color",
    "sample_all_series",
    "screen_to_world",
    "world_to_screen",
]
