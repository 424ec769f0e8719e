from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Callable, Literal


RGBA = tuple[int, int, int, int]
SeriesKind = Literal["cartesian", "polar", "relation"]

DEFAULT_SERIES_COLOR: RGBA = (63, 167, 255, 255)


@dataclass(frozen=True)
class SeriesStyle:
    color: RGBA = DEFAULT_SERIES_COLOR
    visible: bool = True
    label: str | None = None
    line_width: int = 2


@dataclass(frozen=True)
class CartesianSeries:
    evaluate: Callable[[float], float]
    style: SeriesStyle = SeriesStyle()
    kind: Literal["cartesian"] = field(default="cartesian", init=False)


@dataclass(frozen=True)
class PolarSeries:
    evaluate: Callable[[float], float]
    style: SeriesStyle = SeriesStyle()
    kind: Literal["polar"] = field(default="polar", init=False)


@dataclass(frozen=True)
class RelationSeries:
    """Implicit relation; the plotted curve is the zero set of `evaluate(x, y)`."""

    evaluate: Callable[[float, float], float]
    style: SeriesStyle = SeriesStyle()
    kind: Literal["relation"] = field(default="relation", init=False)


SeriesDefinition = CartesianSeries | PolarSeries | RelationSeries


def safe_evaluate(fn: Callable[..., object], *args: float) -> float:
    """Evaluate one point, mapping any failure or non-finite result to NaN."""

    try:
        value = fn(*args)
        out = float(value)  # type: ignore[arg-type]
    except Exception:  # noqa: BLE001 - per-point failures are sampling gaps
        return math.nan
    return out if math.isfinite(out) else math.nan


def series_label(series: SeriesDefinition, index: int) -> str:
    label = series.style.label
    if label is not None and label.strip():
        return label
    return f"f{index + 1}"


def visible_cartesian(series_list: list[SeriesDefinition]) -> list[tuple[int, CartesianSeries]]:
    return [
        (idx, series)
        for idx, series in enumerate(series_list)
        if series.kind == "cartesian" and series.style.visible
    ]
