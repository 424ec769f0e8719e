from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Mapping, Protocol, Sequence

from curvelab.config import parse_color
from curvelab.errors import ConfigError, SeriesCompileError
from curvelab.series import (
    RGBA,
    CartesianSeries,
    PolarSeries,
    RelationSeries,
    SeriesDefinition,
    SeriesKind,
    SeriesStyle,
)


LOGGER = logging.getLogger(__name__)

DEFAULT_PALETTE = ("#3fa7ff", "#ff6b6b", "#6ee7b7", "#fbbf24", "#c084fc", "#f472b6", "#60a5fa")
DERIVATIVE_STEP = 1e-4
THETA_SYMBOL = "θ"


class EvaluableExpression(Protocol):
    def evaluate(self, bindings: Mapping[str, float]) -> float:
        ...


ExpressionCompiler = Callable[[str], EvaluableExpression]


@dataclass(frozen=True)
class SeriesConfig:
    expr: str
    kind: SeriesKind = "cartesian"
    label: str | None = None
    color: str | RGBA | None = None
    visible: bool = True
    derivative: bool = False


def compile_series(
    configs: Sequence[SeriesConfig],
    compiler: ExpressionCompiler,
    variables: Mapping[str, float] | None = None,
) -> list[SeriesDefinition]:
    """Turn caller-side series configs into evaluable series definitions.

    `compiler` is the injected expression capability. Anything it raises is
    reported as a `SeriesCompileError` naming the offending series. Errors
    raised later by the returned callables are per-point and left to the
    sampler, which treats them as gaps.
    """

    bound_vars = {name.strip(): float(value) for name, value in (variables or {}).items() if name and name.strip()}
    out: list[SeriesDefinition] = []
    for i, cfg in enumerate(configs):
        if not cfg.visible:
            continue
        label = cfg.label or cfg.expr
        style = SeriesStyle(color=_resolve_color(cfg.color, i, label), visible=True, label=label)
        source = cfg.expr.replace(THETA_SYMBOL, "x") if cfg.kind == "polar" else cfg.expr
        try:
            expression = compiler(source)
        except Exception as exc:  # noqa: BLE001 - compiler is caller-provided
            LOGGER.warning("failed to compile series %r: %s", label, exc)
            raise SeriesCompileError(label, str(exc) or type(exc).__name__) from exc

        if cfg.kind == "cartesian":
            fn = _bind_1d(expression, bound_vars)
            out.append(CartesianSeries(evaluate=fn, style=style))
            if cfg.derivative:
                d_style = SeriesStyle(color=style.color, visible=True, label=f"{label}'")
                out.append(CartesianSeries(evaluate=central_difference(fn), style=d_style))
        elif cfg.kind == "polar":
            out.append(PolarSeries(evaluate=_bind_1d(expression, bound_vars), style=style))
        elif cfg.kind == "relation":
            out.append(RelationSeries(evaluate=_bind_2d(expression, bound_vars), style=style))
        else:
            raise SeriesCompileError(label, f"unsupported series kind: {cfg.kind!r}")
    return out


def central_difference(fn: Callable[[float], float], h: float = DERIVATIVE_STEP) -> Callable[[float], float]:
    def derivative(x: float) -> float:
        return (fn(x + h) - fn(x - h)) / (2.0 * h)

    return derivative


def _bind_1d(expression: EvaluableExpression, variables: dict[str, float]) -> Callable[[float], float]:
    def evaluate(x: float) -> float:
        return float(expression.evaluate({**variables, "x": x}))

    return evaluate


def _bind_2d(expression: EvaluableExpression, variables: dict[str, float]) -> Callable[[float, float], float]:
    def evaluate(x: float, y: float) -> float:
        return float(expression.evaluate({**variables, "x": x, "y": y}))

    return evaluate


def _resolve_color(color: str | RGBA | None, index: int, label: str) -> RGBA:
    if color is None:
        return parse_color(DEFAULT_PALETTE[index % len(DEFAULT_PALETTE)])
    try:
        return parse_color(color)
    except ConfigError as exc:
        raise SeriesCompileError(label, str(exc)) from exc
