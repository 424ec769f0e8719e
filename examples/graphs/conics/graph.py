from __future__ import annotations

from typing import Mapping

import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from curvelab import SeriesConfig, SeriesDefinition, compile_series


TRANSFORMATIONS = standard_transformations + (convert_xor,)


class SympyExpression:
    """Parses `^`-style math text with SymPy and evaluates it through `math`."""

    def __init__(self, source: str) -> None:
        expr = parse_expr(source, transformations=TRANSFORMATIONS, evaluate=True)
        symbols = tuple(sorted(expr.free_symbols, key=lambda s: s.name))
        self._names = tuple(s.name for s in symbols)
        self._fn = sp.lambdify(symbols, expr, modules="math")

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        return self._fn(*(bindings[name] for name in self._names))


def build_series() -> list[SeriesDefinition]:
    configs = [
        SeriesConfig(expr="x^2 + y^2 - r^2", kind="relation", label="circle"),
        SeriesConfig(expr="2*cos(3*θ)", kind="polar", label="rose"),
        SeriesConfig(expr="x^2 - y^2 - 1", kind="relation", label="hyperbola"),
        SeriesConfig(expr="x^3/3 - x", kind="cartesian", derivative=True),
    ]
    return compile_series(configs, SympyExpression, variables={"r": 1.5})
