from __future__ import annotations

import math

from curvelab import CartesianSeries, SeriesStyle


def build_series() -> list[CartesianSeries]:
    return [
        CartesianSeries(evaluate=math.sin, style=SeriesStyle(color=(63, 167, 255, 255), label="sin(x)")),
        CartesianSeries(evaluate=math.cos, style=SeriesStyle(color=(255, 107, 107, 255), label="cos(x)")),
        CartesianSeries(evaluate=lambda x: 0.1 * x * x - 2.0, style=SeriesStyle(color=(110, 231, 183, 255), label="x^2/10 - 2")),
        # Undefined for x <= 0; the sampler leaves a gap there.
        CartesianSeries(evaluate=math.log, style=SeriesStyle(color=(251, 191, 36, 255), label="ln(x)")),
    ]
