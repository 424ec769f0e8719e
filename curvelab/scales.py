from __future__ import annotations

from decimal import Decimal, InvalidOperation
import math

import numpy as np


GRID_DIVISIONS = 10
GRID_EDGE_EPS = 1e-9
FIXED_DECIMALS = 6
SCIENTIFIC_BELOW = 1e-3
SCIENTIFIC_AT_OR_ABOVE = 1e5


def compute_nice_step(span: float, *, divisions: int = GRID_DIVISIONS) -> float:
    if not math.isfinite(span) or span <= 0:
        raise ValueError(f"span must be finite and > 0, got {span!r}")
    if divisions <= 0:
        raise ValueError("divisions must be > 0")
    raw = span / divisions
    pow10 = 10.0 ** math.floor(math.log10(raw))
    base = raw / pow10
    if base < 1.5:
        nice = 1.0
    elif base < 3.5:
        nice = 2.0
    elif base < 7.5:
        nice = 5.0
    else:
        nice = 10.0
    return nice * pow10


def grid_values(vmin: float, vmax: float, step: float) -> np.ndarray:
    if not math.isfinite(step) or step <= 0:
        raise ValueError("step must be finite and > 0")
    start_index = math.ceil(vmin / step)
    stop_index = math.floor((vmax + GRID_EDGE_EPS) / step)
    if stop_index < start_index:
        return np.zeros(0, dtype=np.float64)
    values = np.arange(start_index, stop_index + 1, dtype=np.float64) * step
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    values[np.isclose(values, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return values


def format_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v != 0 and (abs_v < SCIENTIFIC_BELOW or abs_v >= SCIENTIFIC_AT_OR_ABOVE):
        return f"{value:.2e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-FIXED_DECIMALS)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out
