from __future__ import annotations


class CurveLabError(Exception):
    """Base class for errors raised by curvelab."""


class ViewError(CurveLabError, ValueError):
    pass


class ConfigError(CurveLabError, ValueError):
    pass


class SeriesCompileError(CurveLabError):
    """A series expression could not be turned into an evaluator.

    Raised once per series at setup time; per-point evaluation failures never
    surface as exceptions.
    """

    def __init__(self, label: str, message: str) -> None:
        super().__init__(f"{label}: {message}")
        self.label = label
        self.message = message
