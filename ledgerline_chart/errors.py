from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when a data series cannot be normalized into chart points."""


class ChartConfigError(ValueError):
    """Raised when a chart configuration mapping or file is invalid."""
