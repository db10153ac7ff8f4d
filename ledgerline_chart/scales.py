from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

import numpy as np

from ledgerline_chart.config import DEFAULT_NICE_STEP, CanvasGeometry

LOGGER = logging.getLogger(__name__)

FIT_PAD_RATIO = 0.10
FLAT_RANGE_PAD = 1.0
MIN_RANGE = 1.0
GRID_LINE_COUNT = 5


@dataclass(frozen=True)
class AxisRange:
    min_y: float
    max_y: float
    empty: bool = False

    @property
    def span(self) -> float:
        return max(self.max_y - self.min_y, MIN_RANGE)


EMPTY_RANGE = AxisRange(min_y=0.0, max_y=0.0, empty=True)


def resolve_range(
    values: Sequence[float] | np.ndarray,
    *,
    fit_data_range: bool,
    nice_step: float = DEFAULT_NICE_STEP,
) -> AxisRange:
    """Derive y-axis bounds for a series.

    Fit mode pads the data extent by 10% on each side. Otherwise the bounds
    always include zero and snap outward to multiples of `nice_step`.
    An empty series yields `EMPTY_RANGE`; nothing should be mapped against it.
    """

    vals = np.asarray(values, dtype=np.float64)
    if vals.size == 0:
        LOGGER.debug("empty series; no axis range")
        return EMPTY_RANGE

    data_min = float(np.min(vals))
    data_max = float(np.max(vals))

    if fit_data_range:
        pad = (data_max - data_min) * FIT_PAD_RATIO
        if pad == 0.0:
            LOGGER.debug("flat series at %s; padding range by %s", data_min, FLAT_RANGE_PAD)
            pad = FLAT_RANGE_PAD
        min_y = data_min - pad
        max_y = data_max + pad
    else:
        min_y = min(data_min, 0.0)
        max_y = max(data_max, 0.0)
        nice_min = float(np.floor(min_y / nice_step) * nice_step)
        nice_span = float(np.ceil((max_y - nice_min) / nice_step) * nice_step)
        if nice_span == 0.0:
            nice_span = nice_step
        # Rounding is outward, but re-clamp so zero stays inside the bounds.
        min_y = min(nice_min, 0.0)
        max_y = max(nice_min + nice_span, 0.0)

    if max_y - min_y < MIN_RANGE:
        # Widen around the midpoint so near-flat data stays centered.
        mid = (min_y + max_y) / 2.0
        min_y = mid - MIN_RANGE / 2.0
        max_y = mid + MIN_RANGE / 2.0
    return AxisRange(min_y=min_y, max_y=max_y)


@dataclass(frozen=True)
class ChartScale:
    """Maps (index, value) pairs into canvas pixels.

    Pixel y grows downward while values grow upward, so larger values map to
    smaller y.
    """

    axis: AxisRange
    canvas: CanvasGeometry
    x_scale: float
    y_scale: float

    @classmethod
    def build(cls, axis: AxisRange, canvas: CanvasGeometry, count: int) -> "ChartScale":
        x_scale = canvas.chart_area_width / max(count - 1, 1)
        y_scale = canvas.chart_area_height / axis.span
        return cls(axis=axis, canvas=canvas, x_scale=x_scale, y_scale=y_scale)

    @property
    def plot_left(self) -> float:
        return self.canvas.left_padding

    @property
    def plot_right(self) -> float:
        return self.canvas.left_padding + self.canvas.chart_area_width

    @property
    def plot_top(self) -> float:
        return self.canvas.top_padding

    @property
    def plot_bottom(self) -> float:
        return self.canvas.top_padding + self.canvas.chart_area_height

    def x_at(self, index: float) -> float:
        return float(self.canvas.left_padding + index * self.x_scale)

    def y_at(self, value: float) -> float:
        return float(self.plot_bottom - (value - self.axis.min_y) * self.y_scale)

    def map_point(self, index: float, value: float) -> tuple[float, float]:
        return (self.x_at(index), self.y_at(value))

    def map_series(self, values: Sequence[float] | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        vals = np.asarray(values, dtype=np.float64)
        xs = self.canvas.left_padding + np.arange(vals.size, dtype=np.float64) * self.x_scale
        ys = self.plot_bottom - (vals - self.axis.min_y) * self.y_scale
        return xs, ys


def grid_values(axis: AxisRange, count: int = GRID_LINE_COUNT) -> np.ndarray:
    """Evenly spaced values from the top bound down to the bottom bound."""

    if count <= 0:
        raise ValueError("count must be > 0")
    if count == 1:
        return np.asarray([axis.max_y], dtype=np.float64)
    return np.linspace(axis.max_y, axis.min_y, count, dtype=np.float64)
