from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import numpy as np

from ledgerline_chart.errors import ChartDataError


@dataclass(frozen=True)
class DataPoint:
    label: str
    value: float


def normalize_series(data: Any) -> tuple[DataPoint, ...]:
    """Coerce caller data into an immutable tuple of `DataPoint`.

    Accepts `DataPoint` instances, `{"label", "value"}` mappings and
    `(label, value)` pairs. Order is preserved; it defines the x position.
    """

    if data is None:
        return ()
    if isinstance(data, (str, bytes, bytearray)) or not isinstance(data, Sequence):
        raise ChartDataError(f"unsupported series input type: {type(data)!r}")

    points: list[DataPoint] = []
    for i, raw in enumerate(data):
        if isinstance(raw, DataPoint):
            label, value = raw.label, raw.value
        elif isinstance(raw, Mapping):
            try:
                label, value = raw["label"], raw["value"]
            except KeyError as exc:
                raise ChartDataError(f"data point {i} missing field: {exc.args[0]}") from exc
        elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)) and len(raw) == 2:
            label, value = raw[0], raw[1]
        else:
            raise ChartDataError(f"unsupported data point at index {i}: {raw!r}")
        points.append(DataPoint(label=str(label), value=_coerce_value(value, index=i)))
    return tuple(points)


def series_values(data: Sequence[DataPoint]) -> np.ndarray:
    return np.asarray([p.value for p in data], dtype=np.float64)


def _coerce_value(raw: Any, *, index: int) -> float:
    if isinstance(raw, bool):
        raise ChartDataError(f"value at index {index} must be numeric, got bool")
    if isinstance(raw, Decimal):
        out = float(raw)
    else:
        try:
            out = float(raw)
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"value at index {index} is not numeric: {raw!r}") from exc
    if not np.isfinite(out):
        raise ChartDataError(f"value at index {index} is not finite: {raw!r}")
    return out
