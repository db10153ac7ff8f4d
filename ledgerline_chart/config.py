from __future__ import annotations

from dataclasses import dataclass, field, fields
import math
from pathlib import Path
import tomllib
from typing import Any, Literal, Mapping

from ledgerline_chart.errors import ChartConfigError, ChartDataError
from ledgerline_chart.series import DataPoint, normalize_series
from ledgerline_chart.theme import LIGHT_THEME, ThemeTokens, is_hex_color, validate_theme_tokens

ChartMode = Literal["line", "progress"]

DEFAULT_NICE_STEP = 1000.0


@dataclass(frozen=True)
class CanvasGeometry:
    """Pixel geometry of the chart canvas.

    Right/bottom padding mirror left/top padding unless given explicitly.
    """

    width: float = 300.0
    height: float = 240.0
    top_padding: float = 40.0
    left_padding: float = 40.0
    right_padding: float | None = None
    bottom_padding: float | None = None

    @property
    def chart_area_width(self) -> float:
        right = self.left_padding if self.right_padding is None else self.right_padding
        return self.width - self.left_padding - right

    @property
    def chart_area_height(self) -> float:
        bottom = self.top_padding if self.bottom_padding is None else self.bottom_padding
        return self.height - self.top_padding - bottom


@dataclass(frozen=True)
class SegmentColors:
    above_goal: str = "#16A34A"
    between_goal_and_zero: str = "#F59E0B"
    below_zero: str = "#DC2626"


@dataclass(frozen=True)
class ChartConfig:
    mode: ChartMode = "line"
    data: tuple[DataPoint, ...] = ()
    current_value: float = 0.0
    target_value: float | None = None
    progress_percentage: float | None = None
    show_zero_line: bool = False
    show_grid: bool = True
    show_labels: bool = True
    show_tooltips: bool = True
    fit_data_range: bool = False
    nice_step: float = DEFAULT_NICE_STEP
    segment_colors: SegmentColors = field(default_factory=SegmentColors)
    canvas: CanvasGeometry = field(default_factory=CanvasGeometry)
    theme: ThemeTokens = LIGHT_THEME
    line_color: str | None = None
    secondary_color: str | None = None
    background_color: str | None = None
    highlighted_point: DataPoint | None = None
    title: str | None = None
    subtitle: str | None = None

    @property
    def resolved_line_color(self) -> str:
        return self.line_color or self.theme.primary_color

    @property
    def resolved_secondary_color(self) -> str:
        return self.secondary_color or self.theme.text_secondary_color

    @property
    def resolved_background_color(self) -> str:
        return self.background_color or self.theme.card_background_color

    @property
    def goal_reference(self) -> float:
        return 0.0 if self.target_value is None else self.target_value


_SCALAR_KEYS = {f.name for f in fields(ChartConfig)} - {"segment_colors", "canvas", "theme", "data", "highlighted_point"}


def chart_config_from_mapping(raw: Mapping[str, Any]) -> ChartConfig:
    """Build a validated `ChartConfig` from an untrusted mapping (e.g. parsed TOML)."""

    if not isinstance(raw, Mapping):
        raise ChartConfigError("chart config must be a table/mapping")
    known = _SCALAR_KEYS | {"segment_colors", "canvas", "theme", "data", "highlighted_point"}
    for key in raw:
        if key not in known:
            raise ChartConfigError(f"Unknown chart option: {key}")

    mode = raw.get("mode", "line")
    if mode not in ("line", "progress"):
        raise ChartConfigError(f"`mode` must be 'line' or 'progress', got {mode!r}")

    try:
        data = normalize_series(raw.get("data", ()))
        highlighted = None
        if raw.get("highlighted_point") is not None:
            highlighted = normalize_series([raw["highlighted_point"]])[0]
    except ChartDataError as exc:
        raise ChartConfigError(f"invalid data: {exc}") from exc

    nice_step = _coerce_float(raw.get("nice_step", DEFAULT_NICE_STEP), "nice_step")
    if nice_step <= 0:
        raise ChartConfigError("`nice_step` must be > 0")

    return ChartConfig(
        mode=mode,
        data=data,
        current_value=_coerce_float(raw.get("current_value", 0.0), "current_value"),
        target_value=_coerce_optional_float(raw.get("target_value"), "target_value"),
        progress_percentage=_coerce_optional_float(raw.get("progress_percentage"), "progress_percentage"),
        show_zero_line=_coerce_bool(raw.get("show_zero_line", False), "show_zero_line"),
        show_grid=_coerce_bool(raw.get("show_grid", True), "show_grid"),
        show_labels=_coerce_bool(raw.get("show_labels", True), "show_labels"),
        show_tooltips=_coerce_bool(raw.get("show_tooltips", True), "show_tooltips"),
        fit_data_range=_coerce_bool(raw.get("fit_data_range", False), "fit_data_range"),
        nice_step=nice_step,
        segment_colors=_parse_segment_colors(raw.get("segment_colors")),
        canvas=_parse_canvas(raw.get("canvas")),
        theme=_parse_theme(raw.get("theme")),
        line_color=_coerce_optional_color(raw.get("line_color"), "line_color"),
        secondary_color=_coerce_optional_color(raw.get("secondary_color"), "secondary_color"),
        background_color=_coerce_optional_color(raw.get("background_color"), "background_color"),
        highlighted_point=highlighted,
        title=_coerce_optional_str(raw.get("title"), "title"),
        subtitle=_coerce_optional_str(raw.get("subtitle"), "subtitle"),
    )


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    return chart_config_from_mapping(raw)


def _parse_canvas(raw: Any) -> CanvasGeometry:
    if raw is None:
        return CanvasGeometry()
    if not isinstance(raw, Mapping):
        raise ChartConfigError("`canvas` must be a table")
    allowed = {f.name for f in fields(CanvasGeometry)}
    for key in raw:
        if key not in allowed:
            raise ChartConfigError(f"Unknown canvas option: {key}")
    defaults = CanvasGeometry()
    return CanvasGeometry(
        width=_coerce_float(raw.get("width", defaults.width), "canvas.width"),
        height=_coerce_float(raw.get("height", defaults.height), "canvas.height"),
        top_padding=_coerce_float(raw.get("top_padding", defaults.top_padding), "canvas.top_padding"),
        left_padding=_coerce_float(raw.get("left_padding", defaults.left_padding), "canvas.left_padding"),
        right_padding=_coerce_optional_float(raw.get("right_padding"), "canvas.right_padding"),
        bottom_padding=_coerce_optional_float(raw.get("bottom_padding"), "canvas.bottom_padding"),
    )


def _parse_segment_colors(raw: Any) -> SegmentColors:
    if raw is None:
        return SegmentColors()
    if not isinstance(raw, Mapping):
        raise ChartConfigError("`segment_colors` must be a table")
    values: dict[str, str] = {}
    allowed = {f.name for f in fields(SegmentColors)}
    for key, value in raw.items():
        if key not in allowed:
            raise ChartConfigError(f"Unknown segment color: {key}")
        if not is_hex_color(value):
            raise ChartConfigError(f"`segment_colors.{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        values[key] = value
    return SegmentColors(**values)


def _parse_theme(raw: Any) -> ThemeTokens:
    if raw is None:
        return LIGHT_THEME
    if isinstance(raw, str):
        return validate_theme_tokens(base=raw)
    if not isinstance(raw, Mapping):
        raise ChartConfigError("`theme` must be a palette name or a table")
    overrides = dict(raw)
    base = overrides.pop("base", "light")
    return validate_theme_tokens(overrides, base=str(base))


def _coerce_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ChartConfigError(f"`{name}` must be a boolean")
    return value


def _coerce_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartConfigError(f"`{name}` must be a number")
    out = float(value)
    if not math.isfinite(out):
        raise ChartConfigError(f"`{name}` must be a finite number")
    return out


def _coerce_optional_float(value: Any, name: str) -> float | None:
    if value is None:
        return None
    return _coerce_float(value, name)


def _coerce_optional_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ChartConfigError(f"`{name}` must be a string")
    return value


def _coerce_optional_color(value: Any, name: str) -> str | None:
    if value is None:
        return None
    if not is_hex_color(value):
        raise ChartConfigError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
    return str(value)
