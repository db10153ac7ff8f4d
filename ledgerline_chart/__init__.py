from ledgerline_chart.classify import Band, classify_value, color_for_value
from ledgerline_chart.config import CanvasGeometry, ChartConfig, SegmentColors, chart_config_from_mapping, load_chart_config
from ledgerline_chart.errors import ChartConfigError, ChartDataError
from ledgerline_chart.formatting import format_currency
from ledgerline_chart.scales import AxisRange, ChartScale, resolve_range
from ledgerline_chart.scene import (
    ProgressBar,
    RenderScene,
    Tooltip,
    compute_progress,
    compute_scene,
    on_point_selected,
    project_point,
)
from ledgerline_chart.series import DataPoint, normalize_series
from ledgerline_chart.theme import DARK_THEME, LIGHT_THEME, ThemeTokens

__all__ = [
    "AxisRange",
    "Band",
    "CanvasGeometry",
    "ChartConfig",
    "ChartConfigError",
    "ChartDataError",
    "ChartScale",
    "DARK_THEME",
    "DataPoint",
    "LIGHT_THEME",
    "ProgressBar",
    "RenderScene",
    "SegmentColors",
    "ThemeTokens",
    "Tooltip",
    "chart_config_from_mapping",
    "classify_value",
    "color_for_value",
    "compute_progress",
    "compute_scene",
    "format_currency",
    "load_chart_config",
    "normalize_series",
    "on_point_selected",
    "project_point",
    "resolve_range",
]
