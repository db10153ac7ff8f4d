from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import math
from typing import Literal, Sequence

from ledgerline_chart.classify import Band, band_color, classify_value
from ledgerline_chart.config import ChartConfig, ChartMode
from ledgerline_chart.formatting import format_axis_label, format_currency, format_percentage
from ledgerline_chart.scales import AxisRange, ChartScale, grid_values, resolve_range
from ledgerline_chart.series import DataPoint, series_values

LOGGER = logging.getLogger(__name__)

Point2 = tuple[float, float]
TextAnchor = Literal["start", "middle", "end"]
ReferenceKind = Literal["zero", "goal"]

MARKER_RADIUS = 6.0
HIT_RADIUS = 20.0
LINE_WIDTH = 3.0
TOOLTIP_DOT_RADIUS = 4.0
Y_LABEL_OFFSET_X = 10.0
Y_LABEL_BASELINE_SHIFT = 4.0
X_LABEL_OFFSET_BOTTOM = 10.0
BACKGROUND_CORNER_RADIUS = 8.0
PROGRESS_CAPTION_SUFFIX = "completado"


@dataclass(frozen=True)
class PolylineSegment:
    start: Point2
    end: Point2

    def to_path(self) -> str:
        return f"M {_num(self.start[0])} {_num(self.start[1])} L {_num(self.end[0])} {_num(self.end[1])}"


@dataclass(frozen=True)
class LineSegment:
    path: PolylineSegment
    color: str
    width: float = LINE_WIDTH


@dataclass(frozen=True)
class PointMarker:
    index: int
    x: float
    y: float
    color: str
    band: Band
    value: float
    label: str
    fill: str
    radius: float = MARKER_RADIUS
    hit_radius: float = HIT_RADIUS

    @property
    def data_point(self) -> DataPoint:
        return DataPoint(label=self.label, value=self.value)


@dataclass(frozen=True)
class GridLine:
    y: float
    value: float
    x1: float
    x2: float


@dataclass(frozen=True)
class ReferenceLine:
    y: float
    kind: ReferenceKind
    value: float
    x1: float
    x2: float


@dataclass(frozen=True)
class AxisLabel:
    x: float
    y: float
    text: str
    anchor: TextAnchor


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    corner_radius: float = 0.0


@dataclass(frozen=True)
class AreaFill:
    points: tuple[Point2, ...]
    color: str
    opacity_top: float = 0.3
    opacity_bottom: float = 0.1


@dataclass(frozen=True)
class Tooltip:
    index: int
    x: float
    y: float
    formatted_value: str
    label: str
    color: str
    guide_top: float
    guide_bottom: float
    dot_radius: float = TOOLTIP_DOT_RADIUS


@dataclass(frozen=True)
class BreakdownItem:
    caption: str
    value: float
    text: str


@dataclass(frozen=True)
class ProgressBar:
    percentage: float
    percentage_clamped: float
    goal: float
    current: float
    remaining: float
    percentage_text: str
    caption: str
    show_breakdown: bool
    breakdown: tuple[BreakdownItem, ...]
    fill_color: str
    track_color: str


@dataclass(frozen=True)
class RenderScene:
    """Renderer-agnostic description of one chart render pass."""

    mode: ChartMode
    width: float
    height: float
    axis: AxisRange | None = None
    background: Rect | None = None
    area: AreaFill | None = None
    segments: tuple[LineSegment, ...] = ()
    points: tuple[PointMarker, ...] = ()
    grid_lines: tuple[GridLine, ...] = ()
    reference_lines: tuple[ReferenceLine, ...] = ()
    y_labels: tuple[AxisLabel, ...] = ()
    x_labels: tuple[AxisLabel, ...] = ()
    tooltip: Tooltip | None = None
    progress: ProgressBar | None = None
    line_color: str = ""
    grid_color: str = ""
    text_color: str = ""
    title: str | None = None
    subtitle: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.segments or self.points or self.y_labels or self.x_labels or self.progress)


def compute_scene(config: ChartConfig) -> RenderScene:
    """Build the scene for one render pass. Never mutates `config`."""

    if config.mode == "progress":
        return _progress_scene(config)
    return _line_scene(config)


def _line_scene(config: ChartConfig) -> RenderScene:
    canvas = config.canvas
    background = Rect(
        x=canvas.left_padding,
        y=canvas.top_padding,
        width=canvas.chart_area_width,
        height=canvas.chart_area_height,
        fill=config.resolved_background_color,
        corner_radius=BACKGROUND_CORNER_RADIUS,
    )
    base = dict(
        mode="line",
        width=canvas.width,
        height=canvas.height,
        background=background,
        line_color=config.resolved_line_color,
        grid_color=config.theme.border_color,
        text_color=config.theme.text_secondary_color,
        title=config.title,
        subtitle=config.subtitle,
    )

    data = config.data
    values = series_values(data)
    axis = resolve_range(values, fit_data_range=config.fit_data_range, nice_step=config.nice_step)
    if axis.empty:
        return RenderScene(**base)
    if len(data) == 1:
        LOGGER.debug("single point series; x scale spans the full chart width")

    scale = ChartScale.build(axis, canvas, len(data))
    xs, ys = scale.map_series(values)
    coords = [(float(x), float(y)) for x, y in zip(xs.tolist(), ys.tolist())]

    goal_reference = config.goal_reference
    points = []
    for i, (point, (x, y)) in enumerate(zip(data, coords)):
        band = classify_value(point.value, goal_reference)
        points.append(
            PointMarker(
                index=i,
                x=x,
                y=y,
                color=band_color(band, config.segment_colors),
                band=band,
                value=point.value,
                label=point.label,
                fill=config.resolved_background_color,
            )
        )

    # Strokes stay neutral; only markers carry the band colors.
    segments = tuple(
        LineSegment(path=PolylineSegment(start=coords[i], end=coords[i + 1]), color=config.resolved_line_color)
        for i in range(len(coords) - 1)
    )

    area = None
    if len(coords) >= 2:
        area = AreaFill(
            points=tuple(coords) + ((scale.plot_right, scale.plot_bottom), (scale.plot_left, scale.plot_bottom)),
            color=config.resolved_line_color,
        )

    ticks = [float(v) for v in grid_values(axis).tolist()]
    grid_lines: tuple[GridLine, ...] = ()
    if config.show_grid:
        grid_lines = tuple(
            GridLine(y=scale.y_at(v), value=v, x1=scale.plot_left, x2=scale.plot_right) for v in ticks
        )

    y_labels: tuple[AxisLabel, ...] = ()
    x_labels: tuple[AxisLabel, ...] = ()
    if config.show_labels:
        y_labels = tuple(
            AxisLabel(
                x=canvas.left_padding - Y_LABEL_OFFSET_X,
                y=scale.y_at(v) + Y_LABEL_BASELINE_SHIFT,
                text=format_axis_label(v),
                anchor="end",
            )
            for v in ticks
        )
        x_labels = tuple(
            AxisLabel(x=x, y=canvas.height - X_LABEL_OFFSET_BOTTOM, text=p.label, anchor="middle")
            for p, (x, _) in zip(data, coords)
        )

    scene = RenderScene(
        **base,
        axis=axis,
        area=area,
        segments=segments,
        points=tuple(points),
        grid_lines=grid_lines,
        reference_lines=_reference_lines(config, scale),
        y_labels=y_labels,
        x_labels=x_labels,
    )

    if config.show_tooltips and config.highlighted_point is not None:
        tooltip = on_point_selected(scene, config.highlighted_point)
        if tooltip is None:
            LOGGER.warning("highlighted point %r is not part of the series", config.highlighted_point)
        return _with_tooltip(scene, tooltip)
    return scene


def _reference_lines(config: ChartConfig, scale: ChartScale) -> tuple[ReferenceLine, ...]:
    lines: list[ReferenceLine] = []
    if config.show_zero_line:
        lines.append(ReferenceLine(y=scale.y_at(0.0), kind="zero", value=0.0, x1=scale.plot_left, x2=scale.plot_right))
    if config.target_value is not None:
        lines.append(
            ReferenceLine(
                y=scale.y_at(config.target_value),
                kind="goal",
                value=config.target_value,
                x1=scale.plot_left,
                x2=scale.plot_right,
            )
        )
    return tuple(lines)


def _with_tooltip(scene: RenderScene, tooltip: Tooltip | None) -> RenderScene:
    if tooltip is None:
        return scene
    return replace(scene, tooltip=tooltip)


def on_point_selected(scene: RenderScene, point: PointMarker | DataPoint) -> Tooltip | None:
    """Project a pressed point into tooltip data. Returns None if the point is not in the scene."""

    marker = point if isinstance(point, PointMarker) else _find_marker(scene.points, point)
    if marker is None:
        return None
    background = scene.background
    guide_top = background.y if background is not None else 0.0
    guide_bottom = background.y + background.height if background is not None else scene.height
    return Tooltip(
        index=marker.index,
        x=marker.x,
        y=marker.y,
        formatted_value=format_currency(marker.value),
        label=marker.label,
        color=marker.color,
        guide_top=guide_top,
        guide_bottom=guide_bottom,
    )


def project_point(scene: RenderScene, screen_x: float, screen_y: float) -> DataPoint | None:
    """Hit-test a screen position against the point hit regions.

    The nearest marker whose hit region contains the position wins; ties go to
    the lower index.
    """

    best: PointMarker | None = None
    best_dist = math.inf
    for marker in scene.points:
        dist = math.hypot(screen_x - marker.x, screen_y - marker.y)
        if dist <= marker.hit_radius and dist < best_dist:
            best = marker
            best_dist = dist
    return None if best is None else best.data_point


def _find_marker(points: Sequence[PointMarker], wanted: DataPoint) -> PointMarker | None:
    for marker in points:
        if marker.label == wanted.label and marker.value == wanted.value:
            return marker
    return None


def compute_progress(
    current_value: float,
    target_value: float,
    *,
    provided_percentage: float | None = None,
    fill_color: str = "",
    track_color: str = "",
) -> ProgressBar:
    """Goal progress: unclamped percentage text, bar width clamped to [0, 100]."""

    if provided_percentage is not None:
        percentage = float(provided_percentage)
    elif target_value > 0:
        percentage = current_value / target_value * 100.0
    else:
        percentage = 0.0
    remaining = target_value - current_value
    percentage_text = format_percentage(percentage)
    breakdown = (
        BreakdownItem(caption="Objetivo", value=target_value, text=format_currency(target_value)),
        BreakdownItem(caption="Actual", value=current_value, text=format_currency(current_value)),
        BreakdownItem(caption="Faltante", value=remaining, text=format_currency(remaining)),
    )
    return ProgressBar(
        percentage=percentage,
        percentage_clamped=min(max(percentage, 0.0), 100.0),
        goal=target_value,
        current=current_value,
        remaining=remaining,
        percentage_text=percentage_text,
        caption=f"{percentage_text} {PROGRESS_CAPTION_SUFFIX}",
        show_breakdown=target_value > 0,
        breakdown=breakdown,
        fill_color=fill_color,
        track_color=track_color,
    )


def _progress_scene(config: ChartConfig) -> RenderScene:
    target = 0.0 if config.target_value is None else config.target_value
    progress = compute_progress(
        config.current_value,
        target,
        provided_percentage=config.progress_percentage,
        fill_color=config.resolved_line_color,
        track_color=config.resolved_secondary_color,
    )
    return RenderScene(
        mode="progress",
        width=config.canvas.width,
        height=config.canvas.height,
        progress=progress,
        line_color=config.resolved_line_color,
        grid_color=config.theme.border_color,
        text_color=config.theme.text_secondary_color,
        title=config.title,
        subtitle=config.subtitle,
    )


def _num(value: float) -> str:
    out = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out
