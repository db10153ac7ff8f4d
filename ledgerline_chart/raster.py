from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ledgerline_chart.scene import AxisLabel, RenderScene
from ledgerline_chart.theme import hex_to_rgba

RGBA = tuple[int, int, int, int]

PROGRESS_BAR_HEIGHT = 12


def rasterize_scene(scene: RenderScene, *, background: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    """Paint a scene into an `(H, W, 4)` uint8 RGBA array."""

    width = max(1, int(round(scene.width)))
    height = max(1, int(round(scene.height)))
    image = Image.new("RGBA", (width, height), background)
    draw = ImageDraw.Draw(image, "RGBA")
    font = ImageFont.load_default()
    if scene.mode == "progress":
        _paint_progress(draw, scene, font, width)
    else:
        _paint_line_chart(draw, scene, font)
    return np.asarray(image, dtype=np.uint8).copy()


def save_png(scene: RenderScene, path: str | Path) -> Path:
    out = Path(path)
    Image.fromarray(rasterize_scene(scene)).save(out, format="PNG")
    return out


def _paint_line_chart(draw: ImageDraw.ImageDraw, scene: RenderScene, font: ImageFont.ImageFont) -> None:
    if scene.background is not None:
        bg = scene.background
        draw.rounded_rectangle(
            (bg.x, bg.y, bg.x + bg.width, bg.y + bg.height),
            radius=bg.corner_radius,
            fill=hex_to_rgba(bg.fill),
        )

    grid_color = hex_to_rgba(scene.grid_color, opacity=0.3) if scene.grid_color else None
    if grid_color is not None:
        for grid in scene.grid_lines:
            _dashed_hline(draw, grid.x1, grid.x2, grid.y, grid_color, dash=5.0)

    for ref in scene.reference_lines:
        color = hex_to_rgba(scene.text_color if ref.kind == "zero" else scene.line_color)
        if ref.kind == "goal":
            _dashed_hline(draw, ref.x1, ref.x2, ref.y, color, dash=4.0)
        else:
            draw.line((ref.x1, ref.y, ref.x2, ref.y), fill=color, width=1)

    if scene.area is not None:
        mid_opacity = (scene.area.opacity_top + scene.area.opacity_bottom) / 2.0
        draw.polygon(list(scene.area.points), fill=hex_to_rgba(scene.area.color, opacity=mid_opacity))

    for seg in scene.segments:
        draw.line((*seg.path.start, *seg.path.end), fill=hex_to_rgba(seg.color), width=int(seg.width))

    if scene.text_color:
        text_color = hex_to_rgba(scene.text_color)
        for label in (*scene.y_labels, *scene.x_labels):
            _draw_label(draw, label, text_color, font)

    for marker in scene.points:
        r = marker.radius
        draw.ellipse(
            (marker.x - r, marker.y - r, marker.x + r, marker.y + r),
            fill=hex_to_rgba(marker.fill),
            outline=hex_to_rgba(marker.color),
            width=3,
        )

    if scene.tooltip is not None:
        tip = scene.tooltip
        color = hex_to_rgba(tip.color)
        _dashed_vline(draw, tip.x, tip.guide_top, tip.guide_bottom, color, dash=3.0)
        r = tip.dot_radius
        draw.ellipse((tip.x - r, tip.y - r, tip.x + r, tip.y + r), fill=color)


def _paint_progress(draw: ImageDraw.ImageDraw, scene: RenderScene, font: ImageFont.ImageFont, width: int) -> None:
    progress = scene.progress
    if progress is None:
        return
    radius = PROGRESS_BAR_HEIGHT // 2
    draw.rounded_rectangle((0, 0, width - 1, PROGRESS_BAR_HEIGHT), radius=radius, fill=hex_to_rgba(progress.track_color))
    fill_w = int(round((width - 1) * progress.percentage_clamped / 100.0))
    if fill_w > 0:
        draw.rounded_rectangle((0, 0, fill_w, PROGRESS_BAR_HEIGHT), radius=radius, fill=hex_to_rgba(progress.fill_color))
    if scene.text_color:
        caption = AxisLabel(x=width / 2.0, y=PROGRESS_BAR_HEIGHT + 18.0, text=progress.caption, anchor="middle")
        _draw_label(draw, caption, hex_to_rgba(scene.text_color), font)


def _draw_label(draw: ImageDraw.ImageDraw, label: AxisLabel, color: RGBA, font: ImageFont.ImageFont) -> None:
    # Label y is a baseline; approximate it with the bottom of the text box.
    left, top, right, bottom = draw.textbbox((0, 0), label.text, font=font)
    w = right - left
    h = bottom - top
    if label.anchor == "end":
        x = label.x - w
    elif label.anchor == "middle":
        x = label.x - w / 2.0
    else:
        x = label.x
    draw.text((x - left, label.y - h - top), label.text, fill=color, font=font)


def _dashed_hline(draw: ImageDraw.ImageDraw, x0: float, x1: float, y: float, color: RGBA, *, dash: float) -> None:
    x = min(x0, x1)
    end = max(x0, x1)
    while x < end:
        draw.line((x, y, min(x + dash, end), y), fill=color, width=1)
        x += dash * 2


def _dashed_vline(draw: ImageDraw.ImageDraw, x: float, y0: float, y1: float, color: RGBA, *, dash: float) -> None:
    y = min(y0, y1)
    end = max(y0, y1)
    while y < end:
        draw.line((x, y, x, min(y + dash, end)), fill=color, width=1)
        y += dash * 2
