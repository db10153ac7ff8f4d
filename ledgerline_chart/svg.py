from __future__ import annotations

from pathlib import Path
import xml.etree.ElementTree as ET

from ledgerline_chart.scene import RenderScene

SVG_NS = "http://www.w3.org/2000/svg"
LABEL_FONT_SIZE = 10
PROGRESS_BAR_HEIGHT = 12.0
GRADIENT_ID = "lineGradient"


def scene_to_svg(scene: RenderScene) -> str:
    """Serialize a scene into standalone SVG markup."""

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": _fmt(scene.width),
            "height": _fmt(scene.height),
            "viewBox": f"0 0 {_fmt(scene.width)} {_fmt(scene.height)}",
        },
    )
    if scene.mode == "progress":
        _append_progress(root, scene)
    else:
        _append_line_chart(root, scene)
    return ET.tostring(root, encoding="unicode")


def write_svg(scene: RenderScene, path: str | Path) -> Path:
    out = Path(path)
    out.write_text(scene_to_svg(scene), encoding="utf-8")
    return out


def _append_line_chart(root: ET.Element, scene: RenderScene) -> None:
    if scene.area is not None:
        defs = ET.SubElement(root, "defs")
        gradient = ET.SubElement(defs, "linearGradient", {"id": GRADIENT_ID, "x1": "0%", "y1": "0%", "x2": "0%", "y2": "100%"})
        ET.SubElement(
            gradient,
            "stop",
            {"offset": "0%", "stop-color": scene.area.color, "stop-opacity": _fmt(scene.area.opacity_top)},
        )
        ET.SubElement(
            gradient,
            "stop",
            {"offset": "100%", "stop-color": scene.area.color, "stop-opacity": _fmt(scene.area.opacity_bottom)},
        )

    if scene.background is not None:
        bg = scene.background
        ET.SubElement(
            root,
            "rect",
            {
                "x": _fmt(bg.x),
                "y": _fmt(bg.y),
                "width": _fmt(bg.width),
                "height": _fmt(bg.height),
                "rx": _fmt(bg.corner_radius),
                "fill": bg.fill,
            },
        )

    for grid in scene.grid_lines:
        ET.SubElement(
            root,
            "line",
            {
                "x1": _fmt(grid.x1),
                "y1": _fmt(grid.y),
                "x2": _fmt(grid.x2),
                "y2": _fmt(grid.y),
                "stroke": scene.grid_color,
                "stroke-width": "0.5",
                "stroke-dasharray": "5,5",
                "opacity": "0.3",
            },
        )

    for ref in scene.reference_lines:
        ET.SubElement(
            root,
            "line",
            {
                "x1": _fmt(ref.x1),
                "y1": _fmt(ref.y),
                "x2": _fmt(ref.x2),
                "y2": _fmt(ref.y),
                "stroke": scene.text_color if ref.kind == "zero" else scene.line_color,
                "stroke-width": "1",
                "stroke-dasharray": "4,4" if ref.kind == "goal" else "none",
                "data-kind": ref.kind,
            },
        )

    for label in (*scene.y_labels, *scene.x_labels):
        text = ET.SubElement(
            root,
            "text",
            {
                "x": _fmt(label.x),
                "y": _fmt(label.y),
                "font-size": str(LABEL_FONT_SIZE),
                "fill": scene.text_color,
                "text-anchor": label.anchor,
            },
        )
        text.text = label.text

    if scene.segments:
        x0, y0 = scene.segments[0].path.start
        d = " ".join(
            [f"M {_fmt(x0)} {_fmt(y0)}"]
            + [f"L {_fmt(seg.path.end[0])} {_fmt(seg.path.end[1])}" for seg in scene.segments]
        )
        ET.SubElement(
            root,
            "path",
            {
                "d": d,
                "stroke": scene.segments[0].color,
                "stroke-width": _fmt(scene.segments[0].width),
                "fill": "none",
                "stroke-linecap": "round",
                "stroke-linejoin": "round",
            },
        )

    if scene.area is not None:
        pts = scene.area.points
        d = " ".join(f"{'M' if i == 0 else 'L'} {_fmt(x)} {_fmt(y)}" for i, (x, y) in enumerate(pts)) + " Z"
        ET.SubElement(root, "path", {"d": d, "fill": f"url(#{GRADIENT_ID})"})

    for marker in scene.points:
        ET.SubElement(
            root,
            "circle",
            {"cx": _fmt(marker.x), "cy": _fmt(marker.y), "r": _fmt(marker.hit_radius), "fill": "transparent"},
        )
        ET.SubElement(
            root,
            "circle",
            {
                "cx": _fmt(marker.x),
                "cy": _fmt(marker.y),
                "r": _fmt(marker.radius),
                "fill": marker.fill,
                "stroke": marker.color,
                "stroke-width": "3",
            },
        )

    if scene.tooltip is not None:
        tip = scene.tooltip
        ET.SubElement(
            root,
            "line",
            {
                "x1": _fmt(tip.x),
                "y1": _fmt(tip.guide_top),
                "x2": _fmt(tip.x),
                "y2": _fmt(tip.guide_bottom),
                "stroke": tip.color,
                "stroke-width": "1",
                "stroke-dasharray": "3,3",
            },
        )
        ET.SubElement(root, "circle", {"cx": _fmt(tip.x), "cy": _fmt(tip.y), "r": _fmt(tip.dot_radius), "fill": tip.color})


def _append_progress(root: ET.Element, scene: RenderScene) -> None:
    progress = scene.progress
    if progress is None:
        return
    ET.SubElement(
        root,
        "rect",
        {
            "x": "0",
            "y": "0",
            "width": _fmt(scene.width),
            "height": _fmt(PROGRESS_BAR_HEIGHT),
            "rx": _fmt(PROGRESS_BAR_HEIGHT / 2),
            "fill": progress.track_color,
        },
    )
    ET.SubElement(
        root,
        "rect",
        {
            "x": "0",
            "y": "0",
            "width": _fmt(scene.width * progress.percentage_clamped / 100.0),
            "height": _fmt(PROGRESS_BAR_HEIGHT),
            "rx": _fmt(PROGRESS_BAR_HEIGHT / 2),
            "fill": progress.fill_color,
        },
    )
    caption = ET.SubElement(
        root,
        "text",
        {
            "x": _fmt(scene.width / 2),
            "y": _fmt(PROGRESS_BAR_HEIGHT + 18),
            "font-size": "12",
            "fill": scene.text_color,
            "text-anchor": "middle",
        },
    )
    caption.text = progress.caption
    if not progress.show_breakdown:
        return
    column_w = scene.width / len(progress.breakdown)
    for i, item in enumerate(progress.breakdown):
        cx = column_w * (i + 0.5)
        head = ET.SubElement(
            root,
            "text",
            {"x": _fmt(cx), "y": _fmt(PROGRESS_BAR_HEIGHT + 44), "font-size": "10", "fill": scene.text_color, "text-anchor": "middle"},
        )
        head.text = f"{item.caption}:"
        value = ET.SubElement(
            root,
            "text",
            {"x": _fmt(cx), "y": _fmt(PROGRESS_BAR_HEIGHT + 62), "font-size": "14", "font-weight": "bold", "text-anchor": "middle"},
        )
        value.text = item.text


def _fmt(value: float) -> str:
    out = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out
