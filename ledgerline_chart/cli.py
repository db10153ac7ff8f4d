from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
import sys

from ledgerline_chart.config import ChartConfig, load_chart_config
from ledgerline_chart.raster import save_png
from ledgerline_chart.scene import RenderScene, compute_scene
from ledgerline_chart.svg import write_svg
from ledgerline_chart.theme import THEMES

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledgerline-chart")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart config (TOML) to SVG or PNG.")
    render.add_argument("config", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument(
        "--format",
        choices=["svg", "png"],
        default=None,
        help="Output format. Default: inferred from --out suffix, falling back to svg.",
    )
    render.add_argument("--theme", choices=sorted(THEMES), default=None)
    render.add_argument("--fit-data-range", action="store_true", default=None)

    inspect = sub.add_parser("inspect", help="Print the resolved axis range or progress breakdown as JSON.")
    inspect.add_argument("config", type=Path)
    inspect.add_argument("--fit-data-range", action="store_true", default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _apply_overrides(load_chart_config(args.config), args)
    except ValueError as exc:
        print(f"ledgerline-chart: invalid config: {exc}", file=sys.stderr)
        return 2

    scene = compute_scene(config)
    if args.command == "render":
        fmt = args.format or ("png" if args.out.suffix.lower() == ".png" else "svg")
        if fmt == "png":
            out = save_png(scene, args.out)
        else:
            out = write_svg(scene, args.out)
        LOGGER.info("wrote %s chart to %s", scene.mode, out)
        return 0

    print(json.dumps(_summary(config, scene), indent=2, sort_keys=True))
    return 0


def _apply_overrides(config: ChartConfig, args: argparse.Namespace) -> ChartConfig:
    changes: dict[str, object] = {}
    if getattr(args, "theme", None) is not None:
        changes["theme"] = THEMES[args.theme]
    if args.fit_data_range is not None:
        changes["fit_data_range"] = True
    return replace(config, **changes) if changes else config


def _summary(config: ChartConfig, scene: RenderScene) -> dict[str, object]:
    if scene.progress is not None:
        p = scene.progress
        return {
            "mode": "progress",
            "percentage": p.percentage,
            "bar_width": p.percentage_clamped,
            "goal": p.goal,
            "current": p.current,
            "remaining": p.remaining,
        }
    return {
        "mode": "line",
        "points": len(config.data),
        "min_y": None if scene.axis is None else scene.axis.min_y,
        "max_y": None if scene.axis is None else scene.axis.max_y,
        "y_labels": [label.text for label in scene.y_labels],
    }


if __name__ == "__main__":
    raise SystemExit(main())
