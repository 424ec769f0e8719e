from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from curvelab.errors import SeriesCompileError
from curvelab.frame import FrameResult
from curvelab.hit_test import describe_point
from curvelab.manifest import load_graph_config, load_manifest, load_series
from curvelab.plotter import Plotter
from curvelab.surface import RasterSurface


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curvelab")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a graph folder (graph.toml + entrypoint) to PNG.")
    render.add_argument("graph_dir", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=None, help="Canvas width in CSS px. Default: from graph.toml.")
    render.add_argument("--height", type=int, default=None, help="Canvas height in CSS px. Default: from graph.toml.")
    render.add_argument("--dpr", type=float, default=None, help="Device pixel ratio. Default: from graph.toml.")

    intercepts = sub.add_parser("intercepts", help="Print intercepts and intersections as JSON.")
    intercepts.add_argument("graph_dir", type=Path)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        surface, frame = _render_graph(args.graph_dir, width=args.width, height=args.height, dpr=args.dpr)
        out = surface.save_png(args.out)
        if frame.failed:
            print(f"render failed: {frame.error}")
            return 1
        print(
            f"render complete: out={out} series={len(frame.sampled)} "
            f"intercepts={len(frame.intercepts)} intersections={len(frame.intersections)}"
        )
        return 0

    if args.command == "intercepts":
        _, frame = _render_graph(args.graph_dir)
        if frame.failed:
            print(json.dumps({"error": frame.error}, indent=2))
            return 1
        print(json.dumps(frame_points_summary(frame), indent=2, sort_keys=True))
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def frame_points_summary(frame: FrameResult) -> dict[str, list[dict[str, object]]]:
    return {
        "intercepts": [
            {
                "series_index": p.series_index,
                "kind": p.kind,
                "x": p.x,
                "y": p.y,
                "description": describe_point(p),
            }
            for p in frame.intercepts
        ],
        "intersections": [
            {
                "series_index_a": p.series_index_a,
                "series_index_b": p.series_index_b,
                "x": p.x,
                "y": p.y,
                "description": describe_point(p),
            }
            for p in frame.intersections
        ],
    }


def _render_graph(
    graph_dir: Path,
    *,
    width: int | None = None,
    height: int | None = None,
    dpr: float | None = None,
) -> tuple[RasterSurface, FrameResult]:
    manifest = load_manifest(graph_dir)
    config = load_graph_config(manifest)
    surface = RasterSurface(
        width or manifest.width,
        height or manifest.height,
        dpr or manifest.device_pixel_ratio,
    )
    plotter = Plotter(surface, config, window=manifest.window)
    try:
        series = load_series(graph_dir, manifest.entrypoint)
    except SeriesCompileError as exc:
        LOGGER.error("graph %r failed to compile: %s", manifest.title, exc)
        return surface, plotter.draw(error_message=str(exc))
    LOGGER.info("rendering %r with %d series", manifest.title, len(series))
    frame = plotter.set_series(series)
    return surface, frame
