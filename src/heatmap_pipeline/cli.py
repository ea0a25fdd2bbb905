"""Command line entry point: ``heatmap-pipeline``."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import pathlib
import sys

from .config import HeatmapConfig
from .errors import HeatmapError
from .pipeline import run_file
from .transform.order import ClusterOrder
from .transform.scaler import ScalingSpec

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heatmap-pipeline",
        description="Scale, cluster and color-map a labelled numeric matrix.",
    )
    parser.add_argument("input", type=pathlib.Path, help="Tab- or comma-delimited matrix file.")
    parser.add_argument("--delimiter", default=None, help="Field separator (default: inferred).")
    parser.add_argument("--config", type=pathlib.Path, help="JSON file of pipeline options.")

    group = parser.add_argument_group("transform")
    group.add_argument("--scaling", help="none, row-zscore, col-zscore, row-center, row-minmax, ...")
    group.add_argument("--cluster-rows", action="store_true", help="Order rows by clustering.")
    group.add_argument("--cluster-cols", action="store_true", help="Order columns by clustering.")
    group.add_argument("--metric", default="euclidean", help="Distance metric for clustering.")
    group.add_argument("--linkage", default="average", help="Linkage method for clustering.")
    group.add_argument("--reverse-rows", action="store_true", help="Reverse the row order.")

    group = parser.add_argument_group("colors")
    colors = group.add_mutually_exclusive_group()
    colors.add_argument("--palette", help="Named matplotlib/brewer palette, e.g. RdBu.")
    colors.add_argument("--anchors", help="Comma-separated anchor colors, e.g. green,black,red.")
    group.add_argument("--levels", type=int, help="Number of color levels (default 12).")
    group.add_argument("--reverse-palette", action="store_true", help="Reverse the palette.")
    group.add_argument("--clamp", nargs=2, type=float, metavar=("LOW", "HIGH"),
                       help="Clip values into [LOW, HIGH] before color mapping.")

    group = parser.add_argument_group("output")
    group.add_argument("--html", type=pathlib.Path, help="Write a standalone HTML page.")
    group.add_argument("--png", type=pathlib.Path, help="Write a matplotlib image (png/pdf/svg).")
    group.add_argument("--json", type=pathlib.Path, help="Write the rendered data as JSON.")
    group.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def config_from_args(args: argparse.Namespace) -> HeatmapConfig:
    """Start from ``--config`` (if any) and let explicit flags override it."""
    config = HeatmapConfig.from_json(args.config) if args.config else HeatmapConfig()
    changes = {}
    if args.scaling is not None:
        changes["scaling"] = ScalingSpec.parse(args.scaling)
    if args.cluster_rows:
        changes["row_order"] = ClusterOrder(metric=args.metric, method=args.linkage)
    if args.cluster_cols:
        changes["col_order"] = ClusterOrder(metric=args.metric, method=args.linkage)
    if args.reverse_rows:
        changes["reverse_rows"] = True
    if args.clamp is not None:
        changes["clamp_extremes"] = tuple(args.clamp)

    scale_changes = {}
    if args.palette is not None:
        scale_changes.update(palette=args.palette, anchors=None)
    if args.anchors is not None:
        scale_changes["anchors"] = tuple(a.strip() for a in args.anchors.split(","))
    if args.levels is not None:
        scale_changes["levels"] = args.levels
    if args.reverse_palette:
        scale_changes["reversed"] = True
    if scale_changes:
        changes["color_scale"] = dataclasses.replace(config.color_scale, **scale_changes)

    return dataclasses.replace(config, **changes) if changes else config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        heatmap = run_file(args.input, config, delimiter=args.delimiter)
        if args.html:
            heatmap.to_html(args.html, title=args.input.stem)
        if args.png:
            heatmap.save_figure(args.png, title=args.input.stem)
        if args.json:
            args.json.write_text(json.dumps(heatmap.to_dict(), indent=2), encoding="utf-8")
            logger.info("Wrote heatmap data to %s", args.json)
    except (HeatmapError, ValueError, FileNotFoundError) as exc:
        print(f"heatmap-pipeline: error: {exc}", file=sys.stderr)
        return 2

    if not (args.html or args.png or args.json):
        print(json.dumps({
            "shape": list(heatmap.shape),
            "rowLabels": [str(r) for r in heatmap.row_labels],
            "colLabels": [str(c) for c in heatmap.col_labels],
            "colors": list(heatmap.color_scale.hex_colors),
        }))
    return 0

