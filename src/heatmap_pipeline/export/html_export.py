"""HTMLExporter: generate standalone SVG heatmap pages."""

from __future__ import annotations

import logging
import pathlib
from typing import TYPE_CHECKING

import jinja2

from ..layout.dendrogram_layout import DendrogramSpec

if TYPE_CHECKING:
    from ..render.renderer import RenderedHeatmap

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"

CELL_SIZE = 16.0
DENDRO_EXTENT = 80.0
CHAR_WIDTH = 6.5  # approximate at 10px font
LEGEND_SWATCH = 14.0


class HTMLExporter:
    """Export a rendered heatmap as a self-contained HTML file.

    The page holds a single inline SVG: one rect per cell, labels on the
    right and bottom, dendrograms on the left and top, and a color legend.
    No scripts or external resources.
    """

    @staticmethod
    def export(
        path: str | pathlib.Path,
        heatmap: RenderedHeatmap,
        title: str = "heatmap",
        cell_size: float = CELL_SIZE,
    ) -> pathlib.Path:
        """Write the page and return its path."""
        path = pathlib.Path(path)
        html = HTMLExporter.render_string(heatmap, title=title, cell_size=cell_size)
        path.write_text(html, encoding="utf-8")
        logger.info("Wrote HTML heatmap to %s", path)
        return path

    @staticmethod
    def render_string(
        heatmap: RenderedHeatmap,
        title: str = "heatmap",
        cell_size: float = CELL_SIZE,
    ) -> str:
        n_rows, n_cols = heatmap.shape
        row_dendro = heatmap.dendrogram_spec("row", cell_size=cell_size, extent=DENDRO_EXTENT)
        col_dendro = heatmap.dendrogram_spec("col", cell_size=cell_size, extent=DENDRO_EXTENT)

        left = DENDRO_EXTENT + 10 if row_dendro is not None else 10.0
        top = DENDRO_EXTENT + 10 if col_dendro is not None else 10.0
        grid_w = n_cols * cell_size
        grid_h = n_rows * cell_size
        row_labels = heatmap.row_labels
        col_labels = heatmap.col_labels
        row_label_w = max(len(str(r)) for r in row_labels) * CHAR_WIDTH + 10
        col_label_h = max(len(str(c)) for c in col_labels) * CHAR_WIDTH + 10

        colors = heatmap.colors
        values = heatmap.matrix.values
        cells = [
            {
                "x": left + j * cell_size,
                "y": top + i * cell_size,
                "color": colors[i, j],
                "tooltip": f"{row_labels[i]} / {col_labels[j]}: {values[i, j]:.4g}",
            }
            for i in range(n_rows)
            for j in range(n_cols)
        ]

        scale = heatmap.color_scale
        legend_x = left + grid_w + row_label_w + 20
        legend = [
            {
                "y": top + k * LEGEND_SWATCH,
                "color": color,
                "label": f"{scale.vmin + k * (scale.vmax - scale.vmin) / scale.levels:.3g}",
            }
            for k, color in enumerate(scale.hex_colors)
        ]

        env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
            autoescape=True,
        )
        template = env.get_template("heatmap.html.j2")
        return template.render(
            title=title,
            width=legend_x + 80,
            height=max(top + grid_h + col_label_h, top + (scale.levels + 1) * LEGEND_SWATCH) + 10,
            cell_size=cell_size,
            cells=cells,
            row_labels=[
                {"x": left + grid_w + 4, "y": top + (i + 0.5) * cell_size, "text": str(label)}
                for i, label in enumerate(row_labels)
            ],
            col_labels=[
                {"x": left + (j + 0.5) * cell_size, "y": top + grid_h + 4, "text": str(label)}
                for j, label in enumerate(col_labels)
            ],
            row_paths=_link_paths(row_dendro, left, top),
            col_paths=_link_paths(col_dendro, left, top),
            legend=legend,
            legend_x=legend_x,
            legend_max_label=f"{scale.vmax:.3g}",
            legend_max_y=top + scale.levels * LEGEND_SWATCH,
        )


def _link_paths(spec: DendrogramSpec | None, left: float, top: float) -> list[str]:
    """SVG path data for each U-shaped link; dendrograms grow away from the grid."""
    if spec is None:
        return []
    if spec.side == "left":
        def pt(leaf, h):
            return (left - 5 - h, top + leaf)
    else:
        def pt(leaf, h):
            return (left + leaf, top - 5 - h)

    paths = []
    for link in spec.links:
        a = pt(link.leaf_left, link.height_left_child)
        b = pt(link.leaf_left, link.height_merge)
        c = pt(link.leaf_right, link.height_merge)
        d = pt(link.leaf_right, link.height_right_child)
        paths.append(
            f"M{a[0]:.2f},{a[1]:.2f} L{b[0]:.2f},{b[1]:.2f} "
            f"L{c[0]:.2f},{c[1]:.2f} L{d[0]:.2f},{d[1]:.2f}"
        )
    return paths
