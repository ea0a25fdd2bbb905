"""Static heatmap figures with matplotlib."""

from __future__ import annotations

import logging
import pathlib
from typing import TYPE_CHECKING

import numpy as np

from ..layout.dendrogram_layout import DendrogramSpec

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from ..render.renderer import RenderedHeatmap

logger = logging.getLogger(__name__)


def to_rgba_image(heatmap: RenderedHeatmap) -> np.ndarray:
    """(n_rows, n_cols, 4) uint8 image of the level grid, NaN cells in nan_color."""
    scale = heatmap.color_scale
    lut = np.vstack([scale.lut, np.array(scale.nan_color, dtype=np.uint8)])
    return lut[heatmap.color_indices]


def build_figure(
    heatmap: RenderedHeatmap,
    title: str | None = None,
    cell_inches: float = 0.25,
    show_labels: bool = True,
) -> Figure:
    """Draw the heatmap with optional dendrograms and a discrete color bar.

    Row 0 of the rendered grid is drawn at the top (``origin="upper"``), so
    no row reversal is needed here.
    """
    from matplotlib.cm import ScalarMappable
    from matplotlib.colors import BoundaryNorm, ListedColormap
    from matplotlib.figure import Figure

    n_rows, n_cols = heatmap.shape
    has_row_dendro = heatmap.row_dendrogram is not None
    has_col_dendro = heatmap.col_dendrogram is not None

    width = max(4.0, n_cols * cell_inches + 3.0 + (1.5 if has_row_dendro else 0.0))
    height = max(3.0, n_rows * cell_inches + 2.0 + (1.5 if has_col_dendro else 0.0))
    fig = Figure(figsize=(width, height))
    grid = fig.add_gridspec(
        2, 3,
        width_ratios=[1.5 if has_row_dendro else 0.01, max(n_cols * cell_inches, 1.0), 0.3],
        height_ratios=[1.5 if has_col_dendro else 0.01, max(n_rows * cell_inches, 1.0)],
        wspace=0.02, hspace=0.02,
    )

    ax = fig.add_subplot(grid[1, 1])
    ax.imshow(
        to_rgba_image(heatmap),
        aspect="auto",
        interpolation="nearest",
        origin="upper",
        extent=(0, n_cols, n_rows, 0),
    )
    if show_labels:
        ax.set_yticks(np.arange(n_rows) + 0.5)
        ax.set_yticklabels([str(r) for r in heatmap.row_labels], fontsize=7)
        ax.yaxis.tick_right()
        ax.set_xticks(np.arange(n_cols) + 0.5)
        ax.set_xticklabels([str(c) for c in heatmap.col_labels], fontsize=7, rotation=90)
    else:
        ax.set_xticks([])
        ax.set_yticks([])

    if has_row_dendro:
        _draw_dendrogram(fig.add_subplot(grid[1, 0]), heatmap.dendrogram_spec("row", extent=1.0))
    if has_col_dendro:
        _draw_dendrogram(fig.add_subplot(grid[0, 1]), heatmap.dendrogram_spec("col", extent=1.0))

    scale = heatmap.color_scale
    cmap = ListedColormap(list(scale.hex_colors))
    lo, hi = (scale.vmin, scale.vmax) if scale.vmax > scale.vmin else (scale.vmin - 0.5, scale.vmax + 0.5)
    norm = BoundaryNorm(np.linspace(lo, hi, scale.levels + 1), scale.levels)
    fig.colorbar(ScalarMappable(norm=norm, cmap=cmap), cax=fig.add_subplot(grid[1, 2]))

    if title:
        fig.suptitle(title)
    return fig


def _draw_dendrogram(ax, spec: DendrogramSpec) -> None:
    """Draw U-shaped links; row dendrograms grow leftwards, column ones upwards."""
    for link in spec.links:
        leaf = [link.leaf_left, link.leaf_left, link.leaf_right, link.leaf_right]
        depth = [link.height_left_child, link.height_merge, link.height_merge, link.height_right_child]
        if spec.side in ("left", "right"):
            ax.plot(depth, leaf, color="#555555", linewidth=0.8)
        else:
            ax.plot(leaf, depth, color="#555555", linewidth=0.8)
    if spec.side in ("left", "right"):
        ax.set_ylim(spec.span, 0)
        if spec.side == "left":
            ax.set_xlim(spec.extent * 1.05, 0)
        else:
            ax.set_xlim(0, spec.extent * 1.05)
    else:
        ax.set_xlim(0, spec.span)
        ax.set_ylim(0, spec.extent * 1.05)
    ax.set_axis_off()


def save_figure(
    heatmap: RenderedHeatmap,
    path: str | pathlib.Path,
    dpi: int = 150,
    **kwargs,
) -> pathlib.Path:
    """Build the figure and write it; the format follows the file suffix."""
    path = pathlib.Path(path)
    fig = build_figure(heatmap, **kwargs)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    logger.info("Saved heatmap figure to %s", path)
    return path
