"""Pipeline: load -> scale -> order -> render."""

from __future__ import annotations

import logging
import pathlib

from .config import HeatmapConfig
from .core.matrix import MatrixData
from .io.loader import load_matrix
from .render.renderer import RenderedHeatmap, render
from .transform.order import order
from .transform.scaler import clamp, scale

logger = logging.getLogger(__name__)


def run_pipeline(matrix: MatrixData, config: HeatmapConfig | None = None) -> RenderedHeatmap:
    """Turn a raw matrix into a RenderedHeatmap.

    Orders are computed on the scaled (unclamped) values; clamping only
    affects what is drawn. The input matrix is never modified.
    """
    if config is None:
        config = HeatmapConfig()

    scaled = scale(matrix, config.scaling)
    row_order = order(scaled, "row", config.effective_row_order())
    col_order = order(scaled, "col", config.col_order)

    display = scaled
    if config.clamp_extremes is not None:
        display = clamp(scaled, *config.clamp_extremes)

    vmin, vmax = config.color_domain(display)
    color_scale = config.color_scale.build(vmin, vmax)
    logger.info(
        "Rendering %d x %d heatmap (scaling=%s, rows=%s, cols=%s, domain=[%g, %g])",
        matrix.n_rows, matrix.n_cols, config.scaling.label,
        type(config.row_order).__name__, type(config.col_order).__name__, vmin, vmax,
    )
    return render(display, row_order, col_order, color_scale)


def run_file(
    path: str | pathlib.Path,
    config: HeatmapConfig | None = None,
    delimiter: str | None = None,
) -> RenderedHeatmap:
    """Load a delimited matrix file and run the pipeline on it."""
    return run_pipeline(load_matrix(path, delimiter=delimiter), config)
