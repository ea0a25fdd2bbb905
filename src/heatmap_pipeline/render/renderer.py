"""Renderer: reorder a matrix and map every cell to a color level."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import pathlib
from typing import Sequence, Union

import numpy as np

from ..core.color_scale import ColorScale
from ..core.dendrogram import Dendrogram
from ..core.matrix import MatrixData
from ..errors import ShapeError
from ..layout.dendrogram_layout import DendrogramLayout, DendrogramSpec
from ..transform.order import AxisOrder, validate_permutation

logger = logging.getLogger(__name__)

OrderLike = Union[AxisOrder, Sequence[int], np.ndarray]


@dataclass(frozen=True, eq=False)
class RenderedHeatmap:
    """Everything a drawing surface needs, already in display order.

    ``color_indices[i, j]`` is the level of ``color_scale`` for the cell at
    display row i, display column j (-1 for NaN). ``row_order`` and
    ``col_order`` map display positions back to input positions.
    """

    matrix: MatrixData
    color_scale: ColorScale
    color_indices: np.ndarray
    row_order: np.ndarray
    col_order: np.ndarray
    row_dendrogram: Dendrogram | None = None
    col_dendrogram: Dendrogram | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return self.matrix.shape

    @property
    def row_labels(self) -> list:
        return self.matrix.row_ids.tolist()

    @property
    def col_labels(self) -> list:
        return self.matrix.col_ids.tolist()

    @property
    def colors(self) -> np.ndarray:
        """(n_rows, n_cols) object array of ``#rrggbb`` strings."""
        palette = np.array(self.color_scale.hex_colors + (self.color_scale.nan_hex,), dtype=object)
        # -1 indexes the trailing NaN color
        return palette[self.color_indices]

    def dendrogram_spec(
        self,
        axis: str,
        cell_size: float = 1.0,
        extent: float = 80.0,
        side: str | None = None,
    ) -> DendrogramSpec | None:
        """Link coordinates for the row ("left") or column ("top") dendrogram."""
        dendrogram = self.row_dendrogram if axis == "row" else self.col_dendrogram
        if dendrogram is None:
            return None
        if side is None:
            side = "left" if axis == "row" else "top"
        return DendrogramLayout.compute(dendrogram, side=side, cell_size=cell_size, extent=extent)

    def to_dict(self) -> dict:
        """JSON-ready data contract: palette, level grid, labels, dendrograms."""
        out = {
            "shape": list(self.shape),
            "rowLabels": [_builtin(v) for v in self.row_labels],
            "colLabels": [_builtin(v) for v in self.col_labels],
            "rowOrder": self.row_order.tolist(),
            "colOrder": self.col_order.tolist(),
            "colorScale": self.color_scale.to_dict(),
            "cells": self.color_indices.tolist(),
            "values": [
                [None if np.isnan(v) else float(v) for v in row]
                for row in self.matrix.values
            ],
        }
        for axis, dendrogram in (("row", self.row_dendrogram), ("col", self.col_dendrogram)):
            if dendrogram is not None:
                out[f"{axis}Dendrogram"] = {
                    "tree": dendrogram.to_dict(),
                    "layout": self.dendrogram_spec(axis).to_dict(),
                }
        return out

    def to_html(self, path: str | pathlib.Path, title: str = "heatmap") -> pathlib.Path:
        """Write a standalone SVG/HTML page."""
        from ..export.html_export import HTMLExporter
        return HTMLExporter.export(path, self, title=title)

    def save_figure(self, path: str | pathlib.Path, **kwargs) -> pathlib.Path:
        """Draw with matplotlib and save to an image file (png, pdf, svg)."""
        from ..export.figure import save_figure
        return save_figure(self, path, **kwargs)


def _builtin(value):
    return value.item() if isinstance(value, np.generic) else value


def _resolve_order(
    order: OrderLike,
    dendrogram: Dendrogram | None,
    n: int,
    axis: str,
) -> tuple[np.ndarray, Dendrogram | None]:
    """Turn an order argument into indices, picking up an AxisOrder's dendrogram."""
    if isinstance(order, AxisOrder):
        if dendrogram is None:
            dendrogram = order.dendrogram
        order = order.indices
    try:
        indices = validate_permutation(order, n)
    except ShapeError as exc:
        raise ShapeError(f"Invalid {axis} order: {exc}") from None
    if dendrogram is not None:
        if dendrogram.n_leaves != n:
            raise ShapeError(
                f"{axis} dendrogram has {dendrogram.n_leaves} leaves, matrix has {n} {axis}s."
            )
        if not np.array_equal(dendrogram.leaf_order, indices):
            raise ShapeError(
                f"{axis} order does not match the dendrogram's leaf order; "
                "the dendrogram could not be drawn against it."
            )
    return indices, dendrogram


def render(
    matrix: MatrixData,
    row_order: OrderLike,
    col_order: OrderLike,
    color_scale: ColorScale,
    row_dendrogram: Dendrogram | None = None,
    col_dendrogram: Dendrogram | None = None,
) -> RenderedHeatmap:
    """Reorder ``matrix`` and assign every cell a color level.

    Orders are permutations of the input positions (plain index sequences or
    :class:`AxisOrder`). Values outside the color domain saturate to the end
    colors rather than raising.
    """
    row_idx, row_dendrogram = _resolve_order(row_order, row_dendrogram, matrix.n_rows, "row")
    col_idx, col_dendrogram = _resolve_order(col_order, col_dendrogram, matrix.n_cols, "col")

    reordered = matrix.take(row_idx, col_idx)
    color_indices = color_scale.map_values(reordered.values)
    color_indices.flags.writeable = False
    logger.debug(
        "Rendered %d x %d heatmap with %d color levels",
        reordered.n_rows, reordered.n_cols, color_scale.levels,
    )
    return RenderedHeatmap(
        matrix=reordered,
        color_scale=color_scale,
        color_indices=color_indices,
        row_order=row_idx,
        col_order=col_idx,
        row_dendrogram=row_dendrogram,
        col_dendrogram=col_dendrogram,
    )
