"""heatmap-pipeline: scale, cluster and color-map labelled numeric matrices."""

from ._version import __version__
from .config import ColorScaleConfig, HeatmapConfig
from .core.color_scale import ColorScale
from .core.dendrogram import Dendrogram, DendrogramNode
from .core.matrix import MatrixData
from .errors import (
    DegenerateInputError,
    DomainError,
    HeatmapError,
    ParseError,
    ShapeError,
)
from .io.loader import load_matrix
from .pipeline import run_file, run_pipeline
from .render.renderer import RenderedHeatmap, render
from .transform.order import AxisOrder, ClusterOrder, IdentityOrder, order
from .transform.scaler import ScalingSpec, clamp, scale

__all__ = [
    "__version__",
    "AxisOrder",
    "ClusterOrder",
    "ColorScale",
    "ColorScaleConfig",
    "DegenerateInputError",
    "Dendrogram",
    "DendrogramNode",
    "DomainError",
    "HeatmapConfig",
    "HeatmapError",
    "IdentityOrder",
    "MatrixData",
    "ParseError",
    "RenderedHeatmap",
    "ScalingSpec",
    "ShapeError",
    "clamp",
    "load_matrix",
    "order",
    "render",
    "run_file",
    "run_pipeline",
    "scale",
]
