"""Axis ordering: identity (optionally reversed) or hierarchical clustering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from ..core.dendrogram import Dendrogram
from ..core.matrix import MatrixData
from ..errors import ShapeError
from .cluster import ClusterEngine

VALID_AXES = ("row", "col")


@dataclass(frozen=True)
class IdentityOrder:
    """Keep input order. ``reverse`` flips it for renderers that draw bottom-up."""

    reverse: bool = False


@dataclass(frozen=True)
class ClusterOrder:
    """Order by the leaves of an agglomerative clustering."""

    metric: str = "euclidean"
    method: str = "average"
    optimal_ordering: bool = True

    def __post_init__(self) -> None:
        ClusterEngine.validate(self.method, self.metric)


OrderSpec = Union[IdentityOrder, ClusterOrder]


@dataclass(frozen=True, eq=False)
class AxisOrder:
    """A permutation of ``0..n-1`` plus the dendrogram that produced it, if any."""

    indices: np.ndarray
    dendrogram: Dendrogram | None = None

    def __post_init__(self) -> None:
        indices = validate_permutation(self.indices, len(self.indices))
        indices.flags.writeable = False
        object.__setattr__(self, "indices", indices)

    def __len__(self) -> int:
        return len(self.indices)

    def labels(self, matrix: MatrixData, axis: str) -> list:
        """Labels of ``axis`` in this order."""
        ids = matrix.row_ids if axis == "row" else matrix.col_ids
        return ids[self.indices].tolist()


def validate_permutation(indices, n: int) -> np.ndarray:
    """Return ``indices`` as an int array, or raise ShapeError if it is not a permutation of 0..n-1."""
    arr = np.asarray(indices)
    if arr.ndim != 1 or len(arr) != n:
        raise ShapeError(f"Order has {arr.size} entries, expected {n}.")
    if n and not np.issubdtype(arr.dtype, np.integer):
        raise ShapeError(f"Order must contain integer indices, got dtype {arr.dtype}.")
    arr = arr.astype(np.intp)
    if not np.array_equal(np.sort(arr), np.arange(n)):
        raise ShapeError(
            f"Order is not a permutation of 0..{n - 1}: every index must appear exactly once."
        )
    return arr


def order(matrix: MatrixData, axis: str, spec: OrderSpec | None = None) -> AxisOrder:
    """Compute the display order for the rows or columns of ``matrix``.

    Parameters
    ----------
    matrix : MatrixData
    axis : "row" or "col"
    spec : IdentityOrder or ClusterOrder
        Defaults to ``IdentityOrder()``.

    Raises
    ------
    DegenerateInputError
        Clustering requested with fewer than 2 items on the axis.
    DomainError
        Clustering requested on non-finite values.
    """
    if axis not in VALID_AXES:
        raise ValueError(f"axis must be 'row' or 'col', got '{axis}'")
    if spec is None:
        spec = IdentityOrder()
    n = matrix.n_rows if axis == "row" else matrix.n_cols

    if isinstance(spec, IdentityOrder):
        indices = np.arange(n)
        if spec.reverse:
            indices = indices[::-1]
        return AxisOrder(indices=indices)

    if isinstance(spec, ClusterOrder):
        block = matrix if axis == "row" else matrix.transpose()
        result = ClusterEngine.cluster(
            data=block.values,
            labels=block.row_ids,
            method=spec.method,
            metric=spec.metric,
            optimal_ordering=spec.optimal_ordering,
        )
        return AxisOrder(indices=result.leaf_order, dendrogram=result.dendrogram)

    raise TypeError(f"Unsupported order spec: {type(spec).__name__}")
