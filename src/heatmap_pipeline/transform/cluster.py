"""ClusterEngine: hierarchical clustering via scipy."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from ..core.dendrogram import Dendrogram
from ..errors import DegenerateInputError, DomainError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ClusterResult:
    """Result of clustering the rows of a data block."""

    leaf_order: np.ndarray       # row indices in clustered order
    dendrogram: Dendrogram
    method: str
    metric: str

    @property
    def linkage_matrix(self) -> np.ndarray:
        """scipy linkage matrix (n-1, 4)."""
        return self.dendrogram.linkage_matrix


class ClusterEngine:
    """Hierarchical clustering with deterministic ordering.

    Each call yields the leaf order used to permute an axis and the
    Dendrogram drawn beside it, both taken from scipy.cluster.hierarchy.

    scipy's linkage is deterministic for identical input, so repeated runs
    give identical orders and merge heights.
    """

    VALID_METHODS = {
        "single", "complete", "average", "weighted",
        "centroid", "median", "ward",
    }
    VALID_METRICS = {
        "euclidean", "correlation", "cosine", "cityblock",
        "chebyshev", "braycurtis", "canberra",
    }
    # linkage methods only defined on euclidean distances
    EUCLIDEAN_ONLY = {"ward", "centroid", "median"}

    @classmethod
    def validate(cls, method: str, metric: str) -> None:
        if method not in cls.VALID_METHODS:
            raise ValueError(
                f"Unknown linkage method '{method}'. "
                f"Valid: {sorted(cls.VALID_METHODS)}"
            )
        if metric not in cls.VALID_METRICS:
            raise ValueError(
                f"Unknown distance metric '{metric}'. "
                f"Valid: {sorted(cls.VALID_METRICS)}"
            )

    @classmethod
    def cluster(
        cls,
        data: np.ndarray,
        labels: np.ndarray | None = None,
        method: str = "average",
        metric: str = "euclidean",
        optimal_ordering: bool = True,
    ) -> ClusterResult:
        """Perform hierarchical clustering.

        Parameters
        ----------
        data : (n, m) array
            One row per item; columns are the features compared by ``metric``.
        labels : (n,) array, optional
            Labels carried on the dendrogram leaves.
        method : str
            One of VALID_METHODS.
        metric : str
            One of VALID_METRICS; forced to euclidean for EUCLIDEAN_ONLY methods.
        optimal_ordering : bool
            If True, use scipy's optimal_ordering for a visually clean
            (and still deterministic) leaf order.

        Returns
        -------
        ClusterResult
        """
        cls.validate(method, metric)
        data = np.asarray(data, dtype=np.float64)
        n = data.shape[0]
        if n < 2:
            raise DegenerateInputError(
                f"Clustering needs at least 2 items, got {n}."
            )
        if not np.all(np.isfinite(data)):
            i = int(np.argwhere(~np.isfinite(data))[0][0])
            raise DomainError(
                f"Cannot cluster non-finite values (item {i}"
                + (f", '{labels[i]}'" if labels is not None else "")
                + ")."
            )

        # scipy is slow to import; only pay for it when clustering
        from scipy.cluster.hierarchy import linkage
        from scipy.spatial.distance import pdist

        if method in cls.EUCLIDEAN_ONLY and metric != "euclidean":
            logger.warning(
                "%s linkage requires euclidean distances; ignoring metric '%s'",
                method, metric,
            )
            metric = "euclidean"

        dist = pdist(data, metric=metric)
        if not np.all(np.isfinite(dist)):
            raise DomainError(
                f"Distance '{metric}' is undefined for some pairs "
                "(e.g. correlation between constant rows). Scale the data "
                "or pick another metric."
            )

        logger.debug(
            "Clustering %d items (method=%s, metric=%s, optimal_ordering=%s)",
            n, method, metric, optimal_ordering,
        )
        Z = linkage(dist, method=method, optimal_ordering=optimal_ordering)

        dendrogram = Dendrogram.from_linkage(
            Z, labels=() if labels is None else tuple(labels),
        )
        return ClusterResult(
            leaf_order=dendrogram.leaf_order,
            dendrogram=dendrogram,
            method=method,
            metric=metric,
        )
