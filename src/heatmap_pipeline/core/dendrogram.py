"""Dendrogram: the binary merge tree produced by hierarchical clustering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np


@dataclass(frozen=True, eq=False, repr=False)
class DendrogramNode:
    """A leaf or merge in the dendrogram tree.

    Leaves carry the original item index as ``id`` and height 0. A merge
    created at step k of the linkage has ``id = n_leaves + k`` and owns
    exactly two children.
    """

    id: int
    height: float = 0.0
    left: DendrogramNode | None = None
    right: DendrogramNode | None = None
    count: int = 1

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"DendrogramNode(leaf={self.id})"
        return f"DendrogramNode(id={self.id}, height={self.height:g}, count={self.count})"

    def leaves(self) -> list[int]:
        """Leaf indices under this node, read left to right."""
        out: list[int] = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                out.append(node.id)
            else:
                # right pushed first so left is visited first
                stack.append(node.right)
                stack.append(node.left)
        return out


@dataclass(frozen=True, eq=False)
class Dendrogram:
    """A complete merge tree over ``n_leaves`` items.

    Wraps the scipy linkage matrix it was built from, so merge heights can
    be read in merge order while the tree is walked through ``root``.
    """

    root: DendrogramNode
    linkage_matrix: np.ndarray   # (n-1, 4) scipy linkage
    labels: tuple = ()

    @classmethod
    def from_linkage(cls, Z: np.ndarray, labels: Sequence = ()) -> Dendrogram:
        """Build the tree bottom-up from a scipy linkage matrix.

        Column 0 of each linkage row becomes the left child, column 1 the
        right child, matching ``scipy.cluster.hierarchy.to_tree``.
        """
        Z = np.array(Z, dtype=np.float64)
        if Z.ndim != 2 or Z.shape[0] == 0 or Z.shape[1] != 4:
            raise ValueError(f"Expected a (n-1, 4) linkage matrix, got shape {Z.shape}.")
        n = Z.shape[0] + 1
        labels = tuple(labels)
        if labels and len(labels) != n:
            raise ValueError(f"Linkage covers {n} leaves but {len(labels)} labels given.")

        nodes: dict[int, DendrogramNode] = {i: DendrogramNode(id=i) for i in range(n)}
        for k in range(n - 1):
            # pop so each node gets exactly one parent
            left = nodes.pop(int(Z[k, 0]))
            right = nodes.pop(int(Z[k, 1]))
            nodes[n + k] = DendrogramNode(
                id=n + k,
                height=float(Z[k, 2]),
                left=left,
                right=right,
                count=left.count + right.count,
            )
        (root,) = nodes.values()
        Z.flags.writeable = False
        return cls(root=root, linkage_matrix=Z, labels=labels)

    @property
    def n_leaves(self) -> int:
        return self.root.count

    @property
    def leaf_order(self) -> np.ndarray:
        """Leaf indices left to right; equals scipy's ``leaves_list``."""
        return np.array(self.root.leaves(), dtype=np.intp)

    @property
    def leaf_labels(self) -> list:
        if not self.labels:
            return self.leaf_order.tolist()
        return [self.labels[i] for i in self.leaf_order]

    @property
    def merge_heights(self) -> np.ndarray:
        """Merge distances in the order the merges happened."""
        return self.linkage_matrix[:, 2].copy()

    def merges(self) -> Iterator[DendrogramNode]:
        """Internal nodes in merge order (children before parents)."""
        found: list[DendrogramNode] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if not node.is_leaf:
                found.append(node)
                stack.extend((node.left, node.right))
        return iter(sorted(found, key=lambda node: node.id))

    def to_dict(self) -> dict:
        """Nested JSON-ready description of the tree."""
        def label(i: int):
            if not self.labels:
                return i
            value = self.labels[i]
            return value.item() if isinstance(value, np.generic) else value

        built: dict[int, dict] = {}
        for i in self.leaf_order:
            built[int(i)] = {"leaf": int(i), "label": label(int(i)), "height": 0.0}
        for node in self.merges():
            built[node.id] = {
                "id": node.id,
                "height": node.height,
                "count": node.count,
                "left": built.pop(node.left.id),
                "right": built.pop(node.right.id),
            }
        return built[self.root.id]
