"""Dendrogram layout: convert a merge tree to drawable link coordinates."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.dendrogram import Dendrogram


@dataclass(frozen=True)
class DendrogramLink:
    """A single U-shaped link in the dendrogram.

    Drawn as three segments: up from the left child to the merge height,
    across to the right child's position, then down to the right child.
    Leaf-axis values run along the heatmap edge (y for rows, x for columns);
    height-axis values grow away from it.
    """

    # Leaf-axis positions
    leaf_left: float
    leaf_right: float
    # Height-axis positions
    height_merge: float
    height_left_child: float
    height_right_child: float
    # Number of leaves under the merge
    count: int

    def to_dict(self) -> dict:
        return {
            "leafLeft": self.leaf_left,
            "leafRight": self.leaf_right,
            "heightMerge": self.height_merge,
            "heightLeftChild": self.height_left_child,
            "heightRightChild": self.height_right_child,
            "count": self.count,
        }


@dataclass(frozen=True)
class DendrogramSpec:
    """Drawable links for one dendrogram plus the size of its drawing area."""

    links: tuple[DendrogramLink, ...]
    # Which side: "left", "right", "top", "bottom"
    side: str
    # Size of the dendrogram area on the height axis
    extent: float
    # Size of the area on the leaf axis
    span: float

    def to_dict(self) -> dict:
        return {
            "links": [link.to_dict() for link in self.links],
            "side": self.side,
            "extent": self.extent,
            "span": self.span,
        }


DEFAULT_DENDRO_HEIGHT = 80.0  # pixels for dendrogram area
VALID_SIDES = {"left", "right", "top", "bottom"}


class DendrogramLayout:
    """Converts a Dendrogram to link coordinates.

    Leaf k of the dendrogram's leaf order sits at the centre of visual cell
    k; a merge sits midway between its two children. Heights are scaled so
    the tallest merge spans ``extent``; leaves are at height 0.
    """

    @staticmethod
    def compute(
        dendrogram: Dendrogram,
        side: str = "left",
        cell_size: float = 1.0,
        extent: float = DEFAULT_DENDRO_HEIGHT,
    ) -> DendrogramSpec:
        """Compute coordinates for every merge of ``dendrogram``.

        Parameters
        ----------
        dendrogram : Dendrogram
        side : str
            "left"/"right" for rows, "top"/"bottom" for columns.
        cell_size : float
            Size of one heatmap cell along the leaf axis.
        extent : float
            Size of the dendrogram along the height axis.
        """
        if side not in VALID_SIDES:
            raise ValueError(f"side must be one of {sorted(VALID_SIDES)}, got '{side}'")

        max_height = float(dendrogram.merge_heights.max())
        if max_height == 0:
            max_height = 1.0

        position: dict[int, float] = {
            int(leaf): (k + 0.5) * cell_size
            for k, leaf in enumerate(dendrogram.leaf_order)
        }
        height: dict[int, float] = {int(leaf): 0.0 for leaf in dendrogram.leaf_order}

        links: list[DendrogramLink] = []
        for node in dendrogram.merges():
            left_pos = position[node.left.id]
            right_pos = position[node.right.id]
            merge_height = (node.height / max_height) * extent
            links.append(DendrogramLink(
                leaf_left=left_pos,
                leaf_right=right_pos,
                height_merge=merge_height,
                height_left_child=height[node.left.id],
                height_right_child=height[node.right.id],
                count=node.count,
            ))
            position[node.id] = (left_pos + right_pos) / 2
            height[node.id] = merge_height

        return DendrogramSpec(
            links=tuple(links),
            side=side,
            extent=extent,
            span=dendrogram.n_leaves * cell_size,
        )
