"""Tests for render() and RenderedHeatmap."""

import json

import numpy as np
import pytest

from heatmap_pipeline.core.color_scale import ColorScale
from heatmap_pipeline.core.matrix import MatrixData
from heatmap_pipeline.errors import ShapeError
from heatmap_pipeline.render.renderer import RenderedHeatmap, render
from heatmap_pipeline.transform.order import AxisOrder, ClusterOrder, order


@pytest.fixture
def scale():
    return ColorScale.from_anchors(("green", "black", "red"), vmin=0.0, vmax=12.0, levels=12)


class TestRenderIdentity:
    def test_identity_is_noop(self, small_matrix, scale):
        hm = render(small_matrix, [0, 1, 2, 3], [0, 1, 2], scale)
        assert isinstance(hm, RenderedHeatmap)
        np.testing.assert_array_equal(hm.matrix.values, small_matrix.values)
        assert hm.row_labels == ["gene_A", "gene_B", "gene_C", "gene_D"]
        assert hm.col_labels == ["sample_1", "sample_2", "sample_3"]
        assert hm.shape == (4, 3)

    def test_color_indices(self, small_matrix, scale):
        hm = render(small_matrix, range(4), range(3), scale)
        expected = scale.map_values(small_matrix.values)
        np.testing.assert_array_equal(hm.color_indices, expected)
        assert hm.color_indices[3, 2] == 11

    def test_input_untouched(self, small_matrix, scale):
        before = small_matrix.values.copy()
        render(small_matrix, [3, 2, 1, 0], [2, 1, 0], scale)
        np.testing.assert_array_equal(small_matrix.values, before)


class TestRenderPermutation:
    def test_rows_and_cols_reordered(self, small_matrix, scale):
        hm = render(small_matrix, [2, 0, 3, 1], [1, 2, 0], scale)
        assert hm.row_labels == ["gene_C", "gene_A", "gene_D", "gene_B"]
        assert hm.col_labels == ["sample_2", "sample_3", "sample_1"]
        # display cell (i, j) holds input cell (row_order[i], col_order[j])
        for i, r in enumerate([2, 0, 3, 1]):
            for j, c in enumerate([1, 2, 0]):
                assert hm.matrix.values[i, j] == small_matrix.values[r, c]
        np.testing.assert_array_equal(hm.row_order, [2, 0, 3, 1])

    def test_axis_order_accepted(self, small_matrix, scale):
        rows = order(small_matrix, "row")
        hm = render(small_matrix, rows, AxisOrder(np.array([2, 1, 0])), scale)
        assert hm.col_labels == ["sample_3", "sample_2", "sample_1"]

    @pytest.mark.parametrize("bad", [[0, 1, 2], [0, 1, 2, 2], [0, 1, 2, 4], [0, 1, 2, 3, 4]])
    def test_invalid_row_order(self, small_matrix, scale, bad):
        with pytest.raises(ShapeError, match="Invalid row order"):
            render(small_matrix, bad, [0, 1, 2], scale)

    def test_invalid_col_order(self, small_matrix, scale):
        with pytest.raises(ShapeError, match="Invalid col order"):
            render(small_matrix, [0, 1, 2, 3], [0, 0, 1], scale)


class TestRenderDendrograms:
    def test_cluster_order_brings_dendrogram(self, two_block_matrix, scale):
        rows = order(two_block_matrix, "row", ClusterOrder())
        hm = render(two_block_matrix, rows, [0, 1, 2], scale)
        assert hm.row_dendrogram is rows.dendrogram
        assert hm.col_dendrogram is None
        assert hm.row_labels == rows.dendrogram.leaf_labels

    def test_mismatched_dendrogram(self, two_block_matrix, scale):
        rows = order(two_block_matrix, "row", ClusterOrder())
        shuffled = rows.indices[::-1].copy()
        with pytest.raises(ShapeError, match="leaf order"):
            render(two_block_matrix, shuffled, [0, 1, 2], scale, row_dendrogram=rows.dendrogram)

    def test_dendrogram_size_mismatch(self, two_block_matrix, scale):
        cols = order(two_block_matrix, "col", ClusterOrder())
        with pytest.raises(ShapeError, match="leaves"):
            render(two_block_matrix, [0, 1, 2, 3], [0, 1, 2], scale, row_dendrogram=cols.dendrogram)

    def test_dendrogram_spec(self, two_block_matrix, scale):
        rows = order(two_block_matrix, "row", ClusterOrder())
        hm = render(two_block_matrix, rows, [0, 1, 2], scale)
        spec = hm.dendrogram_spec("row", cell_size=10.0)
        assert spec.side == "left"
        assert spec.span == 40.0
        assert hm.dendrogram_spec("col") is None


class TestRenderedColors:
    def test_hex_grid(self, small_matrix, scale):
        hm = render(small_matrix, range(4), range(3), scale)
        colors = hm.colors
        assert colors.shape == (4, 3)
        assert colors[3, 2] == "#ff0000"

    def test_nan_cells(self, scale):
        m = MatrixData.from_arrays(np.array([[1.0, np.nan]]), ["r"], ["a", "b"])
        hm = render(m, [0], [0, 1], scale)
        assert hm.color_indices[0, 1] == -1
        assert hm.colors[0, 1] == scale.nan_hex

    def test_out_of_domain_saturates(self, scale):
        m = MatrixData.from_arrays(np.array([[-50.0, 500.0]]), ["r"], ["a", "b"])
        hm = render(m, [0], [0, 1], scale)
        np.testing.assert_array_equal(hm.color_indices, [[0, 11]])


class TestToDict:
    def test_json_serializable(self, two_block_matrix, scale):
        rows = order(two_block_matrix, "row", ClusterOrder())
        cols = order(two_block_matrix, "col", ClusterOrder())
        hm = render(two_block_matrix, rows, cols, scale)
        d = json.loads(json.dumps(hm.to_dict()))
        assert d["shape"] == [4, 3]
        assert d["rowLabels"] == hm.row_labels
        assert d["rowOrder"] == hm.row_order.tolist()
        assert len(d["cells"]) == 4 and len(d["cells"][0]) == 3
        assert d["colorScale"]["levels"] == 12
        assert d["rowDendrogram"]["tree"]["count"] == 4
        assert len(d["colDendrogram"]["layout"]["links"]) == 2

    def test_nan_value_is_null(self, scale):
        m = MatrixData.from_arrays(np.array([[0.5, np.nan]]), ["r"], ["a", "b"])
        d = render(m, [0], [0, 1], scale).to_dict()
        assert d["values"] == [[0.5, None]]
        assert d["cells"] == [[0, -1]]
        assert "rowDendrogram" not in d
