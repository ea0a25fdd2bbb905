"""End-to-end tests: file -> scale -> order -> render -> export."""

import json

import numpy as np
import pytest

from heatmap_pipeline import (
    ClusterOrder,
    ColorScaleConfig,
    HeatmapConfig,
    IdentityOrder,
    ScalingSpec,
    run_file,
    run_pipeline,
)
from heatmap_pipeline.errors import DegenerateInputError, DomainError, HeatmapError


GENES_TSV = (
    "gene\ts1\ts2\ts3\ts4\ts5\n"
    "A\t1\t2\t3\t4\t5\n"
    "B\t5\t5\t5\t5\t5\n"
    "C\t10\t8\t6\t4\t2\n"
    "D\t0.5\t3\t0.1\t7\t2.2\n"
    "E\t100\t101\t99\t98\t102\n"
)


@pytest.fixture
def green_red_config():
    return HeatmapConfig(
        scaling=ScalingSpec.ROW_ZSCORE,
        row_order=IdentityOrder(),
        col_order=IdentityOrder(),
        color_scale=ColorScaleConfig(anchors=("green", "red"), levels=12),
    )


class TestEndToEnd:
    def test_zscore_identity_twelve_levels(self, genes_ae, green_red_config):
        hm = run_pipeline(genes_ae, green_red_config)
        assert hm.shape == genes_ae.shape
        assert hm.row_labels == ["A", "B", "C", "D", "E"]
        assert hm.col_labels == ["s1", "s2", "s3", "s4", "s5"]
        assert hm.color_scale.levels == 12
        assert hm.color_indices.min() >= 0
        assert hm.color_indices.max() <= 11
        assert set(hm.colors.ravel()) <= set(hm.color_scale.hex_colors)

    def test_rows_are_zscored(self, genes_ae, green_red_config):
        hm = run_pipeline(genes_ae, green_red_config)
        values = hm.matrix.values
        np.testing.assert_allclose(values.mean(axis=1), 0.0, atol=1e-12)
        # constant row B scales to zero instead of NaN
        np.testing.assert_array_equal(values[1], 0.0)
        for i in (0, 2, 3, 4):
            assert values[i].std(ddof=1) == pytest.approx(1.0)

    def test_offset_rows_look_alike(self, genes_ae, green_red_config):
        # row E sits near 100 but only its shape matters after scaling
        hm = run_pipeline(genes_ae, green_red_config)
        assert hm.matrix.values[4].max() < 2.0

    def test_input_not_mutated(self, genes_ae, green_red_config):
        before = genes_ae.values.copy()
        run_pipeline(genes_ae, green_red_config)
        np.testing.assert_array_equal(genes_ae.values, before)

    def test_default_config(self, genes_ae):
        hm = run_pipeline(genes_ae)
        np.testing.assert_array_equal(hm.matrix.values, genes_ae.values)
        assert hm.color_scale.vmin == 0.5
        assert hm.color_scale.vmax == 102.0

    def test_reverse_rows(self, genes_ae):
        hm = run_pipeline(genes_ae, HeatmapConfig(reverse_rows=True))
        assert hm.row_labels == ["E", "D", "C", "B", "A"]


class TestClustered:
    def test_cluster_both_axes(self, large_matrix):
        config = HeatmapConfig(
            scaling=ScalingSpec.ROW_ZSCORE,
            row_order=ClusterOrder(metric="correlation"),
            col_order=ClusterOrder(),
            clamp_extremes=(-2.0, 2.0),
        )
        hm = run_pipeline(large_matrix, config)
        assert sorted(hm.row_order.tolist()) == list(range(60))
        assert sorted(hm.col_order.tolist()) == list(range(20))
        np.testing.assert_array_equal(hm.row_dendrogram.leaf_order, hm.row_order)
        np.testing.assert_array_equal(hm.col_dendrogram.leaf_order, hm.col_order)
        assert hm.matrix.values.max() <= 2.0
        assert (hm.color_scale.vmin, hm.color_scale.vmax) == (-2.0, 2.0)

    def test_deterministic(self, large_matrix):
        config = HeatmapConfig(row_order=ClusterOrder(), col_order=ClusterOrder())
        a = run_pipeline(large_matrix, config)
        b = run_pipeline(large_matrix, config)
        np.testing.assert_array_equal(a.row_order, b.row_order)
        np.testing.assert_array_equal(a.color_indices, b.color_indices)

    def test_two_blocks_grouped(self, two_block_matrix):
        hm = run_pipeline(two_block_matrix, HeatmapConfig(row_order=ClusterOrder()))
        labels = hm.row_labels
        assert abs(labels.index("r0") - labels.index("r2")) == 1

    def test_single_column_cannot_cluster_columns(self, write_matrix_file):
        path = write_matrix_file("id\tonly\na\t1\nb\t2\n")
        with pytest.raises(DegenerateInputError):
            run_file(path, HeatmapConfig(col_order=ClusterOrder()))


class TestFromFile:
    def test_run_file(self, write_matrix_file, green_red_config):
        hm = run_file(write_matrix_file(GENES_TSV), green_red_config)
        assert hm.row_labels == ["A", "B", "C", "D", "E"]
        json.dumps(hm.to_dict())

    def test_nan_file_rejected(self, write_matrix_file):
        path = write_matrix_file("id\tx\ty\na\t1\tNaN\nb\t2\t3\n")
        with pytest.raises(DomainError):
            run_file(path)

    def test_errors_share_base(self, write_matrix_file):
        path = write_matrix_file("id\tx\na\tabc\n")
        with pytest.raises(HeatmapError):
            run_file(path)

    def test_exports(self, write_matrix_file, tmp_path):
        config = HeatmapConfig(scaling=ScalingSpec.ROW_ZSCORE, row_order=ClusterOrder())
        hm = run_file(write_matrix_file(GENES_TSV), config)
        html = hm.to_html(tmp_path / "out.html", title="genes")
        png = hm.save_figure(tmp_path / "out.png")
        assert html.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
        assert png.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
