"""Shared test fixtures for heatmap-pipeline."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from heatmap_pipeline.core.matrix import MatrixData


@pytest.fixture
def small_matrix_df():
    """4x3 matrix DataFrame for basic tests."""
    data = np.array([
        [1.0, 2.0, 3.0],
        [4.0, 5.0, 6.0],
        [7.0, 8.0, 9.0],
        [10.0, 11.0, 12.0],
    ])
    return pd.DataFrame(
        data,
        index=["gene_A", "gene_B", "gene_C", "gene_D"],
        columns=["sample_1", "sample_2", "sample_3"],
    )


@pytest.fixture
def small_matrix(small_matrix_df):
    return MatrixData(small_matrix_df)


@pytest.fixture
def genes_ae():
    """Rows A-E with 5 numeric columns each, including a constant row."""
    df = pd.DataFrame(
        [
            [1.0, 2.0, 3.0, 4.0, 5.0],
            [5.0, 5.0, 5.0, 5.0, 5.0],
            [10.0, 8.0, 6.0, 4.0, 2.0],
            [0.5, 3.0, 0.1, 7.0, 2.2],
            [100.0, 101.0, 99.0, 98.0, 102.0],
        ],
        index=["A", "B", "C", "D", "E"],
        columns=["s1", "s2", "s3", "s4", "s5"],
    )
    return MatrixData(df)


@pytest.fixture
def two_block_matrix():
    """Rows fall in two well-separated groups: r0/r1 near 0, r2/r3 near 10."""
    return MatrixData.from_arrays(
        np.array([
            [0.0, 0.0, 0.1],
            [10.0, 10.2, 10.1],
            [0.1, 0.2, 0.0],
            [10.1, 10.0, 9.9],
        ]),
        ["r0", "r1", "r2", "r3"],
        ["c0", "c1", "c2"],
    )


@pytest.fixture
def large_matrix():
    """60x20 matrix for clustering tests."""
    rng = np.random.default_rng(42)
    data = rng.standard_normal((60, 20))
    rows = [f"gene_{i:03d}" for i in range(60)]
    cols = [f"sample_{j:03d}" for j in range(20)]
    return MatrixData(pd.DataFrame(data, index=rows, columns=cols))


@pytest.fixture
def write_matrix_file(tmp_path):
    """Write text to a file under tmp_path and return its path."""
    def _write(text, name="matrix.tsv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
