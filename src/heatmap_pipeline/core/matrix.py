"""MatrixData: validated, immutable matrix container."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from ..errors import ShapeError
from .validation import (
    validate_dataframe_matrix,
    validate_label_lengths,
    validate_unique_labels,
)


class MatrixData:
    """Immutable container for a validated numeric matrix.

    Stores the matrix as a contiguous float64 numpy array (row-major)
    alongside the row and column labels. Every transformation returns
    a new MatrixData; the stored array is never written to.
    """

    __slots__ = ("_values", "_row_ids", "_col_ids")

    def __init__(self, df: pd.DataFrame) -> None:
        df = validate_dataframe_matrix(df)
        self._values: np.ndarray = np.array(df.values, dtype=np.float64, order="C")
        self._row_ids: np.ndarray = np.array(df.index, dtype=object)
        self._col_ids: np.ndarray = np.array(df.columns, dtype=object)

    @classmethod
    def from_arrays(
        cls,
        values: np.ndarray,
        row_ids: Sequence,
        col_ids: Sequence,
    ) -> MatrixData:
        """Create a MatrixData from a 2D array plus labels."""
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ShapeError(f"Expected a 2D array, got {values.ndim} dimension(s).")
        row_ids = np.asarray(list(row_ids), dtype=object)
        col_ids = np.asarray(list(col_ids), dtype=object)
        validate_label_lengths(values.shape, row_ids, col_ids)
        validate_unique_labels(row_ids, "Row")
        validate_unique_labels(col_ids, "Column")
        return cls._from_validated(values, row_ids, col_ids)

    @classmethod
    def _from_validated(
        cls,
        values: np.ndarray,
        row_ids: np.ndarray,
        col_ids: np.ndarray,
    ) -> MatrixData:
        """Create a MatrixData from pre-validated arrays (always copies values)."""
        obj = object.__new__(cls)
        obj._values = np.array(values, dtype=np.float64, order="C")
        obj._row_ids = np.array(row_ids, dtype=object)
        obj._col_ids = np.array(col_ids, dtype=object)
        return obj

    @property
    def values(self) -> np.ndarray:
        """Float64 matrix (n_rows, n_cols), read-only view."""
        v = self._values.view()
        v.flags.writeable = False
        return v

    @property
    def row_ids(self) -> np.ndarray:
        """Row labels as object array."""
        return self._row_ids.copy()

    @property
    def col_ids(self) -> np.ndarray:
        """Column labels as object array."""
        return self._col_ids.copy()

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def n_rows(self) -> int:
        return self._values.shape[0]

    @property
    def n_cols(self) -> int:
        return self._values.shape[1]

    def finite_range(self) -> tuple[float, float]:
        """Return (min, max) of all finite values. Used for color scale defaults."""
        finite = self._values[np.isfinite(self._values)]
        if len(finite) == 0:
            return (0.0, 1.0)
        return (float(finite.min()), float(finite.max()))

    def with_values(self, values: np.ndarray) -> MatrixData:
        """Return a new matrix with the same labels and replacement values."""
        values = np.asarray(values, dtype=np.float64)
        validate_label_lengths(values.shape, self._row_ids, self._col_ids)
        return MatrixData._from_validated(values, self._row_ids, self._col_ids)

    def take(self, row_indices: Sequence[int], col_indices: Sequence[int]) -> MatrixData:
        """Extract rows/cols by position, in the given order. Returns a new MatrixData."""
        row_indices = np.asarray(row_indices, dtype=np.intp)
        col_indices = np.asarray(col_indices, dtype=np.intp)
        sub_values = self._values[np.ix_(row_indices, col_indices)]
        return MatrixData._from_validated(
            sub_values, self._row_ids[row_indices], self._col_ids[col_indices],
        )

    def transpose(self) -> MatrixData:
        """Swap rows and columns."""
        return MatrixData._from_validated(self._values.T, self._col_ids, self._row_ids)

    def to_frame(self) -> pd.DataFrame:
        """Return a fresh DataFrame copy of the matrix."""
        return pd.DataFrame(
            self._values.copy(),
            index=pd.Index(self._row_ids.tolist()),
            columns=pd.Index(self._col_ids.tolist()),
        )

    def __repr__(self) -> str:
        return f"MatrixData(shape={self.shape})"
