"""Input validation with clear error messages for bioinformaticians."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from ..errors import DomainError, ParseError, ShapeError


def _preview(items: list) -> str:
    """Format up to five offending items, noting how many were cut."""
    text = f"{items[:5]}"
    if len(items) > 5:
        text += f" (and {len(items) - 5} more)"
    return text


def validate_dataframe_matrix(data: Any) -> pd.DataFrame:
    """Validate that data is a numeric DataFrame suitable for heatmap display.

    Returns the validated DataFrame (unchanged).
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(
            f"Expected a pandas DataFrame, got {type(data).__name__}. "
            "Wrap your data with pd.DataFrame(data, index=row_ids, columns=col_ids)."
        )
    if data.empty:
        raise ShapeError("DataFrame is empty. Provide at least one row and one column.")
    validate_unique_labels(data.index, "Row")
    validate_unique_labels(data.columns, "Column")
    numeric_df = data.select_dtypes(include=[np.number])
    if numeric_df.shape[1] != data.shape[1]:
        non_numeric = [c for c in data.columns if c not in numeric_df.columns]
        raise ParseError(
            f"All columns must be numeric. Non-numeric columns: {_preview(non_numeric)}"
        )
    return data


def validate_unique_labels(labels: Any, axis_name: str) -> None:
    """Raise ValueError if an axis carries duplicate labels."""
    index = pd.Index(labels)
    if index.has_duplicates:
        dupes = index[index.duplicated()].unique().tolist()
        raise ValueError(
            f"{axis_name} labels must be unique. Found duplicates: {_preview(dupes)}"
        )


def validate_label_lengths(
    shape: tuple[int, int],
    row_labels: np.ndarray,
    col_labels: np.ndarray,
) -> None:
    """Check that label sequences match the value grid."""
    if len(row_labels) != shape[0]:
        raise ShapeError(
            f"Matrix has {shape[0]} rows but {len(row_labels)} row labels."
        )
    if len(col_labels) != shape[1]:
        raise ShapeError(
            f"Matrix has {shape[1]} columns but {len(col_labels)} column labels."
        )


def validate_finite(
    values: np.ndarray,
    row_labels: np.ndarray,
    col_labels: np.ndarray,
    context: str,
) -> None:
    """Raise DomainError naming the first non-finite cell, if any."""
    bad = ~np.isfinite(values)
    if not bad.any():
        return
    i, j = (int(k) for k in np.argwhere(bad)[0])
    raise DomainError(
        f"{context} requires finite values; found {values[i, j]} at "
        f"row {i} ('{row_labels[i]}'), column {j} ('{col_labels[j]}'). "
        f"{int(bad.sum())} non-finite cell(s) in total."
    )


def validate_colormap_name(name: str) -> str:
    """Validate that a matplotlib colormap name exists."""
    import matplotlib.pyplot as plt

    try:
        plt.get_cmap(name)
    except ValueError:
        raise ValueError(
            f"Unknown colormap '{name}'. Use a matplotlib colormap name "
            f"like 'RdBu', 'RdYlGn', 'YlOrRd', 'viridis', etc."
        ) from None
    return name
