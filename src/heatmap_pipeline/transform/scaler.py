"""Value scaling functions for expression matrices."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from ..core.matrix import MatrixData
from ..core.validation import validate_finite

logger = logging.getLogger(__name__)

_AXES = {"row": 1, "col": 0}


def scale_zscore(df: pd.DataFrame, axis: int) -> pd.DataFrame:
    """Center and scale (z-score): subtract mean, divide by sample std.

    axis=0 -> column-wise, axis=1 -> row-wise. Rows/columns with zero or
    undefined std (a single value) come out as all zeros.
    """
    mean = df.mean(axis=axis)
    std = df.std(axis=axis, ddof=1)
    # compare extremes, not std: float noise leaves constant rows a tiny std
    flat = (df.max(axis=axis) == df.min(axis=axis)) | std.isna()
    std = std.where(~flat, 1.0)
    if axis == 1:
        out = df.sub(mean, axis=0).div(std, axis=0)
        out.loc[flat.to_numpy(), :] = 0.0
    else:
        out = df.sub(mean, axis=1).div(std, axis=1)
        out.loc[:, flat.to_numpy()] = 0.0
    return out


def scale_center(df: pd.DataFrame, axis: int) -> pd.DataFrame:
    """Center only: subtract mean.

    axis=0 -> column-wise, axis=1 -> row-wise.
    """
    mean = df.mean(axis=axis)
    if axis == 1:
        return df.sub(mean, axis=0)
    return df.sub(mean, axis=1)


def scale_minmax(df: pd.DataFrame, axis: int) -> pd.DataFrame:
    """Min-max scaling to [0, 1].

    axis=0 -> column-wise, axis=1 -> row-wise.
    """
    mn = df.min(axis=axis)
    mx = df.max(axis=axis)
    rng = mx - mn
    rng = rng.replace(0, 1)  # constant rows map to 0
    if axis == 1:
        return df.sub(mn, axis=0).div(rng, axis=0)
    return df.sub(mn, axis=1).div(rng, axis=1)


_METHODS = {"zscore": scale_zscore, "center": scale_center, "minmax": scale_minmax}


def apply_scaling(df: pd.DataFrame, method: str, axis: int) -> pd.DataFrame:
    """Dispatch to the appropriate scaling function.

    method: "none", "zscore", "center", "minmax"
    axis: 0 (column-wise) or 1 (row-wise)
    """
    if method == "none":
        return df
    return _METHODS[method](df, axis)


@dataclass(frozen=True)
class ScalingSpec:
    """Which normalization to apply, and along which axis."""

    method: str = "none"
    axis: str = "row"

    def __post_init__(self) -> None:
        if self.method != "none" and self.method not in _METHODS:
            raise ValueError(
                f"Unknown scaling method '{self.method}'. "
                f"Valid: {['none', *sorted(_METHODS)]}"
            )
        if self.axis not in _AXES:
            raise ValueError(f"Scaling axis must be 'row' or 'col', got '{self.axis}'.")

    @classmethod
    def parse(cls, text: str) -> ScalingSpec:
        """Parse 'none', 'row-zscore', 'col-minmax', 'zscore' (row-wise), ..."""
        text = text.strip().lower().replace("_", "-")
        if text == "none":
            return cls()
        axis, sep, method = text.partition("-")
        if not sep:
            axis, method = "row", text
        if axis == "column":
            axis = "col"
        return cls(method=method, axis=axis)

    @property
    def label(self) -> str:
        return "none" if self.method == "none" else f"{self.axis}-{self.method}"


ScalingSpec.NONE = ScalingSpec()
ScalingSpec.ROW_ZSCORE = ScalingSpec("zscore", "row")


def scale(matrix: MatrixData, spec: ScalingSpec = ScalingSpec.NONE) -> MatrixData:
    """Return a new matrix normalized per ``spec``; ``none`` returns the input.

    Raises DomainError if the matrix holds NaN/Infinity, since means and
    standard deviations are undefined there.
    """
    if spec.method == "none":
        return matrix
    validate_finite(
        matrix.values, matrix.row_ids, matrix.col_ids, context=f"Scaling ({spec.label})",
    )
    logger.debug("Applying %s scaling to %d x %d matrix", spec.label, *matrix.shape)
    scaled = apply_scaling(matrix.to_frame(), spec.method, _AXES[spec.axis])
    return matrix.with_values(scaled.to_numpy(dtype=np.float64))


def clamp(matrix: MatrixData, low: float, high: float) -> MatrixData:
    """Clip every value into [low, high]; keeps a few extremes from washing out the scale."""
    low, high = float(low), float(high)
    if not low < high:
        raise ValueError(f"Clamp bounds must satisfy low < high, got [{low}, {high}].")
    return matrix.with_values(np.clip(matrix.values, low, high))
