"""Load a labelled numeric matrix from a delimited text file."""

from __future__ import annotations

import io
import logging
import pathlib

import numpy as np
import pandas as pd

from ..core.matrix import MatrixData
from ..core.validation import validate_finite
from ..errors import ParseError, ShapeError

logger = logging.getLogger(__name__)

_SUFFIX_DELIMITERS = {
    ".csv": ",",
    ".tsv": "\t",
    ".tab": "\t",
    ".txt": "\t",
}


def infer_delimiter(path: str | pathlib.Path) -> str:
    """Pick a delimiter from the file suffix, else from the header line."""
    path = pathlib.Path(path)
    delimiter = _SUFFIX_DELIMITERS.get(path.suffix.lower())
    if delimiter is not None:
        return delimiter
    with path.open(encoding="utf-8-sig") as fh:
        header = fh.readline()
    return "\t" if "\t" in header else ","


def load_matrix(
    path: str | pathlib.Path,
    delimiter: str | None = None,
) -> MatrixData:
    """Read a matrix file: header row = column labels, first column = row labels.

    Parameters
    ----------
    path : str or Path
        Tab- or comma-delimited text file.
    delimiter : str, optional
        Field separator. Inferred with :func:`infer_delimiter` when omitted.

    Raises
    ------
    ShapeError
        A data line has more or fewer fields than the header.
    ParseError
        A cell is not a number.
    DomainError
        A cell holds NaN or Infinity.
    """
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Matrix file not found: {path}")
    if delimiter is None:
        delimiter = infer_delimiter(path)
    logger.debug("Reading %s with delimiter %r", path, delimiter)

    try:
        raw = pd.read_csv(
            path,
            sep=delimiter,
            index_col=0,
            dtype=str,
            encoding="utf-8-sig",
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        raise ShapeError(f"{path}: file is empty.") from None
    except pd.errors.ParserError as exc:
        # raised for lines with more fields than the header
        raise ShapeError(f"{path}: inconsistent number of fields. {exc}") from None

    if raw.shape[0] == 0 or raw.shape[1] == 0:
        raise ShapeError(
            f"{path}: need at least one data row and one value column, "
            f"got {raw.shape[0]} x {raw.shape[1]}."
        )

    # short lines are padded with NaN, which dtype=str never produces otherwise
    short = raw.isna().any(axis=1).to_numpy()
    if short.any():
        i = int(np.flatnonzero(short)[0])
        n_fields = int(raw.iloc[i].notna().sum()) + 1
        raise ShapeError(
            f"{path}: data row {i + 1} ('{raw.index[i]}') has {n_fields} fields, "
            f"expected {raw.shape[1] + 1}."
        )

    values = _parse_numeric(raw, path)
    row_ids = np.array([str(r).strip() for r in raw.index], dtype=object)
    col_ids = np.array(_read_header(path, delimiter, raw.shape[1]), dtype=object)
    validate_finite(values, row_ids, col_ids, context=f"Loading {path.name}")

    matrix = MatrixData.from_arrays(values, row_ids, col_ids)
    logger.info("Loaded %d x %d matrix from %s", matrix.n_rows, matrix.n_cols, path)
    return matrix


def _parse_numeric(raw: pd.DataFrame, path: pathlib.Path) -> np.ndarray:
    """Convert a frame of strings to float64, naming the first bad cell."""
    stripped = raw.apply(lambda col: col.str.strip())
    numeric = stripped.apply(pd.to_numeric, errors="coerce")
    bad = numeric.isna().to_numpy() & ~stripped.apply(_is_nan_literal).to_numpy()
    if bad.any():
        i, j = (int(k) for k in np.argwhere(bad)[0])
        raise ParseError(
            f"{path}: non-numeric value {stripped.iat[i, j]!r} at row {i} "
            f"('{raw.index[i]}'), column {j} ('{raw.columns[j]}')."
        )
    return numeric.to_numpy(dtype=np.float64)


def _is_nan_literal(col: pd.Series) -> pd.Series:
    """True where the text spells a NaN that to_numeric parsed on purpose."""
    return col.str.lower().isin({"nan", "+nan", "-nan"})


def _read_header(path: pathlib.Path, delimiter: str, n_cols: int) -> list[str]:
    """Column labels exactly as written (read_csv renames duplicates)."""
    with path.open(encoding="utf-8-sig") as fh:
        first_line = fh.readline()
    # parse the line alone so longer data rows below cannot trip the tokenizer
    header = pd.read_csv(
        io.StringIO(first_line),
        sep=delimiter,
        header=None,
        dtype=str,
        keep_default_na=False,
    )
    # R-style files omit the corner cell above the row labels
    labels = header.iloc[0].tolist()[-n_cols:]
    return [label.strip() for label in labels]
