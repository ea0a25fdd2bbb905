"""Error taxonomy for the heatmap pipeline.

Every error subclasses ``ValueError`` as well as :class:`HeatmapError`, so
callers that already guard against bad input with ``except ValueError``
keep working.
"""

from __future__ import annotations


class HeatmapError(Exception):
    """Base class for all heatmap-pipeline errors."""


class ParseError(HeatmapError, ValueError):
    """A cell of the input could not be read as a number."""


class ShapeError(HeatmapError, ValueError):
    """Row/column lengths, labels or orders disagree with the matrix shape."""


class DegenerateInputError(HeatmapError, ValueError):
    """Clustering was requested along an axis with fewer than two items."""


class DomainError(HeatmapError, ValueError):
    """A non-finite value (NaN/Infinity) appeared where a finite one is required."""
