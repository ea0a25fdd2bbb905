"""ColorScale: matplotlib colormap -> N-level RGBA lookup table."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .validation import validate_colormap_name


class ColorScale:
    """Maps scalar values to one of ``levels`` discrete colors.

    The lookup table is sampled evenly from a matplotlib colormap, either a
    named palette (brewer palettes such as ``RdBu`` or ``RdYlGn`` included)
    or a linear interpolation between anchor colors built with
    :meth:`from_anchors`. Values outside ``[vmin, vmax]`` saturate to the
    first/last level; NaN maps to index -1 and ``nan_color``.
    """

    __slots__ = ("_lut", "_vmin", "_vmax", "_cmap_name", "_nan_color", "_levels", "_reverse")

    DEFAULT_LEVELS = 12

    def __init__(
        self,
        cmap_name: str = "RdBu",
        vmin: float = -2.0,
        vmax: float = 2.0,
        levels: int = DEFAULT_LEVELS,
        reverse: bool = False,
        nan_color: tuple[int, int, int, int] = (200, 200, 200, 255),
    ) -> None:
        validate_colormap_name(cmap_name)
        import matplotlib.pyplot as plt

        self._init(plt.get_cmap(cmap_name), cmap_name, vmin, vmax, levels, reverse, nan_color)

    @classmethod
    def from_anchors(
        cls,
        anchors: Sequence[str] = ("green", "black", "red"),
        vmin: float = -2.0,
        vmax: float = 2.0,
        levels: int = DEFAULT_LEVELS,
        reverse: bool = False,
        nan_color: tuple[int, int, int, int] = (200, 200, 200, 255),
    ) -> ColorScale:
        """Interpolate linearly between named anchor colors (low -> high)."""
        from matplotlib.colors import LinearSegmentedColormap

        anchors = list(anchors)
        if len(anchors) < 2:
            raise ValueError(f"Need at least 2 anchor colors, got {len(anchors)}.")
        name = "-".join(anchors)
        try:
            cmap = LinearSegmentedColormap.from_list(name, anchors)
        except ValueError as exc:
            raise ValueError(f"Invalid anchor colors {anchors}: {exc}") from None
        obj = object.__new__(cls)
        obj._init(cmap, name, vmin, vmax, levels, reverse, nan_color)
        return obj

    def _init(self, cmap, name, vmin, vmax, levels, reverse, nan_color) -> None:
        levels = int(levels)
        if levels < 2:
            raise ValueError(f"A color scale needs at least 2 levels, got {levels}.")
        vmin, vmax = float(vmin), float(vmax)
        if not (np.isfinite(vmin) and np.isfinite(vmax)):
            raise ValueError(f"Color domain must be finite, got [{vmin}, {vmax}].")
        if vmin > vmax:
            raise ValueError(f"vmin ({vmin}) must not exceed vmax ({vmax}).")
        self._cmap_name = name
        self._vmin = vmin
        self._vmax = vmax
        self._levels = levels
        self._reverse = bool(reverse)
        self._nan_color = tuple(nan_color)
        self._lut = self._build_lut(cmap)

    def _build_lut(self, cmap) -> np.ndarray:
        """Build a (levels, 4) uint8 RGBA lookup table from the cmap."""
        if self._reverse:
            cmap = cmap.reversed()
        positions = np.linspace(0.0, 1.0, self._levels)
        rgba_float = cmap(positions)  # (levels, 4) float in [0, 1]
        return np.round(rgba_float * 255).astype(np.uint8)

    @property
    def lut(self) -> np.ndarray:
        """(levels, 4) uint8 RGBA lookup table."""
        return self._lut

    @property
    def levels(self) -> int:
        return self._levels

    @property
    def vmin(self) -> float:
        return self._vmin

    @property
    def vmax(self) -> float:
        return self._vmax

    @property
    def cmap_name(self) -> str:
        return self._cmap_name

    @property
    def reverse(self) -> bool:
        return self._reverse

    @property
    def nan_color(self) -> tuple[int, int, int, int]:
        return self._nan_color

    @property
    def hex_colors(self) -> tuple[str, ...]:
        """The levels as ``#rrggbb`` strings, low to high."""
        return tuple(_rgba_to_hex(rgba) for rgba in self._lut)

    @property
    def nan_hex(self) -> str:
        return _rgba_to_hex(self._nan_color)

    def value_to_index(self, value: float) -> int:
        """Map a scalar value to a level index [0, levels - 1]; NaN -> -1."""
        return int(self.map_values(np.array([[value]], dtype=np.float64))[0, 0])

    def map_values(self, values: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`value_to_index` over an array of any shape."""
        values = np.asarray(values, dtype=np.float64)
        out = np.full(values.shape, -1, dtype=np.int64)
        nan = np.isnan(values)
        if self._vmax == self._vmin:
            out[~nan] = (self._levels - 1) // 2
            return out
        normalized = (values[~nan] - self._vmin) / (self._vmax - self._vmin)
        clamped = np.clip(normalized, 0.0, 1.0)
        out[~nan] = np.minimum((clamped * self._levels).astype(np.int64), self._levels - 1)
        return out

    def to_dict(self) -> dict:
        return {
            "name": self._cmap_name,
            "vmin": self._vmin,
            "vmax": self._vmax,
            "levels": self._levels,
            "reversed": self._reverse,
            "colors": list(self.hex_colors),
            "nanColor": self.nan_hex,
        }

    def __repr__(self) -> str:
        return (
            f"ColorScale({self._cmap_name!r}, vmin={self._vmin}, vmax={self._vmax}, "
            f"levels={self._levels}, reverse={self._reverse})"
        )


def _rgba_to_hex(rgba) -> str:
    r, g, b = (int(c) for c in rgba[:3])
    return f"#{r:02x}{g:02x}{b:02x}"
