"""HeatmapConfig: the per-run options of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import pathlib
from typing import Any, Mapping

from .core.color_scale import ColorScale
from .core.matrix import MatrixData
from .transform.order import ClusterOrder, IdentityOrder, OrderSpec
from .transform.scaler import ScalingSpec


def _key(name: str) -> str:
    return name.strip().lower().replace("_", "-")


def _check_keys(section: str, data: Mapping[str, Any], allowed: set[str]) -> dict[str, Any]:
    normalized = {_key(k): v for k, v in data.items()}
    unknown = sorted(set(normalized) - allowed)
    if unknown:
        raise ValueError(
            f"Unknown {section} option(s): {unknown}. Valid: {sorted(allowed)}"
        )
    return normalized


def _flag(name: str, value: Any) -> bool:
    """Accept JSON booleans and the strings "true"/"false"; reject anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"'{name}' must be true or false, got {value!r}.")


@dataclass(frozen=True)
class ColorScaleConfig:
    """Either a named palette or a list of anchor colors, sampled to ``levels``."""

    palette: str = "RdBu"
    anchors: tuple[str, ...] | None = None
    reversed: bool = False
    levels: int = ColorScale.DEFAULT_LEVELS

    def __post_init__(self) -> None:
        if self.anchors is not None:
            object.__setattr__(self, "anchors", tuple(self.anchors))
        if int(self.levels) < 2:
            raise ValueError(f"levels must be at least 2, got {self.levels}.")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColorScaleConfig:
        d = _check_keys("color-scale", data, {"palette", "anchors", "reversed", "levels"})
        if "palette" in d and "anchors" in d:
            raise ValueError("color-scale takes either 'palette' or 'anchors', not both.")
        kwargs: dict[str, Any] = {}
        if "palette" in d:
            kwargs["palette"] = str(d["palette"])
        if "anchors" in d:
            anchors = d["anchors"]
            if isinstance(anchors, str):
                anchors = [a.strip() for a in anchors.split(",")]
            kwargs["anchors"] = tuple(anchors)
        if "reversed" in d:
            kwargs["reversed"] = _flag("reversed", d["reversed"])
        if "levels" in d:
            kwargs["levels"] = int(d["levels"])
        return cls(**kwargs)

    def build(self, vmin: float, vmax: float) -> ColorScale:
        if self.anchors is not None:
            return ColorScale.from_anchors(
                self.anchors, vmin=vmin, vmax=vmax, levels=self.levels, reverse=self.reversed,
            )
        return ColorScale(
            self.palette, vmin=vmin, vmax=vmax, levels=self.levels, reverse=self.reversed,
        )


def parse_order(value: Any) -> OrderSpec:
    """Parse ``"identity"``, ``"cluster"`` or a one-key mapping with options."""
    if isinstance(value, (IdentityOrder, ClusterOrder)):
        return value
    if isinstance(value, str):
        value = {value: {}}
    if not isinstance(value, Mapping) or len(value) != 1:
        raise ValueError(
            f"Order must be 'identity', 'cluster' or a one-key mapping, got {value!r}."
        )
    ((kind, options),) = value.items()
    kind = _key(kind)
    options = options or {}
    if kind == "identity":
        d = _check_keys("identity order", options, {"reverse"})
        return IdentityOrder(reverse=_flag("reverse", d.get("reverse", False)))
    if kind == "cluster":
        d = _check_keys(
            "cluster order", options,
            {"distance-metric", "metric", "linkage", "method", "optimal-ordering"},
        )
        return ClusterOrder(
            metric=d.get("distance-metric", d.get("metric", "euclidean")),
            method=d.get("linkage", d.get("method", "average")),
            optimal_ordering=_flag("optimal-ordering", d.get("optimal-ordering", True)),
        )
    raise ValueError(f"Unknown order kind '{kind}'. Use 'identity' or 'cluster'.")


@dataclass(frozen=True)
class HeatmapConfig:
    """Options for one pipeline run; every field has a default.

    The color domain is ``clamp_extremes`` when set, otherwise
    ``vmin``/``vmax`` where given, falling back to the finite range of the
    scaled matrix.
    """

    scaling: ScalingSpec = field(default_factory=ScalingSpec)
    row_order: OrderSpec = field(default_factory=IdentityOrder)
    col_order: OrderSpec = field(default_factory=IdentityOrder)
    reverse_rows: bool = False
    color_scale: ColorScaleConfig = field(default_factory=ColorScaleConfig)
    clamp_extremes: tuple[float, float] | None = None
    vmin: float | None = None
    vmax: float | None = None

    def __post_init__(self) -> None:
        if self.reverse_rows and not isinstance(self.row_order, IdentityOrder):
            raise ValueError(
                "reverse_rows only applies to identity row order; clustered rows "
                "follow the dendrogram."
            )
        if self.clamp_extremes is not None:
            low, high = (float(v) for v in self.clamp_extremes)
            if not low < high:
                raise ValueError(f"clamp_extremes must satisfy low < high, got {self.clamp_extremes}.")
            object.__setattr__(self, "clamp_extremes", (low, high))

    _KEYS = {
        "scaling", "row-order", "col-order", "reverse-rows", "color-scale",
        "clamp-extremes", "vmin", "vmax",
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeatmapConfig:
        """Build from the hyphenated option names (``row-order``, ``clamp-extremes``, ...)."""
        d = _check_keys("config", data, cls._KEYS)
        kwargs: dict[str, Any] = {}
        if "scaling" in d:
            kwargs["scaling"] = ScalingSpec.parse(str(d["scaling"]))
        if "row-order" in d:
            kwargs["row_order"] = parse_order(d["row-order"])
        if "col-order" in d:
            kwargs["col_order"] = parse_order(d["col-order"])
        if "reverse-rows" in d:
            kwargs["reverse_rows"] = _flag("reverse-rows", d["reverse-rows"])
        if "color-scale" in d:
            kwargs["color_scale"] = ColorScaleConfig.from_dict(d["color-scale"])
        if d.get("clamp-extremes") is not None:
            pair = list(d["clamp-extremes"])
            if len(pair) != 2:
                raise ValueError(f"clamp-extremes needs two numbers, got {pair}.")
            kwargs["clamp_extremes"] = (float(pair[0]), float(pair[1]))
        for bound in ("vmin", "vmax"):
            if d.get(bound) is not None:
                kwargs[bound] = float(d[bound])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: str | pathlib.Path) -> HeatmapConfig:
        with pathlib.Path(path).open(encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))

    def effective_row_order(self) -> OrderSpec:
        if self.reverse_rows:
            return IdentityOrder(reverse=True)
        return self.row_order

    def color_domain(self, matrix: MatrixData) -> tuple[float, float]:
        if self.clamp_extremes is not None:
            return self.clamp_extremes
        data_min, data_max = matrix.finite_range()
        vmin = self.vmin if self.vmin is not None else data_min
        vmax = self.vmax if self.vmax is not None else data_max
        if vmin > vmax:
            raise ValueError(f"Color domain is empty: vmin={vmin} > vmax={vmax}.")
        return vmin, vmax
