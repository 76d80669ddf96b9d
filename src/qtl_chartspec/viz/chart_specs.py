"""Declarative chart spec objects handed to a rendering backend."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

import pandas as pd

from qtl_chartspec.core.constants import FACET_SCALES, REFERENCE_LINETYPE, LayerKind


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    return df.to_dict(orient="records")


@dataclass(frozen=True, eq=False)
class Layer:
    """
    One visual element of a layered chart.

    ``data`` is copied on construction and belongs to the layer: callers that
    need to change it should work on ``layer.data.copy()``.
    """

    kind: ClassVar[LayerKind]
    # Guides (reference lines) carry style values, not result rows
    is_guide: ClassVar[bool] = False

    data: pd.DataFrame

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", self.data.copy())

    def aesthetics(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            **self.aesthetics(),
            "rows": _records(self.data),
        }


@dataclass(frozen=True, eq=False)
class ReferenceLineLayer(Layer):
    """Horizontal guide line(s) at ``y``; one per row, styled by ``linetype_by`` if set."""

    kind: ClassVar[LayerKind] = LayerKind.REFERENCE_LINE
    is_guide: ClassVar[bool] = True

    y: str = "threshold"
    linetype_by: str | None = None
    linestyle: str = REFERENCE_LINETYPE

    def aesthetics(self) -> dict[str, Any]:
        return {"y": self.y, "linetype_by": self.linetype_by, "linestyle": self.linestyle}


@dataclass(frozen=True, eq=False)
class RugLayer(Layer):
    """Tick marks along the x axis at raw positions."""

    kind: ClassVar[LayerKind] = LayerKind.RUG

    x: str = "pos"

    def aesthetics(self) -> dict[str, Any]:
        return {"x": self.x}


@dataclass(frozen=True, eq=False)
class LineLayer(Layer):
    kind: ClassVar[LayerKind] = LayerKind.LINE

    x: str = "pos"
    y: str = "lod"
    color_by: str | None = None
    linetype_by: str | None = None

    def aesthetics(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "color_by": self.color_by,
            "linetype_by": self.linetype_by,
        }


@dataclass(frozen=True, eq=False)
class PointLayer(Layer):
    kind: ClassVar[LayerKind] = LayerKind.POINT

    x: str = "pos"
    y: str = "lod"

    def aesthetics(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, eq=False)
class TextLabelLayer(Layer):
    kind: ClassVar[LayerKind] = LayerKind.TEXT_LABEL

    x: str = "pos"
    y: str = "lod"
    label: str = "name"
    nudge_y: float = 0.0

    def aesthetics(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "label": self.label, "nudge_y": self.nudge_y}


@dataclass(frozen=True)
class FacetSpec:
    """Wrap facets by ``by`` into ``ncol`` columns."""

    by: str
    ncol: int
    scales: str = FACET_SCALES


@dataclass(frozen=True, eq=False)
class ChartSpec:
    """Ordered layers plus faceting and styling directives. ``style`` is read-only."""

    layers: tuple[Layer, ...]
    facet: FacetSpec
    x: str
    y: str
    style: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "layers", tuple(self.layers))
        object.__setattr__(self, "style", MappingProxyType(dict(self.style)))

    @property
    def kinds(self) -> list[LayerKind]:
        return [layer.kind for layer in self.layers]

    def layer(self, kind: LayerKind) -> Layer | None:
        for candidate in self.layers:
            if candidate.kind == kind:
                return candidate
        return None

    @property
    def data_rows(self) -> int:
        """Result and label rows across all non-guide layers."""
        return sum(len(layer.data) for layer in self.layers if not layer.is_guide)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "facet": {
                "by": self.facet.by,
                "ncol": self.facet.ncol,
                "scales": self.facet.scales,
            },
            "style": dict(self.style),
            "layers": [layer.to_dict() for layer in self.layers],
        }
