"""Render a ChartSpec to PNG with matplotlib."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import pandas as pd

from qtl_chartspec.viz.chart_specs import (
    ChartSpec,
    Layer,
    LineLayer,
    PointLayer,
    ReferenceLineLayer,
    RugLayer,
    TextLabelLayer,
)

logger = logging.getLogger(__name__)

LINESTYLES: dict[str, str] = {"solid": "-", "dashed": "--", "dotted": ":", "dashdot": "-."}
GROUP_LINESTYLES: tuple[str, ...] = ("-", "--", ":", "-.")


@dataclass(frozen=True)
class RenderResult:
    png_path: str
    n_facets: int
    legend_labels: tuple[str, ...] = ()


def _facet_keys(spec: ChartSpec) -> list[Any]:
    """Facet keys in order of first appearance across data layers."""
    keys: list[Any] = []
    for layer in spec.layers:
        if layer.is_guide or spec.facet.by not in layer.data.columns:
            continue
        for key in pd.unique(layer.data[spec.facet.by]):
            if key not in keys:
                keys.append(key)
    return keys


def _style_map(values: list[Any], styles: list[str] | tuple[str, ...]) -> dict[Any, str]:
    return {v: styles[i % len(styles)] for i, v in enumerate(values)}


def _levels(spec: ChartSpec, column: str | None) -> list[Any]:
    if column is None:
        return []
    levels: list[Any] = []
    for layer in spec.layers:
        if column in layer.data.columns:
            for v in pd.unique(layer.data[column]):
                if v not in levels:
                    levels.append(v)
    return levels


def _legend_entries(axes: list) -> tuple[list, list[str]]:
    """Handles from every facet, first one per label, in drawing order."""
    entries: dict[str, Any] = {}
    for ax in axes:
        handles, labels = ax.get_legend_handles_labels()
        for handle, label in zip(handles, labels):
            entries.setdefault(label, handle)
    return list(entries.values()), list(entries)


def _in_facet(layer: Layer, by: str, key: Any) -> pd.DataFrame:
    if by not in layer.data.columns:
        return layer.data
    return layer.data[layer.data[by] == key]


def _draw_reference(ax, layer: ReferenceLineLayer, linestyles: dict[Any, str]) -> None:
    default = LINESTYLES.get(layer.linestyle, "--")
    for _, row in layer.data.iterrows():
        if layer.linetype_by is not None:
            group = row[layer.linetype_by]
            ax.axhline(
                y=float(row[layer.y]),
                color="grey",
                linestyle=linestyles.get(group, default),
                linewidth=1,
                label=f"threshold ({group})",
            )
        else:
            ax.axhline(y=float(row[layer.y]), color="grey", linestyle=default, linewidth=1)


def _draw_rug(ax, df: pd.DataFrame, layer: RugLayer) -> None:
    if df.empty:
        return
    xs = df[layer.x].astype(float).values
    # x in data coordinates, y in axes coordinates (bottom edge)
    ax.plot(
        xs,
        [0.0] * len(xs),
        "|",
        color="black",
        markersize=8,
        transform=ax.get_xaxis_transform(),
    )


def _draw_lines(
    ax,
    df: pd.DataFrame,
    layer: LineLayer,
    colors: dict[Any, str],
    linestyles: dict[Any, str],
) -> None:
    if df.empty:
        return
    keys = [c for c in (layer.color_by, layer.linetype_by) if c is not None]
    if not keys:
        d = df.sort_values(layer.x)
        ax.plot(d[layer.x], d[layer.y], color="black", linewidth=1)
        return

    for series_key, d in df.groupby(keys, sort=False):
        if not isinstance(series_key, tuple):
            series_key = (series_key,)
        parts = dict(zip(keys, series_key))
        d = d.sort_values(layer.x)
        color = colors.get(parts.get(layer.color_by), "black")
        style = linestyles.get(parts.get(layer.linetype_by), "-")
        ax.plot(
            d[layer.x],
            d[layer.y],
            color=color,
            linestyle=style,
            linewidth=1,
            label=" / ".join(str(v) for v in series_key),
        )


def _draw_points(ax, df: pd.DataFrame, layer: PointLayer) -> None:
    if df.empty:
        return
    ax.scatter(df[layer.x], df[layer.y], color="black", s=12, zorder=3)


def _draw_text(ax, df: pd.DataFrame, layer: TextLabelLayer) -> None:
    for _, row in df.iterrows():
        ax.text(
            float(row[layer.x]),
            float(row[layer.y]) + layer.nudge_y,
            str(row[layer.label]),
            ha="center",
            va="bottom",
            fontsize=8,
        )


def render_chart_spec(
    spec: ChartSpec,
    out_path: str | Path,
    title: str | None = None,
    dpi: int = 150,
) -> RenderResult:
    """
    Draw ``spec`` as a grid of facets and save it as PNG.

    An empty spec (no facet keys) produces a single blank panel.
    """
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)

    keys = _facet_keys(spec)
    ncol = max(1, min(spec.facet.ncol, len(keys)) if keys else 1)
    nrow = max(1, math.ceil(len(keys) / ncol))

    line = spec.layer(LineLayer.kind)
    color_by = line.color_by if isinstance(line, LineLayer) else None
    linetype_by = line.linetype_by if isinstance(line, LineLayer) else None
    ref = spec.layer(ReferenceLineLayer.kind)
    if linetype_by is None and isinstance(ref, ReferenceLineLayer):
        linetype_by = ref.linetype_by

    palette = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    colors = _style_map(_levels(spec, color_by), palette)
    linestyles = _style_map(_levels(spec, linetype_by), GROUP_LINESTYLES)

    fig, axes = plt.subplots(
        nrow,
        ncol,
        figsize=(4 * ncol, 3 * nrow),
        sharex=spec.facet.scales not in {"free_x", "free"},
        sharey=spec.facet.scales not in {"free_y", "free"},
        squeeze=False,
    )
    flat = list(axes.flat)

    if not keys:
        flat[0].axis("off")
        flat[0].set_title("(no data)", fontsize=10)

    for ax, key in zip(flat, keys):
        for layer in spec.layers:
            if isinstance(layer, ReferenceLineLayer):
                _draw_reference(ax, layer, linestyles)
            elif isinstance(layer, RugLayer):
                _draw_rug(ax, _in_facet(layer, spec.facet.by, key), layer)
            elif isinstance(layer, LineLayer):
                _draw_lines(ax, _in_facet(layer, spec.facet.by, key), layer, colors, linestyles)
            elif isinstance(layer, TextLabelLayer):
                _draw_text(ax, _in_facet(layer, spec.facet.by, key), layer)
            elif isinstance(layer, PointLayer):
                _draw_points(ax, _in_facet(layer, spec.facet.by, key), layer)
        ax.set_title(f"{spec.facet.by} {key}", fontsize=10)
        ax.set_xlabel(spec.style.get("x_label", spec.x))
        ax.set_ylabel(spec.style.get("y_label", spec.y))

    for ax in flat[len(keys):] if keys else flat[1:]:
        ax.axis("off")

    handles, labels = _legend_entries(flat[: len(keys)])
    if handles:
        fig.legend(handles, labels, loc="upper right", fontsize=8)

    if title:
        fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)

    png_path = str(Path(out_path).resolve())
    logger.info("rendered %d facets to %s", len(keys), png_path)
    return RenderResult(png_path=png_path, n_facets=len(keys), legend_labels=tuple(labels))
