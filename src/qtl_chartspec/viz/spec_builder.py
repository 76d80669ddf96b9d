"""Build a layered, faceted ChartSpec from a scan result table."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import pandas as pd

from qtl_chartspec.core.config import DisplayOptions
from qtl_chartspec.core.errors import InvalidInput
from qtl_chartspec.data.reshape import (
    reshape_for_display,
    resolve_value_column,
    restrict_categories,
)
from qtl_chartspec.data.schema import (
    ColumnConvention,
    coerce_numeric,
    default_scan_convention,
    normalize_labels,
    normalize_threshold,
    validate_columns,
)
from qtl_chartspec.viz.chart_specs import (
    ChartSpec,
    FacetSpec,
    Layer,
    LineLayer,
    PointLayer,
    ReferenceLineLayer,
    RugLayer,
    TextLabelLayer,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _BuildContext:
    table: pd.DataFrame
    value_column: str
    options: DisplayOptions
    convention: ColumnConvention
    threshold: float | pd.DataFrame | None
    labels: pd.DataFrame | None


LayerRule = Callable[[_BuildContext], tuple[Layer, ...]]


def reference_line_layers(ctx: _BuildContext) -> tuple[Layer, ...]:
    conv = ctx.convention
    if ctx.threshold is None:
        return ()
    if isinstance(ctx.threshold, pd.DataFrame):
        return (
            ReferenceLineLayer(
                data=ctx.threshold.copy(), y=conv.threshold, linetype_by=conv.group
            ),
        )
    data = pd.DataFrame({conv.threshold: [ctx.threshold]})
    return (ReferenceLineLayer(data=data, y=conv.threshold),)


def rug_layers(ctx: _BuildContext) -> tuple[Layer, ...]:
    if not ctx.options.show_raw_positions:
        return ()
    conv = ctx.convention
    positions = ctx.table[[conv.category, conv.position]].drop_duplicates()
    return (RugLayer(data=positions.reset_index(drop=True), x=conv.position),)


def line_layers(ctx: _BuildContext) -> tuple[Layer, ...]:
    """
    Exactly one line layer:
      - method + group -> colour by method, linetype by group
      - method only    -> colour by method
      - group only     -> colour by group
      - neither        -> single unstyled line
    """
    conv = ctx.convention
    has_method = conv.method in ctx.table.columns
    has_group = conv.group in ctx.table.columns

    color_by: str | None = None
    linetype_by: str | None = None
    if has_method and has_group:
        color_by, linetype_by = conv.method, conv.group
    elif has_method:
        color_by = conv.method
    elif has_group:
        color_by = conv.group

    return (
        LineLayer(
            data=ctx.table.copy(),
            x=conv.position,
            y=ctx.value_column,
            color_by=color_by,
            linetype_by=linetype_by,
        ),
    )


def label_layers(ctx: _BuildContext) -> tuple[Layer, ...]:
    if ctx.labels is None:
        return ()
    conv = ctx.convention
    point = PointLayer(data=ctx.labels.copy(), x=conv.position, y=ctx.value_column)
    text = TextLabelLayer(
        data=ctx.labels.copy(),
        x=conv.position,
        y=ctx.value_column,
        label=conv.name,
        nudge_y=ctx.options.label_nudge_y,
    )
    return (point, text)


# Rules run in this order; each is independent of the others
LAYER_RULES: tuple[LayerRule, ...] = (
    reference_line_layers,
    rug_layers,
    line_layers,
    label_layers,
)


class ChartSpecBuilder:
    """
    Decide which layers a scan chart needs and assemble them into a ChartSpec.

    The builder holds only a column convention; every call is independent and
    never mutates its inputs.
    """

    def __init__(self, convention: ColumnConvention | None = None) -> None:
        self.convention = convention or default_scan_convention()

    def prepare_table(self, table: pd.DataFrame, options: DisplayOptions) -> tuple[pd.DataFrame, str]:
        """Validate, reshape, filter and type-normalise the result table."""
        conv = self.convention
        if not isinstance(table, pd.DataFrame):
            raise InvalidInput(f"Result table must be a pandas DataFrame, got {type(table).__name__}")
        validate_columns(table, conv.required_columns)

        prepared = reshape_for_display(
            table,
            conv,
            split_by_group=options.split_by_group,
            two_part=options.split_by_method_column,
        )

        before = len(prepared)
        prepared = restrict_categories(prepared, options.restrict_categories, conv)
        if options.restrict_categories is not None:
            logger.debug("restrict_categories kept %d of %d rows", len(prepared), before)

        value_column = resolve_value_column(prepared, conv)
        if value_column is None:
            # Nothing to plot: keep the layers, with an all-NaN value column
            value_column = conv.value
            prepared = prepared.assign(**{value_column: float("nan")})
        prepared = coerce_numeric(prepared, [conv.position, value_column])
        return prepared, value_column

    def build(
        self,
        table: pd.DataFrame,
        options: DisplayOptions | None = None,
        threshold: float | pd.DataFrame | None = None,
        labels: pd.DataFrame | None = None,
    ) -> ChartSpec:
        conv = self.convention
        options = options or DisplayOptions()

        prepared, value_column = self.prepare_table(table, options)

        norm_labels = normalize_labels(labels, conv, value_column)
        if norm_labels is not None:
            norm_labels = restrict_categories(norm_labels, options.restrict_categories, conv)

        ctx = _BuildContext(
            table=prepared,
            value_column=value_column,
            options=options,
            convention=conv,
            threshold=normalize_threshold(threshold, conv),
            labels=norm_labels,
        )

        layers: list[Layer] = []
        for rule in LAYER_RULES:
            layers.extend(rule(ctx))

        ncol = options.facet_column_count
        if ncol is None:
            ncol = int(prepared[conv.category].nunique())

        logger.debug(
            "chart spec: layers=%s rows=%d facets=%d",
            [layer.kind.value for layer in layers],
            len(prepared),
            ncol,
        )

        return ChartSpec(
            layers=tuple(layers),
            facet=FacetSpec(by=conv.category, ncol=ncol),
            x=conv.position,
            y=value_column,
            style={
                "theme": "bw",
                "x_label": conv.position,
                "y_label": value_column,
            },
        )


def build_chart_spec(
    table: pd.DataFrame,
    options: DisplayOptions | None = None,
    threshold: float | pd.DataFrame | None = None,
    labels: pd.DataFrame | None = None,
    convention: ColumnConvention | None = None,
) -> ChartSpec:
    """
    Build a ChartSpec for a scan result table.

    Missing optional inputs (threshold, labels) simply omit their layers.
    Raises InvalidInput if the table lacks the category or position column.
    """
    return ChartSpecBuilder(convention).build(
        table, options=options, threshold=threshold, labels=labels
    )
