"""Column naming convention and validation helpers for scan result tables."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from qtl_chartspec.core.constants import (
    DEFAULT_CATEGORY_COLUMN,
    DEFAULT_GROUP_COLUMN,
    DEFAULT_GROUP_PREFIX,
    DEFAULT_METHOD_COLUMN,
    DEFAULT_NAME_COLUMN,
    DEFAULT_POSITION_COLUMN,
    DEFAULT_THRESHOLD_COLUMN,
    DEFAULT_VALUE_COLUMN,
    DEFAULT_VALUE_PREFIX,
    TWO_PART_COLUMNS,
)
from qtl_chartspec.core.errors import InvalidInput


@dataclass(frozen=True)
class ColumnConvention:
    """
    Naming convention for result, threshold and label tables.

    Notes:
    - Wide columns are discovered by prefix (``str.startswith``), never by
      substring, and structural columns (category, position, method, group,
      name) are never treated as wide columns even if they match.
    - ``two_part_columns`` is the fixed set of sub-metrics produced by a
      two-part model scan, in display order.
    """

    category: str = DEFAULT_CATEGORY_COLUMN
    position: str = DEFAULT_POSITION_COLUMN
    value: str = DEFAULT_VALUE_COLUMN
    method: str = DEFAULT_METHOD_COLUMN
    group: str = DEFAULT_GROUP_COLUMN
    threshold: str = DEFAULT_THRESHOLD_COLUMN
    name: str = DEFAULT_NAME_COLUMN

    group_prefix: str = DEFAULT_GROUP_PREFIX
    value_prefix: str = DEFAULT_VALUE_PREFIX
    two_part_columns: tuple[str, ...] = TWO_PART_COLUMNS

    @property
    def required_columns(self) -> tuple[str, ...]:
        return (self.category, self.position)

    @property
    def structural_columns(self) -> frozenset[str]:
        return frozenset(
            {self.category, self.position, self.method, self.group, self.name}
        )


def default_scan_convention() -> ColumnConvention:
    """Convention matching R/qtl ``scanone`` output (chr, pos, lod...)."""
    return ColumnConvention()


def validate_columns(
    df: pd.DataFrame, required: tuple[str, ...] | list[str], what: str = "result table"
) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise InvalidInput(
            f"{what} is missing required columns: {missing}. Found columns: {list(df.columns)}"
        )


def columns_with_prefix(
    df: pd.DataFrame, prefix: str, convention: ColumnConvention
) -> list[str]:
    """Non-structural columns whose name starts with ``prefix``, in table order."""
    return [
        c
        for c in df.columns
        if isinstance(c, str)
        and c.startswith(prefix)
        and c not in convention.structural_columns
    ]


def coerce_numeric(df: pd.DataFrame, columns: list[str], what: str = "result table") -> pd.DataFrame:
    """
    Returns a copy with ``columns`` converted to float.
    Values that cannot be parsed raise InvalidInput (NaN already present is kept).
    """
    out = df.copy()
    for c in columns:
        if c not in out.columns:
            continue
        converted = pd.to_numeric(out[c], errors="coerce")
        bad = converted.isna() & out[c].notna()
        if bad.any():
            examples = out.loc[bad, c].astype(str).head(5).tolist()
            raise InvalidInput(
                f"{what} column '{c}' has {int(bad.sum())} non-numeric values. Examples: {examples}"
            )
        out[c] = converted.astype(float)
    return out


def normalize_threshold(
    threshold: float | int | pd.DataFrame | None, convention: ColumnConvention
) -> float | pd.DataFrame | None:
    """
    Normalise a ThresholdSpec.

    - None stays None.
    - A scalar becomes a float.
    - A table must carry the group and threshold columns; only those two are
      kept, with the threshold coerced to float.
    """
    if threshold is None:
        return None
    if isinstance(threshold, pd.DataFrame):
        validate_columns(
            threshold, [convention.group, convention.threshold], what="threshold table"
        )
        table = threshold[[convention.group, convention.threshold]].reset_index(drop=True)
        return coerce_numeric(table, [convention.threshold], what="threshold table")
    try:
        return float(threshold)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Threshold must be a number or a table, got {threshold!r}") from e


def normalize_labels(
    labels: pd.DataFrame | None,
    convention: ColumnConvention,
    value_column: str,
) -> pd.DataFrame | None:
    """
    Normalise a LabelSpec to (category, position, value, name) columns.

    The label value column may be named after the convention's value column or
    after the resolved ``value_column`` of the result table. When the name
    column is absent each row's index is used as its display name.
    """
    if labels is None:
        return None

    out = labels.copy()
    if value_column not in out.columns and convention.value in out.columns:
        out = out.rename(columns={convention.value: value_column})
    validate_columns(
        out,
        [convention.category, convention.position, value_column],
        what="label table",
    )
    if convention.name not in out.columns:
        out[convention.name] = [str(i) for i in out.index]
    else:
        out[convention.name] = out[convention.name].astype(str)

    out = coerce_numeric(out, [convention.position, value_column], what="label table")
    cols = [convention.category, convention.position, value_column, convention.name]
    return out[cols].reset_index(drop=True)
