"""Wide-to-long reshaping and row filtering of result tables."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from qtl_chartspec.data.schema import ColumnConvention, columns_with_prefix

logger = logging.getLogger(__name__)


def _melt(
    df: pd.DataFrame,
    value_vars: list[str],
    var_name: str,
    value_name: str,
) -> pd.DataFrame:
    # Columns that would collide with the melted output are dropped
    drop = set(value_vars) | {var_name, value_name}
    id_vars = [c for c in df.columns if c not in drop]
    long = df.melt(
        id_vars=id_vars,
        value_vars=value_vars,
        var_name=var_name,
        value_name=value_name,
    )
    return long.reset_index(drop=True)


def reshape_groups(df: pd.DataFrame, convention: ColumnConvention) -> pd.DataFrame:
    """One value column per group (e.g. ``pheno1``, ``pheno2``) -> one row per group."""
    cols = columns_with_prefix(df, convention.group_prefix, convention)
    if not cols:
        logger.debug(
            "split_by_group: no columns starting with %r, table kept as is", convention.group_prefix
        )
        return df.copy()
    return _melt(df, cols, var_name=convention.group, value_name=convention.value)


def reshape_two_part(df: pd.DataFrame, convention: ColumnConvention) -> pd.DataFrame:
    """Two-part sub-metric columns -> one row per sub-metric, tagged in the method column."""
    cols = [c for c in convention.two_part_columns if c in df.columns]
    if not cols:
        logger.debug(
            "two-part: none of %s found, table kept as is", list(convention.two_part_columns)
        )
        return df.copy()
    return _melt(df, cols, var_name=convention.method, value_name=convention.value)


def _split_two_part_name(
    column: str, convention: ColumnConvention
) -> tuple[str, str] | None:
    # Longest sub-metric first so "lod.p.mu.x" is not read as "lod.p" + "mu.x"
    for sub in sorted(convention.two_part_columns, key=len, reverse=True):
        prefix = f"{sub}."
        if column.startswith(prefix) and len(column) > len(prefix):
            return sub, column[len(prefix):]
    return None


def reshape_two_part_groups(
    df: pd.DataFrame, convention: ColumnConvention
) -> pd.DataFrame:
    """
    ``<sub-metric>.<group>`` columns -> one row per (sub-metric, group).

    The sub-metric goes to the method column and the suffix to the group column.
    Without such columns this falls back to the plain two-part reshape, so a
    table that already has a group column keeps it.
    """
    parts: dict[str, tuple[str, str]] = {}
    for c in df.columns:
        if not isinstance(c, str):
            continue
        split = _split_two_part_name(c, convention)
        if split is not None:
            parts[c] = split

    if not parts:
        logger.debug("two-part group split: no '<sub-metric>.<group>' columns, using two-part only")
        return reshape_two_part(df, convention)

    tmp_var = "__two_part_column__"
    long = _melt(df, list(parts), var_name=tmp_var, value_name=convention.value)
    long = long.drop(columns=[convention.method, convention.group], errors="ignore")
    long[convention.method] = long[tmp_var].map(lambda c: parts[c][0])
    long[convention.group] = long[tmp_var].map(lambda c: parts[c][1])
    return long.drop(columns=[tmp_var])


def reshape_for_display(
    df: pd.DataFrame,
    convention: ColumnConvention,
    split_by_group: bool,
    two_part: bool,
) -> pd.DataFrame:
    if split_by_group and two_part:
        return reshape_two_part_groups(df, convention)
    if split_by_group:
        return reshape_groups(df, convention)
    if two_part:
        return reshape_two_part(df, convention)
    return df.copy()


def restrict_categories(
    df: pd.DataFrame,
    categories: Iterable[object] | None,
    convention: ColumnConvention,
) -> pd.DataFrame:
    """
    Keep rows whose category key is in ``categories``.

    Numeric category columns are compared numerically, so ``{1, 4}`` matches a
    float ``chr`` column (pandas reads ``chr`` as float once it holds a NaN)
    and keys that are not numbers (``"X"``) match nothing there. Other columns
    are compared by string form. An empty set keeps no rows.
    """
    if categories is None:
        return df
    col = df[convention.category]
    keys = list(categories)
    if pd.api.types.is_numeric_dtype(col) and not pd.api.types.is_bool_dtype(col):
        wanted = pd.to_numeric(pd.Series(keys, dtype=object).astype(str), errors="coerce")
        mask = col.isin(wanted.dropna().tolist())
    else:
        mask = col.astype(str).isin({str(k) for k in keys})
    return df[mask].reset_index(drop=True)


def resolve_value_column(df: pd.DataFrame, convention: ColumnConvention) -> str | None:
    """
    The unified value column, or the first column starting with the value prefix.
    None when the table has neither.
    """
    if convention.value in df.columns:
        return convention.value
    candidates = columns_with_prefix(df, convention.value_prefix, convention)
    if not candidates:
        logger.debug(
            "no value column %r and none starting with %r", convention.value, convention.value_prefix
        )
        return None
    return candidates[0]
