"""Constants and enums for layers, column names and styling defaults."""

from __future__ import annotations

from enum import Enum


class LayerKind(str, Enum):
    REFERENCE_LINE = "reference_line"
    RUG = "rug"
    LINE = "line"
    POINT = "point"
    TEXT_LABEL = "text_label"


# Default column names of a scan result table (R/qtl scanone style)
DEFAULT_CATEGORY_COLUMN: str = "chr"
DEFAULT_POSITION_COLUMN: str = "pos"
DEFAULT_VALUE_COLUMN: str = "lod"
DEFAULT_METHOD_COLUMN: str = "method"
DEFAULT_GROUP_COLUMN: str = "pheno"
DEFAULT_THRESHOLD_COLUMN: str = "threshold"
DEFAULT_NAME_COLUMN: str = "name"

# Prefixes used to discover wide columns
DEFAULT_GROUP_PREFIX: str = "pheno"
DEFAULT_VALUE_PREFIX: str = "lod"

# Sub-metrics reported by a two-part model scan, in display order
TWO_PART_COLUMNS: tuple[str, ...] = ("lod.p.mu", "lod.p", "lod.mu")

DEFAULT_LABEL_NUDGE_Y: float = 0.5
REFERENCE_LINETYPE: str = "dashed"
FACET_SCALES: str = "free_x"
