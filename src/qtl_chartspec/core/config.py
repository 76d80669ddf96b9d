"""Display options model and loading of its presets from a YAML file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from qtl_chartspec.core.constants import DEFAULT_LABEL_NUDGE_Y
from qtl_chartspec.core.errors import ConfigError


class DisplayOptions(BaseModel):
    """Display toggles for a scan chart."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    split_by_group: bool = False
    # "two-part" mode: sub-metric columns are split into the method column
    split_by_method_column: bool = False
    restrict_categories: frozenset[str | int] | None = None
    show_raw_positions: bool = False
    facet_column_count: int | None = Field(default=None, ge=1)
    label_nudge_y: float = DEFAULT_LABEL_NUDGE_Y


def _load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    return data


def list_presets(path: str | Path) -> list[str]:
    presets = _load_yaml(path).get("presets") or {}
    return sorted(presets)


def load_display_options(path: str | Path, preset: str) -> DisplayOptions:
    """
    Read ``presets.<preset>`` from a YAML file, e.g.

        presets:
          two_part_chr1_4:
            split_by_method_column: true
            restrict_categories: [1, 4]
            facet_column_count: 2
    """
    cfg = _load_yaml(path)
    presets = cfg.get("presets") or {}
    raw = presets.get(preset)
    if raw is None:
        raise ConfigError(f"Preset '{preset}' not found in {path}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Preset '{preset}' in {path} must be a mapping")

    try:
        return DisplayOptions.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid preset '{preset}' in {path}: {e}") from e
