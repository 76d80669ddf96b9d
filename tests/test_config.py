from __future__ import annotations

from pathlib import Path

import pytest

from qtl_chartspec.core.config import list_presets, load_display_options
from qtl_chartspec.core.errors import ConfigError

PRESETS_YAML = """
presets:
  default: {}
  chr1_4:
    split_by_group: true
    restrict_categories: [1, 4]
    facet_column_count: 2
  broken:
    facet_column_count: 0
  typo:
    show_raw_position: true
"""


@pytest.fixture
def presets_path(tmp_path: Path) -> Path:
    p = tmp_path / "presets.yaml"
    p.write_text(PRESETS_YAML, encoding="utf-8")
    return p


def test_load_preset_into_display_options(presets_path: Path) -> None:
    opts = load_display_options(presets_path, "chr1_4")

    assert opts.split_by_group is True
    assert opts.restrict_categories == frozenset({1, 4})
    assert opts.facet_column_count == 2
    assert opts.show_raw_positions is False


def test_empty_preset_gives_defaults(presets_path: Path) -> None:
    opts = load_display_options(presets_path, "default")
    assert opts.restrict_categories is None
    assert opts.label_nudge_y == 0.5


def test_list_presets(presets_path: Path) -> None:
    assert list_presets(presets_path) == ["broken", "chr1_4", "default", "typo"]


@pytest.mark.parametrize("preset", ["broken", "typo"])
def test_invalid_preset_raises_config_error(presets_path: Path, preset: str) -> None:
    with pytest.raises(ConfigError):
        load_display_options(presets_path, preset)


def test_missing_preset_or_file_raises(presets_path: Path, tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_display_options(presets_path, "nope")
    with pytest.raises(ConfigError, match="not found"):
        load_display_options(tmp_path / "missing.yaml", "default")


def test_bundled_presets_load() -> None:
    path = Path(__file__).parent.parent / "configs" / "display_presets.yaml"
    for name in list_presets(path):
        load_display_options(path, name)


def test_display_options_live_in_core_config() -> None:
    from qtl_chartspec.core import config
    from qtl_chartspec.viz import spec_builder

    assert spec_builder.DisplayOptions is config.DisplayOptions
    source = Path(config.__file__).read_text(encoding="utf-8")
    assert "qtl_chartspec.viz" not in source
