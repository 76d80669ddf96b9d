"""
Smoke test: verify that the package is installable and importable.

This test intentionally does NOT modify sys.path.
"""

from __future__ import annotations

import importlib
from importlib import metadata

PACKAGE_NAME = "qtl_chartspec"
DIST_NAME = "qtl-chartspec"


def test_import_modules() -> None:
    for mod in (
        "qtl_chartspec.core.config",
        "qtl_chartspec.data.reshape",
        "qtl_chartspec.viz.spec_builder",
        "qtl_chartspec.viz.render",
    ):
        assert importlib.import_module(mod) is not None


def test_distribution_version_available() -> None:
    version = metadata.version(DIST_NAME)
    assert isinstance(version, str)
    assert version.strip() != ""
