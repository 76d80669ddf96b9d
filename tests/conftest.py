from __future__ import annotations

import pandas as pd
import pytest


def _positions() -> list[tuple[int, float]]:
    # 4 chromosomes x 3 markers
    return [(c, p) for c in (1, 2, 3, 4) for p in (0.0, 10.0, 20.0)]


@pytest.fixture
def scan_df() -> pd.DataFrame:
    rows = [{"chr": c, "pos": p, "lod": float(c) + p / 10.0} for c, p in _positions()]
    return pd.DataFrame(rows)


@pytest.fixture
def two_part_df() -> pd.DataFrame:
    rows = [
        {"chr": c, "pos": p, "lod.p.mu": 3.0, "lod.p": 1.0, "lod.mu": 2.0}
        for c, p in _positions()
    ]
    return pd.DataFrame(rows)


@pytest.fixture
def pheno_df() -> pd.DataFrame:
    rows = [
        {"chr": c, "pos": p, "pheno1": 1.5, "pheno2": 2.5} for c, p in _positions()
    ]
    return pd.DataFrame(rows)


@pytest.fixture
def labels_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "chr": [1, 4],
            "pos": [10.0, 20.0],
            "lod": [2.0, 6.0],
        },
        index=["D1M1", "D4M3"],
    )
