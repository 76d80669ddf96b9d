from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd

from qtl_chartspec.viz.render import render_chart_spec
from qtl_chartspec.viz.spec_builder import DisplayOptions, build_chart_spec


def test_render_every_layer_kind(tmp_path, labels_df) -> None:
    df = pd.DataFrame(
        {
            "chr": [1, 1, 1, 4, 4, 4],
            "pos": [0.0, 10.0, 20.0, 0.0, 10.0, 20.0],
            "lod.p.mu.wt": [1.0, 2.0, 1.5, 3.0, 6.0, 4.0],
            "lod.p.mu.ko": [0.5, 1.0, 0.7, 1.0, 2.0, 1.0],
            "lod.p.wt": [0.3, 0.6, 0.4, 1.0, 2.5, 1.2],
        }
    )
    thresholds = pd.DataFrame({"pheno": ["wt", "ko"], "threshold": [3.0, 3.2]})
    spec = build_chart_spec(
        df,
        DisplayOptions(
            split_by_group=True, split_by_method_column=True, show_raw_positions=True
        ),
        threshold=thresholds,
        labels=labels_df,
    )

    out = tmp_path / "charts" / "scan.png"
    result = render_chart_spec(spec, out, title="two-part scan")

    assert out.exists()
    assert out.stat().st_size > 0
    assert result.n_facets == 2


def test_render_empty_spec(tmp_path, scan_df) -> None:
    spec = build_chart_spec(
        scan_df, DisplayOptions(restrict_categories=set()), threshold=3.0
    )
    out = tmp_path / "empty.png"
    result = render_chart_spec(spec, out)

    assert out.exists()
    assert result.n_facets == 0


def test_legend_gathers_series_from_every_facet(tmp_path) -> None:
    # method "b" is only drawn on the second facet
    df = pd.DataFrame(
        {
            "chr": [1, 1, 4, 4, 4, 4],
            "pos": [0.0, 10.0, 0.0, 10.0, 0.0, 10.0],
            "lod": [1.0, 2.0, 3.0, 4.0, 0.5, 0.7],
            "method": ["a", "a", "a", "a", "b", "b"],
        }
    )
    spec = build_chart_spec(df)
    result = render_chart_spec(spec, tmp_path / "legend.png")

    assert result.n_facets == 2
    assert set(result.legend_labels) == {"a", "b"}
