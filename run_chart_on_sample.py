from __future__ import annotations

from pathlib import Path

from data.synthetic_scan import generate_two_part_scan, top_markers
from qtl_chartspec.core.config import load_display_options
from qtl_chartspec.viz.render import render_chart_spec
from qtl_chartspec.viz.spec_builder import build_chart_spec


def main() -> None:
    scan = generate_two_part_scan()
    options = load_display_options(Path("configs/display_presets.yaml"), "two_part")

    spec = build_chart_spec(
        scan,
        options,
        threshold=3.0,
        labels=top_markers(scan, value_column="lod.p.mu"),
    )

    out_dir = Path("outputs")
    out_dir.mkdir(parents=True, exist_ok=True)

    result = render_chart_spec(spec, out_dir / "scan_sample.png", title="Two-part scan")
    print("Wrote:", result.png_path)


if __name__ == "__main__":
    main()
