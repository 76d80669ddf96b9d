from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from qtl_chartspec.core.constants import TWO_PART_COLUMNS

# ----------------------------
# Settings
# ----------------------------


@dataclass(frozen=True)
class ScanSettings:
    """Shape of a synthetic genome scan (scanone-like output)."""

    seed: int = 7
    n_chromosomes: int = 4
    markers_per_chromosome: int = 12
    chromosome_length_cm: float = 100.0
    phenotypes: tuple[str, ...] = ("pheno1", "pheno2")
    # (chromosome, position in cM, peak LOD)
    peaks: tuple[tuple[int, float, float], ...] = ((1, 40.0, 5.5), (4, 70.0, 4.2))
    peak_width_cm: float = 12.0
    noise_sd: float = 0.25


def make_rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


# ----------------------------
# Generators
# ----------------------------


def marker_grid(settings: ScanSettings) -> pd.DataFrame:
    """Evenly spaced markers, named like D<chr>M<k>."""
    rows = []
    positions = np.linspace(0.0, settings.chromosome_length_cm, settings.markers_per_chromosome)
    for c in range(1, settings.n_chromosomes + 1):
        for k, pos in enumerate(positions, start=1):
            rows.append({"marker": f"D{c}M{k}", "chr": c, "pos": round(float(pos), 2)})
    return pd.DataFrame(rows).set_index("marker")


def _lod_curve(
    markers: pd.DataFrame, settings: ScanSettings, rng: np.random.Generator, scale: float
) -> np.ndarray:
    lod = np.abs(rng.normal(0.0, settings.noise_sd, size=len(markers)))
    for chrom, center, height in settings.peaks:
        on_chr = (markers["chr"] == chrom).to_numpy()
        dist = markers["pos"].to_numpy() - center
        bump = height * scale * np.exp(-0.5 * (dist / settings.peak_width_cm) ** 2)
        lod = lod + np.where(on_chr, bump, 0.0)
    return np.round(lod, 3)


def generate_scan(settings: ScanSettings | None = None) -> pd.DataFrame:
    """Single-phenotype scan: chr, pos, lod."""
    settings = settings or ScanSettings()
    rng = make_rng(settings.seed)
    markers = marker_grid(settings)
    return markers.assign(lod=_lod_curve(markers, settings, rng, 1.0))


def generate_phenotype_scan(settings: ScanSettings | None = None) -> pd.DataFrame:
    """One LOD column per phenotype (wide)."""
    settings = settings or ScanSettings()
    rng = make_rng(settings.seed)
    markers = marker_grid(settings)
    out = markers.copy()
    for i, pheno in enumerate(settings.phenotypes):
        out[pheno] = _lod_curve(markers, settings, rng, 1.0 / (i + 1))
    return out


def generate_two_part_scan(settings: ScanSettings | None = None) -> pd.DataFrame:
    """
    Two-part model scan. lod.p.mu is the joint test, lod.p and lod.mu its
    components; the components are drawn so they roughly add up to the joint one.
    """
    settings = settings or ScanSettings()
    rng = make_rng(settings.seed)
    markers = marker_grid(settings)
    share = rng.uniform(0.3, 0.7, size=len(markers))
    joint = _lod_curve(markers, settings, rng, 1.0)
    p_col, mu_col = TWO_PART_COLUMNS[1], TWO_PART_COLUMNS[2]
    return markers.assign(
        **{
            TWO_PART_COLUMNS[0]: joint,
            p_col: np.round(joint * share, 3),
            mu_col: np.round(joint * (1.0 - share), 3),
        }
    )


def top_markers(scan: pd.DataFrame, value_column: str = "lod", n: int = 2) -> pd.DataFrame:
    """Highest-scoring marker per chromosome, best ``n`` overall, as a label table."""
    best = scan.loc[scan.groupby("chr")[value_column].idxmax()]
    best = best.sort_values(value_column, ascending=False).head(n)
    return best[["chr", "pos", value_column]].rename(columns={value_column: "lod"})


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Generate a synthetic genome-scan table.")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--kind", choices=["single", "phenotypes", "two_part"], default="single")
    parser.add_argument("--out", type=Path, default=Path("data/samples/scan.csv"))
    args = parser.parse_args()

    settings = ScanSettings(seed=args.seed)
    generators = {
        "single": generate_scan,
        "phenotypes": generate_phenotype_scan,
        "two_part": generate_two_part_scan,
    }
    df = generators[args.kind](settings)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.out, index_label="marker")
    print(f"Wrote {len(df):,} rows -> {args.out}")


if __name__ == "__main__":
    main()
