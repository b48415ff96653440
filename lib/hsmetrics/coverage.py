"""
Target coverage summary for HsMetrics records.

Consumes per-base depth over the target territory, either as a BED file in
`bedtools genomecov -bga` layout restricted to targets or as a plain sequence
of depths, and computes the target coverage fields of a record: mean, median
and maximum depth, the fraction of target bases at each coverage threshold,
and the fold 80 base penalty.

Example input (from `bedtools genomecov -bga` intersected with targets):
    chr1    1000    1054    0
    chr1    1054    1100    15
    chr1    1100    1200    150
    ...
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

import polars as pl
from pydantic import BaseModel, Field

from .derive import safe_divide
from .schema import COVERAGE_THRESHOLDS, HsMetrics, coverage_field_name

_BED_SCHEMA = {
    "chrom": pl.Utf8,
    "start": pl.Int64,
    "end": pl.Int64,
    "depth": pl.Int64,
}


class TargetCoverageStats(BaseModel):
    """Coverage statistics over all target bases."""

    total_bases: int = Field(ge=0, description="Target bases with a depth observation")
    mean_coverage: float = Field(ge=0, description="Length-weighted mean depth")
    median_coverage: float = Field(ge=0, description="Length-weighted median depth")
    max_coverage: int = Field(ge=0, description="Maximum depth observed")
    fold_80_base_penalty: float = Field(
        ge=0,
        description="Mean depth over the 20th percentile depth of covered bases",
    )
    fraction_at_depth: dict[int, float] = Field(
        default_factory=dict,
        description="Fraction of target bases with depth >= threshold",
    )


def load_depth_bed(bed_path: Path) -> pl.DataFrame:
    """
    Load a per-base depth BED file.

    Args:
        bed_path: Path to a BED file with columns chrom, start, end, depth

    Returns:
        DataFrame with columns: chrom, start, end, depth
    """
    return pl.read_csv(
        bed_path,
        separator="\t",
        has_header=False,
        new_columns=list(_BED_SCHEMA),
        schema=_BED_SCHEMA,
    )


def depths_to_frame(depths: Iterable[int]) -> pl.DataFrame:
    """
    Build a depth frame from one depth value per target base.

    Args:
        depths: Observed coverage depth of each target base, in any order

    Returns:
        DataFrame with the same columns as load_depth_bed, one row per base
    """
    depth_list = [int(depth) for depth in depths]
    if any(depth < 0 for depth in depth_list):
        msg = "Coverage depths must be non-negative"
        raise ValueError(msg)
    positions = list(range(len(depth_list)))
    return pl.DataFrame(
        {
            "chrom": ["targets"] * len(depth_list),
            "start": positions,
            "end": [position + 1 for position in positions],
            "depth": depth_list,
        },
        schema=_BED_SCHEMA,
    )


def _weighted_percentile(df: pl.DataFrame, fraction: float, total_bases: int) -> float:
    """Smallest depth at which the cumulative share of bases reaches `fraction`."""
    sorted_df = df.sort("depth").with_columns(
        (pl.col("length").cum_sum() / total_bases).alias("cumulative_frac")
    )
    row = sorted_df.filter(pl.col("cumulative_frac") >= fraction).head(1)
    return float(row["depth"][0]) if len(row) > 0 else 0.0


def compute_target_coverage(
    df: pl.DataFrame,
    thresholds: Sequence[int] = COVERAGE_THRESHOLDS,
) -> TargetCoverageStats:
    """
    Compute target coverage statistics from a depth frame.

    The fraction at each threshold d is |{bases : depth >= d}| / |target bases|,
    so the fractions never increase as d increases.

    Args:
        df: DataFrame with columns: chrom, start, end, depth
        thresholds: Coverage depths to report

    Returns:
        TargetCoverageStats; all zeros for an empty frame
    """
    df = df.with_columns((pl.col("end") - pl.col("start")).alias("length"))
    total_bases = int(df["length"].sum())

    if total_bases == 0:
        return TargetCoverageStats(
            total_bases=0,
            mean_coverage=0.0,
            median_coverage=0.0,
            max_coverage=0,
            fold_80_base_penalty=0.0,
            fraction_at_depth={depth: 0.0 for depth in thresholds},
        )

    mean_coverage = (df["depth"] * df["length"]).sum() / total_bases
    median_coverage = _weighted_percentile(df, 0.5, total_bases)
    max_value = df["depth"].max()
    max_coverage = 0 if max_value is None else int(max_value)  # type: ignore[arg-type]

    fraction_at_depth = {
        depth: df.filter(pl.col("depth") >= depth)["length"].sum() / total_bases
        for depth in sorted(thresholds)
    }

    # 80% of covered bases sit at or above the 20th percentile depth
    covered = df.filter(pl.col("depth") > 0)
    covered_bases = int(covered["length"].sum())
    twentieth_percentile = (
        _weighted_percentile(covered, 0.2, covered_bases) if covered_bases else 0.0
    )

    return TargetCoverageStats(
        total_bases=total_bases,
        mean_coverage=float(mean_coverage),
        median_coverage=median_coverage,
        max_coverage=max_coverage,
        fold_80_base_penalty=safe_divide(float(mean_coverage), twentieth_percentile),
        fraction_at_depth={
            depth: float(fraction) for depth, fraction in fraction_at_depth.items()
        },
    )


def apply_target_coverage(record: HsMetrics, stats: TargetCoverageStats) -> HsMetrics:
    """
    Return a copy of the record with its target coverage fields set.

    Only thresholds that have a PCT_TARGET_BASES field are copied over.
    """
    update: dict[str, float | int] = {
        "mean_target_coverage": stats.mean_coverage,
        "median_target_coverage": stats.median_coverage,
        "max_target_coverage": stats.max_coverage,
        "fold_80_base_penalty": stats.fold_80_base_penalty,
    }
    for depth, fraction in stats.fraction_at_depth.items():
        if depth in COVERAGE_THRESHOLDS:
            update[coverage_field_name(depth)] = fraction
    return record.model_copy(update=update, deep=True)
