"""
Pydantic models for hybrid-selection (target capture) metrics.

One `HsMetrics` record holds the summary statistics for one accumulation
level of one input: all reads, a sample, a library, or a read group. The
metrics fall broadly into three groups:

- Basic sequencing counts used as a baseline or as inputs to other metrics
  (genome size, read counts, aligned bases).
- Wet-lab assay performance (on/near/off bait bases, %selected, fold
  enrichment, fold 80 base penalty, library size, HS penalties, dropout).
- Target coverage for downstream callers (mean/median target coverage, the
  fraction of target bases reaching each coverage depth, exclusion rates).

Records are plain values: they start at zero defaults, are populated field by
field by an external aggregation pass, and are only checked when a caller
asks for it (see `hsmetrics.validation`). Column names in metrics files are
the upper-case attribute names, with the grouping columns first.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

COVERAGE_THRESHOLDS: tuple[int, ...] = (1, 2, 10, 20, 30, 40, 50, 100) + tuple(
    range(150, 1001, 50)
)
HS_PENALTY_THRESHOLDS: tuple[int, ...] = (10, 20, 30, 40, 50, 100)

GROUPING_COLUMNS: tuple[str, ...] = ("SAMPLE", "LIBRARY", "READ_GROUP")


class MetricAccumulationLevel(str, Enum):
    """Level at which a record's reads were pooled."""

    ALL_READS = "ALL_READS"
    SAMPLE = "SAMPLE"
    LIBRARY = "LIBRARY"
    READ_GROUP = "READ_GROUP"


class GroupingKey(BaseModel):
    """Sample/library/read group identity of a record. Unset means pooled."""

    model_config = ConfigDict(extra="forbid")

    sample: Optional[str] = None
    library: Optional[str] = None
    read_group: Optional[str] = None

    @property
    def level(self) -> MetricAccumulationLevel:
        if self.read_group is not None:
            return MetricAccumulationLevel.READ_GROUP
        if self.library is not None:
            return MetricAccumulationLevel.LIBRARY
        if self.sample is not None:
            return MetricAccumulationLevel.SAMPLE
        return MetricAccumulationLevel.ALL_READS

    @property
    def label(self) -> str:
        """Most specific identifier that is set, or ALL_READS."""
        for value in (self.read_group, self.library, self.sample):
            if value is not None:
                return value
        return MetricAccumulationLevel.ALL_READS.value

    def as_columns(self) -> dict[str, Optional[str]]:
        return {
            "SAMPLE": self.sample,
            "LIBRARY": self.library,
            "READ_GROUP": self.read_group,
        }


def _count(description: str) -> Any:
    return Field(default=0, ge=0, description=description)


def _ratio(description: str) -> Any:
    return Field(default=0.0, description=description)


def _coverage_fraction(depth: int) -> Any:
    return Field(
        default=0.0,
        description=f"Fraction of all target bases achieving {depth}X or greater coverage",
    )


def _hs_penalty(depth: int) -> Any:
    return Field(
        default=0.0,
        description=(
            f"Hybrid selection penalty incurred to get 80% of target bases to {depth}X: "
            f"with 10 megabases of target, sequence until PF_BASES_ALIGNED = "
            f"10^7 * {depth} * HS_PENALTY_{depth}X"
        ),
    )


class HsMetrics(BaseModel):
    """Summary metrics for one hybrid-selection experiment at one accumulation level."""

    model_config = ConfigDict(extra="forbid")

    grouping: GroupingKey = Field(default_factory=GroupingKey)

    bait_set: str = Field(default="", description="Name of the bait set used")
    genome_size: int = _count("Bases in the reference genome used for alignment")
    bait_territory: int = _count("Bases localized to one or more baits")
    target_territory: int = _count("Unique target bases in the experiment")
    bait_design_efficiency: float = _ratio("TARGET_TERRITORY / BAIT_TERRITORY")

    total_reads: int = _count("Total reads examined")
    pf_reads: int = _count("Reads passing the vendor's filter")
    pf_unique_reads: int = _count("PF reads not marked as duplicates")
    pct_pf_reads: float = _ratio("PF_READS / TOTAL_READS")
    pct_pf_uq_reads: float = _ratio("PF_UNIQUE_READS / TOTAL_READS")
    pf_uq_reads_aligned: int = _count(
        "PF_UNIQUE_READS aligned to the reference with mapping score > 0"
    )
    pct_pf_uq_reads_aligned: float = _ratio("PF_UQ_READS_ALIGNED / PF_UNIQUE_READS")
    pf_bases_aligned: int = _count(
        "PF unique bases aligned to the reference with mapping score > 0"
    )
    pf_uq_bases_aligned: int = _count(
        "Bases in PF_UQ_READS_ALIGNED reads, accounting for clipping and gaps"
    )

    on_bait_bases: int = _count("PF_BASES_ALIGNED mapped to baited regions")
    near_bait_bases: int = _count(
        "PF_BASES_ALIGNED within a fixed interval around a bait but not on it"
    )
    off_bait_bases: int = _count("PF_BASES_ALIGNED mapped away from any bait")
    on_target_bases: int = _count("PF_BASES_ALIGNED mapped to targeted regions")
    pct_selected_bases: float = _ratio(
        "(ON_BAIT_BASES + NEAR_BAIT_BASES) / PF_BASES_ALIGNED"
    )
    pct_off_bait: float = _ratio("OFF_BAIT_BASES / PF_BASES_ALIGNED")
    on_bait_vs_selected: float = _ratio(
        "ON_BAIT_BASES / (ON_BAIT_BASES + NEAR_BAIT_BASES)"
    )

    mean_bait_coverage: float = _ratio("Mean coverage of all baits")
    mean_target_coverage: float = _ratio("Mean coverage of target regions")
    median_target_coverage: float = _ratio("Median coverage of target regions")
    max_target_coverage: int = _count("Maximum coverage over target regions")
    pct_usable_bases_on_bait: float = _ratio(
        "Aligned, de-duplicated, on-bait bases out of all PF bases"
    )
    pct_usable_bases_on_target: float = _ratio(
        "Aligned, de-duplicated, on-target bases out of all PF bases"
    )
    fold_enrichment: float = _ratio(
        "PCT_SELECTED_BASES / (BAIT_TERRITORY / GENOME_SIZE)"
    )
    zero_cvg_targets_pct: float = _ratio(
        "Fraction of targets that did not reach coverage 1 over any base"
    )

    pct_exc_dupe: float = _ratio("Aligned bases filtered as duplicates")
    pct_exc_mapq: float = _ratio("Aligned bases filtered for low mapping quality")
    pct_exc_baseq: float = _ratio("Aligned bases filtered for low base quality")
    pct_exc_overlap: float = _ratio(
        "Aligned bases filtered as the second observation of an overlapping insert"
    )
    pct_exc_off_target: float = _ratio(
        "Aligned bases filtered because they did not align over a target base"
    )

    fold_80_base_penalty: float = _ratio(
        "Fold over-coverage needed to raise 80% of bases in non-zero targets "
        "to the mean coverage of those targets"
    )

    pct_target_bases_1x: float = _coverage_fraction(1)
    pct_target_bases_2x: float = _coverage_fraction(2)
    pct_target_bases_10x: float = _coverage_fraction(10)
    pct_target_bases_20x: float = _coverage_fraction(20)
    pct_target_bases_30x: float = _coverage_fraction(30)
    pct_target_bases_40x: float = _coverage_fraction(40)
    pct_target_bases_50x: float = _coverage_fraction(50)
    pct_target_bases_100x: float = _coverage_fraction(100)
    pct_target_bases_150x: float = _coverage_fraction(150)
    pct_target_bases_200x: float = _coverage_fraction(200)
    pct_target_bases_250x: float = _coverage_fraction(250)
    pct_target_bases_300x: float = _coverage_fraction(300)
    pct_target_bases_350x: float = _coverage_fraction(350)
    pct_target_bases_400x: float = _coverage_fraction(400)
    pct_target_bases_450x: float = _coverage_fraction(450)
    pct_target_bases_500x: float = _coverage_fraction(500)
    pct_target_bases_550x: float = _coverage_fraction(550)
    pct_target_bases_600x: float = _coverage_fraction(600)
    pct_target_bases_650x: float = _coverage_fraction(650)
    pct_target_bases_700x: float = _coverage_fraction(700)
    pct_target_bases_750x: float = _coverage_fraction(750)
    pct_target_bases_800x: float = _coverage_fraction(800)
    pct_target_bases_850x: float = _coverage_fraction(850)
    pct_target_bases_900x: float = _coverage_fraction(900)
    pct_target_bases_950x: float = _coverage_fraction(950)
    pct_target_bases_1000x: float = _coverage_fraction(1000)

    # None means the size could not be estimated (e.g. no duplicates observed)
    hs_library_size: Optional[int] = Field(
        default=None,
        ge=0,
        description="Estimated unique molecules in the selected part of the library",
    )

    hs_penalty_10x: float = _hs_penalty(10)
    hs_penalty_20x: float = _hs_penalty(20)
    hs_penalty_30x: float = _hs_penalty(30)
    hs_penalty_40x: float = _hs_penalty(40)
    hs_penalty_50x: float = _hs_penalty(50)
    hs_penalty_100x: float = _hs_penalty(100)

    at_dropout: float = _ratio(
        "abs(sum of negative (territory% - reads%) deviations) over GC bins 0..50"
    )
    gc_dropout: float = _ratio(
        "abs(sum of negative (territory% - reads%) deviations) over GC bins 50..100"
    )
    het_snp_sensitivity: float = _ratio("Theoretical HET SNP sensitivity")
    het_snp_q: float = _ratio("Phred scaled Q score of HET_SNP_SENSITIVITY")

    @property
    def label(self) -> str:
        return self.grouping.label

    def missing_raw_fields(self) -> list[str]:
        """
        List the raw count fields that were never explicitly populated.

        A field counts as populated once it has been passed to the constructor
        or assigned, even if the value equals the zero default.
        """
        return [name for name in RAW_COUNT_FIELDS if name not in self.model_fields_set]

    @property
    def is_complete(self) -> bool:
        return not self.missing_raw_fields()

    def coverage_fraction(self, depth: int) -> float:
        """
        Return PCT_TARGET_BASES_{depth}X.

        Raises:
            KeyError: If depth is not one of COVERAGE_THRESHOLDS
        """
        if depth not in COVERAGE_THRESHOLDS:
            msg = f"No coverage field for depth {depth}X"
            raise KeyError(msg)
        return getattr(self, coverage_field_name(depth))


def coverage_field_name(depth: int) -> str:
    return f"pct_target_bases_{depth}x"


def hs_penalty_field_name(depth: int) -> str:
    return f"hs_penalty_{depth}x"


# Fields supplied once per record by the upstream aggregator.
RAW_COUNT_FIELDS: tuple[str, ...] = (
    "genome_size",
    "bait_territory",
    "target_territory",
    "total_reads",
    "pf_reads",
    "pf_unique_reads",
    "pf_uq_reads_aligned",
    "pf_bases_aligned",
    "pf_uq_bases_aligned",
    "on_bait_bases",
    "near_bait_bases",
    "off_bait_bases",
    "on_target_bases",
)

# Fields whose value is a fixed function of raw counts (see hsmetrics.derive).
DERIVED_FIELDS: tuple[str, ...] = (
    "bait_design_efficiency",
    "pct_pf_reads",
    "pct_pf_uq_reads",
    "pct_pf_uq_reads_aligned",
    "pct_selected_bases",
    "pct_off_bait",
    "on_bait_vs_selected",
    "fold_enrichment",
)

COVERAGE_FIELDS: tuple[str, ...] = tuple(
    coverage_field_name(depth) for depth in COVERAGE_THRESHOLDS
)

# Float fields that are not fractions and so have no upper bound.
UNBOUNDED_FIELDS: tuple[str, ...] = (
    "mean_bait_coverage",
    "mean_target_coverage",
    "median_target_coverage",
    "fold_enrichment",
    "fold_80_base_penalty",
    *(hs_penalty_field_name(depth) for depth in HS_PENALTY_THRESHOLDS),
    "at_dropout",
    "gc_dropout",
    "het_snp_q",
)

SCHEMA_FIELDS: tuple[str, ...] = tuple(
    name for name in HsMetrics.model_fields if name != "grouping"
)

FRACTION_FIELDS: tuple[str, ...] = tuple(
    name
    for name in SCHEMA_FIELDS
    if HsMetrics.model_fields[name].annotation is float and name not in UNBOUNDED_FIELDS
)


def column_names() -> list[str]:
    """Full ordered header row: grouping columns, then schema fields in declaration order."""
    return [*GROUPING_COLUMNS, *(name.upper() for name in SCHEMA_FIELDS)]
