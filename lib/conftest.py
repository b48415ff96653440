"""Shared fixtures for the hsmetrics tests."""

import pytest

from hsmetrics.schema import COVERAGE_THRESHOLDS, GroupingKey, HsMetrics, coverage_field_name


@pytest.fixture
def raw_counts() -> dict[str, int]:
    """Raw counts with known derived values."""
    # PCT_PF_READS = 900/1000 = 0.9
    # PCT_SELECTED_BASES = (500 + 100)/1000 = 0.6
    # PCT_OFF_BAIT = 400/1000 = 0.4
    # ON_BAIT_VS_SELECTED = 500/600
    # FOLD_ENRICHMENT = 0.6 / (2000/100000) = 30
    return {
        "genome_size": 100_000,
        "bait_territory": 2_000,
        "target_territory": 1_500,
        "total_reads": 1_000,
        "pf_reads": 900,
        "pf_unique_reads": 800,
        "pf_uq_reads_aligned": 760,
        "pf_bases_aligned": 1_000,
        "pf_uq_bases_aligned": 950,
        "on_bait_bases": 500,
        "near_bait_bases": 100,
        "off_bait_bases": 400,
        "on_target_bases": 450,
    }


@pytest.fixture
def complete_record(raw_counts: dict[str, int]) -> HsMetrics:
    """A fully populated, internally consistent sample-level record."""
    coverage = {
        coverage_field_name(depth): max(0.0, 0.99 - index * 0.035)
        for index, depth in enumerate(COVERAGE_THRESHOLDS)
    }
    return HsMetrics(
        grouping=GroupingKey(sample="NA12878"),
        bait_set="exome_v1",
        bait_design_efficiency=0.75,
        pct_pf_reads=0.9,
        pct_pf_uq_reads=0.8,
        pct_pf_uq_reads_aligned=0.95,
        pct_selected_bases=0.6,
        pct_off_bait=0.4,
        on_bait_vs_selected=500 / 600,
        mean_bait_coverage=88.5,
        mean_target_coverage=102.25,
        median_target_coverage=98.0,
        max_target_coverage=1_204,
        pct_usable_bases_on_bait=0.41,
        pct_usable_bases_on_target=0.37,
        fold_enrichment=30.0,
        zero_cvg_targets_pct=0.012,
        pct_exc_dupe=0.11,
        pct_exc_mapq=0.02,
        pct_exc_baseq=0.005,
        pct_exc_overlap=0.03,
        pct_exc_off_target=0.4,
        fold_80_base_penalty=1.6,
        hs_library_size=12_345_678,
        hs_penalty_10x=2.5,
        hs_penalty_20x=2.9,
        hs_penalty_30x=3.3,
        hs_penalty_40x=3.8,
        hs_penalty_50x=4.4,
        hs_penalty_100x=0.0,
        at_dropout=2.1,
        gc_dropout=4.7,
        het_snp_sensitivity=0.97,
        het_snp_q=15.2,
        **coverage,
        **raw_counts,
    )
