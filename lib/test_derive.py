"""Tests for derived fields and library size estimation."""

import math

import pytest

from hsmetrics.derive import (
    DERIVATIONS,
    derive_fields,
    derived_values,
    estimate_library_size,
    fold_enrichment,
    on_bait_vs_selected,
    pct_off_bait,
    pct_pf_reads,
    pct_selected_bases,
    safe_divide,
)
from hsmetrics.schema import DERIVED_FIELDS, RAW_COUNT_FIELDS, HsMetrics


class TestSafeDivide:
    """Test the zero-denominator policy."""

    def test_regular_division(self) -> None:
        assert safe_divide(3, 4) == 0.75

    def test_zero_denominator_gives_zero(self) -> None:
        assert safe_divide(5, 0) == 0.0

    def test_zero_over_zero_gives_zero(self) -> None:
        result = safe_divide(0, 0)
        assert result == 0.0
        assert not math.isnan(result)


class TestFormulas:
    """Test each derived field against its formula."""

    def test_example_read_fractions(self) -> None:
        record = HsMetrics(total_reads=1000, pf_reads=900)
        assert pct_pf_reads(record) == pytest.approx(0.9, abs=1e-9)

    def test_example_bait_fractions(self) -> None:
        record = HsMetrics(
            on_bait_bases=500,
            near_bait_bases=100,
            off_bait_bases=400,
            pf_bases_aligned=1000,
        )
        assert pct_selected_bases(record) == pytest.approx(0.6, abs=1e-9)
        assert pct_off_bait(record) == pytest.approx(0.4, abs=1e-9)
        assert on_bait_vs_selected(record) == pytest.approx(500 / 600, abs=1e-9)

    def test_all_formulas(self, raw_counts: dict[str, int]) -> None:
        values = derived_values(HsMetrics(**raw_counts))
        assert values["bait_design_efficiency"] == pytest.approx(1500 / 2000, abs=1e-9)
        assert values["pct_pf_reads"] == pytest.approx(900 / 1000, abs=1e-9)
        assert values["pct_pf_uq_reads"] == pytest.approx(800 / 1000, abs=1e-9)
        assert values["pct_pf_uq_reads_aligned"] == pytest.approx(760 / 800, abs=1e-9)
        assert values["pct_selected_bases"] == pytest.approx(600 / 1000, abs=1e-9)
        assert values["pct_off_bait"] == pytest.approx(400 / 1000, abs=1e-9)
        assert values["on_bait_vs_selected"] == pytest.approx(500 / 600, abs=1e-9)
        assert values["fold_enrichment"] == pytest.approx(
            0.6 / (2000 / 100_000), abs=1e-9
        )

    def test_derivations_cover_derived_fields(self) -> None:
        assert tuple(DERIVATIONS) == DERIVED_FIELDS

    def test_fold_enrichment_zero_genome(self) -> None:
        """Test that an unknown genome size yields zero enrichment."""
        record = HsMetrics(
            bait_territory=2000, on_bait_bases=10, pf_bases_aligned=20, genome_size=0
        )
        assert fold_enrichment(record) == 0.0

    def test_fold_enrichment_zero_bait_territory(self) -> None:
        record = HsMetrics(
            bait_territory=0, on_bait_bases=10, pf_bases_aligned=20, genome_size=1000
        )
        assert fold_enrichment(record) == 0.0


class TestZeroDenominators:
    """Test that empty inputs produce zeros rather than NaN."""

    def test_all_zero_record(self) -> None:
        counts = dict.fromkeys(RAW_COUNT_FIELDS, 0)
        values = derived_values(HsMetrics(**counts))
        for name, value in values.items():
            assert value == 0.0, name
            assert not math.isnan(value), name

    def test_zero_total_reads(self) -> None:
        record = HsMetrics(total_reads=0, pf_reads=0, pf_unique_reads=0)
        assert derived_values(record)["pct_pf_reads"] == 0.0
        assert derived_values(record)["pct_pf_uq_reads"] == 0.0


class TestDeriveFields:
    """Test filling derived fields into a copy of a record."""

    def test_returns_filled_copy(self, raw_counts: dict[str, int]) -> None:
        record = HsMetrics(**raw_counts)
        derived = derive_fields(record)
        assert derived.pct_pf_reads == pytest.approx(0.9)
        assert derived.fold_enrichment == pytest.approx(30.0)

    def test_input_not_mutated(self, raw_counts: dict[str, int]) -> None:
        record = HsMetrics(**raw_counts)
        derive_fields(record)
        assert record.pct_pf_reads == 0.0

    def test_grouping_not_shared(self, complete_record: HsMetrics) -> None:
        derived = derive_fields(complete_record)
        derived.grouping.sample = "renamed"
        assert complete_record.grouping.sample != "renamed"

    def test_copy_stays_complete(self, raw_counts: dict[str, int]) -> None:
        derived = derive_fields(HsMetrics(**raw_counts))
        assert derived.is_complete

    def test_other_fields_preserved(self, complete_record: HsMetrics) -> None:
        derived = derive_fields(complete_record)
        assert derived.hs_library_size == complete_record.hs_library_size
        assert derived.grouping == complete_record.grouping
        assert derived.pct_target_bases_30x == complete_record.pct_target_bases_30x


class TestEstimateLibrarySize:
    """Test Lander-Waterman library size estimation."""

    def test_no_duplicates_cannot_estimate(self) -> None:
        """Test that zero duplicates leaves the library size unset."""
        assert estimate_library_size(1000, 1000) is None

    def test_no_reads_cannot_estimate(self) -> None:
        assert estimate_library_size(0, 0) is None

    def test_estimate_solves_equation(self) -> None:
        """Test that the estimate satisfies C/X = 1 - exp(-N/X)."""
        reads, unique = 10_000, 8_000
        size = estimate_library_size(reads, unique)
        assert size is not None
        assert size > unique
        assert unique / size == pytest.approx(1 - math.exp(-reads / size), rel=1e-3)

    def test_more_duplication_means_smaller_library(self) -> None:
        low_dup = estimate_library_size(10_000, 9_500)
        high_dup = estimate_library_size(10_000, 5_000)
        assert low_dup is not None and high_dup is not None
        assert high_dup < low_dup

    def test_unique_exceeding_total_raises(self) -> None:
        with pytest.raises(ValueError, match="cannot exceed"):
            estimate_library_size(10, 20)

    def test_negative_counts_raise(self) -> None:
        with pytest.raises(ValueError):
            estimate_library_size(-1, 0)

    def test_no_unique_reads_raises(self) -> None:
        with pytest.raises(ValueError):
            estimate_library_size(10, 0)

    @pytest.mark.parametrize("read_pairs", [10**8, 10**9])
    def test_single_duplicate_in_large_library(self, read_pairs: int) -> None:
        """Test that a barely duplicated library still yields an estimate."""
        size = estimate_library_size(read_pairs, read_pairs - 1)
        assert isinstance(size, int)
        assert size > read_pairs - 1
