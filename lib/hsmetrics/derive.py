"""
Derived fields of an HsMetrics record.

Each derived field is a pure function of the record's own raw counts. Any
division by zero yields 0.0 rather than NaN or infinity so that reports stay
stable for empty inputs (e.g. a read group with no reads).
"""

import math
from typing import Callable, Optional

from loguru import logger

from .schema import HsMetrics


def safe_divide(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def bait_design_efficiency(record: HsMetrics) -> float:
    return safe_divide(record.target_territory, record.bait_territory)


def pct_pf_reads(record: HsMetrics) -> float:
    return safe_divide(record.pf_reads, record.total_reads)


def pct_pf_uq_reads(record: HsMetrics) -> float:
    return safe_divide(record.pf_unique_reads, record.total_reads)


def pct_pf_uq_reads_aligned(record: HsMetrics) -> float:
    return safe_divide(record.pf_uq_reads_aligned, record.pf_unique_reads)


def pct_selected_bases(record: HsMetrics) -> float:
    selected = record.on_bait_bases + record.near_bait_bases
    return safe_divide(selected, record.pf_bases_aligned)


def pct_off_bait(record: HsMetrics) -> float:
    return safe_divide(record.off_bait_bases, record.pf_bases_aligned)


def on_bait_vs_selected(record: HsMetrics) -> float:
    selected = record.on_bait_bases + record.near_bait_bases
    return safe_divide(record.on_bait_bases, selected)


def fold_enrichment(record: HsMetrics) -> float:
    """Enrichment of the baited fraction of bases over the baited fraction of the genome."""
    bait_fraction_of_genome = safe_divide(record.bait_territory, record.genome_size)
    return safe_divide(pct_selected_bases(record), bait_fraction_of_genome)


DERIVATIONS: dict[str, Callable[[HsMetrics], float]] = {
    "bait_design_efficiency": bait_design_efficiency,
    "pct_pf_reads": pct_pf_reads,
    "pct_pf_uq_reads": pct_pf_uq_reads,
    "pct_pf_uq_reads_aligned": pct_pf_uq_reads_aligned,
    "pct_selected_bases": pct_selected_bases,
    "pct_off_bait": pct_off_bait,
    "on_bait_vs_selected": on_bait_vs_selected,
    "fold_enrichment": fold_enrichment,
}


def derived_values(record: HsMetrics) -> dict[str, float]:
    """Compute every derived field from the record's raw counts."""
    return {name: derive(record) for name, derive in DERIVATIONS.items()}


def derive_fields(record: HsMetrics) -> HsMetrics:
    """
    Return a copy of the record with every derived field filled in.

    Args:
        record: Record whose raw count fields are populated

    Returns:
        New HsMetrics; the input record is left untouched
    """
    values = derived_values(record)
    logger.debug(f"Derived {len(values)} fields for record '{record.label}'")
    return record.model_copy(update=values, deep=True)


# Library size estimation follows the Lander-Waterman equation
# C/X = 1 - exp(-N/X), where N is the number of read pairs, C the number of
# distinct read pairs and X the number of distinct molecules in the library.


def _lander_waterman(x: float, c: float, n: float) -> float:
    return c / x - 1 + math.exp(-n / x)


def estimate_library_size(read_pairs: int, unique_read_pairs: int) -> Optional[int]:
    """
    Estimate the number of distinct molecules in a library.

    Args:
        read_pairs: Total read pairs (or fragments) observed
        unique_read_pairs: Read pairs that are not duplicates

    Returns:
        Estimated library size, or None when there are no reads or no
        duplicates, in which case the size cannot be estimated

    Raises:
        ValueError: If the counts are negative or unique_read_pairs > read_pairs
    """
    if read_pairs < 0 or unique_read_pairs < 0:
        msg = f"Read pair counts must be non-negative: {read_pairs}, {unique_read_pairs}"
        raise ValueError(msg)
    if unique_read_pairs > read_pairs:
        msg = (
            f"Unique read pairs ({unique_read_pairs}) cannot exceed "
            f"read pairs ({read_pairs})"
        )
        raise ValueError(msg)

    duplicates = read_pairs - unique_read_pairs
    if read_pairs == 0 or duplicates == 0:
        return None

    if unique_read_pairs == 0:
        msg = f"Cannot estimate library size from {read_pairs} read pairs with none unique"
        raise ValueError(msg)

    n = float(read_pairs)
    c = float(unique_read_pairs)
    lower, upper = 1.0, 100.0

    while _lander_waterman(upper * c, c, n) > 0:
        upper *= 10.0

    for _ in range(41):
        midpoint = (lower + upper) / 2.0
        value = _lander_waterman(midpoint * c, c, n)
        if value == 0:
            break
        if value > 0:
            lower = midpoint
        else:
            upper = midpoint

    return int(c * (lower + upper) / 2.0)
