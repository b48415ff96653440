"""
Advisory invariant checks for HsMetrics records.

Records may be partially populated while an aggregation pass is running, so
nothing here runs on construction or assignment. Callers (tests, report
assembly, the `hsmetrics validate` command) invoke these checks explicitly
once a record is complete.
"""

import math

from loguru import logger

from .config import ValidationConfig
from .derive import DERIVATIONS
from .errors import SchemaViolation
from .schema import COVERAGE_THRESHOLDS, FRACTION_FIELDS, HsMetrics, coverage_field_name


def _fraction_violations(record: HsMetrics, epsilon: float) -> list[str]:
    violations = []
    for name in FRACTION_FIELDS:
        value = getattr(record, name)
        # NaN fails both comparisons and is reported here
        if not (-epsilon <= value <= 1 + epsilon):
            violations.append(f"{name.upper()}={value} is outside [0, 1]")
    return violations


def _accounting_violations(record: HsMetrics, tolerance: int) -> list[str]:
    accounted = record.on_bait_bases + record.near_bait_bases + record.off_bait_bases
    if abs(accounted - record.pf_bases_aligned) > tolerance:
        return [
            f"ON_BAIT_BASES + NEAR_BAIT_BASES + OFF_BAIT_BASES = {accounted} "
            f"but PF_BASES_ALIGNED = {record.pf_bases_aligned}"
        ]
    return []


def _monotonic_violations(record: HsMetrics, epsilon: float) -> list[str]:
    violations = []
    for shallow, deep in zip(COVERAGE_THRESHOLDS, COVERAGE_THRESHOLDS[1:]):
        shallow_value = getattr(record, coverage_field_name(shallow))
        deep_value = getattr(record, coverage_field_name(deep))
        if deep_value > shallow_value + epsilon:
            violations.append(
                f"PCT_TARGET_BASES_{deep}X={deep_value} exceeds "
                f"PCT_TARGET_BASES_{shallow}X={shallow_value}"
            )
    return violations


def _derived_violations(record: HsMetrics, rel_tol: float) -> list[str]:
    violations = []
    for name, derive in DERIVATIONS.items():
        expected = derive(record)
        actual = getattr(record, name)
        if not math.isclose(actual, expected, rel_tol=rel_tol, abs_tol=1e-9):
            violations.append(f"{name.upper()}={actual} but formula gives {expected}")
    return violations


def find_violations(
    record: HsMetrics,
    config: ValidationConfig | None = None,
) -> list[str]:
    """
    Run every invariant check against a record.

    Args:
        record: Record to check
        config: Tolerances; defaults to ValidationConfig()

    Returns:
        One human readable message per failed check, empty when the record is valid
    """
    config = config or ValidationConfig()
    violations = [
        *_fraction_violations(record, config.fraction_epsilon),
        *_accounting_violations(record, config.accounting_tolerance),
        *_monotonic_violations(record, config.monotonic_epsilon),
    ]
    if config.check_derived:
        violations.extend(_derived_violations(record, config.derived_rel_tol))
    return violations


def validate(record: HsMetrics, config: ValidationConfig | None = None) -> HsMetrics:
    """
    Check a record and raise if any invariant fails.

    Returns:
        The record itself, unchanged

    Raises:
        SchemaViolation: Listing every failed check
    """
    violations = find_violations(record, config)
    if violations:
        logger.debug(f"Record '{record.label}' has {len(violations)} violation(s)")
        raise SchemaViolation(record.label, violations)
    return record
