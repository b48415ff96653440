"""
hsmetrics: hybrid-selection (target capture) sequencing metrics.

This package defines the HsMetrics record schema and the operations a
reporting pipeline needs around it.

Modules:
    schema: Pydantic models for the record and its grouping key
    derive: Ratio fields computed from raw counts, library size estimation
    coverage: Target coverage fields from per-base depth
    validation: Advisory invariant checks raising SchemaViolation
    compare: Field-by-field record comparison
    metrics_file: Tab-separated metrics file reading and writing
    multiqc: MultiQC custom content file generation
    cli: Typer command line interface
"""

from .compare import FieldDifference, diff_records, records_equal
from .config import FormatConfig, ValidationConfig
from .coverage import (
    TargetCoverageStats,
    apply_target_coverage,
    compute_target_coverage,
    depths_to_frame,
    load_depth_bed,
)
from .derive import derive_fields, derived_values, estimate_library_size, safe_divide
from .errors import HsMetricsError, IncompleteRecord, MetricsFileError, SchemaViolation
from .metrics_file import MetricsFile, dumps, loads, read_metrics, write_metrics
from .schema import (
    COVERAGE_THRESHOLDS,
    GroupingKey,
    HsMetrics,
    MetricAccumulationLevel,
    column_names,
)
from .validation import find_violations, validate

__all__ = [
    "COVERAGE_THRESHOLDS",
    "FieldDifference",
    "FormatConfig",
    "GroupingKey",
    "HsMetrics",
    "HsMetricsError",
    "IncompleteRecord",
    "MetricAccumulationLevel",
    "MetricsFile",
    "MetricsFileError",
    "SchemaViolation",
    "TargetCoverageStats",
    "ValidationConfig",
    "apply_target_coverage",
    "column_names",
    "compute_target_coverage",
    "depths_to_frame",
    "derive_fields",
    "derived_values",
    "diff_records",
    "dumps",
    "estimate_library_size",
    "find_violations",
    "load_depth_bed",
    "loads",
    "read_metrics",
    "records_equal",
    "safe_divide",
    "validate",
    "write_metrics",
]
