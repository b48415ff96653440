"""
Exception types raised by the hsmetrics package.

Every error is raised where it is detected and propagated to the caller;
nothing here is retried or corrected in place.
"""


class HsMetricsError(Exception):
    """Base class for hsmetrics errors."""


class SchemaViolation(HsMetricsError, ValueError):
    """A populated record fails one or more invariant checks."""

    def __init__(self, label: str, violations: list[str]) -> None:
        self.label = label
        self.violations = list(violations)
        details = "; ".join(self.violations)
        super().__init__(f"HsMetrics record '{label}' failed validation: {details}")


class IncompleteRecord(HsMetricsError):
    """Serialization was attempted before every raw count field was populated."""

    def __init__(self, label: str, missing: list[str]) -> None:
        self.label = label
        self.missing = list(missing)
        fields = ", ".join(name.upper() for name in self.missing)
        super().__init__(
            f"HsMetrics record '{label}' is missing raw count fields: {fields}"
        )


class MetricsFileError(HsMetricsError, ValueError):
    """Metrics file text could not be parsed."""
