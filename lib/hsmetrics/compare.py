"""Field-by-field comparison of HsMetrics records."""

import math
from typing import Any, Optional

from pydantic import BaseModel

from .schema import SCHEMA_FIELDS, HsMetrics


class FieldDifference(BaseModel):
    """A column whose value differs between two records."""

    column: str
    left: Optional[Any] = None
    right: Optional[Any] = None


def _values_match(left: Any, right: Any, rel_tol: float, abs_tol: float) -> bool:
    if isinstance(left, float) or isinstance(right, float):
        if left is None or right is None:
            return left is right
        if math.isnan(left) and math.isnan(right):
            return True
        return math.isclose(left, right, rel_tol=rel_tol, abs_tol=abs_tol)
    return left == right


def diff_records(
    left: HsMetrics,
    right: HsMetrics,
    rel_tol: float = 1e-6,
    abs_tol: float = 1e-9,
) -> list[FieldDifference]:
    """
    List the columns whose values differ between two records.

    Floats are compared with the given tolerances (NaN matches NaN); counts,
    strings and unset values must match exactly.

    Returns:
        Differences in column order, empty when the records match
    """
    pairs: list[tuple[str, Any, Any]] = [
        (column, value, right.grouping.as_columns()[column])
        for column, value in left.grouping.as_columns().items()
    ]
    pairs.extend(
        (name.upper(), getattr(left, name), getattr(right, name))
        for name in SCHEMA_FIELDS
    )
    return [
        FieldDifference(column=column, left=a, right=b)
        for column, a, b in pairs
        if not _values_match(a, b, rel_tol, abs_tol)
    ]


def records_equal(
    left: HsMetrics,
    right: HsMetrics,
    rel_tol: float = 1e-6,
    abs_tol: float = 1e-9,
) -> bool:
    return not diff_records(left, right, rel_tol=rel_tol, abs_tol=abs_tol)
