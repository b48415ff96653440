"""
Configuration models for metrics file rendering and record validation.

Both models are frozen so a configuration can be shared between records and
passed through the command line layer without being modified along the way.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FormatConfig(BaseModel):
    """How values are rendered in a metrics file."""

    model_config = ConfigDict(frozen=True)

    precision: Annotated[int, Field(ge=1, le=17)] = 6
    null_marker: str = ""
    nan_marker: str = "?"

    @model_validator(mode="after")
    def validate_markers(self) -> "FormatConfig":
        """Ensure the markers cannot be confused with each other or with the delimiter."""
        if self.null_marker == self.nan_marker:
            msg = "null_marker and nan_marker must differ"
            raise ValueError(msg)
        for marker in (self.null_marker, self.nan_marker):
            if "\t" in marker or "\n" in marker:
                msg = f"Marker may not contain tabs or newlines: {marker!r}"
                raise ValueError(msg)
        return self


class ValidationConfig(BaseModel):
    """Tolerances used by the advisory record checks."""

    model_config = ConfigDict(frozen=True)

    fraction_epsilon: Annotated[float, Field(ge=0)] = 1e-6
    accounting_tolerance: Annotated[int, Field(ge=0)] = 0
    monotonic_epsilon: Annotated[float, Field(ge=0)] = 1e-9
    check_derived: bool = False
    # Relative tolerance for derived fields; 6 significant digits on disk
    # leaves at most 5e-6 relative error.
    derived_rel_tol: Annotated[float, Field(ge=0)] = 1e-5
