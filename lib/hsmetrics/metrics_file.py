"""
Tab-separated metrics file reading and writing.

File format:
    # free text header line (e.g. the producing command line)
    # another header line

    ## METRICS CLASS	hsmetrics.HsMetrics
    SAMPLE	LIBRARY	READ_GROUP	BAIT_SET	GENOME_SIZE	...
    			exome_v1	3101976562	...
    NA12878			exome_v1	3101976562	...

Grouping columns come first, then the record fields in declaration order.
Counts are written in decimal, floats with a fixed number of significant
digits, NaN as "?" and unset values (e.g. an HS_LIBRARY_SIZE that could not
be estimated) as an empty cell. Records for several accumulation levels share
one header row. Anything after the first blank line following the table
(such as a histogram section) is ignored when reading.
"""

import io
import math
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

import polars as pl
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .config import FormatConfig
from .errors import IncompleteRecord, MetricsFileError
from .schema import (
    GROUPING_COLUMNS,
    SCHEMA_FIELDS,
    GroupingKey,
    HsMetrics,
    column_names,
)

METRICS_CLASS = "hsmetrics.HsMetrics"
_CLASS_MARKER = "## METRICS CLASS"


class MetricsFile(BaseModel):
    """Parsed contents of a metrics file."""

    headers: list[str] = Field(default_factory=list)
    metrics_class: str = METRICS_CLASS
    records: list[HsMetrics] = Field(default_factory=list)


def format_value(value: Any, config: Optional[FormatConfig] = None) -> str:
    """
    Render one cell of a metrics file.

    Args:
        value: Count, ratio, string, or None
        config: Rendering settings; defaults to FormatConfig()

    Returns:
        Cell text without surrounding whitespace
    """
    config = config or FormatConfig()
    if value is None:
        return config.null_marker
    if isinstance(value, float):
        if math.isnan(value):
            return config.nan_marker
        return f"{value:.{config.precision}g}"
    text = str(value)
    if "\t" in text or "\n" in text:
        msg = f"Value may not contain tabs or newlines: {text!r}"
        raise MetricsFileError(msg)
    return text


def _record_row(record: HsMetrics, config: FormatConfig) -> str:
    cells = [format_value(value, config) for value in record.grouping.as_columns().values()]
    cells.extend(format_value(getattr(record, name), config) for name in SCHEMA_FIELDS)
    return "\t".join(cells)


def dumps(
    records: Iterable[HsMetrics],
    headers: Sequence[str] = (),
    metrics_class: str = METRICS_CLASS,
    config: Optional[FormatConfig] = None,
) -> str:
    """
    Serialize records to metrics file text.

    Args:
        records: Complete records, one data row each
        headers: Free text header lines written above the table
        metrics_class: Class name written in the METRICS CLASS marker
        config: Rendering settings

    Returns:
        Metrics file text ending in a blank line

    Raises:
        IncompleteRecord: If any record has unpopulated raw count fields
    """
    config = config or FormatConfig()
    records = list(records)
    for record in records:
        missing = record.missing_raw_fields()
        if missing:
            raise IncompleteRecord(record.label, missing)

    lines = [f"# {header}" for header in headers]
    if lines:
        lines.append("")
    lines.append(f"{_CLASS_MARKER}\t{metrics_class}")
    lines.append("\t".join(column_names()))
    lines.extend(_record_row(record, config) for record in records)

    logger.debug(f"Serialized {len(records)} HsMetrics row(s)")
    return "\n".join(lines) + "\n\n"


def write_metrics(
    output_path: Path,
    records: Iterable[HsMetrics],
    headers: Sequence[str] = (),
    config: Optional[FormatConfig] = None,
) -> Path:
    """
    Write records to a metrics file.

    Returns:
        Path to the written file
    """
    records = list(records)
    output_path.write_text(dumps(records, headers=headers, config=config))
    logger.info(f"Wrote {len(records)} HsMetrics row(s) to {output_path}")
    return output_path


def _split_sections(text: str) -> tuple[list[str], str, list[str]]:
    """Split metrics file text into header lines, metrics class, and table lines."""
    headers: list[str] = []
    metrics_class: Optional[str] = None
    table: list[str] = []

    for line in text.splitlines():
        if metrics_class is None:
            if line.startswith(_CLASS_MARKER):
                _, _, metrics_class = line.partition("\t")
                metrics_class = metrics_class.strip()
            elif line.startswith("##") or not line.strip():
                continue
            elif line.startswith("#"):
                headers.append(line[2:] if line.startswith("# ") else line[1:])
            else:
                msg = f"Table row found before the '{_CLASS_MARKER}' line: {line!r}"
                raise MetricsFileError(msg)
            continue

        if not line.strip() or line.startswith("#"):
            if table:
                break
            continue
        table.append(line)

    if metrics_class is None:
        msg = f"No '{_CLASS_MARKER}' line found"
        raise MetricsFileError(msg)
    if not table:
        msg = "Metrics table has no header row"
        raise MetricsFileError(msg)
    return headers, metrics_class, table


def _parse_cell(name: str, text: Optional[str], config: FormatConfig) -> Any:
    annotation = HsMetrics.model_fields[name].annotation
    if text is None:
        return "" if annotation is str else None
    if annotation is float and text == config.nan_marker:
        return math.nan
    return text


def _parse_table(table: list[str], config: FormatConfig) -> list[HsMetrics]:
    known = set(column_names())
    header = table[0].split("\t")
    unknown = [column for column in header if column not in known]
    if unknown:
        msg = f"Unknown metrics column(s): {', '.join(unknown)}"
        raise MetricsFileError(msg)
    if len(set(header)) != len(header):
        msg = "Duplicate metrics columns in header row"
        raise MetricsFileError(msg)

    try:
        df = pl.read_csv(
            io.StringIO("\n".join(table) + "\n"),
            separator="\t",
            infer_schema_length=0,
            quote_char=None,
            null_values=[config.null_marker] if config.null_marker else None,
        )
    except pl.exceptions.PolarsError as e:
        msg = f"Malformed metrics table: {e}"
        raise MetricsFileError(msg) from e

    records = []
    for row_number, row in enumerate(df.iter_rows(named=True), start=1):
        grouping = GroupingKey(
            sample=row.pop("SAMPLE", None),
            library=row.pop("LIBRARY", None),
            read_group=row.pop("READ_GROUP", None),
        )
        values = {
            column.lower(): _parse_cell(column.lower(), text, config)
            for column, text in row.items()
            if column not in GROUPING_COLUMNS
        }
        try:
            records.append(HsMetrics(grouping=grouping, **values))
        except ValidationError as e:
            msg = f"Invalid values in metrics row {row_number}: {e}"
            raise MetricsFileError(msg) from e
    return records


def loads(text: str, config: Optional[FormatConfig] = None) -> MetricsFile:
    """
    Parse metrics file text.

    Args:
        text: Full metrics file contents
        config: Markers used when the file was written

    Returns:
        MetricsFile with header lines, class name, and validated records

    Raises:
        MetricsFileError: If the text is not a well formed metrics file
    """
    config = config or FormatConfig()
    headers, metrics_class, table = _split_sections(text)
    records = _parse_table(table, config)
    logger.debug(f"Parsed {len(records)} HsMetrics row(s)")
    return MetricsFile(headers=headers, metrics_class=metrics_class, records=records)


def read_metrics(metrics_path: Path, config: Optional[FormatConfig] = None) -> MetricsFile:
    """
    Read a metrics file from disk.

    Args:
        metrics_path: Path to a metrics file written by write_metrics
        config: Markers used when the file was written

    Returns:
        Parsed MetricsFile

    Raises:
        MetricsFileError: If the file is not UTF-8 text or not a well formed
            metrics file
    """
    try:
        text = metrics_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        msg = f"{metrics_path} is not UTF-8 text: {e}"
        raise MetricsFileError(msg) from e
    return loads(text, config=config)
