"""
The 'validate' command for the hsmetrics CLI.

Runs the advisory invariant checks against every record in a metrics file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from hsmetrics.cli.app import app
from hsmetrics.cli.utils import console, error, load_metrics_or_exit, success
from hsmetrics.config import ValidationConfig
from hsmetrics.validation import find_violations


@app.command("validate")
def validate_metrics(
    metrics: Annotated[
        Path,
        typer.Argument(
            help="Path to an HsMetrics metrics file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    epsilon: Annotated[
        float,
        typer.Option(
            "--epsilon",
            "-e",
            min=0.0,
            help="Tolerance allowed outside [0, 1] for fraction fields",
        ),
    ] = 1e-6,
    accounting_tolerance: Annotated[
        int,
        typer.Option(
            "--accounting-tolerance",
            min=0,
            help="Allowed difference between on+near+off bait bases and PF_BASES_ALIGNED",
        ),
    ] = 0,
    check_derived: Annotated[
        bool,
        typer.Option(
            "--check-derived/--no-check-derived",
            help="Also check derived ratios against their formulas",
        ),
    ] = False,
) -> None:
    """
    [bold yellow]Validate[/bold yellow] every record in a metrics file.

    Checks fraction ranges, on/near/off bait base accounting, and that target
    coverage never increases with depth. Exits with status 1 on any violation.
    """
    config = ValidationConfig(
        fraction_epsilon=epsilon,
        accounting_tolerance=accounting_tolerance,
        check_derived=check_derived,
    )
    metrics_file = load_metrics_or_exit(metrics)

    table = Table(title=f"Violations in {metrics.name}")
    table.add_column("Row", justify="right")
    table.add_column("Record")
    table.add_column("Violation", style="red")

    failures = 0
    for row, record in enumerate(metrics_file.records, start=1):
        for violation in find_violations(record, config):
            table.add_row(str(row), record.label, violation)
            failures += 1

    record_count = len(metrics_file.records)
    if failures:
        console.print(table)
        error(f"{failures} violation(s) across {record_count} record(s)")

    success(f"All {record_count} record(s) passed validation")
