"""
The 'derive' command for the hsmetrics CLI.

Recomputes the derived ratios of every record from its raw counts.
"""

from pathlib import Path
from typing import Annotated

import typer

from hsmetrics.cli.app import app
from hsmetrics.cli.utils import error, load_metrics_or_exit, success
from hsmetrics.derive import derive_fields
from hsmetrics.errors import HsMetricsError
from hsmetrics.metrics_file import write_metrics


@app.command("derive")
def derive_metrics(
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
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output metrics file path",
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
) -> None:
    """
    [bold cyan]Derive[/bold cyan] ratio fields from raw counts.

    Rewrites BAIT_DESIGN_EFFICIENCY, PCT_PF_READS, PCT_PF_UQ_READS,
    PCT_PF_UQ_READS_ALIGNED, PCT_SELECTED_BASES, PCT_OFF_BAIT,
    ON_BAIT_VS_SELECTED and FOLD_ENRICHMENT for every record, keeping the
    header lines of the input file.
    """
    metrics_file = load_metrics_or_exit(metrics)
    records = [derive_fields(record) for record in metrics_file.records]
    try:
        write_metrics(output, records, headers=metrics_file.headers)
    except HsMetricsError as e:
        error(str(e))
    success(f"Wrote {len(records)} derived record(s) to {output}")
