"""
The 'multiqc' command for the hsmetrics CLI.

Writes MultiQC custom content files for the records of a metrics file.
"""

from pathlib import Path
from typing import Annotated

import typer

from hsmetrics.cli.app import app
from hsmetrics.cli.utils import info, load_metrics_or_exit, success
from hsmetrics.multiqc import generate_general_stats_tsv, generate_target_coverage_tsv


@app.command("multiqc")
def multiqc(
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
    outdir: Annotated[
        Path,
        typer.Option(
            "--outdir",
            "-d",
            help="Directory for the *_mqc.tsv files",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = Path("."),
) -> None:
    """
    Generate [bold]MultiQC[/bold] custom content from a metrics file.
    """
    metrics_file = load_metrics_or_exit(metrics)
    outdir.mkdir(parents=True, exist_ok=True)

    written = [
        generate_general_stats_tsv(
            metrics_file.records, outdir / "hsmetrics_general_stats_mqc.tsv"
        ),
        generate_target_coverage_tsv(
            metrics_file.records, outdir / "hsmetrics_target_coverage_mqc.tsv"
        ),
    ]
    for path in written:
        info(f"Wrote {path.name}")
    success(f"Wrote MultiQC content for {len(metrics_file.records)} record(s) to {outdir}")
