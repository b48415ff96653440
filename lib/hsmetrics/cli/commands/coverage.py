"""
The 'coverage' command for the hsmetrics CLI.

Summarises per-base target depth into the target coverage fields.
"""

from pathlib import Path
from typing import Annotated

import polars as pl
import typer

from hsmetrics.cli.app import app
from hsmetrics.cli.utils import error, success
from hsmetrics.coverage import compute_target_coverage, load_depth_bed


@app.command("coverage")
def coverage(
    bed: Annotated[
        Path,
        typer.Option(
            "--bed",
            "-b",
            help="Per-base depth BED over the target territory (bedtools genomecov -bga layout)",
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
            help="Output JSON file path",
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
) -> None:
    """
    Compute target coverage statistics from a depth BED file.

    Reports mean/median/max target depth, the fold 80 base penalty, and the
    fraction of target bases at each PCT_TARGET_BASES threshold.
    """
    try:
        stats = compute_target_coverage(load_depth_bed(bed))
    except pl.exceptions.PolarsError as e:
        error(f"Could not read depth BED {bed}: {e}", exit_code=0)
        raise typer.Exit(1) from e
    output.write_text(stats.model_dump_json(indent=2))
    success(f"Wrote target coverage for {stats.total_bases} bases to {output}")
