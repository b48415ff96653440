"""
hsmetrics CLI - a Typer-based command-line interface for HsMetrics files.

Usage:
    hsmetrics validate sample.hs_metrics.txt
    hsmetrics derive sample.hs_metrics.txt --output derived.hs_metrics.txt
    hsmetrics coverage --bed targets.depth.bed --output coverage.json
    hsmetrics multiqc sample.hs_metrics.txt --outdir multiqc/
    hsmetrics --help
"""

import sys

import typer
from rich.console import Console

from hsmetrics.cli.app import app

# Import commands to register them with the app
from hsmetrics.cli.commands import coverage, derive, multiqc, validate  # noqa: F401

__all__ = ["app", "main"]

console = Console()


def main() -> None:
    """Main entry point for the hsmetrics CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except typer.Exit:
        raise
    except typer.Abort:
        sys.exit(1)
