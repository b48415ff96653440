"""
Utility functions for the hsmetrics CLI.

Provides console output helpers, loguru configuration, and metrics file loading.
"""

import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from hsmetrics.errors import MetricsFileError
from hsmetrics.metrics_file import MetricsFile, read_metrics

# Shared console instances
console = Console()
err_console = Console(stderr=True)


def error(message: str, exit_code: int = 1) -> None:
    """Print an error message and optionally exit."""
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    if exit_code:
        sys.exit(exit_code)


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[cyan]Info:[/cyan] {message}")


def configure_logging(verbosity: int) -> None:
    """Configure loguru logging based on verbosity level."""
    logger.remove()

    level = {
        0: "ERROR",
        1: "WARNING",
        2: "SUCCESS",
        3: "INFO",
        4: "DEBUG",
    }.get(min(verbosity, 4), "INFO")

    logger.add(
        sys.stderr,
        colorize=True,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )


def load_metrics_or_exit(metrics_path: Path) -> MetricsFile:
    """Read a metrics file, printing an error and exiting if it is malformed."""
    try:
        return read_metrics(metrics_path)
    except MetricsFileError as e:
        error(f"Could not read {metrics_path}: {e}", exit_code=0)
        raise typer.Exit(1) from e
