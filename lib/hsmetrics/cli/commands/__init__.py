"""
Command modules for the hsmetrics CLI.

Each submodule defines one Typer command that is registered with the main
app in hsmetrics/cli/__init__.py.
"""

from hsmetrics.cli.commands import coverage, derive, multiqc, validate

__all__ = ["coverage", "derive", "multiqc", "validate"]
