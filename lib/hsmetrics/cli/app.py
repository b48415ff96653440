"""
Typer application instance for the hsmetrics CLI.

This module defines the main Typer app and the shared logging option.
Commands are registered via the commands subpackage.
"""

from typing import Annotated

import typer

from hsmetrics.cli.utils import configure_logging

app = typer.Typer(
    name="hsmetrics",
    help="Validate, derive, and report hybrid-selection (HsMetrics) metrics files.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v, -vv, -vvv, -vvvv)",
            rich_help_panel="Logging",
        ),
    ] = 0,
) -> None:
    """
    Work with HsMetrics metrics files.
    """
    configure_logging(verbose)
