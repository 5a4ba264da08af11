# capibmadm/cli/common/utils.py

import logging

import typer
from rich.console import Console

console = Console()


def configure_logging(debug: bool = False):
    """Sets the verbosity of everything logged to stderr."""
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)
    # The IBM SDKs log request details at DEBUG; keep them quiet unless asked.
    for sdk_logger in ("ibm_cloud_sdk_core", "urllib3"):
        logging.getLogger(sdk_logger).setLevel(logging.DEBUG if debug else logging.WARNING)


def exit_with_error(message: str):
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def progress_printer(options):
    """Returns a progress callback that only speaks in debug mode."""
    def progress_callback(message):
        if options.debug:
            typer.echo(f"  - {message}", err=True)
    return progress_callback
