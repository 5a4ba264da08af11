# capibmadm/cli/vpc/key/delete.py

import typer
import questionary

from capibmadm.cli.common.options import REGION_OPTION, global_options
from capibmadm.cli.common.utils import exit_with_error, progress_printer
from capibmadm.core.keys import delete_key, find_key


def key_delete(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Name of the VPC key to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking for confirmation."),
    region: str = REGION_OPTION
):
    """Delete VPC key."""
    options = global_options(ctx, region)
    progress_callback = progress_printer(options)

    found = find_key(options.vpc_region, name, progress_callback=progress_callback)
    if not found["success"]:
        exit_with_error(found["error"])
    key = found["key"]

    if not yes:
        prompt = f"Delete VPC key '{name}' ({key['fingerprint']}) in {options.vpc_region}?"
        if not questionary.confirm(prompt, default=False).ask():
            typer.echo("Aborted, no key was deleted.")
            raise typer.Exit()

    result = delete_key(options.vpc_region, key["id"], name, progress_callback=progress_callback)
    if not result["success"]:
        exit_with_error(result["error"])
