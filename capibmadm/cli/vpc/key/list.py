# capibmadm/cli/vpc/key/list.py

import json
from enum import Enum

import typer
import yaml
from rich.table import Table

from capibmadm.cli.common.options import REGION_OPTION, RESOURCE_GROUP_NAME_OPTION, global_options
from capibmadm.cli.common.utils import console, exit_with_error, progress_printer
from capibmadm.core.keys import list_keys


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    yaml = "yaml"


def key_list(
    ctx: typer.Context,
    resource_group_name: str = RESOURCE_GROUP_NAME_OPTION,
    output: OutputFormat = typer.Option(OutputFormat.table, "--output", "-o", help="Output format.", case_sensitive=False),
    region: str = REGION_OPTION
):
    """List VPC keys."""
    options = global_options(ctx, region)

    result = list_keys(
        options.vpc_region,
        resource_group_name=resource_group_name,
        progress_callback=progress_printer(options)
    )
    if not result["success"]:
        exit_with_error(result["error"])

    keys = result["keys"]
    if output == OutputFormat.json:
        typer.echo(json.dumps(keys, indent=2))
        return
    if output == OutputFormat.yaml:
        typer.echo(yaml.safe_dump(keys, sort_keys=False), nl=False)
        return

    if not keys:
        typer.echo(f"No VPC keys found in {options.vpc_region}.")
        return

    table = Table(title=f"VPC Keys ({options.vpc_region})")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Type", style="magenta")
    table.add_column("Length")
    table.add_column("Fingerprint", style="yellow")
    table.add_column("Resource Group")
    table.add_column("Created")
    for key in keys:
        table.add_row(
            key["name"] or "",
            key["id"] or "",
            key["type"] or "",
            str(key["length"] or ""),
            key["fingerprint"] or "",
            key["resource_group"] or "",
            key["created_at"] or ""
        )
    console.print(table)
