# capibmadm/cli/common/options.py

import typer

from capibmadm.core.config import GlobalOptions

REGION_OPTION = typer.Option(..., "--region", help="IBM Cloud VPC region, e.g. us-south.")
RESOURCE_GROUP_NAME_OPTION = typer.Option("", "--resource-group-name", help="IBM Cloud resource group name.")


def global_options(ctx: typer.Context, region: str) -> GlobalOptions:
    """Returns the options set by the root callback, completed with the command's region."""
    options = ctx.find_object(GlobalOptions) or GlobalOptions()
    options.vpc_region = region
    return options
