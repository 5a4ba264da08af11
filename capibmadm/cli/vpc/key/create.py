# capibmadm/cli/vpc/key/create.py

import typer

from capibmadm.cli.common.options import REGION_OPTION, RESOURCE_GROUP_NAME_OPTION, global_options
from capibmadm.cli.common.utils import exit_with_error, progress_printer
from capibmadm.core.keys import check_key_source, create_key, resolve_public_key


def key_create(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Key Name"),
    public_key: str = typer.Option("", "--public-key", help="Public Key"),
    key_path: str = typer.Option("", "--key-path", help="The absolute path to the VPC key file."),
    resource_group_name: str = RESOURCE_GROUP_NAME_OPTION,
    region: str = REGION_OPTION
):
    """
    Create VPC key.

    Requires IBMCLOUD_API_KEY to be exported. Pass the key either inline with
    --public-key "<public-key-string>" or as a file with --key-path.
    """
    options = global_options(ctx, region)

    # Checked before any file or network access.
    if not name:
        exit_with_error("the --name flag must not be empty")
    source_error = check_key_source(public_key, key_path)
    if source_error:
        exit_with_error(source_error)

    resolved = resolve_public_key(public_key=public_key, key_path=key_path)
    if not resolved["success"]:
        exit_with_error(resolved["error"])

    result = create_key(
        name=name,
        public_key=resolved["public_key"],
        region=options.vpc_region,
        resource_group_name=resource_group_name,
        progress_callback=progress_printer(options)
    )
    if not result["success"]:
        exit_with_error(result["error"])
