# capibmadm/cli/main.py

import typer

from capibmadm.cli.common.utils import configure_logging
from capibmadm.core.config import GlobalOptions

from capibmadm.cli.vpc.key.create import key_create
from capibmadm.cli.vpc.key.delete import key_delete
from capibmadm.cli.vpc.key.list import key_list


app = typer.Typer(
    name="capibmadm",
    help="Commands for working with the IBM Cloud resources used by Cluster API Provider IBM Cloud."
)

vpc_app = typer.Typer(name="vpc", help="Commands for working with VPC resources.")
key_app = typer.Typer(name="key", help="Perform VPC key operations.")

key_app.command("create")(key_create)
key_app.command("delete")(key_delete)
key_app.command("list")(key_list)

vpc_app.add_typer(key_app, name="key")

# Add the sub-apps to the main app
app.add_typer(vpc_app, name="vpc")


@app.callback()
def root(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Enable/disable debug logging.")
):
    """Kubernetes Cluster API Provider IBM Cloud Management Utility."""
    ctx.obj = GlobalOptions(debug=debug)
    configure_logging(debug)


def main():
    app()

if __name__ == "__main__":
    main()
