"""Apply command implementation.

Runs the provisioning pipeline: profile, hosts, Homebrew, casks,
formulae, toolchains, global defaults and downloads.
"""

from typing import Annotated

import typer

from provctl.cli.display import create_results_table, print_results_summary
from provctl.cli.types import CatalogOption
from provctl.core.catalog import require_catalog
from provctl.core.errors import ProvisionError
from provctl.core.provisioner import Provisioner, Stage
from provctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Provision the workstation from the catalog.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def apply_catalog(
    ctx: typer.Context,
    catalog_path: CatalogOption = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without making changes.",
        ),
    ] = False,
    skip: Annotated[
        list[Stage] | None,
        typer.Option(
            "--skip",
            "-s",
            help="Stage to skip (repeatable).",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Provision the workstation from the catalog.

    Stages run in order and stop at the first failure:
      profile, hosts, homebrew, casks, formulae, toolchains, globals, downloads

    Items already installed and files already downloaded are skipped, so
    after fixing a failure simply run apply again.

    Examples:
        provctl apply --dry-run          # Preview changes
        provctl apply --skip hosts       # Leave /etc/hosts alone
    """
    if ctx.invoked_subcommand is not None:
        return

    catalog = require_catalog(catalog_path)
    provisioner = Provisioner(catalog, dry_run=dry_run, skip=skip or ())

    try:
        results = provisioner.run()
    except ProvisionError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if results:
        console.print()
        console.print(create_results_table(results, dry_run=dry_run))
        print_results_summary(results, dry_run=dry_run)

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return

    print_success("Provisioning completed successfully!")
