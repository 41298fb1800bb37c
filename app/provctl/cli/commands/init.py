"""Init command implementation.

Writes the bundled default catalog to the user config path so it can
be edited.
"""

from pathlib import Path
from typing import Annotated

import typer

from provctl.core.catalog import (
    CatalogError,
    catalog_exists,
    load_default_catalog,
    save_catalog,
)
from provctl.core.paths import get_catalog_path
from provctl.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Create an editable catalog.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_catalog(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Where to write the catalog (default: ~/.config/provctl/catalog.toml).",
            dir_okay=False,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing catalog.",
        ),
    ] = False,
) -> None:
    """Create an editable catalog from the bundled defaults."""
    if ctx.invoked_subcommand is not None:
        return

    path = output or get_catalog_path()

    if catalog_exists(path) and not force:
        print_error(f"Catalog already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_catalog(load_default_catalog(), path)
    except CatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Catalog written to {saved}")
    print_info("Edit it, then run 'provctl plan' to see what apply would do.")
