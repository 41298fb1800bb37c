"""Plan command implementation.

Shows which catalog entries a run of apply would act on.
"""

import json
import os
import subprocess
from typing import Annotated

import typer

from provctl.cli.display import create_plan_table, print_plan_summary
from provctl.cli.types import CatalogOption
from provctl.core.catalog import require_catalog
from provctl.core.environment import build_search_path
from provctl.core.plan import compute_plan
from provctl.core.provisioner import get_scanners
from provctl.utils.formatting import console, print_error

app = typer.Typer(
    help="Compare the catalog with the workstation.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_plan(
    ctx: typer.Context,
    catalog_path: CatalogOption = None,
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output the plan as JSON.",
        ),
    ] = False,
) -> None:
    """Compare the catalog with the workstation.

    Lists every cask, formula, toolchain and download with its current
    state. Nothing is changed.
    """
    if ctx.invoked_subcommand is not None:
        return

    catalog = require_catalog(catalog_path)
    search_path = build_search_path(catalog.settings.search_path, os.environ.get("PATH", ""))

    try:
        plan = compute_plan(catalog, get_scanners(search_path), search_path=search_path)
    except (RuntimeError, OSError, subprocess.TimeoutExpired) as e:
        print_error(f"Scan failed: {e}")
        raise typer.Exit(code=1) from e

    if output_json:
        console.print_json(json.dumps(plan.to_dict()))
        return

    console.print(create_plan_table(plan))
    print_plan_summary(plan)
