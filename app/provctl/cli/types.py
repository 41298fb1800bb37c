"""Shared CLI option types.

This module provides the option annotations reused across commands.
"""

from pathlib import Path
from typing import Annotated

import typer

CatalogOption = Annotated[
    Path | None,
    typer.Option(
        "--catalog",
        "-c",
        help="Catalog file to use (default: ~/.config/provctl/catalog.toml or the bundled one).",
        dir_okay=False,
    ),
]
