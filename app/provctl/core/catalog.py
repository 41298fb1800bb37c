"""Catalog file I/O operations.

This module provides functions for loading and saving catalog files
in TOML format with proper validation using Pydantic models.
"""

import logging
import os
import tomllib
from importlib import resources
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from provctl.core.paths import get_catalog_path
from provctl.models.catalog import Catalog

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for catalog-related errors."""


class CatalogNotFoundError(CatalogError):
    """Raised when catalog file is not found."""


class CatalogParseError(CatalogError):
    """Raised when catalog file cannot be parsed."""


class CatalogValidationError(CatalogError):
    """Raised when catalog content is invalid."""


def _validate(data: dict[str, Any], origin: str) -> Catalog:
    try:
        return Catalog.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid catalog content in {origin}: {e}") from e


def load_default_catalog() -> Catalog:
    """Load the catalog bundled with provctl.

    Returns:
        Validated Catalog object.

    Raises:
        CatalogError: If the bundled catalog is missing or invalid.
    """
    try:
        text = resources.files("provctl.data").joinpath("catalog.toml").read_text("utf-8")
    except OSError as e:
        raise CatalogError(f"Failed to read bundled catalog: {e}") from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise CatalogParseError(f"Invalid TOML syntax in bundled catalog: {e}") from e

    return _validate(data, "bundled catalog")


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a catalog from a TOML file.

    Without an explicit path the user catalog is used when it exists,
    otherwise the bundled default catalog.

    Args:
        path: Path to the catalog file.

    Returns:
        Validated Catalog object.

    Raises:
        CatalogNotFoundError: If an explicit catalog file doesn't exist.
        CatalogParseError: If the TOML syntax is invalid.
        CatalogValidationError: If the content doesn't match the schema.
    """
    if path is None:
        user_path = get_catalog_path()
        if not user_path.exists():
            logger.debug("No user catalog at %s, using bundled catalog", user_path)
            return load_default_catalog()
        path = user_path

    if not path.exists():
        raise CatalogNotFoundError(f"Catalog not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise CatalogParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise CatalogError(f"Failed to read catalog: {e}") from e

    logger.debug("Loaded catalog from %s", path)
    return _validate(data, str(path))


def save_catalog(catalog: Catalog, path: Path | None = None) -> Path:
    """Save a catalog to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        catalog: The Catalog object to save.
        path: Path to save the catalog. If None, uses the user catalog path.

    Returns:
        Path where the catalog was saved.

    Raises:
        CatalogError: If the file cannot be written.
    """
    catalog_path = path or get_catalog_path()
    data = catalog_to_dict(catalog)

    tmp_path: Path | None = None
    try:
        catalog_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=catalog_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(catalog_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise CatalogError(f"Failed to write catalog: {e}") from e

    return catalog_path


def catalog_exists(path: Path | None = None) -> bool:
    """Check if a catalog file exists.

    Args:
        path: Path to check. If None, uses the user catalog path.
    """
    return (path or get_catalog_path()).exists()


def require_catalog(path: Path | None = None) -> Catalog:
    """Load catalog or exit with helpful error message.

    Args:
        path: Optional custom catalog path.

    Returns:
        Loaded and validated Catalog.

    Raises:
        typer.Exit: If catalog cannot be loaded.
    """
    import typer

    from provctl.utils.formatting import print_error, print_info

    try:
        return load_catalog(path)
    except CatalogNotFoundError as e:
        print_error(str(e))
        print_info("Run 'provctl init' to create a catalog you can edit.")
        raise typer.Exit(code=1) from e
    except CatalogError as e:
        print_error(f"Failed to load catalog: {e}")
        raise typer.Exit(code=1) from e


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    """Convert a Catalog to a dictionary suitable for TOML serialization.

    Download entries without a checksum are written in the ``name = "url"``
    shorthand.
    """
    data = catalog.model_dump(mode="json", exclude_none=True)
    data["downloads"] = {
        name: entry["url"] if set(entry) == {"url"} else entry
        for name, entry in data["downloads"].items()
    }
    return data
