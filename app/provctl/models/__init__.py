"""Data models for provctl.

This module exports the core data structures used throughout the application.
"""

from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from provctl.models.catalog import (
    Catalog,
    CatalogSettings,
    DownloadEntry,
    PackageCatalog,
)
from provctl.models.package import CatalogItem, PackageKind

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "Catalog",
    "CatalogItem",
    "CatalogSettings",
    "DownloadEntry",
    "PackageCatalog",
    "PackageKind",
    "already_satisfied",
]
