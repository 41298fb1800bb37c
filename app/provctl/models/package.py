"""Catalog item models.

This module defines the kinds of installable things a catalog lists and
the immutable item type handed to probes and install actions.
"""

from dataclasses import dataclass
from enum import Enum


class PackageKind(Enum):
    """Enumeration of catalog kinds.

    Attributes:
        CASK: GUI application bundle installed with ``brew install --cask``.
        FORMULA: Command-line tool installed with ``brew install --formula``.
        TOOLCHAIN: Pinned runtime installed with ``mise install``.
    """

    CASK = "cask"
    FORMULA = "formula"
    TOOLCHAIN = "toolchain"

    @property
    def label(self) -> str:
        """Human-readable installer label used in progress messages."""
        return _KIND_LABELS[self]


_KIND_LABELS: dict[PackageKind, str] = {
    PackageKind.CASK: "brew cask",
    PackageKind.FORMULA: "brew",
    PackageKind.TOOLCHAIN: "mise",
}


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """A single entry of a catalog.

    Attributes:
        kind: Which catalog the item belongs to.
        name: Identifier passed to the package or version manager
            (e.g. 'docker', 'rust@1.82.0').
    """

    kind: PackageKind
    name: str

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.name:
            msg = "Catalog item name cannot be empty"
            raise ValueError(msg)

    @property
    def tool(self) -> str:
        """Tool part of a ``tool@version`` spec (the name itself otherwise)."""
        return self.name.partition("@")[0]

    @property
    def version(self) -> str | None:
        """Version part of a ``tool@version`` spec, if any."""
        _, sep, version = self.name.partition("@")
        return version if sep else None
