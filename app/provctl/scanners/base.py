"""Abstract base class for presence probes.

This module defines the Scanner interface that every catalog probe
must implement.
"""

from abc import ABC, abstractmethod

from provctl.models.package import PackageKind


class Scanner(ABC):
    """Abstract base class for all presence probes.

    Scanners answer "is this item already installed?" by querying a
    package or version manager. They never change the system.

    Attributes:
        search_path: PATH used to locate and run the manager binary.

    Example:
        >>> scanner = BrewCaskScanner(search_path="/opt/homebrew/bin:/usr/bin")
        >>> if scanner.is_available():
        ...     print(scanner.is_installed("docker"))
    """

    def __init__(self, search_path: str | None = None) -> None:
        """Initialize the scanner.

        Args:
            search_path: PATH for child processes. If None, inherits PATH.
        """
        self._search_path = search_path

    @property
    def search_path(self) -> str | None:
        """PATH used to locate and run the manager binary."""
        return self._search_path

    @property
    @abstractmethod
    def kind(self) -> PackageKind:
        """Return the catalog kind this scanner probes."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying manager is available on the search path."""

    @abstractmethod
    def is_installed(self, name: str) -> bool:
        """Check whether a single item is installed.

        Args:
            name: Item identifier (package name or ``tool@version`` spec).

        Returns:
            True if installed, False otherwise.

        Raises:
            RuntimeError: If the manager is not available or cannot be queried.
        """
