"""Homebrew presence probes.

Checks for installed casks and formulae with ``brew list``.
"""

import logging

from provctl.models.package import PackageKind
from provctl.scanners.base import Scanner
from provctl.utils.shell import command_exists, path_env, run_command

logger = logging.getLogger(__name__)


class BrewScanner(Scanner):
    """Probe for Homebrew packages of one kind.

    ``brew list --cask NAME`` (or ``--formula``) exits 0 only when the
    package is installed, so the exit status is the answer.
    """

    _KIND_FLAGS: dict[PackageKind, str] = {
        PackageKind.CASK: "--cask",
        PackageKind.FORMULA: "--formula",
    }

    def __init__(self, kind: PackageKind, search_path: str | None = None) -> None:
        if kind not in self._KIND_FLAGS:
            msg = f"Homebrew does not install {kind.value} items"
            raise ValueError(msg)
        super().__init__(search_path)
        self._kind = kind

    @property
    def kind(self) -> PackageKind:
        """Return the Homebrew package kind."""
        return self._kind

    def is_available(self) -> bool:
        """Check if brew is on the search path."""
        return command_exists("brew", path=self.search_path)

    def is_installed(self, name: str) -> bool:
        """Check whether a cask or formula is installed.

        Raises:
            RuntimeError: If brew is not available.
        """
        if not self.is_available():
            msg = "Homebrew is not available on this system"
            raise RuntimeError(msg)

        result = run_command(
            ["brew", "list", self._KIND_FLAGS[self._kind], name],
            env=path_env(self.search_path),
        )
        logger.debug("brew list %s %s -> %d", self._kind.value, name, result.returncode)
        return result.success


class BrewCaskScanner(BrewScanner):
    """Probe for GUI applications installed as casks."""

    def __init__(self, search_path: str | None = None) -> None:
        super().__init__(PackageKind.CASK, search_path)


class BrewFormulaScanner(BrewScanner):
    """Probe for command-line tools installed as formulae."""

    def __init__(self, search_path: str | None = None) -> None:
        super().__init__(PackageKind.FORMULA, search_path)
