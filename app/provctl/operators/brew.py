"""Homebrew install operators.

Installs casks and formulae with ``brew install``.
"""

from provctl.models.action import Action, ActionResult, ActionType
from provctl.models.package import PackageKind
from provctl.operators.base import Operator
from provctl.utils.shell import command_exists


class BrewOperator(Operator):
    """Operator for Homebrew packages of one kind."""

    _KIND_FLAGS: dict[PackageKind, str] = {
        PackageKind.CASK: "--cask",
        PackageKind.FORMULA: "--formula",
    }

    def __init__(
        self,
        kind: PackageKind,
        dry_run: bool = False,
        search_path: str | None = None,
    ) -> None:
        if kind not in self._KIND_FLAGS:
            msg = f"Homebrew does not install {kind.value} items"
            raise ValueError(msg)
        super().__init__(dry_run=dry_run, search_path=search_path)
        self._kind = kind

    @property
    def kind(self) -> PackageKind:
        """Return the Homebrew package kind."""
        return self._kind

    def is_available(self) -> bool:
        """Check if brew is on the search path."""
        return command_exists("brew", path=self.search_path)

    def install(self, name: str) -> ActionResult:
        """Install a package with ``brew install --cask|--formula NAME``."""
        action = Action(action_type=ActionType.INSTALL, target=name, kind=self._kind)
        return self._execute(action, ["brew", "install", self._KIND_FLAGS[self._kind], name])


class BrewCaskOperator(BrewOperator):
    """Operator for GUI applications installed as casks."""

    def __init__(self, dry_run: bool = False, search_path: str | None = None) -> None:
        super().__init__(PackageKind.CASK, dry_run=dry_run, search_path=search_path)


class BrewFormulaOperator(BrewOperator):
    """Operator for command-line tools installed as formulae."""

    def __init__(self, dry_run: bool = False, search_path: str | None = None) -> None:
        super().__init__(PackageKind.FORMULA, dry_run=dry_run, search_path=search_path)
