"""mise install operator.

Installs pinned toolchain versions and selects global defaults.
"""

import logging

from provctl.models.action import Action, ActionResult, ActionType
from provctl.models.package import PackageKind
from provctl.operators.base import Operator
from provctl.utils.shell import command_exists

logger = logging.getLogger(__name__)


class MiseOperator(Operator):
    """Operator for toolchains managed by mise."""

    @property
    def kind(self) -> PackageKind:
        """Return TOOLCHAIN as the catalog kind."""
        return PackageKind.TOOLCHAIN

    def is_available(self) -> bool:
        """Check if mise is on the search path."""
        return command_exists("mise", path=self.search_path)

    def install(self, name: str) -> ActionResult:
        """Install a toolchain with ``mise install SPEC``."""
        action = Action(action_type=ActionType.INSTALL, target=name, kind=PackageKind.TOOLCHAIN)
        return self._execute(action, ["mise", "install", name])

    def set_global(self, specs: list[str]) -> ActionResult:
        """Select global default versions with one ``mise use --global`` call.

        Args:
            specs: ``tool@version`` specs to make the global defaults.

        Returns:
            ActionResult for the whole batch.
        """
        action = Action(
            action_type=ActionType.SET_GLOBAL,
            target=" ".join(specs),
            kind=PackageKind.TOOLCHAIN,
        )
        logger.info("Setting %d global default(s) with mise", len(specs))
        return self._execute(action, ["mise", "use", "--global", *specs])
