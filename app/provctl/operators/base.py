"""Abstract base class for install operators.

This module defines the Operator interface that every catalog installer
must implement.
"""

import logging
import shlex
from abc import ABC, abstractmethod

from provctl.models.action import Action, ActionResult
from provctl.models.package import PackageKind
from provctl.utils.shell import path_env, run_interactive

logger = logging.getLogger(__name__)


class Operator(ABC):
    """Abstract base class for all install operators.

    Operators run the side-effecting half of a provisioning step. The
    install command inherits the terminal so its progress is visible,
    and it runs without a timeout.

    Attributes:
        dry_run: If True, only report the command that would run.
        search_path: PATH used to locate and run the manager binary.

    Example:
        >>> operator = BrewCaskOperator(dry_run=True)
        >>> result = operator.install("docker")
        >>> print(result.message)
    """

    def __init__(self, dry_run: bool = False, search_path: str | None = None) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
            search_path: PATH for child processes. If None, inherits PATH.
        """
        self._dry_run = dry_run
        self._search_path = search_path

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    def search_path(self) -> str | None:
        """PATH used to locate and run the manager binary."""
        return self._search_path

    @property
    @abstractmethod
    def kind(self) -> PackageKind:
        """Return the catalog kind this operator installs."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying manager is available on the search path."""

    @abstractmethod
    def install(self, name: str) -> ActionResult:
        """Install a single catalog item.

        Args:
            name: Item identifier (package name or ``tool@version`` spec).

        Returns:
            ActionResult describing the outcome.
        """

    def _execute(self, action: Action, args: list[str]) -> ActionResult:
        """Run an install command for an action, or describe it in dry-run mode.

        Args:
            action: The action being executed.
            args: Command and arguments to run.

        Returns:
            ActionResult; a non-zero exit status or a missing binary is a failure.
        """
        command = shlex.join(args)

        if self.dry_run:
            return ActionResult(action=action, success=True, message=f"Dry-run: {command}")

        logger.info("Executing %s", command)

        try:
            returncode = run_interactive(args, env=path_env(self.search_path))
        except OSError as e:
            return ActionResult(action=action, success=False, error=f"Cannot run {args[0]}: {e}")

        if returncode != 0:
            return ActionResult(
                action=action,
                success=False,
                error=f"{command} exited with status {returncode}",
            )
        return ActionResult(action=action, success=True, message="Operation completed")
