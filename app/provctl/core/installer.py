"""Idempotent installer step.

An item is installed only when its presence check reports it absent. The first
install failure raises and aborts the run.
"""

import logging
import subprocess
from collections.abc import Callable, Iterable

from provctl.core.errors import InstallError
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from provctl.models.package import CatalogItem
from provctl.operators.base import Operator
from provctl.scanners.base import Scanner
from provctl.utils.formatting import print_info

logger = logging.getLogger(__name__)

PresenceCheck = Callable[[str], bool]
Install = Callable[[str], ActionResult]


def ensure_installed(
    item: CatalogItem, is_present: PresenceCheck, install: Install
) -> ActionResult:
    """Install an item unless is_present reports it present.

    Args:
        item: Catalog item to ensure.
        is_present: Returns True when the item is already installed.
        install: Installs the item; called at most once.

    Returns:
        ActionResult; ``changed`` is False when the item was already present.

    Raises:
        InstallError: If the install action fails.
    """
    label = item.kind.label

    if is_present(item.name):
        print_info(f"{item.name} is already installed")
        action = Action(action_type=ActionType.INSTALL, target=item.name, kind=item.kind)
        return already_satisfied(action, "Already installed")

    print_info(f"Installing {item.name} via {label}")
    result = install(item.name)

    if result.failed:
        logger.error("Install of %s via %s failed: %s", item.name, label, result.error)
        msg = f"Failed to install {item.name} via {label}"
        if result.error:
            msg = f"{msg}: {result.error}"
        raise InstallError(msg)

    return result


def presence_check(scanner: Scanner, dry_run: bool = False) -> PresenceCheck:
    """Adapt a scanner into a presence check.

    In dry-run mode a manager that is not installed yet (it would be
    bootstrapped or installed earlier in a real run) reports every item
    as absent instead of failing.

    Args:
        scanner: Scanner for the catalog kind.
        dry_run: Whether the run is a dry run.

    Returns:
        Callable raising InstallError when the manager cannot be queried.
    """

    def check(name: str) -> bool:
        if dry_run and not scanner.is_available():
            return False
        try:
            return scanner.is_installed(name)
        except (RuntimeError, OSError, subprocess.TimeoutExpired) as e:
            msg = f"Cannot check whether {name} is installed: {e}"
            raise InstallError(msg) from e

    return check


def install_catalog(
    items: Iterable[CatalogItem],
    scanner: Scanner,
    operator: Operator,
) -> list[ActionResult]:
    """Ensure every item of one catalog, in order, stopping at the first failure.

    Args:
        items: Catalog items in declaration order.
        scanner: Probe for the catalog kind.
        operator: Installer for the catalog kind.

    Returns:
        List of ActionResult for the items processed.

    Raises:
        InstallError: On the first item that fails to install.
    """
    is_present = presence_check(scanner, dry_run=operator.dry_run)
    return [ensure_installed(item, is_present, operator.install) for item in items]
