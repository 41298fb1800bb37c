"""Action models for provisioning steps.

This module defines data structures for representing provisioning
actions (bootstrap, install, set-global, append, download) and their
execution results.
"""

from dataclasses import dataclass
from enum import Enum

from provctl.models.package import PackageKind


class ActionType(Enum):
    """Type of provisioning action.

    Attributes:
        BOOTSTRAP: Install the package manager itself.
        INSTALL: Install a catalog item that is not currently installed.
        SET_GLOBAL: Select the global default version of toolchains.
        APPEND: Append a block of lines to a file.
        DOWNLOAD: Fetch an installer artifact.
    """

    BOOTSTRAP = "bootstrap"
    INSTALL = "install"
    SET_GLOBAL = "set-global"
    APPEND = "append"
    DOWNLOAD = "download"


@dataclass(frozen=True, slots=True)
class Action:
    """Represents a single provisioning action.

    Attributes:
        action_type: The type of action.
        target: What the action operates on (package, spec, file or URL).
        kind: Catalog kind for install actions.
        reason: Optional explanation for why this action is being taken.
    """

    action_type: ActionType
    target: str
    kind: PackageKind | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.target:
            msg = "Action target cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a provisioning action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        changed: False when the step found the target already satisfied.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    changed: bool = True
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success

    @property
    def skipped(self) -> bool:
        """Check if the action was satisfied without doing anything."""
        return self.success and not self.changed


def already_satisfied(action: Action, message: str) -> ActionResult:
    """Create the result of a step whose target was already in place."""
    return ActionResult(action=action, success=True, changed=False, message=message)
