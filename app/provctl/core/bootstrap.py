"""Package manager bootstrap.

Installs Homebrew with its official install script when ``brew`` is not
on the run's search path.
"""

import logging

from provctl.core.errors import BootstrapError
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from provctl.utils.formatting import print_info
from provctl.utils.shell import command_exists, path_env, run_command, run_interactive

logger = logging.getLogger(__name__)


def ensure_homebrew(
    install_url: str,
    *,
    search_path: str | None = None,
    dry_run: bool = False,
) -> ActionResult:
    """Install Homebrew if it is absent.

    Args:
        install_url: URL of the Homebrew install script.
        search_path: PATH used to look for brew and to run the installer.
        dry_run: Only report whether the installer would run.

    Returns:
        ActionResult; ``changed`` is False when brew was already present.

    Raises:
        BootstrapError: If the script cannot be fetched or the install fails.
    """
    action = Action(action_type=ActionType.BOOTSTRAP, target="homebrew")

    if command_exists("brew", path=search_path):
        print_info("Homebrew is already installed")
        return already_satisfied(action, "Already installed")

    print_info("Installing Homebrew")

    if dry_run:
        return ActionResult(
            action=action,
            success=True,
            message=f"Dry-run: would run installer from {install_url}",
        )

    env = path_env(search_path)

    try:
        script = run_command(["curl", "-fsSL", install_url], timeout=None, env=env)
    except OSError as e:
        msg = f"Failed to install Homebrew: cannot run curl: {e}"
        raise BootstrapError(msg) from e

    if not script.success or not script.stdout.strip():
        msg = (
            "Failed to install Homebrew: could not fetch installer: "
            f"{script.stderr.strip() or 'empty response'}"
        )
        raise BootstrapError(msg)

    logger.debug("Fetched Homebrew installer (%d bytes)", len(script.stdout))

    try:
        returncode = run_interactive(["/bin/bash", "-c", script.stdout], env=env)
    except OSError as e:
        msg = f"Failed to install Homebrew: {e}"
        raise BootstrapError(msg) from e

    if returncode != 0:
        msg = f"Failed to install Homebrew (installer exited with status {returncode})"
        raise BootstrapError(msg)

    return ActionResult(action=action, success=True, message="Homebrew installed")
