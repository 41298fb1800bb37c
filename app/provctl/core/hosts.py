"""System hosts file patching.

The hosts file is root-owned, so the block is written through
``sudo tee -a``.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from provctl.core.environment import block_present, wrap_block
from provctl.core.errors import FileAppendError
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from provctl.utils.shell import run_command

logger = logging.getLogger(__name__)

# Column width of the address field, wide enough for dotted IPv4
_ADDRESS_WIDTH = 17


def render_hosts(entries: Mapping[str, str]) -> list[str]:
    """Render hostname to IP overrides as aligned hosts file lines."""
    return [f"{address:<{_ADDRESS_WIDTH}} {host}" for host, address in entries.items()]


def append_hosts(
    path: Path,
    lines: list[str],
    *,
    guard: bool = False,
    dry_run: bool = False,
) -> ActionResult:
    """Append override lines to the hosts file with elevated privilege.

    Args:
        path: Hosts file path.
        lines: Lines to append.
        guard: Wrap in markers and skip when already present.
        dry_run: Only report what would be appended.

    Returns:
        ActionResult for the append.

    Raises:
        FileAppendError: If sudo or tee fails, including privilege denial.
    """
    action = Action(action_type=ActionType.APPEND, target=str(path))

    if guard and block_present(path):
        return already_satisfied(action, "Block already present")

    block = wrap_block(lines) if guard else lines

    if dry_run:
        return ActionResult(
            action=action,
            success=True,
            message=f"Dry-run: would append {len(block)} line(s)",
        )

    logger.info("Appending %d line(s) to %s with sudo", len(block), path)

    try:
        result = run_command(
            ["sudo", "tee", "-a", str(path)],
            timeout=None,
            input_text="\n".join(block) + "\n",
        )
    except OSError as e:
        msg = f"Failed to update {path}: {e}"
        raise FileAppendError(msg) from e

    if not result.success:
        msg = f"Failed to update {path}: {result.stderr.strip() or 'sudo tee failed'}"
        raise FileAppendError(msg)

    return ActionResult(action=action, success=True, message=f"Appended {len(block)} line(s)")
