"""Shell environment mutation.

Builds the search path threaded into every external command of a run and
appends environment exports to the user's shell profile.
"""

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from provctl.core.errors import FileAppendError
from provctl.core.paths import expand_path
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied

logger = logging.getLogger(__name__)

GUARD_BEGIN = "# >>> provctl >>>"
GUARD_END = "# <<< provctl <<<"


def build_search_path(prefixes: Iterable[str], base: str | None = None) -> str:
    """Prepend directories to a PATH value.

    Args:
        prefixes: Directories to put first; ``~`` is expanded.
        base: PATH to extend. If None, uses the process PATH.

    Returns:
        The combined PATH string.
    """
    if base is None:
        base = os.environ.get("PATH", "")
    parts = [str(expand_path(prefix)) for prefix in prefixes]
    if base:
        parts.append(base)
    return os.pathsep.join(parts)


def render_environment(env: Mapping[str, str]) -> list[str]:
    """Render environment variables as shell export lines."""
    return [f'export {name}="{value}"' for name, value in env.items()]


def wrap_block(lines: list[str]) -> list[str]:
    """Surround lines with the begin/end guard markers."""
    return [GUARD_BEGIN, *lines, GUARD_END]


def block_present(path: Path) -> bool:
    """Check whether a guarded block was already appended to a file.

    Raises:
        FileAppendError: If the file exists but cannot be read.
    """
    if not path.exists():
        return False
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        msg = f"Failed to read {path}: {e}"
        raise FileAppendError(msg) from e
    return GUARD_BEGIN in content.splitlines()


def append_block(
    path: Path,
    lines: list[str],
    *,
    guard: bool = False,
    dry_run: bool = False,
) -> ActionResult:
    """Append lines to a file.

    Without ``guard`` the append is unconditional, so running it twice
    writes the block twice. With ``guard`` the block is wrapped in markers
    and skipped when the begin marker is already in the file.

    Args:
        path: File to append to; created when absent.
        lines: Lines to append.
        guard: Wrap in markers and skip when already present.
        dry_run: Only report what would be appended.

    Returns:
        ActionResult for the append.

    Raises:
        FileAppendError: If the file cannot be written.
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

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write("\n".join(block) + "\n")
    except OSError as e:
        msg = f"Failed to append to {path}: {e}"
        raise FileAppendError(msg) from e

    logger.debug("Appended %d line(s) to %s", len(block), path)
    return ActionResult(action=action, success=True, message=f"Appended {len(block)} line(s)")
