"""Installer artifact downloads.

Artifacts are fetched with curl into the download directory. A file that
already exists under the artifact's filename counts as downloaded unless a
checksum is configured and does not match.
"""

import hashlib
import logging
import os
from pathlib import Path

from provctl.core.errors import DownloadError
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from provctl.models.catalog import DownloadEntry
from provctl.utils.formatting import print_info, print_warning
from provctl.utils.shell import path_env, run_interactive

logger = logging.getLogger(__name__)


def file_sha256(path: Path) -> str:
    """Compute the SHA-256 hex digest of a file."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial download %s: %s", path, e)


def _checksum_matches(path: Path, expected: str) -> bool:
    try:
        return file_sha256(path) == expected
    except OSError as e:
        msg = f"Failed to read {path}: {e}"
        raise DownloadError(msg) from e


def ensure_download(
    name: str,
    entry: DownloadEntry,
    dest_dir: Path,
    *,
    search_path: str | None = None,
    dry_run: bool = False,
) -> ActionResult:
    """Download an artifact unless a file with its name already exists.

    The fetch goes to ``<filename>.part`` and is renamed into place only
    after curl succeeds (and the checksum matches, when configured).

    Args:
        name: Artifact name from the catalog.
        entry: Download entry with the URL and optional checksum.
        dest_dir: Directory to download into.
        search_path: PATH used to locate curl.
        dry_run: Only report what would be fetched.

    Returns:
        ActionResult; ``changed`` is False when the file already existed.

    Raises:
        DownloadError: If the fetch fails or the checksum does not match.
    """
    filename = entry.filename
    dest = dest_dir / filename
    action = Action(action_type=ActionType.DOWNLOAD, target=entry.url, reason=name)

    if dest.exists():
        if entry.sha256 is None or _checksum_matches(dest, entry.sha256):
            print_info(f"{filename} already exists in {dest_dir}")
            return already_satisfied(action, f"{filename} already exists")
        print_warning(f"{dest} does not match its sha256, downloading again")

    print_info(f"Downloading {filename}")

    if dry_run:
        return ActionResult(action=action, success=True, message=f"Dry-run: would fetch {filename}")

    part = dest.with_name(f"{filename}.part")
    args = ["curl", "-fL", entry.url, "-o", str(part)]

    try:
        returncode = run_interactive(args, env=path_env(search_path))
    except OSError as e:
        _discard(part)
        msg = f"Failed to download {filename}: {e}"
        raise DownloadError(msg) from e

    if returncode != 0:
        _discard(part)
        msg = f"Failed to download {filename} (curl exited with status {returncode})"
        raise DownloadError(msg)

    if entry.sha256 is not None and not _checksum_matches(part, entry.sha256):
        _discard(part)
        msg = f"Failed to download {filename}: sha256 mismatch"
        raise DownloadError(msg)

    try:
        os.replace(part, dest)
    except OSError as e:
        _discard(part)
        msg = f"Failed to save {dest}: {e}"
        raise DownloadError(msg) from e

    return ActionResult(action=action, success=True, message=f"Saved to {dest}")
