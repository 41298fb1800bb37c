"""mise presence probe.

Lists the installed versions of a tool with ``mise ls --installed --json TOOL``
and matches ``tool@version`` specs against them.
"""

import json
import logging
from typing import Any, cast

from provctl.models.package import PackageKind
from provctl.scanners.base import Scanner
from provctl.utils.shell import command_exists, path_env, run_command

logger = logging.getLogger(__name__)


def parse_spec(spec: str) -> tuple[str, str | None]:
    """Split a ``tool@version`` spec into its parts.

    Args:
        spec: Tool spec such as ``rust@1.82.0`` or ``java@corretto-21.0.5.11.1``.

    Returns:
        Tuple of (tool, version); version is None for a bare tool name.

    Raises:
        ValueError: If the tool part is empty.
    """
    tool, sep, version = spec.partition("@")
    if not tool:
        msg = f"Invalid tool spec: {spec!r}"
        raise ValueError(msg)
    return tool, (version if sep else None)


class MiseScanner(Scanner):
    """Probe for toolchain versions installed with mise."""

    @property
    def kind(self) -> PackageKind:
        """Return TOOLCHAIN as the catalog kind."""
        return PackageKind.TOOLCHAIN

    def is_available(self) -> bool:
        """Check if mise is on the search path."""
        return command_exists("mise", path=self.search_path)

    def installed_versions(self, tool: str) -> set[str]:
        """Get the installed versions of one tool.

        The tool is passed to ``mise ls`` so mise resolves aliases itself
        (``nodejs`` is listed as ``node``). Filtered to one tool, mise prints
        a JSON list of entries; an object keyed by tool is accepted too.

        Args:
            tool: Tool name as written in the catalog.

        Returns:
            Set of installed version strings.

        Raises:
            RuntimeError: If mise is unavailable, fails, or prints invalid JSON.
        """
        if not self.is_available():
            msg = "mise is not available on this system"
            raise RuntimeError(msg)

        result = run_command(
            ["mise", "ls", "--installed", "--json", tool],
            env=path_env(self.search_path),
        )
        if not result.success:
            msg = f"mise ls {tool} failed: {result.stderr.strip() or 'unknown error'}"
            raise RuntimeError(msg)

        try:
            data: object = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            msg = f"mise ls returned invalid JSON: {e}"
            raise RuntimeError(msg) from e

        if isinstance(data, dict):
            entries = [
                entry
                for value in cast(dict[str, Any], data).values()
                if isinstance(value, list)
                for entry in cast(list[Any], value)
            ]
        elif isinstance(data, list):
            entries = cast(list[Any], data)
        else:
            msg = "mise ls returned unexpected JSON structure"
            raise RuntimeError(msg)

        versions = {
            str(entry["version"])
            for entry in entries
            if isinstance(entry, dict) and "version" in entry and entry.get("installed", True)
        }
        logger.debug("mise ls %s -> %s", tool, sorted(versions))
        return versions

    def is_installed(self, name: str) -> bool:
        """Check whether a ``tool@version`` spec is installed.

        A bare tool name matches any installed version of that tool.
        """
        tool, version = parse_spec(name)
        installed = self.installed_versions(tool)
        if version is None:
            return bool(installed)
        return version in installed
