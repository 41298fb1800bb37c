"""Desired-versus-current state comparison.

Computes, without changing anything, which parts of a catalog a run
would act on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from provctl.core.environment import block_present
from provctl.core.errors import FileAppendError
from provctl.models.package import PackageKind
from provctl.utils.shell import command_exists

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from provctl.models.catalog import Catalog
    from provctl.scanners.base import Scanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """State of a single catalog entry.

    Attributes:
        category: Entry category ("profile", "hosts", "homebrew", "cask",
            "formula", "toolchain" or "download").
        name: Entry name (file path, package, spec or filename).
        present: True when a run would leave this entry alone.
        detail: Optional explanation.
    """

    category: str
    name: str
    present: bool
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class Plan:
    """Result of comparing a catalog with the system.

    Attributes:
        entries: Entries in pipeline order.
    """

    entries: tuple[PlanEntry, ...]

    @property
    def missing(self) -> tuple[PlanEntry, ...]:
        """Entries a run would act on."""
        return tuple(e for e in self.entries if not e.present)

    @property
    def is_satisfied(self) -> bool:
        """Check if a run would change nothing."""
        return not self.missing

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "satisfied": self.is_satisfied,
            "summary": {
                "total": len(self.entries),
                "missing": len(self.missing),
            },
            "entries": [_entry_to_dict(e) for e in self.entries],
        }


def _entry_to_dict(entry: PlanEntry) -> dict[str, object]:
    result: dict[str, object] = {
        "category": entry.category,
        "name": entry.name,
        "present": entry.present,
    }
    if entry.detail is not None:
        result["detail"] = entry.detail
    return result


def _append_entry(category: str, path: str, guarded: bool, present: bool) -> PlanEntry:
    if not guarded:
        return PlanEntry(category, path, present=False, detail="appended on every run")
    if present:
        return PlanEntry(category, path, present=True, detail="block already present")
    return PlanEntry(category, path, present=False, detail="block not yet appended")


def compute_plan(
    catalog: Catalog,
    scanners: Mapping[PackageKind, Scanner],
    *,
    search_path: str | None = None,
) -> Plan:
    """Compare a catalog with the current system state.

    Args:
        catalog: Desired state.
        scanners: Probe per catalog kind.
        search_path: PATH used to look for brew.

    Returns:
        Plan listing every entry and whether it is already satisfied.

    Raises:
        RuntimeError: If an available manager cannot be queried.
        OSError: If a probe command cannot be started.
        subprocess.TimeoutExpired: If a probe command hangs.
    """
    settings = catalog.settings
    guard = settings.guard_appends
    entries: list[PlanEntry] = []

    if catalog.environment:
        path = settings.profile_path
        entries.append(_append_entry("profile", str(path), guard, guard and _safe_present(path)))

    if catalog.hosts:
        path = settings.hosts_path
        entries.append(_append_entry("hosts", str(path), guard, guard and _safe_present(path)))

    entries.append(
        PlanEntry("homebrew", "brew", present=command_exists("brew", path=search_path))
    )

    for kind in (PackageKind.CASK, PackageKind.FORMULA, PackageKind.TOOLCHAIN):
        scanner = scanners[kind]
        items = catalog.items(kind)
        if not items:
            continue
        if not scanner.is_available():
            entries.extend(
                PlanEntry(kind.value, item.name, present=False, detail=f"{kind.label} not installed")
                for item in items
            )
            continue
        for item in items:
            entries.append(PlanEntry(kind.value, item.name, present=scanner.is_installed(item.name)))

    dest_dir = settings.download_path
    for name, download in catalog.resolved_downloads().items():
        filename = download.filename
        entries.append(
            PlanEntry("download", filename, present=(dest_dir / filename).exists(), detail=name)
        )

    logger.debug("Computed plan with %d entries", len(entries))
    return Plan(entries=tuple(entries))


def _safe_present(path: Path) -> bool:
    try:
        return block_present(path)
    except FileAppendError as e:
        logger.warning("%s", e)
        return False
