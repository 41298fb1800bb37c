"""Provisioning pipeline.

Runs every stage of a catalog in a fixed order. Each stage blocks until
its external commands exit, and the first ProvisionError aborts the run
without touching later stages.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING

from provctl.core.bootstrap import ensure_homebrew
from provctl.core.downloads import ensure_download
from provctl.core.environment import append_block, build_search_path, render_environment
from provctl.core.errors import DefaultVersionError, DownloadError
from provctl.core.hosts import append_hosts, render_hosts
from provctl.core.installer import install_catalog
from provctl.core.paths import ensure_download_dir
from provctl.models.package import PackageKind
from provctl.operators.brew import BrewCaskOperator, BrewFormulaOperator
from provctl.operators.mise import MiseOperator
from provctl.scanners.brew import BrewCaskScanner, BrewFormulaScanner
from provctl.scanners.mise import MiseScanner
from provctl.utils.formatting import print_info

if TYPE_CHECKING:
    from provctl.models.action import ActionResult
    from provctl.models.catalog import Catalog
    from provctl.operators.base import Operator
    from provctl.scanners.base import Scanner

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline stages, declared in execution order."""

    PROFILE = "profile"
    HOSTS = "hosts"
    HOMEBREW = "homebrew"
    CASKS = "casks"
    FORMULAE = "formulae"
    TOOLCHAINS = "toolchains"
    GLOBALS = "globals"
    DOWNLOADS = "downloads"


def get_scanners(search_path: str | None = None) -> dict[PackageKind, Scanner]:
    """Get one scanner per catalog kind.

    Args:
        search_path: PATH handed to every scanner.
    """
    return {
        PackageKind.CASK: BrewCaskScanner(search_path),
        PackageKind.FORMULA: BrewFormulaScanner(search_path),
        PackageKind.TOOLCHAIN: MiseScanner(search_path),
    }


def get_operators(
    search_path: str | None = None,
    dry_run: bool = False,
) -> dict[PackageKind, Operator]:
    """Get one operator per catalog kind.

    Args:
        search_path: PATH handed to every operator.
        dry_run: Whether the operators only simulate installs.
    """
    return {
        PackageKind.CASK: BrewCaskOperator(dry_run=dry_run, search_path=search_path),
        PackageKind.FORMULA: BrewFormulaOperator(dry_run=dry_run, search_path=search_path),
        PackageKind.TOOLCHAIN: MiseOperator(dry_run=dry_run, search_path=search_path),
    }


class Provisioner:
    """Apply a catalog to the workstation, stage by stage.

    The search path for the run is computed once from the catalog's
    prefixes and the inherited PATH, then passed to every step.

    Example:
        >>> provisioner = Provisioner(load_catalog(), dry_run=True)
        >>> results = provisioner.run()
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        dry_run: bool = False,
        skip: Iterable[Stage] = (),
        environ: Mapping[str, str] | None = None,
        scanners: Mapping[PackageKind, Scanner] | None = None,
        operators: Mapping[PackageKind, Operator] | None = None,
    ) -> None:
        """Initialize the provisioner.

        Args:
            catalog: Validated catalog to apply.
            dry_run: Report actions without changing the system.
            skip: Stages not to run.
            environ: Environment providing the base PATH. Defaults to os.environ.
            scanners: Probe per catalog kind. Defaults to brew/mise scanners.
            operators: Installer per catalog kind. Defaults to brew/mise operators.
        """
        self._catalog = catalog
        self._dry_run = dry_run
        self._skip = frozenset(skip)

        env = os.environ if environ is None else environ
        self._search_path = build_search_path(catalog.settings.search_path, env.get("PATH", ""))

        self._scanners = dict(scanners) if scanners is not None else get_scanners(self._search_path)
        self._operators = (
            dict(operators)
            if operators is not None
            else get_operators(self._search_path, dry_run=dry_run)
        )

        self._stages: dict[Stage, Callable[[], list[ActionResult]]] = {
            Stage.PROFILE: self._append_profile,
            Stage.HOSTS: self._patch_hosts,
            Stage.HOMEBREW: self._bootstrap,
            Stage.CASKS: lambda: self._install(PackageKind.CASK),
            Stage.FORMULAE: lambda: self._install(PackageKind.FORMULA),
            Stage.TOOLCHAINS: lambda: self._install(PackageKind.TOOLCHAIN),
            Stage.GLOBALS: self._set_globals,
            Stage.DOWNLOADS: self._download,
        }

    @property
    def search_path(self) -> str:
        """PATH value threaded into every external command of this run."""
        return self._search_path

    @property
    def dry_run(self) -> bool:
        """Check if the run only reports actions."""
        return self._dry_run

    def run(self) -> list[ActionResult]:
        """Run every stage that is not skipped, in order.

        Returns:
            ActionResult for every step performed or found satisfied.

        Raises:
            ProvisionError: On the first failing step.
        """
        logger.debug("Search path for this run: %s", self._search_path)

        results: list[ActionResult] = []
        for stage in Stage:
            if stage in self._skip:
                logger.info("Skipping stage %s", stage.value)
                continue
            results.extend(self._stages[stage]())
        return results

    def _append_profile(self) -> list[ActionResult]:
        env = self._catalog.resolved_environment()
        if not env:
            return []

        settings = self._catalog.settings
        print_info(f"Appending environment variables to {settings.profile_path}")
        return [
            append_block(
                settings.profile_path,
                render_environment(env),
                guard=settings.guard_appends,
                dry_run=self._dry_run,
            )
        ]

    def _patch_hosts(self) -> list[ActionResult]:
        if not self._catalog.hosts:
            return []

        settings = self._catalog.settings
        print_info(f"Updating {settings.hosts_path} file with necessary entries")
        return [
            append_hosts(
                settings.hosts_path,
                render_hosts(self._catalog.hosts),
                guard=settings.guard_appends,
                dry_run=self._dry_run,
            )
        ]

    def _bootstrap(self) -> list[ActionResult]:
        return [
            ensure_homebrew(
                self._catalog.settings.homebrew_install_url,
                search_path=self._search_path,
                dry_run=self._dry_run,
            )
        ]

    def _install(self, kind: PackageKind) -> list[ActionResult]:
        items = self._catalog.items(kind)
        if not items:
            return []

        print_info(f"Installing packages with {kind.label}")
        return install_catalog(items, self._scanners[kind], self._operators[kind])

    def _set_globals(self) -> list[ActionResult]:
        specs = self._catalog.global_specs()
        if not specs:
            return []

        operator = self._operators[PackageKind.TOOLCHAIN]
        if not isinstance(operator, MiseOperator):
            msg = "Global defaults require a mise operator"
            raise TypeError(msg)

        print_info("Setting global versions with mise")
        result = operator.set_global(specs)
        if result.failed:
            msg = "Failed to set global versions with mise"
            if result.error:
                msg = f"{msg}: {result.error}"
            raise DefaultVersionError(msg)
        return [result]

    def _download(self) -> list[ActionResult]:
        downloads = self._catalog.resolved_downloads()
        if not downloads:
            return []

        dest_dir = self._catalog.settings.download_path
        if not self._dry_run:
            try:
                ensure_download_dir(dest_dir)
            except RuntimeError as e:
                raise DownloadError(str(e)) from e

        print_info("Downloading files with curl")
        return [
            ensure_download(
                name,
                entry,
                dest_dir,
                search_path=self._search_path,
                dry_run=self._dry_run,
            )
            for name, entry in downloads.items()
        ]
