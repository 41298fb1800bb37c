"""Catalog models for declarative workstation provisioning.

This module defines the Pydantic models representing the catalog.toml
structure: pinned versions, download URLs, the three package catalogs,
the shell environment block and the hosts overrides.
"""

import ipaddress
import re
from pathlib import Path
from typing import Annotated, Self
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from provctl.core.paths import expand_path
from provctl.models.package import CatalogItem, PackageKind

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

DEFAULT_SEARCH_PATH = ("~/.local/share/mise/shims", "/opt/homebrew/bin")

# {name} placeholders resolved against the [versions] table
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SHA256 = re.compile(r"^[0-9a-fA-F]{64}$")


class UnknownPlaceholderError(KeyError):
    """Raised when a placeholder does not name a pinned version."""


def expand_placeholders(text: str, versions: dict[str, str], strict: bool = True) -> str:
    """Replace ``{name}`` placeholders with pinned versions.

    Args:
        text: Text containing placeholders.
        versions: Mapping of version constant name to version string.
        strict: If True, unknown placeholders raise. If False, they are kept
            verbatim so shell syntax like ``${HOME}`` survives.

    Returns:
        The expanded text.

    Raises:
        UnknownPlaceholderError: If strict and a placeholder is unknown.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in versions:
            return versions[key]
        if strict:
            raise UnknownPlaceholderError(key)
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, text)


def artifact_filename(url: str) -> str:
    """Derive the destination filename from a URL's final path segment.

    Query strings and fragments are ignored. A path ending in "/" has an
    empty final segment.

    Raises:
        ValueError: If the final segment is empty, "." or "..".
    """
    name = urlsplit(url).path.rsplit("/", 1)[-1]
    if name in ("", ".", ".."):
        msg = f"URL has no filename component: {url}"
        raise ValueError(msg)
    return name


def _check_arguments(values: list[str], field_name: str) -> list[str]:
    seen: set[str] = set()
    for value in values:
        if not value or value != value.strip() or any(c.isspace() for c in value):
            msg = f"{field_name}: invalid entry {value!r}"
            raise ValueError(msg)
        if value in seen:
            msg = f"{field_name}: duplicate entry {value!r}"
            raise ValueError(msg)
        seen.add(value)
    return values


class CatalogSettings(BaseModel):
    """Settings section of the catalog.

    Attributes:
        profile: Shell profile the environment block is appended to.
        hosts_file: System hosts file the overrides are appended to.
        download_dir: Directory artifacts are downloaded into.
        search_path: Directories prepended to the inherited PATH for this run.
        homebrew_install_url: Location of the Homebrew install script.
        guard_appends: Wrap appended blocks in markers and skip them when
            already present.
    """

    model_config = ConfigDict(extra="forbid")

    profile: Annotated[str, Field(description="Shell profile file")] = "~/.zshrc"
    hosts_file: Annotated[str, Field(description="System hosts file")] = "/etc/hosts"
    download_dir: Annotated[str, Field(description="Artifact download directory")] = (
        "~/Downloads"
    )
    search_path: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_SEARCH_PATH),
            description="Directories prepended to PATH",
        ),
    ]
    homebrew_install_url: Annotated[
        str, Field(description="Homebrew install script URL")
    ] = HOMEBREW_INSTALL_URL
    guard_appends: Annotated[
        bool, Field(description="Skip appends whose marker is already present")
    ] = False

    @property
    def profile_path(self) -> Path:
        """Expanded shell profile path."""
        return expand_path(self.profile)

    @property
    def hosts_path(self) -> Path:
        """Expanded hosts file path."""
        return expand_path(self.hosts_file)

    @property
    def download_path(self) -> Path:
        """Expanded download directory path."""
        return expand_path(self.download_dir)


class DownloadEntry(BaseModel):
    """A single installer artifact to download.

    Attributes:
        url: HTTP(S) URL of the artifact.
        sha256: Optional expected SHA-256 hex digest.
    """

    model_config = ConfigDict(extra="forbid")

    url: Annotated[str, Field(description="Artifact URL")]
    sha256: Annotated[str | None, Field(description="Expected SHA-256 digest")] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only HTTP(S) URLs are fetchable."""
        if urlsplit(v).scheme not in ("http", "https"):
            msg = f"Download URL must be http(s): {v}"
            raise ValueError(msg)
        return v

    @field_validator("sha256")
    @classmethod
    def validate_sha256(cls, v: str | None) -> str | None:
        """Validate and normalize the digest."""
        if v is None:
            return None
        if not _SHA256.match(v):
            msg = f"sha256 must be 64 hex characters, got {v!r}"
            raise ValueError(msg)
        return v.lower()

    @property
    def filename(self) -> str:
        """Destination filename derived from the URL."""
        return artifact_filename(self.url)


class PackageCatalog(BaseModel):
    """Package section of the catalog.

    Attributes:
        casks: GUI applications installed as Homebrew casks.
        formulae: Command-line tools installed as Homebrew formulae.
        toolchains: Pinned ``tool@version`` specs installed with mise.
        globals: Toolchain specs selected as global defaults.
    """

    model_config = ConfigDict(extra="forbid")

    casks: Annotated[list[str], Field(default_factory=list, description="Homebrew casks")]
    formulae: Annotated[list[str], Field(default_factory=list, description="Homebrew formulae")]
    toolchains: Annotated[list[str], Field(default_factory=list, description="mise tool specs")]
    globals: Annotated[
        list[str], Field(default_factory=list, description="Global default tool specs")
    ]

    @field_validator("casks", "formulae", "toolchains", "globals")
    @classmethod
    def validate_entries(cls, v: list[str], info: ValidationInfo) -> list[str]:
        """Every entry must be a single, unique command-line argument."""
        return _check_arguments(v, info.field_name or "packages")

    @model_validator(mode="after")
    def validate_globals_subset(self) -> Self:
        """Validate that every global default is also a toolchain."""
        unknown = [spec for spec in self.globals if spec not in self.toolchains]
        if unknown:
            msg = f"Global defaults must also be listed in toolchains: {unknown}"
            raise ValueError(msg)
        return self


class Catalog(BaseModel):
    """Complete catalog describing the desired workstation state.

    Attributes:
        settings: File locations and run settings.
        versions: Pinned version constants referenced as ``{name}``.
        environment: Environment variables exported from the shell profile.
        hosts: Hostname to IP overrides.
        packages: The cask, formula and toolchain catalogs.
        downloads: Installer artifacts keyed by name.
    """

    model_config = ConfigDict(extra="forbid")

    settings: Annotated[CatalogSettings, Field(default_factory=CatalogSettings)]
    versions: Annotated[dict[str, str], Field(default_factory=dict)]
    environment: Annotated[dict[str, str], Field(default_factory=dict)]
    hosts: Annotated[dict[str, str], Field(default_factory=dict)]
    packages: Annotated[PackageCatalog, Field(default_factory=PackageCatalog)]
    downloads: Annotated[dict[str, DownloadEntry], Field(default_factory=dict)]

    @field_validator("versions")
    @classmethod
    def validate_versions(cls, v: dict[str, str]) -> dict[str, str]:
        """Version constants must be non-empty and free of whitespace."""
        for name, version in v.items():
            if not version or any(c.isspace() for c in version):
                msg = f"versions: invalid version for {name!r}: {version!r}"
                raise ValueError(msg)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: dict[str, str]) -> dict[str, str]:
        """Keys must be shell variable names; values must fit one double-quoted export."""
        for name, value in v.items():
            if not _ENV_NAME.match(name):
                msg = f"environment: invalid variable name {name!r}"
                raise ValueError(msg)
            if '"' in value or "\n" in value or value.endswith("\\"):
                msg = (
                    f"environment: value of {name} cannot contain double quotes, "
                    "newlines or a trailing backslash"
                )
                raise ValueError(msg)
        return v

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, v: dict[str, str]) -> dict[str, str]:
        """Every hostname must map to a valid IP address."""
        for host, address in v.items():
            if not host or any(c.isspace() for c in host):
                msg = f"hosts: invalid hostname {host!r}"
                raise ValueError(msg)
            try:
                ipaddress.ip_address(address)
            except ValueError:
                msg = f"hosts: invalid IP address for {host}: {address!r}"
                raise ValueError(msg) from None
        return v

    @field_validator("downloads", mode="before")
    @classmethod
    def coerce_download_urls(cls, v: object) -> object:
        """Allow ``name = "url"`` as shorthand for ``name = { url = "url" }``."""
        if isinstance(v, dict):
            return {
                name: {"url": entry} if isinstance(entry, str) else entry
                for name, entry in v.items()
            }
        return v

    @model_validator(mode="after")
    def validate_placeholders(self) -> Self:
        """Validate that placeholders resolve and download filenames are unique."""
        try:
            self.toolchain_specs()
            self.global_specs()
            downloads = self.resolved_downloads()
        except UnknownPlaceholderError as e:
            msg = f"Unknown version placeholder: {{{e.args[0]}}}"
            raise ValueError(msg) from None

        owners: dict[str, str] = {}
        for name, entry in downloads.items():
            filename = entry.filename
            if filename in owners:
                msg = f"Downloads {owners[filename]!r} and {name!r} share filename {filename!r}"
                raise ValueError(msg)
            owners[filename] = name
        return self

    def toolchain_specs(self) -> list[str]:
        """Toolchain specs with version placeholders expanded."""
        return [expand_placeholders(spec, self.versions) for spec in self.packages.toolchains]

    def global_specs(self) -> list[str]:
        """Global default specs with version placeholders expanded."""
        return [expand_placeholders(spec, self.versions) for spec in self.packages.globals]

    def items(self, kind: PackageKind) -> list[CatalogItem]:
        """Get the ordered items of one catalog.

        Args:
            kind: Catalog to return.

        Returns:
            List of CatalogItem in declaration order.
        """
        if kind == PackageKind.CASK:
            names = self.packages.casks
        elif kind == PackageKind.FORMULA:
            names = self.packages.formulae
        else:
            names = self.toolchain_specs()
        return [CatalogItem(kind=kind, name=name) for name in names]

    def resolved_environment(self) -> dict[str, str]:
        """Environment values with known version placeholders expanded."""
        return {
            name: expand_placeholders(value, self.versions, strict=False)
            for name, value in self.environment.items()
        }

    def resolved_downloads(self) -> dict[str, DownloadEntry]:
        """Download entries with version placeholders in URLs expanded."""
        return {
            name: entry.model_copy(update={"url": expand_placeholders(entry.url, self.versions)})
            for name, entry in self.downloads.items()
        }

    @property
    def item_count(self) -> int:
        """Total number of catalog items across all three catalogs."""
        return (
            len(self.packages.casks) + len(self.packages.formulae) + len(self.packages.toolchains)
        )
