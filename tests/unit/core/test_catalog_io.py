"""Unit tests for catalog file I/O."""

import os
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from provctl.core.catalog import (
    CatalogNotFoundError,
    CatalogParseError,
    CatalogValidationError,
    catalog_exists,
    catalog_to_dict,
    load_catalog,
    load_default_catalog,
    require_catalog,
    save_catalog,
)
from provctl.models.catalog import Catalog
from provctl.models.package import PackageKind


class TestLoadDefaultCatalog:
    """Tests for the bundled catalog."""

    def test_bundled_catalog_is_valid(self) -> None:
        """The bundled catalog validates and lists every kind."""
        catalog = load_default_catalog()

        assert catalog.items(PackageKind.CASK)
        assert catalog.items(PackageKind.FORMULA)
        assert catalog.items(PackageKind.TOOLCHAIN)
        assert catalog.downloads
        assert catalog.hosts

    def test_bundled_globals_are_expanded(self) -> None:
        """Bundled global defaults resolve to concrete versions."""
        catalog = load_default_catalog()

        assert all("{" not in spec for spec in catalog.global_specs())
        assert set(catalog.global_specs()) <= set(catalog.toolchain_specs())

    def test_bundled_formulae(self) -> None:
        """The bundled formulae include mise and cocoapods."""
        catalog = load_default_catalog()
        assert catalog.packages.formulae == ["mise", "cocoapods"]


class TestLoadCatalog:
    """Tests for load_catalog function."""

    def test_loads_explicit_path(self, tmp_path: Path) -> None:
        """A catalog file is parsed and validated."""
        path = tmp_path / "catalog.toml"
        path.write_text('[packages]\ncasks = ["arc"]\n')

        catalog = load_catalog(path)
        assert catalog.packages.casks == ["arc"]

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path that does not exist raises."""
        with pytest.raises(CatalogNotFoundError):
            load_catalog(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Syntax errors raise CatalogParseError."""
        path = tmp_path / "catalog.toml"
        path.write_text("[packages\n")

        with pytest.raises(CatalogParseError):
            load_catalog(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise CatalogValidationError."""
        path = tmp_path / "catalog.toml"
        path.write_text('[packages]\ntoolchains = ["zig@{zig}"]\n')

        with pytest.raises(CatalogValidationError, match="Unknown version placeholder"):
            load_catalog(path)

    def test_falls_back_to_bundled(self, tmp_path: Path) -> None:
        """Without a user catalog the bundled one is used."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            catalog = load_catalog()

        assert catalog == load_default_catalog()

    def test_prefers_user_catalog(self, tmp_path: Path) -> None:
        """An existing user catalog wins over the bundled one."""
        user = tmp_path / "provctl" / "catalog.toml"
        user.parent.mkdir()
        user.write_text('[packages]\nformulae = ["mise"]\n')

        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            catalog = load_catalog()

        assert catalog.packages.formulae == ["mise"]
        assert catalog.packages.casks == []


class TestSaveCatalog:
    """Tests for save_catalog function."""

    def test_save_and_reload(self, tmp_path: Path, sample_catalog: Catalog) -> None:
        """A saved catalog loads back unchanged."""
        path = tmp_path / "out" / "catalog.toml"

        assert save_catalog(sample_catalog, path) == path
        assert load_catalog(path) == sample_catalog
        assert not list(path.parent.glob("*.tmp"))

    def test_download_shorthand_written(self, tmp_path: Path, sample_catalog: Catalog) -> None:
        """Downloads without a checksum are written as plain URLs."""
        path = save_catalog(sample_catalog, tmp_path / "catalog.toml")

        with open(path, "rb") as f:
            data = tomllib.load(f)
        assert data["downloads"]["xcode"] == "https://example.com/Developer_Tools/Xcode_16.xip"

    def test_checksum_kept(self) -> None:
        """Downloads with a checksum keep the table form."""
        catalog = Catalog.model_validate(
            {"downloads": {"a": {"url": "https://example.com/a.zip", "sha256": "0" * 64}}}
        )
        assert catalog_to_dict(catalog)["downloads"]["a"] == {
            "url": "https://example.com/a.zip",
            "sha256": "0" * 64,
        }

    def test_catalog_exists(self, tmp_path: Path) -> None:
        """catalog_exists reflects the file system."""
        path = tmp_path / "catalog.toml"
        assert catalog_exists(path) is False
        path.write_text("")
        assert catalog_exists(path) is True


class TestRequireCatalog:
    """Tests for require_catalog function."""

    def test_exits_on_missing(self, tmp_path: Path) -> None:
        """A missing catalog exits with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            require_catalog(tmp_path / "missing.toml")
        assert exc_info.value.exit_code == 1

    def test_exits_on_invalid(self, tmp_path: Path) -> None:
        """An invalid catalog exits with code 1."""
        path = tmp_path / "catalog.toml"
        path.write_text('[unknown]\nkey = "value"\n')

        with pytest.raises(typer.Exit):
            require_catalog(path)
