"""Unit tests for XDG path management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from provctl.core.paths import (
    APP_NAME,
    ensure_download_dir,
    expand_path,
    get_catalog_path,
    get_config_dir,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME environment variable."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_catalog_path(self, tmp_path: Path) -> None:
        """The user catalog lives in the config directory."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_catalog_path() == tmp_path / APP_NAME / "catalog.toml"


class TestExpandPath:
    """Tests for expand_path function."""

    def test_expands_home(self) -> None:
        """~ expands to the home directory."""
        assert expand_path("~/Downloads") == Path.home() / "Downloads"

    def test_expands_variables(self, tmp_path: Path) -> None:
        """Environment variables are substituted."""
        with patch.dict(os.environ, {"PROVCTL_TEST_DIR": str(tmp_path)}):
            assert expand_path("$PROVCTL_TEST_DIR/hosts") == tmp_path / "hosts"


class TestEnsureDirs:
    """Tests for directory creation helpers."""

    def test_ensure_download_dir(self, tmp_path: Path) -> None:
        """ensure_download_dir creates nested directories."""
        target = tmp_path / "a" / "b"
        assert ensure_download_dir(target) == target
        assert target.is_dir()

    def test_ensure_download_dir_failure(self, tmp_path: Path) -> None:
        """A path blocked by a file raises RuntimeError."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(RuntimeError, match="Cannot create download directory"):
            ensure_download_dir(blocker / "sub")
