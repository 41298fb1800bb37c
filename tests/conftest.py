"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from pathlib import Path

import pytest
from provctl.models.catalog import Catalog


@pytest.fixture
def catalog_data(tmp_path: Path) -> dict[str, object]:
    """Raw catalog data pointing every file location into tmp_path."""
    return {
        "settings": {
            "profile": str(tmp_path / "home" / ".zshrc"),
            "hosts_file": str(tmp_path / "etc" / "hosts"),
            "download_dir": str(tmp_path / "Downloads"),
            "search_path": [str(tmp_path / "bin")],
        },
        "versions": {"rust": "1.82.0", "python": "3.13.0"},
        "environment": {
            "PATH": "$HOME/.local/share/mise/shims:$PATH",
            "EDITOR": "nano",
        },
        "hosts": {"reddit.com": "151.101.129.140"},
        "packages": {
            "casks": ["arc", "docker"],
            "formulae": ["mise"],
            "toolchains": ["rust@{rust}", "python@{python}"],
            "globals": ["rust@{rust}"],
        },
        "downloads": {
            "xcode": "https://example.com/Developer_Tools/Xcode_16.xip",
        },
    }


@pytest.fixture
def sample_catalog(catalog_data: dict[str, object]) -> Catalog:
    """Validated catalog built from catalog_data."""
    return Catalog.model_validate(catalog_data)


@pytest.fixture
def mock_mise_output() -> str:
    """Sample ``mise ls --installed --json`` output."""
    return json.dumps(
        {
            "rust": [
                {
                    "version": "1.82.0",
                    "install_path": "/Users/dev/.local/share/mise/installs/rust/1.82.0",
                    "installed": True,
                    "active": True,
                }
            ],
            "java": [
                {"version": "corretto-21.0.5.11.1", "installed": True, "active": True},
                {"version": "corretto-17.0.13.11.1", "installed": True, "active": False},
            ],
        }
    )
