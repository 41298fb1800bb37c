"""Unit tests for artifact downloads."""

import hashlib
from pathlib import Path
from unittest.mock import patch

import pytest
from provctl.core.downloads import ensure_download, file_sha256
from provctl.core.errors import DownloadError
from provctl.models.catalog import DownloadEntry

URL = "https://download.developer.apple.com/Developer_Tools/Xcode_16/Xcode_16.xip"


def _fake_curl(content: bytes, returncode: int = 0):
    """Build a run_interactive replacement that writes to curl's -o target."""

    def run(args: list[str], env: dict[str, str] | None = None) -> int:
        Path(args[args.index("-o") + 1]).write_bytes(content)
        return returncode

    return run


class TestEnsureDownload:
    """Tests for ensure_download function."""

    def test_existing_file_is_skipped(self, tmp_path: Path) -> None:
        """A file with the artifact name is never fetched again."""
        (tmp_path / "Xcode_16.xip").write_bytes(b"old")

        with patch("provctl.core.downloads.run_interactive") as mock_run:
            result = ensure_download("xcode", DownloadEntry(url=URL), tmp_path)

        mock_run.assert_not_called()
        assert result.skipped is True
        assert (tmp_path / "Xcode_16.xip").read_bytes() == b"old"

    def test_fetches_with_curl(self, tmp_path: Path) -> None:
        """A missing file is fetched with curl into a .part file then renamed."""
        with patch(
            "provctl.core.downloads.run_interactive", side_effect=_fake_curl(b"data")
        ) as mock_run:
            result = ensure_download(
                "xcode", DownloadEntry(url=URL), tmp_path, search_path="/opt/homebrew/bin"
            )

        args = mock_run.call_args[0][0]
        assert args == ["curl", "-fL", URL, "-o", str(tmp_path / "Xcode_16.xip.part")]
        assert mock_run.call_args.kwargs["env"] == {"PATH": "/opt/homebrew/bin"}
        assert (tmp_path / "Xcode_16.xip").read_bytes() == b"data"
        assert not (tmp_path / "Xcode_16.xip.part").exists()
        assert result.changed is True
        assert result.message == f"Saved to {tmp_path / 'Xcode_16.xip'}"

    def test_curl_failure_raises(self, tmp_path: Path) -> None:
        """A failing curl leaves no file behind and raises DownloadError."""
        with (
            patch("provctl.core.downloads.run_interactive", side_effect=_fake_curl(b"", 22)),
            pytest.raises(DownloadError, match="curl exited with status 22"),
        ):
            ensure_download("xcode", DownloadEntry(url=URL), tmp_path)

        assert list(tmp_path.iterdir()) == []

    def test_missing_curl_raises(self, tmp_path: Path) -> None:
        """A missing curl binary raises DownloadError."""
        with (
            patch("provctl.core.downloads.run_interactive", side_effect=FileNotFoundError("curl")),
            pytest.raises(DownloadError, match="Failed to download Xcode_16.xip"),
        ):
            ensure_download("xcode", DownloadEntry(url=URL), tmp_path)

    def test_checksum_mismatch_raises(self, tmp_path: Path) -> None:
        """Fetched content that does not match sha256 is discarded."""
        entry = DownloadEntry(url=URL, sha256=hashlib.sha256(b"expected").hexdigest())

        with (
            patch("provctl.core.downloads.run_interactive", side_effect=_fake_curl(b"other")),
            pytest.raises(DownloadError, match="sha256 mismatch"),
        ):
            ensure_download("xcode", entry, tmp_path)

        assert list(tmp_path.iterdir()) == []

    def test_existing_file_with_wrong_checksum_refetched(self, tmp_path: Path) -> None:
        """An existing file failing its checksum is downloaded again."""
        (tmp_path / "Xcode_16.xip").write_bytes(b"truncated")
        entry = DownloadEntry(url=URL, sha256=hashlib.sha256(b"full").hexdigest())

        with patch("provctl.core.downloads.run_interactive", side_effect=_fake_curl(b"full")):
            result = ensure_download("xcode", entry, tmp_path)

        assert result.changed is True
        assert (tmp_path / "Xcode_16.xip").read_bytes() == b"full"

    def test_existing_file_with_matching_checksum_skipped(self, tmp_path: Path) -> None:
        """An existing file matching its checksum is kept."""
        (tmp_path / "Xcode_16.xip").write_bytes(b"full")
        entry = DownloadEntry(url=URL, sha256=hashlib.sha256(b"full").hexdigest())

        with patch("provctl.core.downloads.run_interactive") as mock_run:
            result = ensure_download("xcode", entry, tmp_path)

        mock_run.assert_not_called()
        assert result.skipped is True

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run never invokes curl."""
        with patch("provctl.core.downloads.run_interactive") as mock_run:
            result = ensure_download("xcode", DownloadEntry(url=URL), tmp_path, dry_run=True)

        mock_run.assert_not_called()
        assert result.message == "Dry-run: would fetch Xcode_16.xip"


def test_file_sha256(tmp_path: Path) -> None:
    """file_sha256 hashes file content."""
    path = tmp_path / "blob"
    path.write_bytes(b"abc")
    assert file_sha256(path) == hashlib.sha256(b"abc").hexdigest()
