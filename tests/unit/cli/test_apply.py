"""Unit tests for apply command."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import tomli_w
from provctl.cli.main import app
from provctl.core.errors import InstallError
from provctl.core.provisioner import Stage
from provctl.models.action import Action, ActionResult, ActionType, already_satisfied
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def catalog_file(tmp_path: Path, catalog_data: dict[str, object]) -> Path:
    """Catalog written to disk."""
    path = tmp_path / "catalog.toml"
    path.write_bytes(tomli_w.dumps(catalog_data).encode())
    return path


def _install(name: str) -> ActionResult:
    action = Action(action_type=ActionType.INSTALL, target=name)
    return ActionResult(action=action, success=True, message="Operation completed")


class TestApplyCommand:
    """Tests for provctl apply command."""

    def test_apply_help(self) -> None:
        """Apply command shows help."""
        result = runner.invoke(app, ["apply", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.output
        assert "--skip" in result.output

    def test_apply_success(self, catalog_file: Path) -> None:
        """A successful run prints results and exits 0."""
        with patch("provctl.cli.commands.apply.Provisioner") as mock_cls:
            mock_cls.return_value.run.return_value = [
                _install("arc"),
                already_satisfied(
                    Action(action_type=ActionType.INSTALL, target="docker"), "Already installed"
                ),
            ]
            result = runner.invoke(app, ["apply", "--catalog", str(catalog_file)])

        assert result.exit_code == 0
        assert "Results" in result.output
        assert "1 changed" in result.output
        assert "1 already satisfied" in result.output
        assert "Provisioning completed successfully!" in result.output

    def test_apply_failure_exits_nonzero(self, catalog_file: Path) -> None:
        """A ProvisionError is printed and exits 1."""
        with patch("provctl.cli.commands.apply.Provisioner") as mock_cls:
            mock_cls.return_value.run.side_effect = InstallError(
                "Failed to install docker via brew cask"
            )
            result = runner.invoke(app, ["apply", "-c", str(catalog_file)])

        assert result.exit_code == 1
        assert "Failed to install docker via brew cask" in result.output
        assert "completed successfully" not in result.output

    def test_apply_dry_run_and_skip(self, catalog_file: Path) -> None:
        """--dry-run and --skip reach the provisioner."""
        with patch("provctl.cli.commands.apply.Provisioner") as mock_cls:
            mock_cls.return_value.run.return_value = [_install("arc")]
            result = runner.invoke(
                app,
                ["apply", "-c", str(catalog_file), "--dry-run", "--skip", "hosts", "-s", "downloads"],
            )

        assert result.exit_code == 0
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["dry_run"] is True
        assert list(kwargs["skip"]) == [Stage.HOSTS, Stage.DOWNLOADS]
        assert "Dry Run" in result.output
        assert "No changes were made" in result.output

    def test_apply_invalid_stage(self, catalog_file: Path) -> None:
        """Unknown stage names are rejected by the option parser."""
        result = runner.invoke(app, ["apply", "-c", str(catalog_file), "--skip", "nope"])
        assert result.exit_code == 2

    def test_apply_missing_catalog(self, tmp_path: Path) -> None:
        """A missing catalog exits 1 with a hint."""
        result = runner.invoke(app, ["apply", "-c", str(tmp_path / "none.toml")])

        assert result.exit_code == 1
        assert "provctl init" in result.output

    def test_apply_dry_run_end_to_end(self, catalog_file: Path, tmp_path: Path) -> None:
        """A real dry run changes nothing on disk."""
        with (
            patch("provctl.scanners.brew.command_exists", return_value=False),
            patch("provctl.scanners.mise.command_exists", return_value=False),
            patch("provctl.core.bootstrap.command_exists", return_value=False),
            patch("provctl.operators.base.run_interactive") as mock_run,
            patch("provctl.core.hosts.run_command") as mock_hosts,
        ):
            result = runner.invoke(app, ["apply", "-c", str(catalog_file), "-n"])

        assert result.exit_code == 0
        mock_run.assert_not_called()
        mock_hosts.assert_not_called()
        assert not (tmp_path / "home" / ".zshrc").exists()
        assert not (tmp_path / "Downloads").exists()


def test_provisioner_receives_catalog(catalog_file: Path) -> None:
    """The loaded catalog is handed to the provisioner."""
    with patch("provctl.cli.commands.apply.Provisioner") as mock_cls:
        mock_cls.return_value = MagicMock(run=MagicMock(return_value=[]))
        result = runner.invoke(app, ["apply", "-c", str(catalog_file)])

    assert result.exit_code == 0
    catalog = mock_cls.call_args.args[0]
    assert catalog.packages.casks == ["arc", "docker"]


def test_apply_scan_timeout_is_reported(catalog_file: Path) -> None:
    """A hung brew list ends the run with an error message, not a traceback."""
    with (
        patch("provctl.scanners.brew.command_exists", return_value=True),
        patch("provctl.core.bootstrap.command_exists", return_value=True),
        patch(
            "provctl.scanners.brew.run_command",
            side_effect=subprocess.TimeoutExpired(["brew", "list"], 60),
        ),
        patch("provctl.operators.base.run_interactive") as mock_run,
    ):
        result = runner.invoke(
            app, ["apply", "-c", str(catalog_file), "--skip", "profile", "--skip", "hosts"]
        )

    assert result.exit_code == 1
    assert not isinstance(result.exception, subprocess.TimeoutExpired)
    assert "Cannot check whether arc is installed" in result.output
    mock_run.assert_not_called()
