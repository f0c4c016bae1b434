# Tests for galion.cli
# CLI commands using Click testing

from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from galion.cli import cli
from galion.config.schema import GalionConfig
from galion.errors import GalionError, RcloneError
from galion.jobs.model import JobStatus
from galion.remotes.model import ConfigOrigin, RemoteConfiguration
from galion.remotes.store import RemoteStore


def _mock_app(remotes: list[RemoteConfiguration] | None = None) -> MagicMock:
    """App double usable as a context manager."""
    app = MagicMock()
    app.__enter__.return_value = app
    app.config = GalionConfig.model_validate({"jobs": {"poll_interval": 0.01}})
    app.store = RemoteStore(remotes or [])
    return app


BACKUP = RemoteConfiguration("backup", "/data", "remote:bucket")


class TestCliGroup:
    """Tests for main CLI group."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Galion" in result.output
        assert "--rclone-ask-password" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "galion" in result.output

    @patch("galion.cli.GalionApp")
    def test_defaults_to_tui(self, mock_app_cls):
        app = _mock_app([BACKUP])
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["--hide-banner", "--ignore-duplicate-remote"])

        assert result.exit_code == 0
        app.init.assert_called_once()
        app.run_tui.assert_called_once()
        options = mock_app_cls.from_options.call_args[0][0]
        assert options.hide_banner is True
        assert options.ignore_duplicate_remote is True

    @patch("galion.cli.GalionApp")
    def test_tui_failure(self, mock_app_cls):
        app = _mock_app()
        app.init.side_effect = GalionError("No remote found")
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["tui"])

        assert result.exit_code == 1
        assert "No remote found" in result.output
        app.run_tui.assert_not_called()


class TestRemotesCommand:
    """Tests for remotes command."""

    @patch("galion.cli.GalionApp")
    def test_lists_remotes(self, mock_app_cls):
        mock_app_cls.from_options.return_value = _mock_app(
            [BACKUP, RemoteConfiguration("gdrive", None, "gdrive:", ConfigOrigin.EXTERNALLY_DISCOVERED)]
        )

        runner = CliRunner()
        result = runner.invoke(cli, ["remotes"])

        assert result.exit_code == 0
        assert "backup" in result.output
        assert "gdrive" in result.output

    @patch("galion.cli.GalionApp")
    def test_rclone_unreachable(self, mock_app_cls):
        app = _mock_app()
        app.init.side_effect = RcloneError("rclone call 'options/set' failed")
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["remotes"])

        assert result.exit_code == 1
        assert "options/set" in result.output


class TestSyncCommand:
    """Tests for sync command."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "--help"])
        assert result.exit_code == 0
        assert "--no-wait" in result.output

    @patch("galion.cli.GalionApp")
    def test_unknown_remote(self, mock_app_cls):
        mock_app_cls.from_options.return_value = _mock_app([BACKUP])

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "nope"])

        assert result.exit_code == 1
        assert "Unknown remote: nope" in result.output

    @patch("galion.cli.GalionApp")
    def test_incomplete_remote(self, mock_app_cls):
        mock_app_cls.from_options.return_value = _mock_app([RemoteConfiguration("photos", "/pics")])

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "photos"])

        assert result.exit_code == 1
        assert "needs a source and a destination" in result.output

    @patch("galion.cli.GalionApp")
    def test_no_wait(self, mock_app_cls):
        app = _mock_app([BACKUP])
        app.client.submit_sync.return_value = 7
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "backup", "--no-wait"])

        assert result.exit_code == 0
        assert "Started job 7" in result.output
        app.client.submit_sync.assert_called_once_with("/data", "remote:bucket")
        app.client.job_status.assert_not_called()

    @patch("galion.cli.time.sleep")
    @patch("galion.cli.GalionApp")
    def test_wait_success(self, mock_app_cls, mock_sleep):
        app = _mock_app([BACKUP])
        app.client.submit_sync.return_value = 7
        app.client.job_status.side_effect = [
            RcloneError("timeout"),
            JobStatus(finished=False),
            JobStatus(finished=True, success=True, duration_seconds=12.5),
        ]
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "backup"])

        assert result.exit_code == 0
        assert "Sync completed" in result.output
        assert mock_sleep.call_count == 2

    @patch("galion.cli.time.sleep")
    @patch("galion.cli.GalionApp")
    def test_wait_failure(self, mock_app_cls, mock_sleep):
        app = _mock_app([BACKUP])
        app.client.submit_sync.return_value = 7
        app.client.job_status.return_value = JobStatus(finished=True, success=False, error="quota exceeded")
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "backup"])

        assert result.exit_code == 1
        assert "quota exceeded" in result.output


class TestJobsCommand:
    """Tests for jobs command."""

    @patch("galion.cli.GalionApp")
    def test_lists_jobs(self, mock_app_cls):
        app = _mock_app()
        app.client.list_active_jobs.return_value = [1, 2]
        app.client.job_status.side_effect = [JobStatus(finished=False), RcloneError("job not found")]
        mock_app_cls.from_options.return_value = app

        runner = CliRunner()
        result = runner.invoke(cli, ["jobs"])

        assert result.exit_code == 0
        assert "running" in result.output
        assert "unknown" in result.output
        app.init.assert_not_called()


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_path(self, temp_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(temp_dir / "c.yaml"), "config", "path"])
        assert result.exit_code == 0
        assert result.output.strip() == str(temp_dir / "c.yaml")

    def test_init_and_force(self, temp_dir: Path):
        path = temp_dir / "c.yaml"
        runner = CliRunner()

        result = runner.invoke(cli, ["--config", str(path), "config", "init"])
        assert result.exit_code == 0
        assert path.exists()

        result = runner.invoke(cli, ["--config", str(path), "config", "init"])
        assert "already exists" in result.output

        path.write_text("changed", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(path), "config", "init", "--force"])
        assert result.exit_code == 0
        assert path.read_text(encoding="utf-8").startswith("# Galion")

    def test_show(self, config_file: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "Remotes: 2" in result.output
        assert "photos" in result.output

    def test_show_missing(self, temp_dir: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(temp_dir / "nope.yaml"), "config", "show"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_check_valid(self, config_file: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(config_file)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_check_invalid(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("jobs:\n  poll_interval: never\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check", str(path)])

        assert result.exit_code == 1
        assert "poll_interval" in result.output
