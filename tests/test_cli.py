"""
Tests for the CLI commands.

Uses typer's CliRunner against temporary project directories.
"""

import json

from typer.testing import CliRunner

from conftest import stage
from filerelease import __version__
from filerelease.cli.main import app

runner = CliRunner()


class TestMainApp:
    """Tests for the top-level app."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"filerelease version {__version__}" in result.output

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("serve", "release", "schedule"):
            assert command in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "release" in result.output

    def test_subcommand_help(self):
        for command in ("serve", "release", "schedule"):
            result = runner.invoke(app, [command, "--help"])
            assert result.exit_code == 0


class TestRelease:
    """Tests for the release command."""

    def test_release_json(self, project_dir):
        stage(project_dir / "staging", "redemption_01.txt", "outpay_01.txt")

        result = runner.invoke(app, ["release", "redemption", "--project-dir", str(project_dir), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "category": "REDEMPTION",
            "filesProcessed": 1,
            "successfulFiles": ["redemption_01.txt"],
            "errors": [],
        }
        assert (project_dir / "publish" / "redemption_01.txt").exists()
        assert (project_dir / "staging" / "outpay_01.txt").exists()

    def test_release_table(self, project_dir):
        stage(project_dir / "staging", "own_and_ben_1.csv")

        result = runner.invoke(app, ["release", "own-and-ben", "-d", str(project_dir)], env={"COLUMNS": "200"})

        assert result.exit_code == 0, result.output
        assert "own_and_ben_1.csv" in result.output
        assert "moved" in result.output

    def test_release_nothing_staged(self, project_dir):
        result = runner.invoke(app, ["release", "OUTPAY", "-d", str(project_dir)])
        assert result.exit_code == 0, result.output
        assert "No staged files" in result.output

    def test_unknown_category(self, project_dir):
        result = runner.invoke(app, ["release", "payroll", "-d", str(project_dir)])
        assert result.exit_code == 2

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["release", "outpay", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_filesystem_error_json(self, project_dir):
        (project_dir / "staging").rmdir()
        (project_dir / "staging").write_text("not a directory")

        result = runner.invoke(app, ["release", "outpay", "-d", str(project_dir), "--json"])

        assert result.exit_code == 1
        body = json.loads(result.output)
        assert body["category"] == "OUTPAY"
        assert body["errors"][0]["fileName"] == "system"


class TestSchedule:
    """Tests for the schedule command."""

    def test_schedule_table(self, project_dir):
        result = runner.invoke(app, ["schedule", "-d", str(project_dir), "--count", "2"], env={"COLUMNS": "200"})
        assert result.exit_code == 0, result.output
        assert "REDEMPTION" in result.output
        assert "OUTPAY" in result.output
        assert "disabled" in result.output

    def test_schedule_missing_config(self, tmp_path):
        result = runner.invoke(app, ["schedule", "-d", str(tmp_path)])
        assert result.exit_code == 1

    def test_schedule_none_configured(self, tmp_path):
        (tmp_path / "config.yaml").write_text("filesystem:\n  staging_dir: s\n  publish_dir: p\n")
        result = runner.invoke(app, ["schedule", "-d", str(tmp_path)])
        assert result.exit_code == 0
        assert "No schedules configured" in result.output


class TestServe:
    """Tests for the serve command."""

    def test_serve_missing_config(self, tmp_path):
        result = runner.invoke(app, ["serve", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
