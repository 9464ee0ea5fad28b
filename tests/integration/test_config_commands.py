"""Integration tests for config commands."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from ignition_scan.app import app
from ignition_scan.config.manager import ConfigManager

runner = CliRunner()


def _patch_manager(tmp_path: Path):
    """Patch ConfigManager to use a temp config file."""
    config_path = tmp_path / "config.toml"
    return patch(
        "ignition_scan.commands.config_cmd._get_manager",
        side_effect=lambda: ConfigManager(config_path=config_path),
    )


def _reload(tmp_path: Path) -> ConfigManager:
    return ConfigManager(config_path=tmp_path / "config.toml")


class TestConfigCommands:
    def test_show_defaults(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show", "-f", "json"])
        assert result.exit_code == 0, result.output
        assert '"batch_concurrency": 3' in result.output
        assert '"project_paths": []' in result.output

    def test_show_table(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0, result.output
        assert "cache_ttl_seconds" in result.output

    def test_add_path(self, tmp_path: Path):
        project = tmp_path / "projects" / "A"
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "add-path", str(project)])
        assert result.exit_code == 0, result.output
        assert "Added" in result.output
        assert _reload(tmp_path).config.project_paths == [os.path.abspath(project)]

    def test_add_path_twice(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add-path", str(tmp_path / "A")])
            result = runner.invoke(app, ["config", "add-path", str(tmp_path / "A")])
        assert result.exit_code == 0
        assert "already configured" in result.output

    def test_remove_path(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add-path", str(tmp_path / "A")])
            result = runner.invoke(app, ["config", "remove-path", str(tmp_path / "A")])
        assert result.exit_code == 0, result.output
        assert _reload(tmp_path).config.project_paths == []

    def test_remove_unknown_path(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "remove-path", "/nowhere"])
        assert result.exit_code == 1
        assert "is not configured" in result.output

    def test_set(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "set", "cache-ttl-seconds", "60"])
        assert result.exit_code == 0, result.output
        assert _reload(tmp_path).config.scanner.cache_ttl_seconds == 60

    def test_set_bool(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "set", "watch", "false"])
        assert result.exit_code == 0, result.output
        assert _reload(tmp_path).config.scanner.watch is False

    def test_set_unknown_key(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "set", "colour", "blue"])
        assert result.exit_code == 1
        assert "Unknown setting" in result.output

    def test_set_invalid_value(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "set", "batch_concurrency", "0"])
        assert result.exit_code == 6
        assert _reload(tmp_path).config.scanner.batch_concurrency == 3

    def test_broken_config_file(self, tmp_path: Path):
        (tmp_path / "config.toml").write_text("project_paths = [", encoding="utf-8")
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 6
