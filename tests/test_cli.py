"""Tests for the runscript command line."""

from __future__ import annotations

import shutil

import pytest
from typer.testing import CliRunner

from runscript import __version__
from runscript.cli import app


runner = CliRunner()

requires_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Isolate HOME so config and events stay inside tmp_path."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("RUNSCRIPT_CONFIG", raising=False)
    monkeypatch.delenv("RUNSCRIPT_PROJECT_ROOT", raising=False)
    return tmp_path


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output


@requires_bash
class TestScriptRun:
    """Tests for runscript script run."""

    def test_run_success(self, cli_env):
        result = runner.invoke(
            app, ["script", "run", "--no-events", "test-script", "arg1", "arg2"]
        )

        assert result.exit_code == 0
        assert "argument count: 2" in result.output
        assert "arguments: arg1 arg2" in result.output

    def test_run_forwards_exit_code(self, cli_env):
        result = runner.invoke(app, ["script", "run", "--no-events", "test-script", "error"])

        assert result.exit_code == 1
        assert "Requested error!" in result.output

    def test_run_dash_args(self, cli_env):
        result = runner.invoke(
            app, ["script", "run", "--no-events", "test-script", "--", "--flag", "value"]
        )

        assert result.exit_code == 0
        assert "arguments: --flag value" in result.output

    def test_run_missing_script(self, cli_env):
        result = runner.invoke(app, ["script", "run", "--no-events", "nope"])

        assert result.exit_code == 1

    def test_run_logs_events(self, cli_env):
        result = runner.invoke(app, ["script", "run", "test-script"])

        assert result.exit_code == 0
        events = (cli_env / ".runscript" / "events.jsonl").read_text()
        assert "script.completed" in events

    def test_run_project_root(self, cli_env):
        base = cli_env / "project" / "bash_scripts"
        base.mkdir(parents=True)
        (base / "hello.sh").write_text("#!/bin/bash\necho hello from project\n")

        result = runner.invoke(
            app,
            ["script", "run", "--no-events", "--project-root", str(cli_env / "project"), "hello"],
        )

        assert result.exit_code == 0
        assert "hello from project" in result.output

    def test_bad_config(self, cli_env):
        result = runner.invoke(
            app, ["script", "run", "--config", str(cli_env / "missing.yml"), "test-script"]
        )

        assert result.exit_code == 1


class TestScriptList:
    """Tests for runscript script list."""

    def test_list_bundled(self, cli_env):
        result = runner.invoke(app, ["script", "list"])

        assert result.exit_code == 0
        assert "test-script.sh" in result.output
        assert "functions.sh" in result.output
        assert "nested.sh" not in result.output

    def test_list_missing_project_root(self, cli_env):
        result = runner.invoke(app, ["script", "list", "--project-root", str(cli_env / "none")])

        assert result.exit_code == 1


class TestReadmeUpdate:
    """Tests for runscript readme update."""

    def test_update_then_noop(self, cli_env):
        scripts_dir = cli_env / "bash_scripts"
        scripts_dir.mkdir()
        (scripts_dir / "deploy.sh").write_text("#!/bin/bash\n# desc: Deploy the app\n")
        readme = cli_env / "README.md"
        readme.write_text("# Project\n")

        args = ["readme", "update", "--scripts-dir", str(scripts_dir), "--readme", str(readme)]
        first = runner.invoke(app, args)
        second = runner.invoke(app, args)

        assert first.exit_code == 0
        assert "Updated" in first.output
        assert "| `deploy.sh` | Deploy the app |" in readme.read_text()
        assert second.exit_code == 0
        assert "already up to date" in second.output

    def test_missing_scripts_dir(self, cli_env):
        result = runner.invoke(
            app, ["readme", "update", "--scripts-dir", str(cli_env / "none")]
        )

        assert result.exit_code == 1

    def test_non_utf8_readme(self, cli_env):
        scripts_dir = cli_env / "bash_scripts"
        scripts_dir.mkdir()
        (scripts_dir / "deploy.sh").write_text("#!/bin/bash\n# desc: Deploy the app\n")
        readme = cli_env / "README.md"
        readme.write_bytes(b"\xff\xfe not utf-8\n")

        result = runner.invoke(
            app, ["readme", "update", "--scripts-dir", str(scripts_dir), "--readme", str(readme)]
        )

        assert result.exit_code == 1
        assert "not valid UTF-8" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)


class TestConfigValidate:
    """Tests for runscript config validate."""

    def test_valid(self, cli_env):
        config_file = cli_env / "config.yml"
        config_file.write_text("staging: user\nkeep_scripts: true\n")

        result = runner.invoke(app, ["config", "validate", "--config", str(config_file)])

        assert result.exit_code == 0
        assert "Staging: user" in result.output

    def test_invalid(self, cli_env):
        config_file = cli_env / "config.yml"
        config_file.write_text("unknown_key: 1\n")

        result = runner.invoke(app, ["config", "validate", "--config", str(config_file)])

        assert result.exit_code == 1
