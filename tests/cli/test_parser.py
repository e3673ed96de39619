"""
Tests for CLI argument parser.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from ortoolskit.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, capsys):
        cli = CLI()
        result = cli.run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        assert "ortoolskit" in capsys.readouterr().out

    def test_global_options(self):
        args = CLI().parse_args(
            ["-v", "--out-dir", "/tmp/out", "--config", "cfg.yaml", "fetch"]
        )

        assert args.verbose is True
        assert args.out_dir == Path("/tmp/out")
        assert args.config == Path("cfg.yaml")
        assert args.command == "fetch"


class TestCommandParsing:
    """Test subcommand parsing."""

    def test_build_style(self):
        args = CLI().parse_args(["build", "--style", "flags"])
        assert args.command == "build"
        assert args.style == "flags"

    def test_build_invalid_style(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["build", "--style", "cmake"])

    def test_resolve_os(self):
        args = CLI().parse_args(["resolve", "--os", "Manjaro"])
        assert args.os_name == "Manjaro"

    @pytest.mark.parametrize("command", ["fetch", "protos", "verify"])
    def test_simple_commands(self, command):
        assert CLI().parse_args([command]).command == command


class TestDispatch:
    """Test command dispatch and error mapping."""

    def test_dispatches_to_command_module(self):
        with patch("ortoolskit.cli.commands.resolve.run", return_value=0) as mock_run:
            assert CLI().run(["resolve"]) == 0

        mock_run.assert_called_once()

    def test_library_errors_exit_one(self, monkeypatch):
        monkeypatch.delenv("OUT_DIR", raising=False)
        assert CLI().run(["--project-root", "/nonexistent", "verify"]) == 1
