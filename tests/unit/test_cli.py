#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the diffview command line entry point."""

import io
import json
import logging
import sys

import pytest

from diffview.cli import EXIT_INPUT_ERROR, EXIT_NO_CHANGES, EXIT_SUCCESS, create_parser, main
from diffview.config import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Keep real config files and the CLI logging setup out of other tests."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    package_logger = logging.getLogger("diffview")
    handlers, level, propagate = package_logger.handlers[:], package_logger.level, package_logger.propagate
    yield workdir
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


@pytest.fixture
def diff_file(isolated_cli, git_diff_text):
    """Write the sample git diff to a file."""
    path = isolated_cli / "changes.patch"
    path.write_text(git_diff_text, encoding="utf-8")
    return path


@pytest.mark.unit
@pytest.mark.cli
class TestArgumentParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test default argument values."""
        args = create_parser().parse_args([])

        assert args.file == "-"
        assert args.dialect == "git"
        assert args.json is False
        assert args.highlight is True
        assert args.log_level == "WARNING"

    def test_flags(self):
        """Test explicit flags."""
        args = create_parser().parse_args(["--dialect", "hg", "--json", "--no-highlight", "--theme", "dracula", "x.diff"])

        assert (args.file, args.dialect, args.json, args.highlight, args.theme) == ("x.diff", "hg", True, False, "dracula")

    def test_bad_theme_exits_with_usage_error(self, capsys):
        """Test that unknown themes are rejected by argparse."""
        assert main(["--theme", "no-such-theme", "x.diff"]) == EXIT_INPUT_ERROR
        assert "Invalid theme" in capsys.readouterr().err

    def test_log_level_names_case_insensitive(self):
        """Test that log level names are accepted in any case."""
        assert create_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_bad_log_level(self):
        """Test that unknown log levels are rejected."""
        assert main(["--log-level", "verbose", "x.diff"]) == EXIT_INPUT_ERROR

    def test_bad_dialect(self):
        """Test that only hg and git dialects are accepted."""
        assert main(["--dialect", "svn", "x.diff"]) == EXIT_INPUT_ERROR


@pytest.mark.unit
@pytest.mark.cli
class TestMain:
    """Tests for running the command."""

    def test_summary_table(self, diff_file, capsys):
        """Test the per-file summary."""
        assert main([str(diff_file)]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "3 file(s) changed" in out
        assert "src/app.py" in out
        assert "README.md" in out
        assert "old.txt" in out
        assert "+5 -3" in out

    def test_json_output(self, diff_file, capsys):
        """Test that --json prints the whole model."""
        assert main(["--json", "--no-highlight", str(diff_file)]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert [item["display_path"] for item in data] == ["src/app.py", "README.md", "old.txt"]
        assert [item["status"] for item in data] == ["modified", "added", "deleted"]
        assert len(data[0]["hunks"]) == 2
        assert all(not line["highlighted"] for line in data[0]["hunks"][0]["lines"])

    def test_json_output_highlighted(self, diff_file, capsys):
        """Test that highlighting is recorded in the JSON model."""
        assert main(["--json", str(diff_file)]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert all(line["highlighted"] for line in data[0]["hunks"][0]["lines"])

    def test_hg_dialect_from_stdin(self, hg_diff_text, monkeypatch, capsys):
        """Test reading Mercurial diff text from stdin."""
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(hg_diff_text.encode("utf-8"))))

        assert main(["--dialect", "hg", "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert [item["display_path"] for item in data] == ["src/lib.rs", "new.txt"]

    def test_empty_input(self, isolated_cli, capsys):
        """Test that an empty diff exits with the no-changes code."""
        empty = isolated_cli / "empty.diff"
        empty.write_text("", encoding="utf-8")

        assert main([str(empty)]) == EXIT_NO_CHANGES
        assert "No changes to review" in capsys.readouterr().err

    def test_missing_file(self, isolated_cli, capsys):
        """Test that unreadable input is an input error."""
        assert main([str(isolated_cli / "missing.diff")]) == EXIT_INPUT_ERROR
        assert capsys.readouterr().err.startswith("Error: Cannot read")

    def test_invalid_config(self, diff_file, isolated_cli, capsys):
        """Test that a broken config file is reported as an input error."""
        config = isolated_cli / "bad.toml"
        config.write_text("[render]\nwidth = 3\n", encoding="utf-8")

        assert main(["--config", str(config), str(diff_file)]) == EXIT_INPUT_ERROR
        assert "Unknown config section" in capsys.readouterr().err

    def test_config_disables_highlighting(self, diff_file, isolated_cli, capsys):
        """Test that the discovered config is applied."""
        (isolated_cli / ".diffview.toml").write_text("[highlight]\nenabled = false\n", encoding="utf-8")

        assert main(["--json", str(diff_file)]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert not any(line["highlighted"] for line in data[0]["hunks"][0]["lines"])

    def test_config_tab_width(self, isolated_cli, capsys):
        """Test that the diff tab width from config reaches the parser."""
        (isolated_cli / ".diffview.toml").write_text("[diff]\ntab_width = 2\n", encoding="utf-8")
        patch = isolated_cli / "tabs.diff"
        patch.write_text(
            "diff --git a/Makefile b/Makefile\n--- a/Makefile\n+++ b/Makefile\n@@ -1 +1 @@\n-\told\n+\tnew\n",
            encoding="utf-8",
        )

        assert main(["--json", "--no-highlight", str(patch)]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert [line["content"] for line in data[0]["hunks"][0]["lines"]] == ["  old", "  new"]
