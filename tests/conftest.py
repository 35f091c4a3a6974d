"""Pytest configuration and shared fixtures for the diffview test suite.

This module provides shared fixtures, test configuration, and the sample
diffs used across the parser and highlighting tests.
"""

import os
from pathlib import PurePosixPath

import pytest
from rich.style import Style

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


class RecordingHighlighter:
    """Highlighter double that records every call and styles each line as one span.

    Lines containing ``FAIL`` come back as ``None`` to simulate a per-line
    highlighting failure.
    """

    def __init__(self, known: bool = True):
        self.known = known
        self.calls: list[tuple[PurePosixPath, list[str]]] = []
        self.foreground = Style(color="white")
        self.add_background = Style(bgcolor="green")
        self.delete_background = Style(bgcolor="red")

    def highlight_file_lines(self, file_path, lines):
        self.calls.append((PurePosixPath(file_path), list(lines)))
        if not self.known:
            return None
        return [None if "FAIL" in line else ((self.foreground, line),) if line else () for line in lines]


@pytest.fixture
def recording_highlighter() -> RecordingHighlighter:
    """Provide a highlighter double that records its calls."""
    return RecordingHighlighter()


@pytest.fixture
def git_diff_text() -> str:
    """Provide a git-style diff with a modified, an added and a deleted file.

    Returns
    -------
    str
        Diff text as printed by ``git diff`` or ``jj diff --git``

    """
    return (
        "diff --git a/src/app.py b/src/app.py\n"
        "index 83db48f..bf269f4 100644\n"
        "--- a/src/app.py\n"
        "+++ b/src/app.py\n"
        "@@ -1,4 +1,5 @@\n"
        " import os\n"
        "-import sys\n"
        "+import sys\n"
        "+import json\n"
        " \n"
        " def main():\n"
        "@@ -20,3 +21,3 @@ def main():\n"
        "     x = 1\n"
        "-    return x\n"
        "+    return x + 1\n"
        " \n"
        "diff --git a/README.md b/README.md\n"
        "new file mode 100644\n"
        "index 0000000..e69de29\n"
        "--- /dev/null\n"
        "+++ b/README.md\n"
        "@@ -0,0 +1,2 @@\n"
        "+# Title\n"
        "+Some text\n"
        "diff --git a/old.txt b/old.txt\n"
        "deleted file mode 100644\n"
        "index e69de29..0000000\n"
        "--- a/old.txt\n"
        "+++ /dev/null\n"
        "@@ -1 +0,0 @@\n"
        "-gone\n"
    )


@pytest.fixture
def hg_diff_text() -> str:
    """Provide a Mercurial diff with timestamps in the path lines.

    Returns
    -------
    str
        Diff text as printed by ``hg diff``

    """
    return (
        "diff -r abc123 src/lib.rs\n"
        "--- a/src/lib.rs\tThu Jan 01 00:00:00 1970 +0000\n"
        "+++ b/src/lib.rs\tThu Jan 01 00:00:00 1970 +0000\n"
        "@@ -1,3 +1,4 @@\n"
        " fn main() {\n"
        "-    println!(\"old\");\n"
        "+    println!(\"new\");\n"
        "+    println!(\"extra\");\n"
        " }\n"
        "diff -r abc123 new.txt\n"
        "--- /dev/null\tThu Jan 01 00:00:00 1970 +0000\n"
        "+++ b/new.txt\tThu Jan 01 00:00:00 1970 +0000\n"
        "@@ -0,0 +1 @@\n"
        "+hello\n"
    )
