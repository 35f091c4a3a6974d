#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the diffview library.

This module centralizes the literal types, header prefixes, and default
configuration values shared by the parsers, the highlighter, and the
gap calculator.

Constants are organized by category:
1. Type Definitions - Literal types for closed sets of values
2. Diff Text Grammar - Prefixes and markers of the unified diff format
3. Highlighting Defaults - Theme and diff background colors
4. Configuration Discovery - Config file names
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

FileStatus = Literal["added", "modified", "deleted", "renamed", "copied"]
LineOrigin = Literal["context", "addition", "deletion"]

# "hg" is the text-header dialect ("diff " prefix), "git" the git-style one
DiffDialect = Literal["hg", "git"]

FILE_STATUSES: tuple[FileStatus, ...] = ("added", "modified", "deleted", "renamed", "copied")
LINE_ORIGINS: tuple[LineOrigin, ...] = ("context", "addition", "deletion")
DIFF_DIALECTS: tuple[DiffDialect, ...] = ("hg", "git")

STATUS_CHARS: dict[FileStatus, str] = {
    "added": "A",
    "modified": "M",
    "deleted": "D",
    "renamed": "R",
    "copied": "C",
}

# =============================================================================
# Diff Text Grammar
# =============================================================================

DIALECT_HEADER_PREFIXES: dict[DiffDialect, str] = {
    "hg": "diff ",
    "git": "diff --git ",
}

# Any file header, regardless of dialect, terminates a hunk
FILE_HEADER_PREFIX = "diff "
HUNK_HEADER_PREFIX = "@@"
OLD_PATH_PREFIX = "---"
NEW_PATH_PREFIX = "+++"
NO_NEWLINE_MARKER = "\\"
DEV_NULL = "/dev/null"

# Tabs in line content are always expanded to this many spaces
DEFAULT_TAB_WIDTH = 4

# =============================================================================
# Highlighting Defaults
# =============================================================================

DEFAULT_THEME = "monokai"
DEFAULT_ADD_BACKGROUND = "#00230c"
DEFAULT_DELETE_BACKGROUND = "#2d0000"

# Theme names rich understands in addition to the Pygments styles
RICH_ANSI_THEMES: tuple[str, ...] = ("ansi_dark", "ansi_light")

# =============================================================================
# Configuration Discovery
# =============================================================================

CONFIG_FILENAMES: tuple[str, ...] = (".diffview.toml", ".diffview.yaml", ".diffview.yml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_SECTION = "diffview"
USER_CONFIG_DIRNAME = "diffview"
USER_CONFIG_FILENAME = "config.toml"
