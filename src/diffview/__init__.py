"""diffview - one line-accurate diff model for every VCS diff source.

diffview turns the diffs produced by version-control tools into a single
canonical model of files, hunks and lines, and attaches syntax-highlighted
spans to every line without losing lexer context across diff boundaries.

Diff Sources
------------
- **Unified diff text**: Mercurial ``diff -r`` output and git-style
  ``diff --git`` output (git, Jujutsu, patch files)
- **Structural handles**: deltas/hunks/lines from native diff engines such
  as libgit2

Key Features
------------
- Frozen ``DiffFile`` / ``DiffHunk`` / ``DiffLine`` model with exact old and
  new line numbers
- Pygments-based highlighting that lexes the old and new side of a hunk
  separately and maps the spans back onto diff lines
- Gap calculation and on-demand context fetching between hunks
- TOML / YAML configuration discovery

Examples
--------
Parse a git patch:

    >>> from diffview import parse_unified_diff
    >>> files = parse_unified_diff(patch_text, "git")
    >>> for f in files:
    ...     print(f.status_char, f.display_path, f.additions, f.deletions)

Parse with syntax highlighting:

    >>> from diffview import SyntaxHighlighter, parse_unified_diff
    >>> files = parse_unified_diff(patch_text, "git", highlighter=SyntaxHighlighter())
    >>> files[0].hunks[0].lines[0].highlighted_spans

"""

from diffview.config import DiffViewConfig, discover_config_file, load_config, load_highlight_options
from diffview.context import (
    ContentSource,
    WorkingTreeContentSource,
    calculate_gap,
    expand_gap,
    fetch_context_lines,
    gap_range,
    hunk_gaps,
)
from diffview.exceptions import (
    ConfigError,
    ContentDecodingError,
    ContentError,
    ContentReadError,
    DiffSourceError,
    DiffViewError,
    InvalidOptionsError,
    NoChangesError,
    ValidationError,
)
from diffview.highlight.align import (
    apply_diff_background,
    highlight_hunk_lines,
    highlighted_line_for_diff,
    split_diff_lines_for_highlighting,
)
from diffview.highlight.syntax import SyntaxHighlighter
from diffview.model import DiffFile, DiffHunk, DiffLine, FileStatus, LineOrigin
from diffview.options import DiffSourceOptions, HighlightOptions
from diffview.parsers.structural import StructuralDiff, StructuralDiffAdapter, parse_structural_diff
from diffview.parsers.unified import UnifiedDiffParser, parse_unified_diff

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ContentDecodingError",
    "ContentError",
    "ContentReadError",
    "ContentSource",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffSourceError",
    "DiffSourceOptions",
    "DiffViewConfig",
    "DiffViewError",
    "FileStatus",
    "HighlightOptions",
    "InvalidOptionsError",
    "LineOrigin",
    "NoChangesError",
    "StructuralDiff",
    "StructuralDiffAdapter",
    "SyntaxHighlighter",
    "UnifiedDiffParser",
    "ValidationError",
    "WorkingTreeContentSource",
    "apply_diff_background",
    "calculate_gap",
    "discover_config_file",
    "expand_gap",
    "fetch_context_lines",
    "gap_range",
    "highlight_hunk_lines",
    "highlighted_line_for_diff",
    "hunk_gaps",
    "load_config",
    "load_highlight_options",
    "parse_structural_diff",
    "parse_unified_diff",
    "split_diff_lines_for_highlighting",
]
