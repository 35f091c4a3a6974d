#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Diff sources that build the canonical diff model.

Each source implements :class:`~diffview.parsers.base.BaseDiffSource`:

- :class:`~diffview.parsers.unified.UnifiedDiffParser` for unified-diff text
  (``"hg"`` and ``"git"`` header dialects)
- :class:`~diffview.parsers.structural.StructuralDiffAdapter` for structural
  handles from native diff engines
"""

from diffview.parsers.base import BaseDiffSource, build_hunk_lines
from diffview.parsers.structural import (
    StructuralDelta,
    StructuralDiff,
    StructuralDiffAdapter,
    StructuralDiffSnapshot,
    StructuralHunk,
    StructuralLine,
    parse_structural_diff,
)
from diffview.parsers.unified import (
    HunkHeader,
    LineCursor,
    UnifiedDiffParser,
    parse_binary_file_line,
    parse_hunk_header,
    parse_unified_diff,
)

__all__ = [
    "BaseDiffSource",
    "HunkHeader",
    "LineCursor",
    "StructuralDelta",
    "StructuralDiff",
    "StructuralDiffAdapter",
    "StructuralDiffSnapshot",
    "StructuralHunk",
    "StructuralLine",
    "UnifiedDiffParser",
    "build_hunk_lines",
    "parse_binary_file_line",
    "parse_hunk_header",
    "parse_structural_diff",
    "parse_unified_diff",
]
