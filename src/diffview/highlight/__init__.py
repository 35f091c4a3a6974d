#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Syntax highlighting for diff lines.

:mod:`diffview.highlight.syntax` turns file lines into styled spans and
:mod:`diffview.highlight.align` maps those spans back onto interleaved diff
lines.
"""

from diffview.highlight.align import (
    HighlightSequences,
    LineHighlighter,
    apply_diff_background,
    highlight_hunk_lines,
    highlighted_line_at,
    highlighted_line_for_diff,
    split_diff_lines_for_highlighting,
)
from diffview.highlight.syntax import (
    SyntaxHighlighter,
    lexer_class_from_shebang,
    resolve_lexer_class,
    split_tokens_by_line,
)

__all__ = [
    "HighlightSequences",
    "LineHighlighter",
    "SyntaxHighlighter",
    "apply_diff_background",
    "highlight_hunk_lines",
    "highlighted_line_at",
    "highlighted_line_for_diff",
    "lexer_class_from_shebang",
    "resolve_lexer_class",
    "split_diff_lines_for_highlighting",
    "split_tokens_by_line",
]
