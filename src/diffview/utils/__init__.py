#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/utils/__init__.py
"""Utility modules for the diffview package."""

from diffview.utils.text import expand_tabs, normalize_line_content, split_diff_text

__all__ = [
    "expand_tabs",
    "normalize_line_content",
    "split_diff_text",
]
