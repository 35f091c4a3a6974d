#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for diffview.

Options are frozen dataclasses; use ``create_updated()`` to derive a
modified copy.
"""

from __future__ import annotations

from diffview.options.base import BaseDiffOptions, CloneFrozenMixin
from diffview.options.highlight import HighlightOptions, available_themes
from diffview.options.source import DiffSourceOptions

__all__ = [
    "BaseDiffOptions",
    "CloneFrozenMixin",
    "DiffSourceOptions",
    "HighlightOptions",
    "available_themes",
]
