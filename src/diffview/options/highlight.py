#  Copyright (c) 2025 Tom Villani, Ph.D.

# diffview/options/highlight.py
"""Configuration options for syntax highlighting of diff lines.

This module defines the theme and diff-background settings consumed by
:class:`diffview.highlight.syntax.SyntaxHighlighter`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pygments.styles import get_all_styles
from rich.color import Color, ColorParseError

from diffview.constants import (
    DEFAULT_ADD_BACKGROUND,
    DEFAULT_DELETE_BACKGROUND,
    DEFAULT_THEME,
    RICH_ANSI_THEMES,
)
from diffview.exceptions import ValidationError
from diffview.options.base import BaseDiffOptions


def available_themes() -> list[str]:
    """Return every theme name the highlighter accepts."""
    return sorted(set(get_all_styles()) | set(RICH_ANSI_THEMES))


@dataclass(frozen=True)
class HighlightOptions(BaseDiffOptions):
    """Configuration options for diff syntax highlighting.

    Parameters
    ----------
    enabled : bool, default True
        Whether diff lines receive highlighted spans at all. When disabled
        every line falls back to plain diff coloring.
    theme : str, default "monokai"
        Pygments style name used for foreground colors, or one of rich's
        ``ansi_dark`` / ``ansi_light`` themes.
    add_background : str, default "#00230c"
        Background color applied to the spans of added lines. Any color
        string rich understands is accepted.
    delete_background : str, default "#2d0000"
        Background color applied to the spans of deleted lines.

    """

    enabled: bool = field(
        default=True,
        metadata={"help": "Attach syntax-highlighted spans to diff lines", "importance": "core"},
    )

    theme: str = field(
        default=DEFAULT_THEME,
        metadata={
            "help": "Pygments theme for foreground colors (e.g. monokai, dracula, ansi_dark)",
            "importance": "core",
        },
    )

    add_background: str = field(
        default=DEFAULT_ADD_BACKGROUND,
        metadata={"help": "Background color for added lines", "importance": "advanced"},
    )

    delete_background: str = field(
        default=DEFAULT_DELETE_BACKGROUND,
        metadata={"help": "Background color for deleted lines", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the enabled flag, theme and color values.

        Raises
        ------
        ValidationError
            If ``enabled`` is not a bool, the theme is unknown or a
            background color cannot be parsed.

        """
        super().__post_init__()

        if not isinstance(self.enabled, bool):
            raise ValidationError(
                f"enabled must be a boolean, got {type(self.enabled).__name__}",
                parameter_name="enabled",
                parameter_value=self.enabled,
            )

        if self.theme not in available_themes():
            raise ValidationError(
                f"Invalid theme '{self.theme}'. See https://pygments.org/styles/ for the full list.",
                parameter_name="theme",
                parameter_value=self.theme,
            )

        for name in ("add_background", "delete_background"):
            value = getattr(self, name)
            try:
                Color.parse(value)
            except ColorParseError as e:
                raise ValidationError(
                    f"Invalid color for {name}: {value!r}",
                    parameter_name=name,
                    parameter_value=value,
                    original_error=e,
                ) from e
