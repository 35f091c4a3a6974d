#  Copyright (c) 2025 Tom Villani, Ph.D.

# diffview/options/source.py
"""Configuration options shared by the diff sources."""

from __future__ import annotations

from dataclasses import dataclass, field

from diffview.constants import DEFAULT_TAB_WIDTH
from diffview.exceptions import ValidationError
from diffview.options.base import BaseDiffOptions

MAX_TAB_WIDTH = 16


@dataclass(frozen=True)
class DiffSourceOptions(BaseDiffOptions):
    """Configuration options for building the diff model.

    Parameters
    ----------
    tab_width : int, default 4
        Number of spaces each tab in line content is replaced with. Line
        content is normalised before highlighting, so spans always match the
        expanded text.

    """

    tab_width: int = field(
        default=DEFAULT_TAB_WIDTH,
        metadata={"help": "Spaces per tab in line content", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the tab width.

        Raises
        ------
        ValidationError
            If the tab width is not an integer between 1 and 16

        """
        super().__post_init__()

        if isinstance(self.tab_width, bool) or not isinstance(self.tab_width, int):
            raise ValidationError(
                f"tab_width must be an integer, got {type(self.tab_width).__name__}",
                parameter_name="tab_width",
                parameter_value=self.tab_width,
            )
        if not 1 <= self.tab_width <= MAX_TAB_WIDTH:
            raise ValidationError(
                f"tab_width must be between 1 and {MAX_TAB_WIDTH}, got {self.tab_width}",
                parameter_name="tab_width",
                parameter_value=self.tab_width,
            )
