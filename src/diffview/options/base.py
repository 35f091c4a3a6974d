"""Base classes for diffview options.

This module defines the foundation classes for the frozen option
dataclasses used by the diff sources and the syntax highlighter.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseDiffOptions(CloneFrozenMixin):
    """Base class for all diffview options.

    Notes
    -----
    Subclasses define their settings as frozen dataclass fields whose
    ``metadata`` carries a ``help`` string, which configuration loading uses
    to report the accepted keys.

    """

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return the names of all option fields."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def field_help(cls) -> dict[str, str]:
        """Return the help text of every option field."""
        return {f.name: f.metadata.get("help", "") for f in fields(cls)}

    def __post_init__(self) -> None:
        """Validate option values. Subclasses extend this."""
        pass
