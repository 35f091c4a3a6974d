#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/model.py
"""Canonical diff model shared by every diff source.

A diff request (working tree, commit range, or pull-request range) produces
a list of :class:`DiffFile` objects. Each file owns an ordered tuple of
:class:`DiffHunk` objects, and each hunk an ordered tuple of
:class:`DiffLine` objects. All three are frozen: once a parser or adapter
has built the tree it is never mutated, so readers never race a writer.
A new diff request simply produces a new tree.

Line numbering invariant
------------------------
``old_lineno`` is set exactly for context and deletion lines, and
``new_lineno`` exactly for context and addition lines. Replaying the line
origins of a hunk from ``old_start``/``new_start`` reproduces the header's
``old_count``/``new_count``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Optional

from rich.style import Style

from diffview.constants import FILE_STATUSES, LINE_ORIGINS, STATUS_CHARS, FileStatus, LineOrigin
from diffview.exceptions import ValidationError

Span = tuple[Style, str]
Spans = tuple[Span, ...]


def status_char(status: FileStatus) -> str:
    """Return the single-letter code for a file status (``A``, ``M``, ``D``, ``R``, ``C``)."""
    return STATUS_CHARS[status]


def origin_has_old_side(origin: LineOrigin) -> bool:
    """Whether lines of this origin exist in the old file."""
    return origin in ("context", "deletion")


def origin_has_new_side(origin: LineOrigin) -> bool:
    """Whether lines of this origin exist in the new file."""
    return origin in ("context", "addition")


@dataclass(frozen=True)
class DiffLine:
    """A single line of a hunk.

    Parameters
    ----------
    origin : LineOrigin
        Whether the line is unchanged context, an addition, or a deletion
    content : str
        Line text with tabs expanded and no trailing newline
    old_lineno : int or None
        Line number in the old file; set for context and deletion lines
    new_lineno : int or None
        Line number in the new file; set for context and addition lines
    highlighted_spans : tuple of (Style, str) or None
        Syntax-highlighted fragments. When present they concatenate to
        ``content``. ``None`` means the renderer falls back to plain diff
        coloring.

    Raises
    ------
    ValidationError
        If the origin is unknown, line numbers disagree with the origin, or
        the spans do not reproduce the content

    """

    origin: LineOrigin
    content: str
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None
    highlighted_spans: Optional[Spans] = None

    def __post_init__(self) -> None:
        """Validate the line numbering and span invariants."""
        if self.origin not in LINE_ORIGINS:
            raise ValidationError(
                f"Unknown line origin: {self.origin!r}", parameter_name="origin", parameter_value=self.origin
            )
        if (self.old_lineno is not None) != origin_has_old_side(self.origin):
            raise ValidationError(
                f"old_lineno must {'' if origin_has_old_side(self.origin) else 'not '}be set for "
                f"{self.origin} lines",
                parameter_name="old_lineno",
                parameter_value=self.old_lineno,
            )
        if (self.new_lineno is not None) != origin_has_new_side(self.origin):
            raise ValidationError(
                f"new_lineno must {'' if origin_has_new_side(self.origin) else 'not '}be set for "
                f"{self.origin} lines",
                parameter_name="new_lineno",
                parameter_value=self.new_lineno,
            )
        if self.highlighted_spans is not None:
            spans = tuple(self.highlighted_spans)
            if "".join(text for _, text in spans) != self.content:
                raise ValidationError(
                    "highlighted spans must concatenate to the line content",
                    parameter_name="highlighted_spans",
                    parameter_value=spans,
                )
            object.__setattr__(self, "highlighted_spans", spans)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation (spans are reported as a flag)."""
        return {
            "origin": self.origin,
            "content": self.content,
            "old_lineno": self.old_lineno,
            "new_lineno": self.new_lineno,
            "highlighted": self.highlighted_spans is not None,
        }


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of a diff covering an old/new line range.

    Parameters
    ----------
    header : str
        The ``@@ ... @@`` header text
    lines : tuple of DiffLine
        Lines in diff order
    old_start, old_count : int
        Old-file range from the header
    new_start, new_count : int
        New-file range from the header

    """

    header: str
    lines: tuple[DiffLine, ...] = field(default_factory=tuple)
    old_start: int = 0
    old_count: int = 1
    new_start: int = 0
    new_count: int = 1

    def __post_init__(self) -> None:
        """Freeze the line container."""
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def old_end(self) -> int:
        """First old-file line after this hunk."""
        return self.old_start + self.old_count

    @property
    def new_end(self) -> int:
        """First new-file line after this hunk."""
        return self.new_start + self.new_count

    def line_counts(self) -> tuple[int, int]:
        """Replay line origins and return ``(old_lines, new_lines)``.

        For a well-formed hunk the result equals ``(old_count, new_count)``.
        """
        old_lines = sum(1 for line in self.lines if origin_has_old_side(line.origin))
        new_lines = sum(1 for line in self.lines if origin_has_new_side(line.origin))
        return old_lines, new_lines

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "header": self.header,
            "old_start": self.old_start,
            "old_count": self.old_count,
            "new_start": self.new_start,
            "new_count": self.new_count,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class DiffFile:
    """All changes to one file.

    Parameters
    ----------
    old_path : PurePosixPath or None
        Repository-relative path before the change; ``None`` for added files
    new_path : PurePosixPath or None
        Repository-relative path after the change; ``None`` for deleted files
    status : FileStatus
        Kind of change
    hunks : tuple of DiffHunk
        Hunks in file order; always empty for binary files
    is_binary : bool
        Whether either side is binary content

    Raises
    ------
    ValidationError
        If neither path is present, the status is unknown, a rename or copy
        lacks one of its paths, or a binary file carries hunks

    """

    old_path: Optional[PurePosixPath]
    new_path: Optional[PurePosixPath]
    status: FileStatus
    hunks: tuple[DiffHunk, ...] = field(default_factory=tuple)
    is_binary: bool = False

    def __post_init__(self) -> None:
        """Normalise paths and validate file-level invariants."""
        for attr in ("old_path", "new_path"):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, PurePosixPath):
                object.__setattr__(self, attr, PurePosixPath(value))
        object.__setattr__(self, "hunks", tuple(self.hunks))

        if self.status not in FILE_STATUSES:
            raise ValidationError(
                f"Unknown file status: {self.status!r}", parameter_name="status", parameter_value=self.status
            )
        if self.old_path is None and self.new_path is None:
            raise ValidationError("A diff file needs at least one of old_path or new_path", parameter_name="old_path")
        if self.status in ("renamed", "copied") and (self.old_path is None or self.new_path is None):
            raise ValidationError(
                f"A {self.status} file needs both old_path and new_path",
                parameter_name="status",
                parameter_value=self.status,
            )
        if self.is_binary and self.hunks:
            raise ValidationError("Binary files cannot carry hunks", parameter_name="hunks")

    @property
    def display_path(self) -> PurePosixPath:
        """The new path when present, otherwise the old path."""
        path = self.new_path if self.new_path is not None else self.old_path
        assert path is not None
        return path

    @property
    def status_char(self) -> str:
        """Single-letter status code."""
        return status_char(self.status)

    @property
    def additions(self) -> int:
        """Number of added lines across all hunks."""
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.origin == "addition")

    @property
    def deletions(self) -> int:
        """Number of deleted lines across all hunks."""
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.origin == "deletion")

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "old_path": str(self.old_path) if self.old_path is not None else None,
            "new_path": str(self.new_path) if self.new_path is not None else None,
            "display_path": str(self.display_path),
            "status": self.status,
            "is_binary": self.is_binary,
            "additions": self.additions,
            "deletions": self.deletions,
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }
