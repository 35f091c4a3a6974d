#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/parsers/base.py
"""Base classes for diff sources.

This module defines the abstract base class every diff source inherits from.
A diff source turns one kind of raw diff (unified-diff text in a given
dialect, or a structural handle from a native diff engine) into the
canonical list of :class:`~diffview.model.DiffFile` objects.

Dialect-specific parsing stays in the subclasses. What they share lives
here: option validation, turning collected hunk lines into a
:class:`~diffview.model.DiffHunk` with line numbers and highlighting, and the
"no changes" check on the final result.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Any, Optional, Sequence, Union

from diffview.constants import LineOrigin
from diffview.exceptions import InvalidOptionsError, NoChangesError
from diffview.highlight.align import LineHighlighter, highlight_hunk_lines
from diffview.model import DiffFile, DiffHunk, DiffLine
from diffview.options.base import BaseDiffOptions
from diffview.options.source import DiffSourceOptions

logger = logging.getLogger(__name__)


def build_hunk_lines(
    contents: Sequence[str],
    origins: Sequence[LineOrigin],
    old_start: int,
    new_start: int,
    spans: Optional[Sequence[Any]] = None,
) -> list[DiffLine]:
    """Assign line numbers to collected hunk lines.

    Two counters start at the header's ``old_start`` and ``new_start``.
    Context lines take both and advance both, deletions take and advance the
    old counter, additions the new one.

    Parameters
    ----------
    contents : sequence of str
        Normalised line texts in diff order
    origins : sequence of LineOrigin
        Origin of each line
    old_start, new_start : int
        Start lines from the hunk header
    spans : sequence, optional
        Highlighted spans (or None) per line

    Returns
    -------
    list of DiffLine
        Lines with line numbers set according to their origin

    """
    old_lineno = old_start
    new_lineno = new_start
    lines: list[DiffLine] = []

    for i, (content, origin) in enumerate(zip(contents, origins)):
        line_spans = spans[i] if spans is not None else None
        if origin == "context":
            lines.append(DiffLine(origin, content, old_lineno, new_lineno, line_spans))
            old_lineno += 1
            new_lineno += 1
        elif origin == "deletion":
            lines.append(DiffLine(origin, content, old_lineno, None, line_spans))
            old_lineno += 1
        else:
            lines.append(DiffLine(origin, content, None, new_lineno, line_spans))
            new_lineno += 1
    return lines


class BaseDiffSource(ABC):
    """Abstract base class for all diff sources.

    Parameters
    ----------
    highlighter : LineHighlighter or None, default None
        Highlighter used to attach spans to every line. Without one, every
        line's ``highlighted_spans`` is None.
    options : DiffSourceOptions or None, default None
        Source options. If None, default options are used.

    Examples
    --------
    Creating a custom source:

        >>> from diffview.parsers.base import BaseDiffSource
        >>>
        >>> class EmptySource(BaseDiffSource):
        ...     def parse(self, source):
        ...         return self._finish([])

    """

    source_name = "diff source"

    def __init__(self, highlighter: LineHighlighter | None = None, options: DiffSourceOptions | None = None):
        """Initialize the source with an optional highlighter and options."""
        self._validate_options_type(options, DiffSourceOptions, type(self).__name__)
        self.highlighter = highlighter
        self.options: DiffSourceOptions = options or DiffSourceOptions()

    @staticmethod
    def _validate_options_type(options: BaseDiffOptions | None, expected_type: type, source_name: str) -> None:
        """Validate that options are of the correct type for this source.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                source_name=source_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, source: Any) -> list[DiffFile]:
        """Parse a raw diff into the canonical model.

        Parameters
        ----------
        source : Any
            Raw diff in the form this source understands

        Returns
        -------
        list of DiffFile
            Files in diff order, never empty

        Raises
        ------
        NoChangesError
            If the diff contains no files

        """
        raise NotImplementedError

    def _build_hunk(
        self,
        file_path: Optional[Union[str, PurePosixPath]],
        header: str,
        old_start: int,
        old_count: int,
        new_start: int,
        new_count: int,
        contents: Sequence[str],
        origins: Sequence[LineOrigin],
    ) -> DiffHunk:
        """Build one hunk from its header values and collected lines.

        Highlighting runs once for the whole hunk so each side is lexed as a
        contiguous sequence.
        """
        spans = highlight_hunk_lines(self.highlighter, file_path, contents, origins)
        lines = build_hunk_lines(contents, origins, old_start, new_start, spans)
        hunk = DiffHunk(
            header=header,
            lines=tuple(lines),
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
        )
        if hunk.line_counts() != (old_count, new_count):
            logger.debug(
                "Hunk %r holds %d/%d lines, header declares %d/%d",
                header,
                *hunk.line_counts(),
                old_count,
                new_count,
            )
        return hunk

    def _finish(self, files: list[DiffFile]) -> list[DiffFile]:
        """Return the files, or raise NoChangesError when there are none."""
        if not files:
            raise NoChangesError()
        logger.debug("%s produced %d file(s)", self.source_name, len(files))
        return files
