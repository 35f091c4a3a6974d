#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/context.py
"""Hidden-context gaps between hunks and on-demand context fetching.

A diff only shows a few lines around each change. The lines between two
hunks (or before the first hunk) are a *gap*. This module computes gap sizes
and ranges in new-file line numbers and reads the hidden lines from a
:class:`ContentSource` when a gap is expanded.

Fetching never mutates the diff model; it returns fresh context
:class:`~diffview.model.DiffLine` objects for the caller to display.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Protocol, Union

from diffview.constants import DEFAULT_TAB_WIDTH, FileStatus
from diffview.exceptions import ContentDecodingError, ContentReadError, DiffViewError, ValidationError
from diffview.model import DiffFile, DiffLine
from diffview.utils.text import expand_tabs, split_diff_text

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePosixPath]


class ContentSource(Protocol):
    """Read access to file content for gap expansion.

    ``read_working_file`` returns the file as it is now (working tree or the
    newest revision of the diff). ``read_committed_file`` returns the last
    committed version and is used for deleted files.
    """

    def read_working_file(self, path: PurePosixPath) -> bytes: ...

    def read_committed_file(self, path: PurePosixPath) -> bytes: ...


class WorkingTreeContentSource:
    """Content source backed by a checkout on disk.

    Parameters
    ----------
    root : str or Path
        Working-tree root; diff paths are resolved relative to it
    committed_reader : callable, optional
        Returns the committed bytes of a path. VCS backends inject their own
        blob lookup here. Without one, committed content is unavailable.

    Examples
    --------
    >>> source = WorkingTreeContentSource("/path/to/repo")
    >>> source.read_working_file(PurePosixPath("README.md"))  # doctest: +SKIP
    b'# Project...'

    """

    def __init__(
        self,
        root: Union[str, Path],
        committed_reader: Optional[Callable[[PurePosixPath], bytes]] = None,
    ):
        self.root = Path(root)
        self.committed_reader = committed_reader

    def read_working_file(self, path: PurePosixPath) -> bytes:
        """Read a file from the working tree."""
        return (self.root / Path(*PurePosixPath(path).parts)).read_bytes()

    def read_committed_file(self, path: PurePosixPath) -> bytes:
        """Read the committed version of a file through the injected reader.

        Raises
        ------
        ContentReadError
            If no committed reader was configured

        """
        if self.committed_reader is None:
            raise ContentReadError(str(path), message=f"No committed content available for {path}")
        return self.committed_reader(PurePosixPath(path))


def calculate_gap(previous_hunk: Optional[tuple[int, int]], current_new_start: int) -> int:
    """Count the hidden new-file lines before a hunk.

    Parameters
    ----------
    previous_hunk : tuple of (int, int) or None
        ``(new_start, new_count)`` of the preceding hunk, or None for the
        first hunk of a file
    current_new_start : int
        ``new_start`` of the hunk the gap precedes

    Returns
    -------
    int
        Number of hidden lines, never negative

    Examples
    --------
    >>> calculate_gap(None, 10)
    9
    >>> calculate_gap((5, 3), 15)
    7
    >>> calculate_gap((5, 10), 12)
    0

    """
    if previous_hunk is None:
        return max(0, current_new_start - 1)
    previous_start, previous_count = previous_hunk
    return max(0, current_new_start - (previous_start + previous_count))


def _hunk_at(file: DiffFile, hunk_index: int):
    if not 0 <= hunk_index < len(file.hunks):
        raise ValidationError(
            f"Hunk index {hunk_index} out of range for {file.display_path} ({len(file.hunks)} hunks)",
            parameter_name="hunk_index",
            parameter_value=hunk_index,
        )
    return file.hunks[hunk_index]


def gap_range(file: DiffFile, hunk_index: int) -> Optional[tuple[int, int]]:
    """Return the inclusive new-file line range hidden before a hunk.

    Parameters
    ----------
    file : DiffFile
        File owning the hunk
    hunk_index : int
        Index of the hunk the gap precedes

    Returns
    -------
    tuple of (int, int) or None
        ``(start, end)`` line numbers, or None when nothing is hidden

    Raises
    ------
    ValidationError
        If ``hunk_index`` does not name a hunk of ``file``

    """
    hunk = _hunk_at(file, hunk_index)
    if hunk_index == 0:
        start = 1
    else:
        previous = file.hunks[hunk_index - 1]
        start = previous.new_start + previous.new_count
    end = hunk.new_start - 1
    if start > end:
        return None
    return start, end


def hunk_gaps(file: DiffFile) -> list[int]:
    """Return the gap size before every hunk of a file, in hunk order."""
    gaps = []
    previous: Optional[tuple[int, int]] = None
    for hunk in file.hunks:
        gaps.append(calculate_gap(previous, hunk.new_start))
        previous = (hunk.new_start, hunk.new_count)
    return gaps


def fetch_context_lines(
    source: ContentSource,
    file_path: PathLike,
    status: FileStatus,
    start: int,
    end: int,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[DiffLine]:
    """Read lines ``start..end`` (inclusive, 1-based) as context lines.

    Deleted files are read from committed content, every other status from
    the working content. Lines beyond the end of the file are left out.

    Parameters
    ----------
    source : ContentSource
        Where file content comes from
    file_path : str or PurePosixPath
        Repository-relative path
    status : FileStatus
        Status of the file in the diff
    start, end : int
        Inclusive line range
    tab_width : int, default 4
        Spaces per tab in the returned content

    Returns
    -------
    list of DiffLine
        Context lines whose old and new line numbers are both the file line
        number. Empty when ``start`` is 0 or greater than ``end``.

    Raises
    ------
    ContentReadError
        If the content cannot be read
    ContentDecodingError
        If the content is not valid UTF-8

    """
    if start < 1 or start > end:
        return []

    path = PurePosixPath(file_path)
    try:
        if status == "deleted":
            raw = source.read_committed_file(path)
        else:
            raw = source.read_working_file(path)
    except DiffViewError:
        raise
    except Exception as e:
        raise ContentReadError(str(path), original_error=e) from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ContentDecodingError(str(path), original_error=e) from e

    file_lines = split_diff_text(text)
    last = min(end, len(file_lines))
    if last < end:
        logger.debug("Context range %d-%d of %s ends past EOF (%d lines)", start, end, path, len(file_lines))

    return [
        DiffLine("context", expand_tabs(file_lines[lineno - 1], tab_width), lineno, lineno)
        for lineno in range(start, last + 1)
    ]


def expand_gap(
    source: ContentSource,
    file: DiffFile,
    hunk_index: int,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> list[DiffLine]:
    """Fetch all lines hidden before a hunk.

    Returns an empty list when the hunk has no gap before it; the source is
    not touched in that case.
    """
    hidden = gap_range(file, hunk_index)
    if hidden is None:
        return []
    return fetch_context_lines(source, file.display_path, file.status, hidden[0], hidden[1], tab_width)
