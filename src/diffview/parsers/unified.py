#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/parsers/unified.py
"""Unified diff text parser.

This module parses the unified-diff text printed by line-oriented VCS tools
into :class:`~diffview.model.DiffFile` objects. Two header dialects are
supported:

``"hg"``
    Text headers starting with ``diff `` (``diff -r REV PATH``). The ``---``
    and ``+++`` lines may carry a tab-delimited timestamp.
``"git"``
    Git-style headers starting with ``diff --git `` as printed by git and
    Jujutsu, with ``new file``, ``deleted file``, ``rename`` and ``copy``
    metadata lines.

Lines are consumed through a single :class:`LineCursor` that is never
rewound, so each input line is looked at a bounded number of times.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from diffview.constants import (
    DEV_NULL,
    DIALECT_HEADER_PREFIXES,
    DIFF_DIALECTS,
    FILE_HEADER_PREFIX,
    HUNK_HEADER_PREFIX,
    NEW_PATH_PREFIX,
    NO_NEWLINE_MARKER,
    OLD_PATH_PREFIX,
    DiffDialect,
    FileStatus,
    LineOrigin,
)
from diffview.exceptions import ValidationError
from diffview.highlight.align import LineHighlighter
from diffview.model import DiffFile, DiffHunk
from diffview.options.source import DiffSourceOptions
from diffview.parsers.base import BaseDiffSource
from diffview.utils.text import normalize_line_content, split_diff_text

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_BINARY_LINE_PREFIX = "Binary file"
_GIT_BINARY_PATCH = "GIT binary patch"


@dataclass(frozen=True)
class HunkHeader:
    """Line ranges declared by a ``@@`` hunk header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int


@dataclass
class _FileRecord:
    """Mutable state of a file header while it is being read."""

    header: str
    old_path: Optional[PurePosixPath] = None
    new_path: Optional[PurePosixPath] = None
    status: Optional[FileStatus] = None
    is_binary: bool = False


class LineCursor:
    """Single-pass cursor over the lines of a diff.

    Parameters
    ----------
    lines : list of str
        Lines without terminators

    Examples
    --------
    >>> cursor = LineCursor(["a", "b"])
    >>> cursor.peek(), cursor.next(), cursor.next(), cursor.next()
    ('a', 'a', 'b', None)

    """

    def __init__(self, lines: list[str]):
        """Initialize the cursor at the first line."""
        self._lines = lines
        self._position = 0

    @property
    def position(self) -> int:
        """Index of the next line to be returned."""
        return self._position

    def at_end(self) -> bool:
        """Whether every line has been consumed."""
        return self._position >= len(self._lines)

    def peek(self) -> Optional[str]:
        """Return the next line without consuming it, or None at the end."""
        if self.at_end():
            return None
        return self._lines[self._position]

    def next(self) -> Optional[str]:
        """Consume and return the next line, or None at the end."""
        line = self.peek()
        if line is not None:
            self._position += 1
        return line


def parse_hunk_header(line: str) -> Optional[HunkHeader]:
    """Parse ``@@ -o[,oc] +n[,nc] @@`` into its four values.

    An omitted count means 1. Anything after the closing ``@@`` (usually the
    enclosing function name) is ignored.

    Parameters
    ----------
    line : str
        Hunk header line

    Returns
    -------
    HunkHeader or None
        Parsed ranges, or None when the line is not a well-formed header

    Examples
    --------
    >>> parse_hunk_header("@@ -1,3 +1,4 @@ def main():")
    HunkHeader(old_start=1, old_count=3, new_start=1, new_count=4)
    >>> parse_hunk_header("@@ -5 +5 @@")
    HunkHeader(old_start=5, old_count=1, new_start=5, new_count=1)
    >>> parse_hunk_header("@@ garbage @@") is None
    True

    """
    match = HUNK_HEADER_RE.match(line)
    if not match:
        return None

    old_start, old_count, new_start, new_count = match.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


def _path_or_none(path: str, prefix: str = "") -> Optional[PurePosixPath]:
    if path == DEV_NULL:
        return None
    if prefix and path.startswith(prefix):
        path = path[len(prefix) :]
    return PurePosixPath(path) if path else None


def parse_binary_file_line(line: str) -> Optional[tuple[Optional[PurePosixPath], Optional[PurePosixPath]]]:
    """Extract ``(old_path, new_path)`` from a binary notice.

    Handles ``Binary files a/OLD and b/NEW differ`` (git) and
    ``Binary file PATH has changed`` (hg). ``/dev/null`` yields None for that
    side.

    Returns
    -------
    tuple or None
        The two paths, or None when the line matches neither form

    """
    if line.startswith("Binary files ") and line.endswith(" differ"):
        content = line[len("Binary files ") : -len(" differ")]
        old_part, sep, new_part = content.partition(" and ")
        if not sep:
            return None
        return _path_or_none(old_part, "a/"), _path_or_none(new_part, "b/")

    if line.startswith("Binary file ") and line.endswith(" has changed"):
        path = _path_or_none(line[len("Binary file ") : -len(" has changed")])
        return path, path

    return None


def paths_from_file_header(header: str) -> tuple[Optional[PurePosixPath], Optional[PurePosixPath]]:
    """Recover paths from the ``diff`` header line itself.

    Used for records without ``---``/``+++`` lines, such as mode-only changes
    or empty new files.

    ``diff --git a/X b/Y`` yields ``(X, Y)``; when both names are equal the
    line is split in the middle, so names containing `` b/`` still work.
    Any other ``diff`` header (``diff -r REV [-r REV] PATH``) yields its last
    token for both sides.
    """
    git_prefix = DIALECT_HEADER_PREFIXES["git"]
    if header.startswith(git_prefix):
        rest = header[len(git_prefix) :]
        half = (len(rest) - 1) // 2
        if len(rest) % 2 == 1 and rest[half] == " " and rest[2:half] == rest[half + 3 :]:
            old_part, new_part = rest[:half], rest[half + 1 :]
        else:
            old_part, sep, new_part = rest.partition(" b/")
            if not sep:
                return None, None
            new_part = "b/" + new_part
        return _path_or_none(old_part, "a/"), _path_or_none(new_part, "b/")

    tokens = header[len(FILE_HEADER_PREFIX) :].split()
    if not tokens or tokens[-1].startswith("-"):
        return None, None
    path = PurePosixPath(tokens[-1])
    return path, path


class UnifiedDiffParser(BaseDiffSource):
    """Parse unified diff text into the canonical diff model.

    Parameters
    ----------
    dialect : {"hg", "git"}, default "git"
        Header dialect of the input text
    highlighter : LineHighlighter or None, default None
        Highlighter used to attach spans to every line
    options : DiffSourceOptions or None, default None
        Source options

    Examples
    --------
    >>> text = "diff --git a/f.txt b/f.txt\\n--- a/f.txt\\n+++ b/f.txt\\n@@ -1 +1 @@\\n-old\\n+new\\n"
    >>> [f.status for f in UnifiedDiffParser("git").parse(text)]
    ['modified']

    """

    source_name = "unified diff"

    def __init__(
        self,
        dialect: DiffDialect = "git",
        highlighter: LineHighlighter | None = None,
        options: DiffSourceOptions | None = None,
    ):
        """Initialize the parser for one header dialect."""
        super().__init__(highlighter=highlighter, options=options)
        if dialect not in DIFF_DIALECTS:
            raise ValidationError(
                f"Unknown diff dialect {dialect!r}; expected one of {', '.join(DIFF_DIALECTS)}",
                parameter_name="dialect",
                parameter_value=dialect,
            )
        self.dialect: DiffDialect = dialect
        self.header_prefix = DIALECT_HEADER_PREFIXES[dialect]

    def parse(self, source: str) -> list[DiffFile]:
        """Parse diff text.

        Parameters
        ----------
        source : str
            Unified diff text

        Returns
        -------
        list of DiffFile
            Files in the order they appear

        Raises
        ------
        NoChangesError
            If the text contains no file records

        """
        cursor = LineCursor(split_diff_text(source))
        files: list[DiffFile] = []

        while (line := cursor.next()) is not None:
            if not line.startswith(self.header_prefix):
                continue

            record = self._parse_file_header(cursor, line)
            if record.old_path is None and record.new_path is None:
                logger.warning("Skipping diff record without a file path: %r", line)
                continue

            if record.is_binary:
                files.append(
                    DiffFile(
                        old_path=record.old_path,
                        new_path=record.new_path,
                        status=record.status or "modified",
                        is_binary=True,
                    )
                )
                continue

            file_path = record.new_path if record.new_path is not None else record.old_path
            hunks = self._parse_hunks(cursor, file_path)
            files.append(
                DiffFile(
                    old_path=record.old_path,
                    new_path=record.new_path,
                    status=record.status or "modified",
                    hunks=tuple(hunks),
                )
            )

        return self._finish(files)

    def _header_path(self, line: str, prefix: str) -> Optional[PurePosixPath]:
        """Path of a ``---``/``+++`` line, without marker, side prefix or timestamp."""
        path = line[3:]
        if path.startswith(" "):
            path = path[1:]
        if self.dialect == "hg":
            path = path.split("\t", 1)[0]
        else:
            # git appends a tab to names containing spaces
            path = path.rstrip("\t")
        return _path_or_none(path, prefix)

    def _parse_file_header(self, cursor: LineCursor, header: str) -> _FileRecord:
        """Read header lines up to the first hunk, next file or binary notice."""
        record = _FileRecord(header=header)

        while (line := cursor.peek()) is not None:
            if line.startswith(OLD_PATH_PREFIX):
                record.old_path = self._header_path(line, "a/")
                cursor.next()
            elif line.startswith(NEW_PATH_PREFIX):
                record.new_path = self._header_path(line, "b/")
                cursor.next()
                break
            elif line.startswith("new file"):
                record.status = "added"
                cursor.next()
            elif line.startswith("deleted file"):
                record.status = "deleted"
                cursor.next()
            elif line.startswith("rename from "):
                record.status = "renamed"
                record.old_path = PurePosixPath(line[len("rename from ") :])
                cursor.next()
            elif line.startswith("rename to "):
                record.new_path = PurePosixPath(line[len("rename to ") :])
                cursor.next()
            elif line.startswith("copy from "):
                record.status = "copied"
                record.old_path = PurePosixPath(line[len("copy from ") :])
                cursor.next()
            elif line.startswith("copy to "):
                record.new_path = PurePosixPath(line[len("copy to ") :])
                cursor.next()
            elif line.startswith(HUNK_HEADER_PREFIX) or line.startswith(FILE_HEADER_PREFIX):
                break
            elif line.startswith(_BINARY_LINE_PREFIX) or line.startswith(_GIT_BINARY_PATCH):
                break
            else:
                # index, mode and similarity lines
                cursor.next()

        # A binary notice may also follow the ---/+++ pair
        line = cursor.peek()
        if line is not None and (line.startswith(_BINARY_LINE_PREFIX) or line.startswith(_GIT_BINARY_PATCH)):
            cursor.next()
            record.is_binary = True
            paths = parse_binary_file_line(line)
            if paths is not None:
                old_path, new_path = paths
                if record.old_path is None:
                    record.old_path = old_path
                if record.new_path is None:
                    record.new_path = new_path

        if record.old_path is None and record.new_path is None:
            self._recover_paths(record)
        elif record.status in ("renamed", "copied") and (record.old_path is None or record.new_path is None):
            old_path, new_path = paths_from_file_header(record.header)
            record.old_path = record.old_path or old_path
            record.new_path = record.new_path or new_path
            if record.old_path is None or record.new_path is None:
                logger.debug("Incomplete %s record %r; treating as modified", record.status, record.header)
                record.status = None

        if record.status is None:
            if record.old_path is None and record.new_path is not None:
                record.status = "added"
            elif record.old_path is not None and record.new_path is None:
                record.status = "deleted"
        return record

    def _recover_paths(self, record: _FileRecord) -> None:
        """Fill both paths from the header line, honouring add/delete metadata."""
        old_path, new_path = paths_from_file_header(record.header)
        if record.status == "added":
            record.new_path = new_path or old_path
        elif record.status == "deleted":
            record.old_path = old_path or new_path
        else:
            record.old_path, record.new_path = old_path, new_path
        if record.old_path is not None or record.new_path is not None:
            logger.debug("Recovered paths from header %r", record.header)

    def _parse_hunks(self, cursor: LineCursor, file_path: Optional[PurePosixPath]) -> list[DiffHunk]:
        """Parse hunks until the next file header or the end of input."""
        hunks: list[DiffHunk] = []
        while (line := cursor.peek()) is not None and not line.startswith(FILE_HEADER_PREFIX):
            if line.startswith(HUNK_HEADER_PREFIX):
                hunk = self._parse_hunk(cursor, file_path)
                if hunk is not None:
                    hunks.append(hunk)
            else:
                cursor.next()
        return hunks

    def _parse_hunk(self, cursor: LineCursor, file_path: Optional[PurePosixPath]) -> Optional[DiffHunk]:
        """Parse one hunk; a malformed header drops the hunk and its body."""
        header = cursor.next()
        assert header is not None
        ranges = parse_hunk_header(header)

        contents: list[str] = []
        origins: list[LineOrigin] = []
        while (line := cursor.peek()) is not None:
            if line.startswith(HUNK_HEADER_PREFIX) or line.startswith(FILE_HEADER_PREFIX):
                break
            cursor.next()

            origin: LineOrigin
            if line.startswith(NO_NEWLINE_MARKER):
                continue
            elif line.startswith("+"):
                if line.startswith(NEW_PATH_PREFIX):
                    continue
                origin = "addition"
            elif line.startswith("-"):
                if line.startswith(OLD_PATH_PREFIX):
                    continue
                origin = "deletion"
            elif line.startswith(" ") or not line:
                origin = "context"
            else:
                continue

            contents.append(normalize_line_content(line[1:], self.options.tab_width))
            origins.append(origin)

        if ranges is None:
            logger.debug("Dropping hunk with malformed header %r (%d lines)", header, len(contents))
            return None

        return self._build_hunk(
            file_path,
            header,
            ranges.old_start,
            ranges.old_count,
            ranges.new_start,
            ranges.new_count,
            contents,
            origins,
        )


def parse_unified_diff(
    text: str,
    dialect: DiffDialect = "git",
    highlighter: LineHighlighter | None = None,
    options: DiffSourceOptions | None = None,
) -> list[DiffFile]:
    """Parse unified diff text into the canonical diff model.

    Parameters
    ----------
    text : str
        Unified diff text
    dialect : {"hg", "git"}, default "git"
        Header dialect of the input
    highlighter : LineHighlighter or None, default None
        Highlighter for line spans
    options : DiffSourceOptions or None, default None
        Source options

    Returns
    -------
    list of DiffFile
        Parsed files

    Raises
    ------
    NoChangesError
        If the text contains no file records
    ValidationError
        If the dialect is unknown

    """
    return UnifiedDiffParser(dialect, highlighter=highlighter, options=options).parse(text)
