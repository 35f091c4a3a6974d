#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/parsers/structural.py
"""Adapter from structural diff handles to the canonical model.

Native diff engines (libgit2 and its bindings) expose a computed diff as
deltas, hunks and lines reached through index accessors rather than as text.
:class:`StructuralDiffAdapter` walks such a handle and produces the same
:class:`~diffview.model.DiffFile` list as the text parser, with the same
content normalisation, line numbering and highlighting.

The handle only has to satisfy the :class:`StructuralDiff` protocol. A VCS
backend wraps its engine's diff object in a thin class implementing it;
:class:`StructuralDiffSnapshot` is a plain in-memory implementation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, Optional, Protocol, TypeVar, Union

from diffview.constants import FileStatus, LineOrigin
from diffview.exceptions import DiffSourceError, DiffViewError
from diffview.highlight.align import LineHighlighter
from diffview.model import DiffFile, DiffHunk
from diffview.options.source import DiffSourceOptions
from diffview.parsers.base import BaseDiffSource
from diffview.utils.text import normalize_line_content

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Engine delta status names (case-insensitive); anything else is "modified"
DELTA_STATUS_MAP: dict[str, FileStatus] = {
    "added": "added",
    "untracked": "added",
    "deleted": "deleted",
    "modified": "modified",
    "renamed": "renamed",
    "copied": "copied",
}

LINE_ORIGIN_MAP: dict[str, LineOrigin] = {
    "+": "addition",
    "-": "deletion",
    " ": "context",
}

# "=", ">" and "<" mark end-of-file newline changes; they carry no content
EOF_NEWLINE_ORIGINS = frozenset("=><")


class DeltaInfo(Protocol):
    """One changed file of a structural diff."""

    @property
    def status(self) -> str: ...

    @property
    def old_path(self) -> Optional[str]: ...

    @property
    def new_path(self) -> Optional[str]: ...

    @property
    def old_is_binary(self) -> bool: ...

    @property
    def new_is_binary(self) -> bool: ...


class HunkInfo(Protocol):
    """Header values of one hunk."""

    @property
    def header(self) -> Union[str, bytes]: ...

    @property
    def old_start(self) -> int: ...

    @property
    def old_lines(self) -> int: ...

    @property
    def new_start(self) -> int: ...

    @property
    def new_lines(self) -> int: ...


class LineInfo(Protocol):
    """One line of a hunk. Absent line numbers are None or negative."""

    @property
    def origin(self) -> str: ...

    @property
    def old_lineno(self) -> Optional[int]: ...

    @property
    def new_lineno(self) -> Optional[int]: ...

    @property
    def content(self) -> Union[bytes, str]: ...


class StructuralDiff(Protocol):
    """Index-based access to a computed diff."""

    def num_deltas(self) -> int: ...

    def delta(self, delta_index: int) -> DeltaInfo: ...

    def num_hunks(self, delta_index: int) -> int: ...

    def hunk(self, delta_index: int, hunk_index: int) -> HunkInfo: ...

    def num_lines_in_hunk(self, delta_index: int, hunk_index: int) -> int: ...

    def line_in_hunk(self, delta_index: int, hunk_index: int, line_index: int) -> LineInfo: ...


@dataclass(frozen=True)
class StructuralDelta:
    """In-memory :class:`DeltaInfo`."""

    status: str
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    old_is_binary: bool = False
    new_is_binary: bool = False


@dataclass(frozen=True)
class StructuralHunk:
    """In-memory :class:`HunkInfo`."""

    header: Union[str, bytes]
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


@dataclass(frozen=True)
class StructuralLine:
    """In-memory :class:`LineInfo`."""

    origin: str
    content: Union[bytes, str]
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None


@dataclass
class StructuralDiffSnapshot:
    """In-memory :class:`StructuralDiff`.

    Parameters
    ----------
    deltas : list
        One ``(delta, hunks)`` pair per file, where ``hunks`` is a list of
        ``(hunk, lines)`` pairs

    Examples
    --------
    >>> snapshot = StructuralDiffSnapshot([
    ...     (StructuralDelta("added", new_path="hello.py"), [
    ...         (StructuralHunk("@@ -0,0 +1 @@", 0, 0, 1, 1), [StructuralLine("+", b"print(1)\\n", new_lineno=1)]),
    ...     ]),
    ... ])
    >>> snapshot.num_lines_in_hunk(0, 0)
    1

    """

    deltas: list[tuple[StructuralDelta, list[tuple[StructuralHunk, list[StructuralLine]]]]] = field(
        default_factory=list
    )

    def num_deltas(self) -> int:
        return len(self.deltas)

    def delta(self, delta_index: int) -> StructuralDelta:
        return self.deltas[delta_index][0]

    def num_hunks(self, delta_index: int) -> int:
        return len(self.deltas[delta_index][1])

    def hunk(self, delta_index: int, hunk_index: int) -> StructuralHunk:
        return self.deltas[delta_index][1][hunk_index][0]

    def num_lines_in_hunk(self, delta_index: int, hunk_index: int) -> int:
        return len(self.deltas[delta_index][1][hunk_index][1])

    def line_in_hunk(self, delta_index: int, hunk_index: int, line_index: int) -> StructuralLine:
        return self.deltas[delta_index][1][hunk_index][1][line_index]


def map_delta_status(status: str) -> FileStatus:
    """Map an engine status name onto :data:`~diffview.constants.FileStatus`."""
    return DELTA_STATUS_MAP.get(str(status).lower(), "modified")


def _lineno_or_none(value: Optional[int]) -> Optional[int]:
    if value is None or value < 0:
        return None
    return value


def _decode_header(header: Union[str, bytes]) -> str:
    if isinstance(header, bytes):
        header = header.decode("utf-8", errors="replace")
    return header.strip()


class StructuralDiffAdapter(BaseDiffSource):
    """Convert a :class:`StructuralDiff` handle into the canonical model.

    Parameters
    ----------
    highlighter : LineHighlighter or None, default None
        Highlighter used to attach spans to every line
    options : DiffSourceOptions or None, default None
        Source options

    Notes
    -----
    Line numbers are recomputed from the hunk header so both diff sources
    follow the same numbering rules; engine-supplied numbers that disagree
    are logged at DEBUG level.

    """

    source_name = "structural diff"

    def parse(self, source: StructuralDiff) -> list[DiffFile]:
        """Walk every delta of the handle.

        Parameters
        ----------
        source : StructuralDiff
            Diff handle from a native engine

        Returns
        -------
        list of DiffFile
            One file per delta with a path, in handle order

        Raises
        ------
        NoChangesError
            If the handle has no deltas with a file path
        DiffSourceError
            If any accessor of the handle fails

        """
        files: list[DiffFile] = []
        num_deltas = self._call(source.num_deltas, "count deltas")

        for delta_index in range(num_deltas):
            delta = self._call(lambda: source.delta(delta_index), f"read delta {delta_index}")
            diff_file = self._convert_delta(source, delta_index, delta)
            if diff_file is not None:
                files.append(diff_file)

        return self._finish(files)

    def _call(self, accessor: Callable[[], T], action: str) -> T:
        """Invoke a handle accessor, wrapping engine failures."""
        try:
            return accessor()
        except DiffViewError:
            raise
        except Exception as e:
            raise DiffSourceError(
                f"Diff engine failed to {action}: {e}",
                source_name=self.source_name,
                original_error=e,
            ) from e

    def _convert_delta(self, source: StructuralDiff, delta_index: int, delta: DeltaInfo) -> Optional[DiffFile]:
        status = map_delta_status(delta.status)
        old_path = PurePosixPath(delta.old_path) if delta.old_path else None
        new_path = PurePosixPath(delta.new_path) if delta.new_path else None

        # Engines report the surviving path on both sides of adds and deletes
        if status == "added" and new_path is not None:
            old_path = None
        elif status == "deleted" and old_path is not None:
            new_path = None
        elif status in ("renamed", "copied") and (old_path is None or new_path is None):
            logger.debug("%s delta %d lacks one path; treating as modified", status, delta_index)
            status = "modified"

        if old_path is None and new_path is None:
            logger.warning("Skipping delta %d without a file path", delta_index)
            return None

        is_binary = bool(delta.old_is_binary or delta.new_is_binary)
        if is_binary:
            return DiffFile(old_path=old_path, new_path=new_path, status=status, is_binary=True)

        file_path = new_path if new_path is not None else old_path
        num_hunks = self._call(lambda: source.num_hunks(delta_index), f"count hunks of delta {delta_index}")
        hunks = [self._convert_hunk(source, delta_index, hunk_index, file_path) for hunk_index in range(num_hunks)]
        return DiffFile(old_path=old_path, new_path=new_path, status=status, hunks=tuple(hunks))

    def _convert_hunk(
        self,
        source: StructuralDiff,
        delta_index: int,
        hunk_index: int,
        file_path: Optional[PurePosixPath],
    ) -> DiffHunk:
        where = f"hunk {hunk_index} of delta {delta_index}"
        info = self._call(lambda: source.hunk(delta_index, hunk_index), f"read {where}")
        num_lines = self._call(lambda: source.num_lines_in_hunk(delta_index, hunk_index), f"count lines of {where}")

        contents: list[str] = []
        origins: list[LineOrigin] = []
        engine_numbers: list[tuple[Optional[int], Optional[int]]] = []

        for line_index in range(num_lines):
            line = self._call(
                lambda: source.line_in_hunk(delta_index, hunk_index, line_index),
                f"read line {line_index} of {where}",
            )
            origin = LINE_ORIGIN_MAP.get(line.origin)
            if origin is None:
                if line.origin not in EOF_NEWLINE_ORIGINS:
                    logger.debug("Skipping line with unknown origin %r in %s", line.origin, where)
                continue

            contents.append(normalize_line_content(line.content, self.options.tab_width))
            origins.append(origin)
            engine_numbers.append((_lineno_or_none(line.old_lineno), _lineno_or_none(line.new_lineno)))

        hunk = self._build_hunk(
            file_path,
            _decode_header(info.header),
            info.old_start,
            info.old_lines,
            info.new_start,
            info.new_lines,
            contents,
            origins,
        )
        self._check_engine_numbers(hunk, engine_numbers, where)
        return hunk

    @staticmethod
    def _check_engine_numbers(
        hunk: DiffHunk,
        engine_numbers: list[tuple[Optional[int], Optional[int]]],
        where: str,
    ) -> None:
        for line, (old_lineno, new_lineno) in zip(hunk.lines, engine_numbers):
            if (line.old_lineno, line.new_lineno) != (old_lineno, new_lineno):
                logger.debug(
                    "Engine line numbers %s/%s differ from computed %s/%s in %s",
                    old_lineno,
                    new_lineno,
                    line.old_lineno,
                    line.new_lineno,
                    where,
                )
                return


def parse_structural_diff(
    handle: StructuralDiff,
    highlighter: LineHighlighter | None = None,
    options: DiffSourceOptions | None = None,
) -> list[DiffFile]:
    """Convert a structural diff handle into the canonical model.

    Parameters
    ----------
    handle : StructuralDiff
        Diff handle from a native engine
    highlighter : LineHighlighter or None, default None
        Highlighter for line spans
    options : DiffSourceOptions or None, default None
        Source options

    Returns
    -------
    list of DiffFile
        One file per delta

    Raises
    ------
    NoChangesError
        If the handle has no deltas
    DiffSourceError
        If the engine fails

    """
    return StructuralDiffAdapter(highlighter=highlighter, options=options).parse(handle)


__all__ = [
    "DELTA_STATUS_MAP",
    "DeltaInfo",
    "HunkInfo",
    "LineInfo",
    "StructuralDelta",
    "StructuralDiff",
    "StructuralDiffAdapter",
    "StructuralDiffSnapshot",
    "StructuralHunk",
    "StructuralLine",
    "map_delta_status",
    "parse_structural_diff",
]
