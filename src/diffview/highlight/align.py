#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/highlight/align.py
"""Alignment of syntax highlighting with interleaved diff lines.

A hunk interleaves lines from two versions of a file. Lexing that interleaved
sequence directly gives wrong results as soon as a deletion opens a string or
comment that the additions do not. Instead the hunk is split into the old
file's lines (context + deletions) and the new file's lines (context +
additions), each is highlighted on its own, and every diff line takes its
spans back from the side it belongs to.

Examples
--------
>>> seqs = split_diff_lines_for_highlighting(["a", "b", "c"], ["context", "deletion", "addition"])
>>> seqs.old_lines, seqs.new_lines
(['a', 'b'], ['a', 'c'])
>>> seqs.old_line_indices, seqs.new_line_indices
([0, 1, None], [0, None, 1])

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Protocol, Sequence, Union

from rich.style import Style

from diffview.constants import LineOrigin
from diffview.exceptions import ValidationError
from diffview.model import Spans, origin_has_new_side, origin_has_old_side

logger = logging.getLogger(__name__)


class LineHighlighter(Protocol):
    """Anything that can highlight a contiguous sequence of one file's lines."""

    add_background: Style
    delete_background: Style

    def highlight_file_lines(
        self, file_path: Union[str, PurePosixPath], lines: Sequence[str]
    ) -> Optional[list[Optional[Spans]]]: ...


@dataclass
class HighlightSequences:
    """Old and new line sequences of a hunk plus per-line indices into them.

    Parameters
    ----------
    old_lines : list of str
        Context and deletion lines in diff order
    new_lines : list of str
        Context and addition lines in diff order
    old_line_indices : list of int or None
        For every diff line, its index in ``old_lines`` (None for additions)
    new_line_indices : list of int or None
        For every diff line, its index in ``new_lines`` (None for deletions)

    """

    old_lines: list[str]
    new_lines: list[str]
    old_line_indices: list[Optional[int]]
    new_line_indices: list[Optional[int]]


def split_diff_lines_for_highlighting(
    contents: Sequence[str],
    origins: Sequence[LineOrigin],
) -> HighlightSequences:
    """Split interleaved diff lines into old and new sequences.

    Parameters
    ----------
    contents : sequence of str
        Line texts in diff order
    origins : sequence of LineOrigin
        Origin of each line, same length as ``contents``

    Returns
    -------
    HighlightSequences
        Both sequences and the index mapping back to diff order

    Raises
    ------
    ValidationError
        If ``contents`` and ``origins`` differ in length

    """
    if len(contents) != len(origins):
        raise ValidationError(
            f"contents and origins must have the same length ({len(contents)} != {len(origins)})",
            parameter_name="origins",
            parameter_value=len(origins),
        )

    sequences = HighlightSequences([], [], [], [])
    for content, origin in zip(contents, origins):
        if origin_has_old_side(origin):
            sequences.old_line_indices.append(len(sequences.old_lines))
            sequences.old_lines.append(content)
        else:
            sequences.old_line_indices.append(None)

        if origin_has_new_side(origin):
            sequences.new_line_indices.append(len(sequences.new_lines))
            sequences.new_lines.append(content)
        else:
            sequences.new_line_indices.append(None)
    return sequences


def highlighted_line_at(
    highlighted: Optional[Sequence[Optional[Spans]]],
    index: Optional[int],
) -> Optional[Spans]:
    """Return the spans at ``index``; None if either is missing or out of range."""
    if highlighted is None or index is None:
        return None
    if 0 <= index < len(highlighted):
        return highlighted[index]
    return None


def highlighted_line_for_diff(
    old_highlighted: Optional[Sequence[Optional[Spans]]],
    new_highlighted: Optional[Sequence[Optional[Spans]]],
    old_index: Optional[int],
    new_index: Optional[int],
    origin: LineOrigin,
) -> Optional[Spans]:
    """Pick the spans for one diff line from the side it belongs to.

    Additions and context lines read from the new file, deletions from the
    old file.
    """
    if origin == "deletion":
        return highlighted_line_at(old_highlighted, old_index)
    return highlighted_line_at(new_highlighted, new_index)


def apply_diff_background(
    spans: Spans,
    origin: LineOrigin,
    add_background: Style,
    delete_background: Style,
) -> Spans:
    """Overlay the diff background on a line's spans.

    Foreground and text attributes are kept; only the background is
    replaced. Context lines are returned unchanged.
    """
    if origin == "addition":
        background = add_background
    elif origin == "deletion":
        background = delete_background
    else:
        return spans
    return tuple((style + background, text) for style, text in spans)


def highlight_hunk_lines(
    highlighter: Optional[LineHighlighter],
    file_path: Optional[Union[str, PurePosixPath]],
    contents: Sequence[str],
    origins: Sequence[LineOrigin],
) -> list[Optional[Spans]]:
    """Highlight one hunk's lines and return one entry per line.

    Parameters
    ----------
    highlighter : LineHighlighter or None
        Highlighter to use; None disables highlighting
    file_path : str, PurePosixPath or None
        Path used for grammar resolution
    contents : sequence of str
        Line texts in diff order
    origins : sequence of LineOrigin
        Origin of each line

    Returns
    -------
    list of (tuple of spans or None)
        Spans with the diff background applied, or None where the renderer
        should fall back to plain diff coloring

    """
    sequences = split_diff_lines_for_highlighting(contents, origins)

    if highlighter is None or file_path is None:
        return [None] * len(contents)

    # Separate calls so the old and new sides never share lexer state
    old_highlighted = highlighter.highlight_file_lines(file_path, sequences.old_lines)
    new_highlighted = highlighter.highlight_file_lines(file_path, sequences.new_lines)
    if old_highlighted is None and new_highlighted is None:
        return [None] * len(contents)

    result: list[Optional[Spans]] = []
    for i, origin in enumerate(origins):
        spans = highlighted_line_for_diff(
            old_highlighted,
            new_highlighted,
            sequences.old_line_indices[i],
            sequences.new_line_indices[i],
            origin,
        )
        if spans is not None and "".join(text for _, text in spans) != contents[i]:
            logger.debug("Discarding spans that do not reproduce line %d of %s", i, file_path)
            spans = None
        if spans is not None:
            spans = apply_diff_background(spans, origin, highlighter.add_background, highlighter.delete_background)
        result.append(spans)
    return result
