#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/utils/text.py
"""Text normalisation helpers shared by every diff source."""

from __future__ import annotations

from diffview.constants import DEFAULT_TAB_WIDTH


def split_diff_text(text: str) -> list[str]:
    """Split diff text into lines the way line-oriented VCS output is read.

    Only ``\\n`` separates lines; a single trailing ``\\r`` is removed from
    each line. Unlike :meth:`str.splitlines`, form feeds and Unicode line
    separators stay inside the line they appear in, so file content that
    contains them keeps its line numbering.

    Parameters
    ----------
    text : str
        Raw diff text

    Returns
    -------
    list of str
        Lines without terminators. A trailing newline does not produce an
        empty final line.

    """
    if not text:
        return []

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def expand_tabs(content: str, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
    """Replace every tab with ``tab_width`` spaces (not tab-stop aligned)."""
    return content.replace("\t", " " * tab_width)


def normalize_line_content(raw: bytes | str, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
    """Normalise one raw diff line into display content.

    Bytes are decoded as UTF-8 with invalid sequences replaced, a trailing
    ``\\n`` and then ``\\r`` are trimmed, and tabs are expanded.

    Parameters
    ----------
    raw : bytes or str
        Raw line content as delivered by a diff source
    tab_width : int, default 4
        Number of spaces per tab

    Returns
    -------
    str
        Normalised line content

    """
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    text = text.removesuffix("\n").removesuffix("\r")
    return expand_tabs(text, tab_width)
