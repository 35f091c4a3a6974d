#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/diffview/highlight/syntax.py
"""Per-file syntax highlighting of line sequences.

:class:`SyntaxHighlighter` resolves a Pygments lexer from a file path (or
the first line's shebang), lexes a whole sequence of lines in one pass so
that multi-line strings and comments keep their state, and splits the token
stream back into one tuple of ``(Style, text)`` spans per input line.

Failures are scoped: when no lexer can be resolved the whole call returns
``None``; when a single line cannot be reproduced from the token stream
only that line's entry is ``None``.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import PurePosixPath
from typing import Callable, Iterable, Optional, Sequence, Union

from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class_by_name, find_lexer_class_for_filename
from pygments.token import _TokenType
from pygments.util import ClassNotFound
from rich.style import Style
from rich.syntax import Syntax, SyntaxTheme

from diffview.model import Spans
from diffview.options.highlight import HighlightOptions

logger = logging.getLogger(__name__)

HighlightedLines = list[Optional[Spans]]

# Extensions Pygments may not know, mapped to a close equivalent
FALLBACK_EXTENSIONS: dict[str, str] = {
    "jsx": "js",
    "mjs": "js",
    "cjs": "js",
    "hbs": "html",
    "handlebars": "html",
    "mustache": "html",
    "ejs": "html",
    "pug": "html",
    "jade": "html",
    "njk": "html",
    "mdx": "md",
    "jsonc": "json",
    "json5": "json",
    "prisma": "json",
    "heex": "rb",
}

# Extension-less filenames mapped to a lexer alias
FALLBACK_FILENAMES: dict[str, str] = {
    "Containerfile": "docker",
    "Justfile": "make",
    "justfile": "make",
}

# Shebang interpreters whose name is not a Pygments alias
SHEBANG_INTERPRETERS: dict[str, str] = {
    "node": "javascript",
    "nodejs": "javascript",
    "deno": "typescript",
    "ksh": "bash",
    "dash": "bash",
    "ash": "bash",
    "pwsh": "powershell",
}

_TRAILING_VERSION_RE = re.compile(r"[\d.]+$")


def fallback_extension(ext: str) -> str | None:
    """Return the substitute extension for ``ext``, if one is registered."""
    return FALLBACK_EXTENSIONS.get(ext)


def fallback_filename(name: str) -> str | None:
    """Return the lexer alias registered for an extension-less filename."""
    return FALLBACK_FILENAMES.get(name)


def _lexer_class_by_name(alias: str) -> type[Lexer] | None:
    try:
        return find_lexer_class_by_name(alias)
    except ClassNotFound:
        return None


def resolve_lexer_class(file_path: Union[str, PurePosixPath, os.PathLike]) -> type[Lexer] | None:
    """Resolve a lexer class from a file path.

    Lookup order:

    1. the file name as-is against Pygments filename patterns (exact extension)
    2. the same with the extension lower-cased, when that differs
    3. :data:`FALLBACK_EXTENSIONS`
    4. the file name as a lexer alias token, then as an exact file name
    5. :data:`FALLBACK_FILENAMES`

    Parameters
    ----------
    file_path : str or path-like
        Repository-relative path of the file

    Returns
    -------
    type[Lexer] or None
        The lexer class, or None when the path alone does not identify one

    """
    path = PurePosixPath(os.fspath(file_path))
    name = path.name
    suffix = path.suffix

    if suffix:
        ext = suffix[1:]
        lexer_cls = find_lexer_class_for_filename(name)
        if lexer_cls is not None:
            return lexer_cls

        normalized = ext.lower()
        if normalized != ext:
            lexer_cls = find_lexer_class_for_filename(f"{path.stem}.{normalized}")
            if lexer_cls is not None:
                return lexer_cls

        fallback = fallback_extension(normalized)
        if fallback is not None:
            lexer_cls = find_lexer_class_for_filename(f"file.{fallback}")
            if lexer_cls is not None:
                return lexer_cls

    if name:
        lexer_cls = _lexer_class_by_name(name.lower())
        if lexer_cls is not None:
            return lexer_cls

        lexer_cls = find_lexer_class_for_filename(name)
        if lexer_cls is not None:
            return lexer_cls

        alias = fallback_filename(name)
        if alias is not None:
            return _lexer_class_by_name(alias)

    return None


def lexer_class_from_shebang(first_line: str) -> type[Lexer] | None:
    """Resolve a lexer class from a ``#!`` line.

    ``#!/usr/bin/env python3`` and ``#!/bin/bash -e`` both resolve through the
    interpreter name; a trailing version number is dropped when the full
    name is not a known alias.
    """
    if not first_line.startswith("#!"):
        return None

    parts = first_line[2:].split()
    if not parts:
        return None

    interpreter = os.path.basename(parts[0])
    if interpreter == "env":
        candidates = [part for part in parts[1:] if not part.startswith("-") and "=" not in part]
        if not candidates:
            return None
        interpreter = os.path.basename(candidates[0])

    for candidate in (interpreter, _TRAILING_VERSION_RE.sub("", interpreter)):
        if not candidate:
            continue
        alias = SHEBANG_INTERPRETERS.get(candidate, candidate)
        lexer_cls = _lexer_class_by_name(alias)
        if lexer_cls is not None:
            return lexer_cls
    return None


def split_tokens_by_line(
    tokens: Iterable[tuple[_TokenType, str]],
    lines: Sequence[str],
    style_for_token: Callable[[_TokenType], Style],
) -> HighlightedLines:
    """Split a token stream over ``"\\n".join(lines)`` into per-line spans.

    Adjacent fragments with the same style are merged. A line whose
    fragments do not reproduce the input line exactly gets ``None``, as do
    all lines not reached when the token stream raises part-way.

    Parameters
    ----------
    tokens : iterable of (token type, text)
        Lexer output
    lines : sequence of str
        The lines that were lexed
    style_for_token : callable
        Maps a token type to a rich Style

    Returns
    -------
    list of (tuple of spans or None)
        One entry per input line

    """
    result: HighlightedLines = [None] * len(lines)
    current: list[list] = []
    index = 0

    def finish_line() -> None:
        if index >= len(lines):
            return
        spans = tuple((style, text) for style, text in current)
        if "".join(text for _, text in spans) == lines[index]:
            result[index] = spans
        else:
            logger.debug("Highlight mismatch on line %d; falling back to plain coloring", index)

    try:
        for token_type, value in tokens:
            if index >= len(lines):
                break
            pieces = value.split("\n")
            for piece_index, piece in enumerate(pieces):
                if piece_index > 0:
                    finish_line()
                    index += 1
                    current = []
                    if index >= len(lines):
                        break
                if not piece:
                    continue
                style = style_for_token(token_type)
                if current and current[-1][0] == style:
                    current[-1][1] += piece
                else:
                    current.append([style, piece])
        else:
            # Token stream ended without a final newline
            finish_line()
    except Exception as e:
        logger.debug("Lexer failed at line %d: %s", index, e)

    return result


class SyntaxHighlighter:
    """Highlight the lines of one file with a Pygments lexer and rich styles.

    Parameters
    ----------
    options : HighlightOptions or None
        Theme and diff background settings. Defaults are used when None.

    Attributes
    ----------
    theme : rich.syntax.SyntaxTheme
        Theme that maps token types to styles
    add_background : rich.style.Style
        Background-only style for added lines
    delete_background : rich.style.Style
        Background-only style for deleted lines

    Examples
    --------
    >>> highlighter = SyntaxHighlighter()
    >>> lines = highlighter.highlight_file_lines("main.py", ["x = 1", "y = 2"])
    >>> len(lines)
    2

    """

    def __init__(self, options: HighlightOptions | None = None):
        """Initialize the highlighter with theme and background colors."""
        self.options = options or HighlightOptions()
        self.theme: SyntaxTheme = Syntax.get_theme(self.options.theme)
        self.add_background = Style(bgcolor=self.options.add_background)
        self.delete_background = Style(bgcolor=self.options.delete_background)
        self._token_styles: dict[_TokenType, Style] = {}

    def style_for_token(self, token_type: _TokenType) -> Style:
        """Return the theme style for a token type."""
        style = self._token_styles.get(token_type)
        if style is None:
            style = self.theme.get_style_for_token(token_type)
            self._token_styles[token_type] = style
        return style

    def resolve_lexer_class(self, file_path: Union[str, PurePosixPath], lines: Sequence[str]) -> type[Lexer] | None:
        """Resolve a lexer from the path, falling back to the first line's shebang."""
        lexer_cls = resolve_lexer_class(file_path)
        if lexer_cls is None and lines:
            lexer_cls = lexer_class_from_shebang(lines[0])
        if lexer_cls is not None:
            logger.debug("Resolved lexer %s for %s", lexer_cls.name, file_path)
        return lexer_cls

    def highlight_file_lines(
        self,
        file_path: Union[str, PurePosixPath],
        lines: Sequence[str],
    ) -> HighlightedLines | None:
        """Highlight a contiguous sequence of lines from one file.

        A fresh lexer is created for every call, so two sequences of the same
        file (e.g. the old and new side of a hunk) never share lexer state.

        Parameters
        ----------
        file_path : str or PurePosixPath
            Path used to pick the grammar
        lines : sequence of str
            Lines in file order, without newlines

        Returns
        -------
        list or None
            None when highlighting is disabled or no grammar resolves.
            Otherwise one entry per line: a tuple of spans (possibly empty for
            an empty line), or None when that line failed to highlight.

        """
        if not self.options.enabled:
            return None

        lexer_cls = self.resolve_lexer_class(file_path, lines)
        if lexer_cls is None:
            logger.debug("No grammar for %s; using plain diff coloring", file_path)
            return None

        if not lines:
            return []

        lexer = lexer_cls(stripnl=False, stripall=False, ensurenl=True)
        # Pygments turns a bare \r into a newline, which would shift every later line
        lexable = [line.replace("\r", " ") for line in lines]
        highlighted = split_tokens_by_line(lexer.get_tokens("\n".join(lexable)), lexable, self.style_for_token)
        return [spans if spans is not None and lexable[i] == lines[i] else None for i, spans in enumerate(highlighted)]
