#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/diffview/cli.py
"""Command line entry point for diffview.

``diffview`` reads unified-diff text from a file or stdin, builds the diff
model and prints a per-file summary table, or the whole model as JSON. It is
meant for checking what a diff source produces, not for reviewing diffs.

Examples
--------
Summarise the working-tree changes of a Mercurial checkout::

    hg diff | diffview --dialect hg

Dump the model of a git patch::

    diffview --json changes.patch

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from diffview.constants import DIFF_DIALECTS
from diffview.config import load_config
from diffview.exceptions import ConfigError, NoChangesError, ValidationError
from diffview.highlight.syntax import SyntaxHighlighter
from diffview.logging_utils import LOG_LEVELS, configure_logging
from diffview.model import DiffFile
from diffview.options.highlight import available_themes
from diffview.parsers.unified import parse_unified_diff

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_NO_CHANGES = 1
EXIT_INPUT_ERROR = 2

STATUS_STYLES = {
    "added": "green",
    "deleted": "red",
    "modified": "yellow",
    "renamed": "cyan",
    "copied": "blue",
}


def _validate_theme(value: str) -> str:
    """Validate a theme name for argparse.

    Raises
    ------
    argparse.ArgumentTypeError
        If the theme is unknown

    """
    if value not in available_themes():
        raise argparse.ArgumentTypeError(
            f"Invalid theme '{value}'. Available themes: {', '.join(available_themes())}"
        )
    return value


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``diffview`` command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="diffview",
        description="Parse unified diff text and summarise the files, hunks and lines it changes",
    )

    parser.add_argument("file", nargs="?", default="-", help="Diff file to read (default: '-' for stdin)")
    parser.add_argument(
        "--dialect",
        choices=list(DIFF_DIALECTS),
        default="git",
        help="Header dialect: git ('diff --git', default; git and jj output) or hg ('diff -r', Mercurial)",
    )
    parser.add_argument("--json", action="store_true", help="Print the parsed diff model as JSON")
    parser.add_argument("--config", help="Configuration file (default: discovered from cwd, then user config)")
    parser.add_argument("--theme", type=_validate_theme, help="Override the highlighting theme from config")
    parser.add_argument(
        "--no-highlight",
        dest="highlight",
        action="store_false",
        default=True,
        help="Skip syntax highlighting while parsing",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Log with timestamps and logger names")

    return parser


def _read_input(path: str) -> str:
    """Read diff text from a path or stdin, replacing undecodable bytes."""
    if path == "-":
        data = sys.stdin.buffer.read()
    else:
        with open(path, "rb") as f:
            data = f.read()
    return data.decode("utf-8", errors="replace")


def _format_path(diff_file: DiffFile) -> str:
    if diff_file.status in ("renamed", "copied"):
        return f"{diff_file.old_path} -> {diff_file.new_path}"
    return str(diff_file.display_path)


def render_summary(files: list[DiffFile], console: Console) -> None:
    """Print one table row per file plus a totals line."""
    table = Table(title=f"{len(files)} file(s) changed")
    table.add_column("St", justify="center")
    table.add_column("Path", style="cyan", no_wrap=False)
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    table.add_column("Hunks", justify="right")

    for diff_file in files:
        style = STATUS_STYLES.get(diff_file.status, "white")
        if diff_file.is_binary:
            additions = deletions = "bin"
        else:
            additions, deletions = str(diff_file.additions), str(diff_file.deletions)
        table.add_row(
            f"[{style}]{diff_file.status_char}[/{style}]",
            _format_path(diff_file),
            additions,
            deletions,
            str(len(diff_file.hunks)),
        )

    console.print(table)
    total_additions = sum(f.additions for f in files)
    total_deletions = sum(f.deletions for f in files)
    console.print(f"[green]+{total_additions}[/green] [red]-{total_deletions}[/red]")


def main(argv: Optional[list[str]] = None) -> int:
    """Run the ``diffview`` command.

    Parameters
    ----------
    argv : list of str, optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        0 on success, 1 when the diff has no changes, 2 on input or
        configuration errors

    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_SUCCESS

    configure_logging(args.log_level, log_file=args.log_file, trace_mode=args.trace)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    highlighter = None
    if args.highlight:
        highlight_options = config.highlight
        if args.theme:
            highlight_options = highlight_options.create_updated(theme=args.theme)
        if highlight_options.enabled:
            highlighter = SyntaxHighlighter(highlight_options)

    try:
        text = _read_input(args.file)
    except OSError as e:
        print(f"Error: Cannot read {args.file}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        files = parse_unified_diff(text, args.dialect, highlighter=highlighter, options=config.diff)
    except NoChangesError as e:
        print(e.message, file=sys.stderr)
        return EXIT_NO_CHANGES
    except ValidationError as e:
        logger.debug("Rejected diff input", exc_info=True)
        print(f"Error: Invalid diff input: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.json:
        print(json.dumps([f.to_dict() for f in files], indent=2))
    else:
        render_summary(files, Console())

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
