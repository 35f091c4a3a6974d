#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for diffview/parsers/unified.py."""

import logging
from pathlib import PurePosixPath

import pytest
from hypothesis import given
from hypothesis import strategies as st
from rich.style import Style

from diffview.exceptions import InvalidOptionsError, NoChangesError, ValidationError
from diffview.options import DiffSourceOptions, HighlightOptions
from diffview.parsers.unified import (
    HunkHeader,
    LineCursor,
    UnifiedDiffParser,
    parse_binary_file_line,
    parse_hunk_header,
    parse_unified_diff,
    paths_from_file_header,
)
from diffview.utils.text import expand_tabs


@pytest.mark.unit
class TestLineCursor:
    """Tests for the single-pass line cursor."""

    def test_peek_does_not_consume(self):
        """Test that peeking leaves the position unchanged."""
        cursor = LineCursor(["a", "b"])
        assert cursor.peek() == "a"
        assert cursor.peek() == "a"
        assert cursor.position == 0

    def test_next_consumes_until_end(self):
        """Test that next walks the lines once and then returns None."""
        cursor = LineCursor(["a", "b"])
        assert cursor.next() == "a"
        assert cursor.next() == "b"
        assert cursor.at_end()
        assert cursor.next() is None
        assert cursor.peek() is None


@pytest.mark.unit
class TestParseHunkHeader:
    """Tests for hunk header parsing."""

    def test_full_header(self):
        """Test a header with both counts and a section name."""
        assert parse_hunk_header("@@ -10,7 +12,9 @@ def f():") == HunkHeader(10, 7, 12, 9)

    def test_omitted_counts_default_to_one(self):
        """Test that missing counts mean a single line."""
        assert parse_hunk_header("@@ -3 +4 @@") == HunkHeader(3, 1, 4, 1)

    def test_zero_counts(self):
        """Test the empty side of an added file."""
        assert parse_hunk_header("@@ -0,0 +1,2 @@") == HunkHeader(0, 0, 1, 2)

    @pytest.mark.parametrize(
        "line",
        ["@@ -a,1 +1,1 @@", "@@ -1,1 1,1 @@", "@@@ -1,1 -1,1 +1,2 @@@", "@@ -1,1 +1,1", "@@"],
    )
    def test_malformed_headers(self, line):
        """Test that malformed headers are rejected."""
        assert parse_hunk_header(line) is None


@pytest.mark.unit
class TestParseBinaryFileLine:
    """Tests for binary notice parsing."""

    def test_git_modified(self):
        """Test the git form with both sides present."""
        assert parse_binary_file_line("Binary files a/img.png and b/img.png differ") == (
            PurePosixPath("img.png"),
            PurePosixPath("img.png"),
        )

    def test_git_added(self):
        """Test that /dev/null marks the absent side."""
        assert parse_binary_file_line("Binary files /dev/null and b/img.png differ") == (
            None,
            PurePosixPath("img.png"),
        )

    def test_hg_form(self):
        """Test the Mercurial form naming a single path."""
        assert parse_binary_file_line("Binary file logo.png has changed") == (
            PurePosixPath("logo.png"),
            PurePosixPath("logo.png"),
        )

    def test_unrecognised(self):
        """Test that other lines yield None."""
        assert parse_binary_file_line("Binary stuff") is None


@pytest.mark.unit
class TestPathsFromFileHeader:
    """Tests for recovering paths from the header line."""

    def test_git_same_paths(self):
        """Test the common case of identical names."""
        assert paths_from_file_header("diff --git a/dir/run.sh b/dir/run.sh") == (
            PurePosixPath("dir/run.sh"),
            PurePosixPath("dir/run.sh"),
        )

    def test_git_name_containing_separator(self):
        """Test that identical names containing ' b/' split in the middle."""
        old, new = paths_from_file_header("diff --git a/x b/y b/x b/y")
        assert old == new == PurePosixPath("x b/y")

    def test_git_different_paths(self):
        """Test names that differ between sides."""
        assert paths_from_file_header("diff --git a/one.py b/two.py") == (
            PurePosixPath("one.py"),
            PurePosixPath("two.py"),
        )

    def test_hg_header(self):
        """Test that the last token of a text header is the path."""
        assert paths_from_file_header("diff -r 1a2b -r 3c4d src/main.c") == (
            PurePosixPath("src/main.c"),
            PurePosixPath("src/main.c"),
        )


@pytest.mark.unit
class TestGitDialect:
    """Tests for parsing git-style headers."""

    def test_files_and_statuses(self, git_diff_text):
        """Test that every record becomes a file with the right status."""
        files = parse_unified_diff(git_diff_text, "git")

        assert [(f.status, str(f.display_path)) for f in files] == [
            ("modified", "src/app.py"),
            ("added", "README.md"),
            ("deleted", "old.txt"),
        ]
        assert files[1].old_path is None
        assert files[2].new_path is None

    def test_multiple_hunks(self, git_diff_text):
        """Test hunk boundaries and header values."""
        app = parse_unified_diff(git_diff_text, "git")[0]

        assert len(app.hunks) == 2
        assert app.hunks[0].header == "@@ -1,4 +1,5 @@"
        assert app.hunks[1].header == "@@ -20,3 +21,3 @@ def main():"
        assert (app.hunks[1].old_start, app.hunks[1].new_start) == (20, 21)

    def test_line_numbering(self, git_diff_text):
        """Test that old and new counters advance by origin."""
        hunk = parse_unified_diff(git_diff_text, "git")[0].hunks[0]

        assert [(line.origin, line.content, line.old_lineno, line.new_lineno) for line in hunk.lines] == [
            ("context", "import os", 1, 1),
            ("deletion", "import sys", 2, None),
            ("addition", "import sys", None, 2),
            ("addition", "import json", None, 3),
            ("context", "", 3, 4),
            ("context", "def main():", 4, 5),
        ]
        assert hunk.line_counts() == (hunk.old_count, hunk.new_count)

    def test_added_and_deleted_line_numbers(self, git_diff_text):
        """Test numbering on the empty side of added and deleted files."""
        files = parse_unified_diff(git_diff_text, "git")

        assert [line.new_lineno for line in files[1].hunks[0].lines] == [1, 2]
        assert [line.old_lineno for line in files[2].hunks[0].lines] == [1]

    def test_hg_headers_are_ignored(self, hg_diff_text):
        """Test that text headers do not open records in the git dialect."""
        with pytest.raises(NoChangesError):
            parse_unified_diff(hg_diff_text, "git")

    def test_rename_without_content(self):
        """Test a pure rename."""
        text = (
            "diff --git a/old_name.py b/new_name.py\n"
            "similarity index 100%\n"
            "rename from old_name.py\n"
            "rename to new_name.py\n"
        )
        [renamed] = parse_unified_diff(text, "git")

        assert renamed.status == "renamed"
        assert renamed.old_path == PurePosixPath("old_name.py")
        assert renamed.new_path == PurePosixPath("new_name.py")
        assert renamed.hunks == ()

    def test_rename_with_content(self):
        """Test a rename that also changes lines."""
        text = (
            "diff --git a/a.py b/b.py\n"
            "similarity index 90%\n"
            "rename from a.py\n"
            "rename to b.py\n"
            "index 111..222 100644\n"
            "--- a/a.py\n"
            "+++ b/b.py\n"
            "@@ -1 +1 @@\n"
            "-x = 1\n"
            "+x = 2\n"
        )
        [renamed] = parse_unified_diff(text, "git")

        assert renamed.status == "renamed"
        assert renamed.display_path == PurePosixPath("b.py")
        assert len(renamed.hunks) == 1

    def test_copy(self):
        """Test copy metadata."""
        text = "diff --git a/src.c b/dst.c\nsimilarity index 100%\ncopy from src.c\ncopy to dst.c\n"
        [copied] = parse_unified_diff(text, "git")

        assert copied.status == "copied"
        assert (copied.old_path, copied.new_path) == (PurePosixPath("src.c"), PurePosixPath("dst.c"))

    @pytest.mark.parametrize(
        "header,binary_line,status,old,new",
        [
            ("new file mode 100644", "Binary files /dev/null and b/img.png differ", "added", None, "img.png"),
            ("deleted file mode 100644", "Binary files a/img.png and /dev/null differ", "deleted", "img.png", None),
            ("index 1..2 100644", "Binary files a/img.png and b/img.png differ", "modified", "img.png", "img.png"),
        ],
    )
    def test_binary_files(self, header, binary_line, status, old, new):
        """Test binary add, delete and modify."""
        text = f"diff --git a/img.png b/img.png\n{header}\n{binary_line}\n"
        [binary] = parse_unified_diff(text, "git")

        assert binary.is_binary
        assert binary.hunks == ()
        assert binary.status == status
        assert binary.old_path == (PurePosixPath(old) if old else None)
        assert binary.new_path == (PurePosixPath(new) if new else None)

    def test_git_binary_patch(self):
        """Test that literal binary patches are treated as binary."""
        text = (
            "diff --git a/data.bin b/data.bin\n"
            "index 1..2 100644\n"
            "GIT binary patch\n"
            "literal 12\n"
            "zcmZ?wbhEHbG\n"
            "\n"
            "literal 0\n"
            "HcmV?d00001\n"
            "\n"
            "diff --git a/next.txt b/next.txt\n"
            "--- a/next.txt\n"
            "+++ b/next.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
        )
        files = parse_unified_diff(text, "git")

        assert [f.is_binary for f in files] == [True, False]
        assert files[0].display_path == PurePosixPath("data.bin")
        assert len(files[1].hunks) == 1

    def test_mode_change_recovers_paths(self):
        """Test that a record without ---/+++ takes its paths from the header."""
        text = (
            "diff --git a/run.sh b/run.sh\n"
            "old mode 100644\n"
            "new mode 100755\n"
            "diff --git a/empty.txt b/empty.txt\n"
            "new file mode 100644\n"
            "index 0000000..e69de29\n"
        )
        mode_change, empty_file = parse_unified_diff(text, "git")

        assert mode_change.status == "modified"
        assert mode_change.old_path == mode_change.new_path == PurePosixPath("run.sh")
        assert mode_change.hunks == ()
        assert empty_file.status == "added"
        assert empty_file.old_path is None
        assert empty_file.new_path == PurePosixPath("empty.txt")

    def test_no_newline_marker_skipped(self):
        """Test that the end-of-file marker does not become a line."""
        text = (
            "diff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1 +1 @@\n"
            "-old\n\\ No newline at end of file\n+new\n\\ No newline at end of file\n"
        )
        [diff_file] = parse_unified_diff(text, "git")

        assert [line.content for line in diff_file.hunks[0].lines] == ["old", "new"]

    def test_tabs_and_crlf_normalised(self):
        """Test that line content is normalised before it is stored."""
        text = "diff --git a/f b/f\r\n--- a/f\r\n+++ b/f\r\n@@ -1 +1 @@\r\n-\told\r\n+\tnew\r\n"
        [diff_file] = parse_unified_diff(text, "git")

        assert [line.content for line in diff_file.hunks[0].lines] == ["    old", "    new"]

    def test_custom_tab_width(self):
        """Test that the tab width option is applied."""
        text = "diff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1 +1 @@\n-\tx\n+\ty\n"
        [diff_file] = parse_unified_diff(text, "git", options=DiffSourceOptions(tab_width=2))

        assert diff_file.hunks[0].lines[1].content == "  y"

    def test_stray_path_markers_and_garbage_skipped(self):
        """Test that +++, --- and unknown lines inside a hunk are skipped."""
        text = (
            "diff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n"
            " keep\n+++ stray\n--- stray\n~garbage\n-old\n+new\n"
        )
        [diff_file] = parse_unified_diff(text, "git")

        assert [line.content for line in diff_file.hunks[0].lines] == ["keep", "old", "new"]

    def test_malformed_hunk_dropped(self, caplog):
        """Test that a malformed header drops only its own hunk."""
        text = (
            "diff --git a/f b/f\n--- a/f\n+++ b/f\n"
            "@@ -x,1 +1,1 @@\n+lost\n"
            "@@ -5,1 +5,1 @@\n kept\n"
        )
        with caplog.at_level(logging.DEBUG, logger="diffview.parsers.unified"):
            [diff_file] = parse_unified_diff(text, "git")

        assert len(diff_file.hunks) == 1
        assert diff_file.hunks[0].lines[0].content == "kept"
        assert diff_file.hunks[0].lines[0].old_lineno == 5
        assert "malformed header" in caplog.text

    def test_text_before_first_header_ignored(self):
        """Test that commit messages or other preamble are skipped."""
        text = "commit abc\nAuthor: someone\n\n    message\n\ndiff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1 +1 @@\n-a\n+b\n"
        assert len(parse_unified_diff(text, "git")) == 1


@pytest.mark.unit
class TestHgDialect:
    """Tests for parsing Mercurial text headers."""

    def test_timestamps_stripped(self, hg_diff_text):
        """Test that tab-delimited timestamps are not part of the path."""
        lib, new = parse_unified_diff(hg_diff_text, "hg")

        assert lib.old_path == lib.new_path == PurePosixPath("src/lib.rs")
        assert lib.status == "modified"
        assert new.status == "added"
        assert new.new_path == PurePosixPath("new.txt")

    def test_line_numbering(self, hg_diff_text):
        """Test numbering in the hg dialect."""
        hunk = parse_unified_diff(hg_diff_text, "hg")[0].hunks[0]

        assert [(line.old_lineno, line.new_lineno) for line in hunk.lines] == [
            (1, 1),
            (2, None),
            (None, 2),
            (None, 3),
            (3, 4),
        ]

    def test_binary_file(self):
        """Test the Mercurial binary notice."""
        text = "diff -r abc123 logo.png\nBinary file logo.png has changed\n"
        [binary] = parse_unified_diff(text, "hg")

        assert binary.is_binary
        assert binary.status == "modified"
        assert binary.display_path == PurePosixPath("logo.png")

    def test_git_headers_also_open_records(self, git_diff_text):
        """Test that ``diff --git`` headers match the generic text prefix."""
        assert len(parse_unified_diff(git_diff_text, "hg")) == 3


@pytest.mark.unit
class TestParserErrors:
    """Tests for whole-diff failures."""

    @pytest.mark.parametrize("text", ["", "\n", "no diff here\n"])
    def test_no_changes(self, text):
        """Test that text without records raises NoChangesError."""
        with pytest.raises(NoChangesError):
            parse_unified_diff(text, "git")

    def test_unknown_dialect(self):
        """Test that unknown dialects are rejected."""
        with pytest.raises(ValidationError):
            UnifiedDiffParser("svn")  # type: ignore[arg-type]

    def test_wrong_options_type(self):
        """Test that highlight options are not accepted as source options."""
        with pytest.raises(InvalidOptionsError):
            UnifiedDiffParser("git", options=HighlightOptions())  # type: ignore[arg-type]


class TrailingSpaceStrippingHighlighter:
    """Highlighter whose spans lose trailing whitespace."""

    add_background = Style(bgcolor="green")
    delete_background = Style(bgcolor="red")

    def highlight_file_lines(self, file_path, lines):
        return [((Style(), line.rstrip()),) for line in lines]


@pytest.mark.unit
class TestParserHighlighting:
    """Tests for highlighting during parsing."""

    def test_old_and_new_highlighted_separately(self, git_diff_text, recording_highlighter):
        """Test that each hunk side is passed to the highlighter on its own."""
        parse_unified_diff(git_diff_text, "git", highlighter=recording_highlighter)

        path, old_lines = recording_highlighter.calls[0]
        _, new_lines = recording_highlighter.calls[1]
        assert path == PurePosixPath("src/app.py")
        assert old_lines == ["import os", "import sys", "", "def main():"]
        assert new_lines == ["import os", "import sys", "import json", "", "def main():"]

    def test_backgrounds_applied(self, git_diff_text, recording_highlighter):
        """Test that additions and deletions carry their diff background."""
        hunk = parse_unified_diff(git_diff_text, "git", highlighter=recording_highlighter)[0].hunks[0]
        foreground = recording_highlighter.foreground

        context, deletion, addition = hunk.lines[0], hunk.lines[1], hunk.lines[2]
        assert context.highlighted_spans == ((foreground, "import os"),)
        assert deletion.highlighted_spans == ((foreground + recording_highlighter.delete_background, "import sys"),)
        assert addition.highlighted_spans == ((foreground + recording_highlighter.add_background, "import sys"),)
        assert hunk.lines[4].highlighted_spans == ()

    def test_deleted_file_uses_old_path(self, git_diff_text, recording_highlighter):
        """Test that deleted files are highlighted by their old path."""
        parse_unified_diff(git_diff_text, "git", highlighter=recording_highlighter)

        assert recording_highlighter.calls[-1][0] == PurePosixPath("old.txt")

    def test_spans_not_matching_content_fall_back_per_line(self):
        """Test that spans which drop text only cost that line its highlighting."""
        text = "diff --git a/a.py b/a.py\n--- a/a.py\n+++ b/a.py\n@@ -1 +1 @@\n-x  \n+y\n"
        [diff_file] = parse_unified_diff(text, "git", highlighter=TrailingSpaceStrippingHighlighter())

        deletion, addition = diff_file.hunks[0].lines
        assert deletion.content == "x  "
        assert deletion.highlighted_spans is None
        assert [fragment for _, fragment in addition.highlighted_spans] == ["y"]

    def test_without_highlighter_spans_are_none(self, git_diff_text):
        """Test plain parsing."""
        files = parse_unified_diff(git_diff_text, "git")
        assert all(line.highlighted_spans is None for f in files for h in f.hunks for line in h.lines)


_LINE_TEXT = st.text(alphabet="abc xyz\t(){};=", max_size=20)


@pytest.mark.unit
@pytest.mark.fuzzing
class TestUnifiedParserProperties:
    """Property-based tests for hunk parsing."""

    @given(st.lists(st.tuples(st.sampled_from(["+", "-", " "]), _LINE_TEXT), min_size=1, max_size=30))
    def test_counts_and_numbering_replay(self, body):
        """Test that parsed lines reproduce the header counts and number sequentially."""
        old_count = sum(1 for marker, _ in body if marker != "+")
        new_count = sum(1 for marker, _ in body if marker != "-")
        text = "diff --git a/f.txt b/f.txt\n--- a/f.txt\n+++ b/f.txt\n"
        text += f"@@ -7,{old_count} +9,{new_count} @@\n"
        text += "".join(f"{marker}{content}\n" for marker, content in body)

        [diff_file] = parse_unified_diff(text, "git")
        hunk = diff_file.hunks[0]

        assert hunk.line_counts() == (old_count, new_count)
        assert [line.content for line in hunk.lines] == [expand_tabs(content) for _, content in body]
        old_numbers = [line.old_lineno for line in hunk.lines if line.old_lineno is not None]
        new_numbers = [line.new_lineno for line in hunk.lines if line.new_lineno is not None]
        assert old_numbers == list(range(7, 7 + old_count))
        assert new_numbers == list(range(9, 9 + new_count))
