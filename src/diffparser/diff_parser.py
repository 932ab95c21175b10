"""Unified diff parser."""

from __future__ import annotations

import re
from dataclasses import replace

from diffparser.models import Diff, DiffFile, DiffHunk, DiffLine, DiffRange, FileMode, LineMode

# Regex patterns for parsing unified diff format
_INDEX_LINE = re.compile(r"^index .+$")
_PATH_MARKER = re.compile(r"^(-|\+){3} .+$")
_HUNK_HEADER = re.compile(r"^@@ -(\d+),?(\d+)? \+(\d+),?(\d+)? @@ ?(.+)?", re.ASCII)

_NO_NEWLINE_MARKER = "\\ No newline at end of file"

_LINE_MODES = {
    " ": LineMode.UNCHANGED,
    "+": LineMode.ADDED,
    "-": LineMode.REMOVED,
}


class DiffParseError(ValueError):
    """Raised when a structural line of a diff cannot be interpreted."""

    def __init__(self, message: str, line: str, line_number: int) -> None:
        super().__init__(f"{message} at line {line_number}: {line!r}")
        self.line = line
        self.line_number = line_number


def parse_diff(diff_text: str) -> Diff:
    """Parse unified diff text, such as ``git diff`` output, into a Diff.

    Args:
        diff_text: Raw unified diff text.

    Returns:
        A Diff holding one DiffFile per ``diff`` section, in input order.

    Raises:
        DiffParseError: A hunk header is malformed, or a hunk body line has
            an unknown prefix.
    """
    diff = Diff(raw=diff_text)
    lines = diff_text.split("\n")

    current_file: DiffFile | None = None
    current_hunk: DiffHunk | None = None
    in_hunk = False
    first_hunk_in_file = False
    added_no = 0
    removed_no = 0
    position = 0

    for idx, raw_line in enumerate(lines):
        position += 1

        if raw_line.startswith("diff "):
            in_hunk = False
            first_hunk_in_file = True
            current_file = _start_file(lines, idx)
            diff.files.append(current_file)
            continue

        if raw_line.startswith("deleted file "):
            if current_file is not None:
                current_file.mode = FileMode.DELETED
            continue

        if raw_line.startswith("new file "):
            if current_file is not None:
                current_file.mode = FileMode.NEW
            continue

        if raw_line.startswith("rename "):
            if current_file is not None:
                current_file.mode = FileMode.RENAMED
            continue

        if raw_line.startswith("@@ "):
            if current_file is None:
                # Bare hunks without a ``diff`` line still get a file
                current_file = DiffFile()
                diff.files.append(current_file)
                first_hunk_in_file = True
            if first_hunk_in_file:
                position = 0
                first_hunk_in_file = False

            in_hunk = True
            current_hunk = _parse_hunk_header(raw_line, idx + 1)
            current_file.hunks.append(current_hunk)
            added_no = current_hunk.new_range.start
            removed_no = current_hunk.orig_range.start
            continue

        if not in_hunk or current_hunk is None or not _is_source_line(raw_line):
            continue

        mode = _LINE_MODES.get(raw_line[0])
        if mode is None:
            raise DiffParseError("Could not parse line mode", raw_line, idx + 1)

        line = DiffLine(mode=mode, number=0, content=raw_line[1:], position=position)

        if mode == LineMode.ADDED:
            new_line = replace(line, number=added_no)
            current_hunk.new_range.lines.append(new_line)
            current_hunk.whole_range.lines.append(replace(new_line))
            added_no += 1
        elif mode == LineMode.REMOVED:
            orig_line = replace(line, number=removed_no)
            current_hunk.orig_range.lines.append(orig_line)
            current_hunk.whole_range.lines.append(replace(orig_line))
            removed_no += 1
        else:
            new_line = replace(line, number=added_no)
            current_hunk.new_range.lines.append(new_line)
            current_hunk.whole_range.lines.append(replace(new_line))
            current_hunk.orig_range.lines.append(replace(line, number=removed_no))
            added_no += 1
            removed_no += 1

    return diff


def _start_file(lines: list[str], idx: int) -> DiffFile:
    """Build a DiffFile from the ``diff`` line at ``lines[idx]``.

    The header absorbs an ``index`` line and a ``---``/``+++`` pair when
    they follow; anything else is left out of the header.
    """
    diff_line = lines[idx]
    current_file = DiffFile(mode=FileMode.MODIFIED)

    fields = diff_line.split()
    if len(fields) >= 3:
        from_hint, to_hint = fields[-2], fields[-1]
        if from_hint.startswith("a/"):
            current_file.orig_name = from_hint[2:]
        if to_hint.startswith("b/"):
            current_file.new_name = to_hint[2:]

    header = diff_line
    if len(lines) > idx + 3:
        index_line = lines[idx + 1]
        if _INDEX_LINE.match(index_line):
            header += "\n" + index_line
        marker_from, marker_to = lines[idx + 2], lines[idx + 3]
        if _PATH_MARKER.match(marker_from) and _PATH_MARKER.match(marker_to):
            header += "\n" + marker_from + "\n" + marker_to
    current_file.header = header

    return current_file


def _parse_hunk_header(raw_line: str, line_number: int) -> DiffHunk:
    """Parse ``@@ -A[,B] +C[,D] @@ [heading]`` into an empty DiffHunk."""
    m = _HUNK_HEADER.match(raw_line)
    if not m:
        raise DiffParseError("Malformed hunk header", raw_line, line_number)

    orig_start = int(m.group(1))
    orig_length = int(m.group(2)) if m.group(2) else orig_start
    new_start = int(m.group(3))
    new_length = int(m.group(4)) if m.group(4) else new_start

    return DiffHunk(
        header=m.group(5) or "",
        orig_range=DiffRange(start=orig_start, length=orig_length),
        new_range=DiffRange(start=new_start, length=new_length),
    )


def _is_source_line(line: str) -> bool:
    """Check whether a line inside a hunk carries content."""
    if line == _NO_NEWLINE_MARKER:
        return False
    if not line:
        return False
    if len(line) >= 3 and line[:3] in ("---", "+++"):
        return False
    return True
