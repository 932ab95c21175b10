"""diffparser — parse unified diffs into files, hunks and lines."""

from diffparser.diff_parser import DiffParseError, parse_diff
from diffparser.models import (
    Diff,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffRange,
    FileMode,
    LineMode,
    changed,
)

__all__ = [
    "Diff",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParseError",
    "DiffRange",
    "FileMode",
    "LineMode",
    "changed",
    "parse_diff",
]
