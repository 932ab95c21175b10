"""Data models for parsed unified diffs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileMode(str, Enum):
    """What the diff does to a file."""

    DELETED = "DELETED"
    MODIFIED = "MODIFIED"
    NEW = "NEW"
    RENAMED = "RENAMED"


class LineMode(str, Enum):
    """Whether a hunk line was added, removed or left unchanged."""

    ADDED = "ADDED"
    REMOVED = "REMOVED"
    UNCHANGED = "UNCHANGED"


@dataclass
class DiffLine:
    """A single line of hunk content.

    ``number`` is the line number in the file version the line belongs to
    (new file for added lines, old file for removed lines). ``position`` is
    the line's offset in the file's diff body, counted from the first hunk
    header, as used when anchoring review comments to a diff.
    """

    mode: LineMode
    number: int
    content: str
    position: int

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "number": self.number,
            "content": self.content,
            "position": self.position,
        }


@dataclass
class DiffRange:
    """A window of lines declared by a hunk header."""

    start: int = 0
    length: int = 0
    lines: list[DiffLine] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "length": self.length,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class DiffHunk:
    """A contiguous change region within a file."""

    header: str = ""
    orig_range: DiffRange = field(default_factory=DiffRange)
    new_range: DiffRange = field(default_factory=DiffRange)
    whole_range: DiffRange = field(default_factory=DiffRange)

    @property
    def length(self) -> int:
        """Number of diff lines the hunk spans, including its ``@@`` header."""
        return len(self.whole_range.lines) + 1

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "orig_range": self.orig_range.to_dict(),
            "new_range": self.new_range.to_dict(),
            "whole_range": self.whole_range.to_dict(),
        }


@dataclass
class DiffFile:
    """A single file touched by a diff."""

    header: str = ""
    mode: FileMode = FileMode.MODIFIED
    orig_name: str | None = None
    new_name: str | None = None
    hunks: list[DiffHunk] = field(default_factory=list)

    @property
    def path(self) -> str:
        """Best available name for the file."""
        return self.new_name or self.orig_name or ""

    @property
    def added_lines(self) -> list[DiffLine]:
        """Get all added lines across all hunks."""
        return [
            line
            for hunk in self.hunks
            for line in hunk.new_range.lines
            if line.mode == LineMode.ADDED
        ]

    @property
    def removed_lines(self) -> list[DiffLine]:
        """Get all removed lines across all hunks."""
        return [
            line
            for hunk in self.hunks
            for line in hunk.orig_range.lines
            if line.mode == LineMode.REMOVED
        ]

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "mode": self.mode.value,
            "orig_name": self.orig_name,
            "new_name": self.new_name,
            "hunks": [h.to_dict() for h in self.hunks],
        }


@dataclass
class Diff:
    """The parsed form of a whole diff."""

    raw: str = ""
    files: list[DiffFile] = field(default_factory=list)

    def changed(self) -> dict[str, list[int]]:
        """Map each file's new name to the line numbers added to it.

        Deleted files are skipped.
        """
        changed_lines: dict[str, list[int]] = {}
        for f in self.files:
            if f.mode == FileMode.DELETED:
                continue
            for hunk in f.hunks:
                for line in hunk.new_range.lines:
                    if line.mode == LineMode.ADDED:
                        changed_lines.setdefault(f.new_name or "", []).append(line.number)
        return changed_lines

    def to_dict(self) -> dict:
        return {"files": [f.to_dict() for f in self.files]}


def changed(diff: Diff) -> dict[str, list[int]]:
    """Return the added line numbers of every non-deleted file in ``diff``."""
    return diff.changed()
