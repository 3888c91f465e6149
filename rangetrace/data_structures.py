"""
Data structures for line-range history tracking.

All structures are immutable and deterministic.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


def split_lines(text: str) -> List[str]:
    """Split text on newlines, dropping the empty tail of a trailing newline."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True)
class LineRange:
    """Contiguous block of lines, 1-indexed, both ends inclusive."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"Line range must start at 1 or later: {self.start}")
        if self.end < self.start:
            raise ValueError(f"Line range ends before it starts: {self.start}:{self.end}")

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    @classmethod
    def spanning(cls, line_count: int) -> "LineRange":
        """Range covering a whole file of `line_count` lines."""
        return cls(1, line_count)

    @classmethod
    def parse(cls, text: str) -> "LineRange":
        """Parse "START:END" or a single "LINE"."""
        start, sep, end = text.partition(":")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError:
            raise ValueError(f"Invalid line range: {text!r}") from None
        return cls(first, last)

    def __str__(self) -> str:
        return f"{self.start}:{self.end}"


@dataclass(frozen=True)
class Snapshot:
    """File content as of one revision."""

    revision: str
    path: str
    content: str
    exists: bool = True

    @classmethod
    def missing(cls, revision: str, path: str) -> "Snapshot":
        return cls(revision=revision, path=path, content="", exists=False)

    @property
    def lines(self) -> List[str]:
        return split_lines(self.content)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def slice(self, line_range: LineRange) -> str:
        return "\n".join(self.lines[line_range.start - 1:line_range.end])


class DiffKind(Enum):
    UNCHANGED = "unchanged"
    INSERTED  = "inserted"   # only in the second text
    REMOVED   = "removed"    # only in the first text


@dataclass(frozen=True)
class DiffOp:
    kind:  DiffKind
    count: int


class Side(Enum):
    """Which argument of a diff a line range belongs to."""
    LEFT  = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class MapResult:
    mapped:  LineRange
    touched: bool


@dataclass(frozen=True)
class CommitRef:
    """A commit from a file's history. Identity is the hash."""

    hash: str
    author_name: str = field(default="", compare=False)
    author_email: str = field(default="", compare=False)
    subject: str = field(default="", compare=False)

    @property
    def short_hash(self) -> str:
        return self.hash[:10]


@dataclass(frozen=True)
class ChangeRecord:
    """
    Result of a successful search.

    `before`/`after` are the sliced texts of the chronologically earlier
    and later snapshots around `commit`; the ranges are in those snapshots'
    own coordinates.
    """

    commit: CommitRef
    path: str
    before: str
    after: str
    before_range: LineRange
    after_range: LineRange
