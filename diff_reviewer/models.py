"""Data models for the diff reviewer."""

from __future__ import annotations

import json
from bisect import bisect_left, bisect_right
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    """Severity levels for review issues."""

    CRITICAL = "critical"  # Security holes, leaked credentials
    MAJOR = "major"  # Likely runtime failures
    MINOR = "minor"  # Maintainability, style, small inefficiencies
    INFO = "info"  # Worth a look, not necessarily wrong

    def __str__(self) -> str:
        return self.value

    @property
    def weight(self) -> int:
        return _SEVERITY_WEIGHTS[self]


_SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 4,
    Severity.MAJOR: 3,
    Severity.MINOR: 2,
    Severity.INFO: 1,
}


class ChangeType(str, Enum):
    """Kind of a line inside a hunk."""

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"

    def __str__(self) -> str:
        return self.value

    @property
    def marker(self) -> str:
        if self is ChangeType.ADDITION:
            return "+"
        if self is ChangeType.DELETION:
            return "-"
        return " "


@dataclass(frozen=True)
class LineChange:
    """One line of a hunk.

    ``line_number`` is the new-file number for additions and the old-file
    number for deletions and context lines. Zero means the line appeared
    before any hunk header and its position is unknown.
    """

    type: ChangeType
    line_number: int
    content: str


class ChangeIndex:
    """A file's changes ordered by line number, for window lookups."""

    def __init__(self, changes: list[LineChange]):
        self.source = changes
        self.size = len(changes)
        self.ordered = sorted(changes, key=lambda c: c.line_number)
        self._numbers = [c.line_number for c in self.ordered]

    def between(self, low: int, high: int) -> list[LineChange]:
        """Changes numbered ``low`` to ``high`` inclusive, in line order."""
        return self.ordered[bisect_left(self._numbers, low) : bisect_right(self._numbers, high)]


@dataclass
class FileChange:
    """One file touched by a diff."""

    file_name: str
    old_file_name: str
    is_new_file: bool = False
    is_deleted: bool = False
    changes: list[LineChange] = field(default_factory=list)
    raw_diff: str = ""
    _index: Optional[ChangeIndex] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def is_renamed(self) -> bool:
        return self.file_name != self.old_file_name

    @property
    def additions(self) -> int:
        return sum(1 for c in self.changes if c.type == ChangeType.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for c in self.changes if c.type == ChangeType.DELETION)

    @property
    def added_lines(self) -> list[LineChange]:
        return [c for c in self.changes if c.type == ChangeType.ADDITION]

    @property
    def line_index(self) -> ChangeIndex:
        """Sorted view of ``changes``, rebuilt when the list is replaced or grows."""
        index = self._index
        if index is None or index.source is not self.changes or index.size != len(self.changes):
            index = self._index = ChangeIndex(self.changes)
        return index


@dataclass(frozen=True)
class Issue:
    """A single finding produced by a detector."""

    severity: Severity
    title: str
    description: str
    file: str
    line: Optional[int] = None
    suggestion: Optional[str] = None
    code_snippet: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["severity"] = str(self.severity)
        # Drop None values for cleaner output
        return {k: v for k, v in d.items() if v is not None}


@dataclass
class FilterOptions:
    """Which files of a diff take part in the review."""

    file_extensions: Optional[list[str]] = None
    exclude_patterns: Optional[list[str]] = None


@dataclass(frozen=True)
class ChangeSummary:
    """Per-file line counts as reported by ``git diff --numstat``."""

    path: str
    insertions: int
    deletions: int
    binary: bool = False


@dataclass(frozen=True)
class ReviewResult:
    """Aggregate outcome of one review."""

    files_changed: int
    lines_added: int
    lines_removed: int
    issues: tuple[Issue, ...] = ()
    summary: str = ""
    prompt: Optional[str] = None
    change_summary: tuple[ChangeSummary, ...] = ()

    def count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def critical_count(self) -> int:
        return self.count(Severity.CRITICAL)

    @property
    def major_count(self) -> int:
        return self.count(Severity.MAJOR)

    def to_dict(self) -> dict:
        return {
            "files_changed": self.files_changed,
            "lines_added": self.lines_added,
            "lines_removed": self.lines_removed,
            "stats": {
                str(severity): self.count(severity) for severity in Severity
            }
            | {"total": len(self.issues)},
            "issues": [i.to_dict() for i in self.issues],
            "summary": self.summary,
            "prompt": self.prompt,
            "change_summary": [asdict(s) for s in self.change_summary],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
