"""Diff parsing: unified diff to structured FileChange/LineChange objects."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from diff_reviewer.models import ChangeType, FileChange, LineChange

logger = logging.getLogger(__name__)

_FILE_BOUNDARY = re.compile(r"^diff --git", re.MULTILINE)
_FILE_HEADER = re.compile(r"^diff --git a/(.*?) b/(.*?)$")
_HUNK_HEADER = re.compile(r"^@@\s+-(\d+)(?:,\d+)?\s+\+(\d+)(?:,\d+)?\s+@@")

# Git extended header lines and other metadata that never carry content
_METADATA_PREFIXES = (
    "diff ",
    "index ",
    "+++",
    "---",
    "\\",
    "old mode ",
    "new mode ",
    "new file mode",
    "deleted file mode",
    "similarity index",
    "dissimilarity index",
    "rename from",
    "rename to",
    "copy from",
    "copy to",
    "Binary files",
    "GIT binary patch",
)


@dataclass
class HunkCursor:
    """Old/new line counters for the hunk being read."""

    old_line: int = 0
    new_line: int = 0

    def reset(self, old_start: int, new_start: int) -> None:
        self.old_line = old_start
        self.new_line = new_start

    def addition(self) -> int:
        line_no = self.new_line
        self.new_line += 1
        return line_no

    def deletion(self) -> int:
        line_no = self.old_line
        self.old_line += 1
        return line_no

    def context(self) -> int:
        # Context lines are reported with their old-file number
        line_no = self.old_line
        self.old_line += 1
        self.new_line += 1
        return line_no


def parse_diff(diff_text: str) -> list[FileChange]:
    """Parse a unified diff into FileChange objects, one per file block.

    Blocks whose ``diff --git`` header has no ``a/... b/...`` pair are
    dropped. Anything before the first header is ignored.
    """
    files: list[FileChange] = []

    bounds = [m.start() for m in _FILE_BOUNDARY.finditer(diff_text)]
    for start, end in zip(bounds, bounds[1:] + [len(diff_text)]):
        block = diff_text[start:end]
        file_change = _parse_file_block(block)
        if file_change is None:
            logger.debug("Skipping unparseable diff block: %r", block[:80])
            continue
        files.append(file_change)

    return files


def _parse_file_block(block: str) -> FileChange | None:
    # Only "\n" ends a diff line; \f, \v, \u2028 and friends are content
    lines = [line.removesuffix("\r") for line in block.split("\n")]
    header_match = _FILE_HEADER.match(lines[0]) if lines else None
    if not header_match:
        return None

    file_change = FileChange(
        file_name=header_match.group(2),
        old_file_name=header_match.group(1),
        raw_diff=block,
    )
    cursor = HunkCursor()

    for line in lines[1:]:
        if line.startswith("new file mode"):
            file_change.is_new_file = True
            continue
        if line.startswith("deleted file mode"):
            file_change.is_deleted = True
            continue

        if line.startswith("@@"):
            hunk_match = _HUNK_HEADER.match(line)
            if hunk_match:
                cursor.reset(int(hunk_match.group(1)), int(hunk_match.group(2)))
            continue

        if line.startswith("+") and not line.startswith("+++"):
            file_change.changes.append(
                LineChange(ChangeType.ADDITION, cursor.addition(), line[1:])
            )
        elif line.startswith("-") and not line.startswith("---"):
            file_change.changes.append(
                LineChange(ChangeType.DELETION, cursor.deletion(), line[1:])
            )
        elif line and not line.startswith(_METADATA_PREFIXES):
            content = line[1:] if line.startswith(" ") else line
            file_change.changes.append(
                LineChange(ChangeType.CONTEXT, cursor.context(), content)
            )

    return file_change


def diff_stats(files: list[FileChange]) -> dict:
    """Generate summary statistics for parsed diff files."""
    return {
        "files_changed": len(files),
        "lines_added": sum(f.additions for f in files),
        "lines_removed": sum(f.deletions for f in files),
        "new_files": [f.file_name for f in files if f.is_new_file],
        "deleted_files": [f.file_name for f in files if f.is_deleted],
        "renamed_files": [f.file_name for f in files if f.is_renamed],
    }
