"""Extension allow-list and substring exclude-list for parsed files."""

from __future__ import annotations

from typing import Optional

from diff_reviewer.models import FileChange


def filter_files(
    files: list[FileChange],
    extensions: Optional[list[str]] = None,
    exclude_patterns: Optional[list[str]] = None,
) -> list[FileChange]:
    """Keep files ending in one of ``extensions`` and containing none of
    ``exclude_patterns``.

    Both checks are case-insensitive plain string tests, not globs. An
    empty or missing list imposes no constraint. Input order is preserved.
    """
    suffixes = tuple(ext.lower() for ext in extensions or [])
    excluded = [pattern.lower() for pattern in exclude_patterns or []]

    kept: list[FileChange] = []
    for file_change in files:
        name = file_change.file_name.lower()
        if suffixes and not name.endswith(suffixes):
            continue
        if any(pattern in name for pattern in excluded):
            continue
        kept.append(file_change)
    return kept
