"""Snippet extraction around a flagged line, plus file-type helpers."""

from __future__ import annotations

import os
import re

from diff_reviewer.config import DEFAULT_LANGUAGE, LANGUAGE_MAP
from diff_reviewer.models import FileChange, LineChange

_QUOTED_LITERAL = re.compile(r"""(['"])[^'"]*(['"])""")


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    return os.path.splitext(file_name.lower())[1]


def language_for(file_name: str) -> str:
    return LANGUAGE_MAP.get(file_extension(file_name), DEFAULT_LANGUAGE)


def _format_line(line: LineChange, is_target: bool) -> str:
    prefix = "> " if is_target else "  "
    return f"{prefix}{line.line_number:>3}{line.type.marker} {line.content}"


def get_code_context(
    file_change: FileChange, target: LineChange, context_lines: int = 2
) -> str:
    """Render ``target`` with up to ``context_lines`` neighbours on each side.

    Neighbours are the file's recorded changes whose line number lies
    within ``context_lines`` of the target, the closest ones kept. When the
    diff has fewer neighbours the window is simply shorter.
    """
    index = file_change.line_index
    target_no = target.line_number

    before = index.between(target_no - context_lines, target_no - 1)
    after = index.between(target_no + 1, target_no + context_lines)
    window = before[-context_lines:] + [target] + after[:context_lines]

    return "\n".join(_format_line(line, line is target) for line in window)


def mask_literals(snippet: str) -> str:
    """Replace every quoted literal with ``***`` keeping the quotes."""
    return _QUOTED_LITERAL.sub(r"\1***\2", snippet)
