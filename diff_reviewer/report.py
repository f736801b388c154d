"""Markdown rendering of a ReviewResult."""

from __future__ import annotations

from diff_reviewer.models import ReviewResult


def format_review_result(result: ReviewResult) -> str:
    parts = [
        "# Code Review Report\n",
        "**Review Summary:**",
        f"- Files Changed: {result.files_changed}",
        f"- Lines Added: {result.lines_added}",
        f"- Lines Removed: {result.lines_removed}",
        f"- Issues Found: {len(result.issues)}\n",
    ]

    if result.issues:
        parts.append("## Issues and Recommendations\n")
        for index, issue in enumerate(result.issues, start=1):
            parts.append(f"### {index}. {str(issue.severity).upper()}: {issue.title}\n")
            parts.append(f"**File:** `{issue.file}`")
            if issue.line:
                parts.append(f"**Line:** {issue.line}")
            parts.append(f"**Description:** {issue.description}\n")
            if issue.suggestion:
                parts.append(f"**Suggestion:** {issue.suggestion}\n")
            if issue.code_snippet:
                parts.append(
                    f"**Code:**\n```{issue.language or ''}\n{issue.code_snippet}\n```\n"
                )
            parts.append("---\n")

    if result.summary:
        parts.append(f"## Overall Assessment\n\n{result.summary}\n")

    return "\n".join(parts)
