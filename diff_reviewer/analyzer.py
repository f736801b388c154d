"""Core review logic: parse, filter, detect, rank, summarize."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from diff_reviewer.checks import analyze_file_change
from diff_reviewer.config import DEFAULT_TO_REF
from diff_reviewer.diff_parser import parse_diff
from diff_reviewer.file_filter import filter_files
from diff_reviewer.models import (
    ChangeSummary,
    FileChange,
    FilterOptions,
    Issue,
    ReviewResult,
    Severity,
)
from diff_reviewer.prompts import TemplateStore
from diff_reviewer.vcs import GitDiffProvider

logger = logging.getLogger(__name__)

_default_templates = TemplateStore()


# ── Ranking & Summary ────────────────────────────────────────────────────────


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Most severe first; equal severities keep their emission order."""
    return sorted(issues, key=lambda issue: issue.severity.weight, reverse=True)


def generate_summary(files: list[FileChange], issues: list[Issue]) -> str:
    """Prose overview. Only critical and major counts are called out."""
    additions = sum(f.additions for f in files)
    deletions = sum(f.deletions for f in files)
    summary = (
        f"This code review analyzed {len(files)} files with {additions} "
        f"additions and {deletions} deletions.\n\n"
    )

    if not issues:
        return summary + "**Excellent work!** No significant issues were found."

    critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    major = sum(1 for i in issues if i.severity == Severity.MAJOR)

    summary += f"Found {len(issues)} issues:\n"
    if critical:
        summary += f"- {critical} critical issues\n"
    if major:
        summary += f"- {major} major issues\n"
    return summary


# ── Review ───────────────────────────────────────────────────────────────────


def review_diff(
    diff_text: str,
    options: Optional[FilterOptions] = None,
    review_prompt: Optional[str] = None,
    change_summary: Optional[list[ChangeSummary]] = None,
    templates: Optional[TemplateStore] = None,
) -> ReviewResult:
    """Review a unified diff.

    Args:
        diff_text: Unified diff, as produced by ``git diff``.
        options: Extension allow-list and exclude patterns.
        review_prompt: Prompt text recorded on the result. Defaults to the
            comprehensive template; detection does not depend on it.
        change_summary: Per-file numstat from the VCS, carried through.
        templates: Store used to resolve the default prompt.
    """
    options = options or FilterOptions()
    templates = templates or _default_templates
    prompt = review_prompt or templates.get_template(None)

    parsed = parse_diff(diff_text)
    files = filter_files(parsed, options.file_extensions, options.exclude_patterns)
    logger.debug("Parsed %d files, %d after filtering", len(parsed), len(files))

    issues: list[Issue] = []
    for file_change in files:
        issues.extend(analyze_file_change(file_change))

    ranked = sort_issues(issues)
    result = ReviewResult(
        files_changed=len(files),
        lines_added=sum(f.additions for f in files),
        lines_removed=sum(f.deletions for f in files),
        issues=tuple(ranked),
        summary=generate_summary(files, ranked),
        prompt=prompt,
        change_summary=tuple(change_summary or ()),
    )

    logger.info(
        "Review complete: files=%d +%d -%d issues=%d (critical=%d major=%d)",
        result.files_changed,
        result.lines_added,
        result.lines_removed,
        len(result.issues),
        result.critical_count,
        result.major_count,
    )
    return result


def review_commits(
    from_commit: str,
    to_commit: str = DEFAULT_TO_REF,
    repository_path: str = ".",
    options: Optional[FilterOptions] = None,
    review_prompt: Optional[str] = None,
    templates: Optional[TemplateStore] = None,
) -> ReviewResult:
    """Review the changes between two commits (or any refs)."""
    if not from_commit:
        raise ValueError("from_commit is required")

    provider = GitDiffProvider(repository_path)
    payload = provider.diff(from_commit, to_commit or DEFAULT_TO_REF)
    return review_diff(
        payload.diff_text,
        options=options,
        review_prompt=review_prompt,
        change_summary=payload.summary,
        templates=templates,
    )


def review_branches(
    source_branch: str,
    target_branch: Optional[str] = None,
    repository_path: str = ".",
    options: Optional[FilterOptions] = None,
    review_prompt: Optional[str] = None,
    templates: Optional[TemplateStore] = None,
) -> ReviewResult:
    """Review what ``source_branch`` adds on top of ``target_branch``.

    Without a target the repository's default branch is used.
    """
    if not source_branch:
        raise ValueError("source_branch is required")

    provider = GitDiffProvider(repository_path)
    target = target_branch or provider.default_branch()
    logger.info("Reviewing branch %s against %s", source_branch, target)

    payload = provider.diff(target, source_branch)
    return review_diff(
        payload.diff_text,
        options=options,
        review_prompt=review_prompt,
        change_summary=payload.summary,
        templates=templates,
    )
