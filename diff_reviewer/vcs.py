"""Git access: resolves two refs of a local repository to a unified diff."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import git

from diff_reviewer.config import DEFAULT_BRANCH_CANDIDATES
from diff_reviewer.models import ChangeSummary

logger = logging.getLogger(__name__)

# Pin the output format the parser reads, whatever the user's git config says
_DIFF_FLAGS = ("--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/")


class ReviewError(Exception):
    """A review could not be carried out."""


class InvalidReferenceError(ReviewError):
    """A commit or branch name does not resolve in the repository."""


@dataclass
class DiffPayload:
    """Raw diff text between two refs plus git's per-file line counts."""

    diff_text: str
    summary: list[ChangeSummary] = field(default_factory=list)


class GitDiffProvider:
    """Reads diffs out of a local git repository."""

    def __init__(self, repository_path: str = "."):
        try:
            self.repo = git.Repo(repository_path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise ReviewError(
                f"Not a git repository: {repository_path}"
            ) from e

    def resolve_ref(self, ref: str) -> str:
        """Return the commit SHA ``ref`` points at.

        Raises:
            InvalidReferenceError: if ``ref`` does not name a commit.
        """
        try:
            sha = self.repo.git.rev_parse("--verify", f"{ref}^{{commit}}")
        except git.GitCommandError as e:
            logger.warning("Could not resolve ref %r: %s", ref, str(e.stderr).strip())
            raise InvalidReferenceError(
                f"Invalid commit or branch reference '{ref}' in {self.repo.working_dir}"
            ) from e
        logger.debug("Resolved %s -> %s", ref, sha)
        return sha

    def default_branch(self) -> str:
        """First existing branch among the usual default branch names."""
        for candidate in DEFAULT_BRANCH_CANDIDATES:
            try:
                self.resolve_ref(candidate)
            except InvalidReferenceError:
                continue
            return candidate
        raise InvalidReferenceError(
            "No default branch found (tried "
            + ", ".join(DEFAULT_BRANCH_CANDIDATES)
            + ")"
        )

    def diff(self, from_ref: str, to_ref: str) -> DiffPayload:
        """Unified diff and numstat summary of ``from_ref`` → ``to_ref``."""
        from_sha = self.resolve_ref(from_ref)
        to_sha = self.resolve_ref(to_ref)

        diff_text = self.repo.git.diff(*_DIFF_FLAGS, from_sha, to_sha)
        numstat = self.repo.git.diff(*_DIFF_FLAGS, from_sha, to_sha, numstat=True)
        summary = parse_numstat(numstat)

        logger.info(
            "Diff %s..%s: %d files, %d characters",
            from_ref,
            to_ref,
            len(summary),
            len(diff_text),
        )
        return DiffPayload(diff_text=diff_text, summary=summary)


def parse_numstat(output: str) -> list[ChangeSummary]:
    """Parse ``git diff --numstat`` lines (``added<TAB>removed<TAB>path``)."""
    summary: list[ChangeSummary] = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        added, removed, path = parts
        # Binary files report "-" for both counts
        binary = added == "-" or removed == "-"
        summary.append(
            ChangeSummary(
                path=path,
                insertions=0 if binary else int(added),
                deletions=0 if binary else int(removed),
                binary=binary,
            )
        )
    return summary

