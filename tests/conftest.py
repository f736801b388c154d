from pathlib import Path

import git
import pytest

from diff_reviewer.models import ChangeType, FileChange, LineChange

AUTHOR = git.Actor("Test Author", "author@example.com")


def added_file(file_name: str, lines: list[str], start: int = 1) -> FileChange:
    """A FileChange whose changes are consecutive additions from ``start``."""
    return FileChange(
        file_name=file_name,
        old_file_name=file_name,
        changes=[
            LineChange(ChangeType.ADDITION, start + i, content)
            for i, content in enumerate(lines)
        ],
    )


@pytest.fixture
def make_file():
    return added_file


class RepoBuilder:
    """Small helper around a throwaway git repository."""

    def __init__(self, root: Path):
        self.root = root
        self.repo = git.Repo.init(root)

    def commit(self, files: dict[str, str], message: str = "change") -> git.Commit:
        for name, content in files.items():
            path = self.root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            self.repo.index.add([name])
        return self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR)

    def rename_current_branch(self, name: str) -> None:
        self.repo.git.branch("-M", name)

    def checkout_new_branch(self, name: str) -> None:
        self.repo.create_head(name).checkout()


@pytest.fixture
def git_repo(tmp_path):
    return RepoBuilder(tmp_path)
