"""Shared fixtures: real temporary git repositories built with GitPython."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest
from git import Actor, Repo

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

TEST_USER = Actor("Test User", "test@example.com")


def commit_files(
    repo: Repo,
    message: str,
    files: Optional[Dict[str, str]] = None,
    remove: Iterable[str] = (),
    when: Optional[datetime] = None,
    committer: Actor = TEST_USER,
    author: Optional[Actor] = None,
    head: bool = True,
):
    """Write, stage and commit files with a fixed committer and commit time."""
    root = Path(repo.working_tree_dir)
    for relative_path, content in (files or {}).items():
        file_path = root / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        repo.index.add([relative_path])

    removed = list(remove)
    if removed:
        repo.index.remove(removed, working_tree=True)

    git_date = f"{int((when or BASE_TIME).timestamp())} +0000"
    return repo.index.commit(
        message,
        author=author or committer,
        committer=committer,
        author_date=git_date,
        commit_date=git_date,
        head=head,
    )


def at(minutes: int) -> datetime:
    """A commit time ``minutes`` after the base time."""
    return BASE_TIME + timedelta(minutes=minutes)


def shallow_clone(repo: Repo, destination: Path, depth: int) -> Repo:
    """Clone ``repo`` with truncated history, as CI checkouts do."""
    source_url = Path(repo.working_tree_dir).as_uri()
    return Repo.clone_from(source_url, str(destination), depth=depth)


@pytest.fixture
def temp_git_repo():
    """Create an empty git repository with a configured user."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo = Repo.init(temp_dir)
        with repo.config_writer() as config:
            config.set_value("user", "name", TEST_USER.name)
            config.set_value("user", "email", TEST_USER.email)
        try:
            yield repo
        finally:
            repo.close()


@pytest.fixture
def three_commit_repo(temp_git_repo):
    """A.java, then B.c, then A.java again."""
    repo = temp_git_repo
    commits = [
        commit_files(repo, "Add A", {"A.java": "class A {}\n"}, when=at(0)),
        commit_files(repo, "Add B", {"B.c": "int main() { return 0; }\n"}, when=at(10)),
        commit_files(
            repo, "Change A", {"A.java": "class A { int x; }\n"}, when=at(20)
        ),
    ]
    return repo, commits
