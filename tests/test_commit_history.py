"""Tests for CommitRecord and CommitHistory."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from git_provenance.errors import InvariantViolationError, ResolutionError
from git_provenance.models import Author, ChangeType, CommitHistory, CommitRecord, TimeWindow

JANE = Author(name="Jane", email_address="jane@example.com")
JOHN = Author(name="John", email_address="john@example.com")
START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def record(commit_hash, days, author=JANE, files=()):
    return CommitRecord(
        author=author, date_time=START + timedelta(days=days), hash=commit_hash
    ).add(*files)


@pytest.fixture
def history():
    return CommitHistory.of(
        [
            record("cccc3333", 2, JOHN, ["src/A.java", "README.md"]),
            record("aaaa1111", 0, JANE, ["src/A.java"]),
            record("bbbb2222", 1, JANE, ["src/B.c"]),
        ]
    )


def test_commit_record_defaults():
    commit = CommitRecord(author=JANE, date_time=START, hash="f" * 40)

    assert commit.message == ""
    assert commit.files == set()
    assert commit.short_hash == "fffffff"
    assert commit.date_time.tzinfo is not None


def test_commit_record_with_message_and_files():
    commit = (
        CommitRecord(author=JANE, date_time=START, hash="abc")
        .with_message("Fix the build\n\nDetails")
        .add("src/A.java", Path("docs") / "guide.md")
        .add("old.txt", change_type=ChangeType.DELETED)
    )

    assert commit.message == "Fix the build\n\nDetails"
    assert commit.sorted_files() == ["docs/guide.md", "old.txt", "src/A.java"]
    assert "docs/guide.md" in commit
    assert commit.touched(Path("src/A.java"))
    assert commit.change_type("old.txt") is ChangeType.DELETED
    assert commit.change_type("src/A.java") is ChangeType.MODIFIED
    assert commit.change_type("missing") is None


def test_commit_records_are_identified_by_hash():
    first = record("abc", 0, JANE, ["a"])
    second = record("abc", 5, JOHN, ["b"])

    assert first == second
    assert len({first, second}) == 1


def test_change_type_from_git_codes():
    assert ChangeType.from_git("A") is ChangeType.ADDED
    assert ChangeType.from_git("R100") is ChangeType.RENAMED
    assert ChangeType.from_git("D") is ChangeType.DELETED
    assert ChangeType.from_git(None) is ChangeType.MODIFIED


def test_history_rejects_duplicate_hashes():
    with pytest.raises(InvariantViolationError):
        CommitHistory.of([record("abc", 0), record("abc", 1)])


def test_history_iterates_chronologically(history):
    assert [r.hash for r in history] == ["aaaa1111", "bbbb2222", "cccc3333"]
    assert len(history) == 3
    assert history.first_commit().hash == "aaaa1111"
    assert history.last_commit().hash == "cccc3333"
    assert history.hashes() == {"aaaa1111", "bbbb2222", "cccc3333"}


def test_history_lookup_by_hash_and_prefix(history):
    assert history.get("bbbb2222").hash == "bbbb2222"
    assert history.get("cccc").hash == "cccc3333"
    assert history.get("ffff") is None
    assert history.get("") is None
    assert "aaaa" in history
    assert "dddd" not in history


def test_history_ambiguous_prefix():
    ambiguous = CommitHistory.of([record("ab12", 0), record("ab34", 1)])

    with pytest.raises(ResolutionError):
        ambiguous.get("ab")


def test_history_queries(history):
    assert history.files_changed_in("cccc3333") == ["README.md", "src/A.java"]
    assert history.files_changed_in("unknown") == []
    assert [r.hash for r in history.commits_touching("src/A.java")] == [
        "aaaa1111",
        "cccc3333",
    ]
    assert [r.hash for r in history.commits_by("JOHN@EXAMPLE.COM")] == ["cccc3333"]
    assert [r.hash for r in history.commits_by(JANE)] == ["aaaa1111", "bbbb2222"]
    assert history.authors() == {JANE, JOHN}
    assert history.paths() == {"src/A.java", "src/B.c", "README.md"}

    window = TimeWindow.between(START + timedelta(hours=12), START + timedelta(days=1))
    assert [r.hash for r in history.commits_during(window)] == ["bbbb2222"]


def test_empty_history():
    empty = CommitHistory.of([])

    assert len(empty) == 0
    assert empty.first_commit() is None
    assert empty.last_commit() is None


def test_resolution_error_messages():
    default = ResolutionError("abc123~1")
    explicit = ResolutionError("abc", "Ambiguous prefix abc")

    assert str(default) == "Failed to resolve [abc123~1]"
    assert default.expression == "abc123~1"
    assert str(explicit) == "Ambiguous prefix abc"
