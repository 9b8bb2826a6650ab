"""Tests for the SourceFile aggregate."""

import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from git_provenance.errors import InvariantViolationError
from git_provenance.models import Author, Revision, SourceFile, SourceFileType, TimeWindow

JANE = Author(name="Jane Doe", email_address="jane@example.com")
JOHN = Author(name="John Smith", email_address="john@example.com")
SHOUTING_JANE = Author(name="JANE DOE", email_address="JANE@EXAMPLE.COM")
START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def revision(revision_id: str, days: int, author: Author = JANE) -> Revision:
    return Revision(author=author, date_time=START + timedelta(days=days), id=revision_id)


@pytest.fixture
def java_file():
    """Create a real file on disk for SourceFile to reference."""
    with tempfile.TemporaryDirectory() as temp_dir:
        file_path = Path(temp_dir) / "Main.java"
        file_path.write_text("class Main {}\n")
        yield file_path


@pytest.fixture
def source_file(java_file):
    return (
        SourceFile(java_file)
        .with_revision(revision("c3", 20, JOHN))
        .with_revision(revision("a1", 0))
        .with_revision(revision("b2", 10, SHOUTING_JANE))
    )


def test_requires_existing_regular_file(java_file):
    """SourceFile rejects missing paths and directories."""
    with pytest.raises(InvariantViolationError):
        SourceFile(java_file.parent / "Missing.java")

    with pytest.raises(InvariantViolationError):
        SourceFile(java_file.parent)

    with pytest.raises(InvariantViolationError):
        SourceFile(None)

    assert SourceFile.from_path(str(java_file)).path == java_file


def test_revisions_kept_in_chronological_order(source_file):
    ids = [r.id for r in source_file]

    assert ids == ["a1", "b2", "c3"]
    assert source_file.first_revision().id == "a1"
    assert source_file.last_revision().id == "c3"
    assert source_file.first_revision_date_time() <= source_file.last_revision_date_time()

    date_times = [r.date_time for r in source_file]
    assert date_times == sorted(date_times)


def test_duplicate_revision_id_is_rejected(source_file):
    with pytest.raises(InvariantViolationError):
        source_file.with_revision(revision("a1", 99, JOHN))

    assert source_file.revision_count() == 3


def test_revision_lookups(source_file):
    assert source_file.revision_count() == 3
    assert len(source_file) == 3
    assert source_file.revision_ids() == {"a1", "b2", "c3"}
    assert source_file.revision("b2").id == "b2"
    assert source_file.revision("missing") is None


def test_revisions_by_author_object_is_subset(source_file):
    """Author queries return a subset; Authors compare by name."""
    by_john = source_file.revisions_by(JOHN)

    assert [r.id for r in by_john] == ["c3"]
    assert set(by_john) <= set(source_file.revisions())
    assert source_file.was_modified_by(JOHN)
    assert not source_file.was_modified_by(Author(name="Nobody"))


def test_revisions_by_name_or_email_string(source_file):
    """String queries match name or email, ignoring case."""
    by_email = source_file.revisions_by("jane@example.com")

    assert {r.id for r in by_email} == {"a1", "b2"}
    assert {r.id for r in source_file.revisions_by("john smith")} == {"c3"}
    assert source_file.was_modified_by("JOHN@example.com")
    assert not source_file.was_modified_by("someone@example.com")


def test_revisions_during_window(source_file):
    window = TimeWindow.between(START + timedelta(days=5), START + timedelta(days=20))

    assert {r.id for r in source_file.revisions_during(window)} == {"b2", "c3"}
    assert source_file.was_modified_during(window)
    assert not source_file.was_modified_during(TimeWindow.since(START + timedelta(days=30)))
    assert source_file.revisions_during(None) == ()


def test_authors(source_file):
    assert source_file.authors() == {JANE, SHOUTING_JANE, JOHN}


def test_empty_source_file(java_file):
    empty = SourceFile(java_file)

    assert empty.first_revision() is None
    assert empty.last_revision() is None
    assert empty.first_revision_date_time() is None
    assert empty.authors() == frozenset()
    assert list(empty) == []


def test_type_is_resolved_once_and_stable(java_file):
    """The type survives deletion of the underlying file."""
    source_file = SourceFile(java_file)

    first = source_file.type
    java_file.unlink()
    second = source_file.type

    assert first is SourceFileType.JAVA
    assert second is first


def test_identity_by_path(java_file):
    assert SourceFile(java_file) == SourceFile(java_file)
    assert len({SourceFile(java_file), SourceFile(java_file)}) == 1


def test_concurrent_appends_keep_every_revision(java_file):
    source_file = SourceFile(java_file)

    def append(offset):
        for i in range(50):
            source_file.with_revision(revision(f"{offset}-{i}", i))

    threads = [threading.Thread(target=append, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert source_file.revision_count() == 200
    assert list(source_file) == sorted(source_file)


def test_revisions_at_the_same_instant_keep_insertion_order(java_file):
    source_file = (
        SourceFile(java_file)
        .with_revision(revision("z9", 1))
        .with_revision(revision("a1", 1))
        .with_revision(revision("m5", 0))
    )

    assert [r.id for r in source_file] == ["m5", "z9", "a1"]
    assert source_file.last_revision().id == "a1"
