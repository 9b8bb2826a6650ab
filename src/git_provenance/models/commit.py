"""Commit record and commit history models."""

from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, field_validator

from git_provenance.errors import InvariantViolationError, ResolutionError
from git_provenance.models.author import Author
from git_provenance.models.time_window import TimeWindow, to_local

PathLike = Union[str, PurePath]


def normalize_path(path: PathLike) -> str:
    """Render a repository-relative path in POSIX form."""
    return PurePath(path).as_posix()


class ChangeType(str, Enum):
    """How a commit changed a path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"

    @classmethod
    def from_git(cls, code: Optional[str]) -> "ChangeType":
        """Map a git status letter (A, M, D, R, C, T) to a change type."""
        return _GIT_CHANGE_CODES.get((code or "M")[:1].upper(), cls.MODIFIED)


_GIT_CHANGE_CODES = {
    "A": ChangeType.ADDED,
    "M": ChangeType.MODIFIED,
    "D": ChangeType.DELETED,
    "R": ChangeType.RENAMED,
    "C": ChangeType.COPIED,
    "T": ChangeType.TYPE_CHANGED,
}


class CommitRecord(BaseModel):
    """Normalized commit: who, when, which hash and which paths it touched."""

    author: Author
    date_time: datetime
    hash: str
    message: str = ""
    position: int = 0  # Walk order; parents precede children
    files: Set[str] = set()
    changes: Dict[str, ChangeType] = {}

    @field_validator("date_time")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return to_local(value)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def with_message(self, message: Optional[str]) -> "CommitRecord":
        self.message = message or ""
        return self

    def add(
        self, *paths: PathLike, change_type: ChangeType = ChangeType.MODIFIED
    ) -> "CommitRecord":
        """Record paths touched by this commit."""
        for path in paths:
            normalized = normalize_path(path)
            self.files.add(normalized)
            self.changes[normalized] = change_type
        return self

    def touched(self, path: PathLike) -> bool:
        return normalize_path(path) in self.files

    def change_type(self, path: PathLike) -> Optional[ChangeType]:
        return self.changes.get(normalize_path(path))

    def sorted_files(self) -> List[str]:
        return sorted(self.files)

    def __contains__(self, path: PathLike) -> bool:
        return self.touched(path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitRecord):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __str__(self) -> str:
        return f"{self.short_hash} {self.author.name} {self.date_time.isoformat()}"


class CommitHistory:
    """Deduplicated collection of commit records for a repository.

    Records iterate chronologically; commits from the same second keep the
    order in which they were committed.
    """

    def __init__(self, records: Iterable[CommitRecord] = ()):
        by_hash: Dict[str, CommitRecord] = {}
        for record in records:
            if record.hash in by_hash:
                raise InvariantViolationError(
                    f"Commit [{record.hash}] appears more than once"
                )
            by_hash[record.hash] = record
        self._by_hash = by_hash
        self._ordered: Tuple[CommitRecord, ...] = tuple(
            sorted(by_hash.values(), key=lambda r: (r.date_time, r.position, r.hash))
        )

    @classmethod
    def of(cls, records: Iterable[CommitRecord]) -> "CommitHistory":
        return cls(records)

    def hashes(self) -> FrozenSet[str]:
        return frozenset(self._by_hash)

    def contains(self, commit_hash: str) -> bool:
        return self.get(commit_hash) is not None

    def get(self, commit_hash: str) -> Optional[CommitRecord]:
        """Look up a record by full hash or by a unique hash prefix."""
        if not commit_hash:
            return None
        record = self._by_hash.get(commit_hash)
        if record is not None:
            return record
        matches = [r for h, r in self._by_hash.items() if h.startswith(commit_hash)]
        if len(matches) > 1:
            raise ResolutionError(
                commit_hash, f"Hash prefix [{commit_hash}] is ambiguous"
            )
        return matches[0] if matches else None

    def files_changed_in(self, commit_hash: str) -> List[str]:
        record = self.get(commit_hash)
        return record.sorted_files() if record else []

    def commits_touching(self, path: PathLike) -> Tuple[CommitRecord, ...]:
        return tuple(r for r in self._ordered if r.touched(path))

    def commits_by(self, author: Union[Author, str]) -> Tuple[CommitRecord, ...]:
        if isinstance(author, Author):
            return tuple(r for r in self._ordered if r.author == author)
        return tuple(r for r in self._ordered if r.author.matches(author))

    def commits_during(self, window: TimeWindow) -> Tuple[CommitRecord, ...]:
        return tuple(r for r in self._ordered if window.contains(r.date_time))

    def authors(self) -> FrozenSet[Author]:
        return frozenset(r.author for r in self._ordered)

    def paths(self) -> FrozenSet[str]:
        return frozenset(path for r in self._ordered for path in r.files)

    def first_commit(self) -> Optional[CommitRecord]:
        return self._ordered[0] if self._ordered else None

    def last_commit(self) -> Optional[CommitRecord]:
        return self._ordered[-1] if self._ordered else None

    def __contains__(self, commit_hash: str) -> bool:
        return self.contains(commit_hash)

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __repr__(self) -> str:
        return f"CommitHistory(commits={len(self._ordered)})"
