"""SourceFile aggregate tracking the revision history of one file."""

import bisect
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

from git_provenance.errors import InvariantViolationError
from git_provenance.models.author import Author
from git_provenance.models.revision import Revision
from git_provenance.models.source_type import SourceFileType
from git_provenance.models.time_window import TimeWindow


class SourceFile:
    """A file under source control and its chronological revisions.

    Revisions are unique by id and always kept in chronological order;
    revisions from the same instant keep the order they were added in.
    Appending is serialized by a per-file lock; queries read an immutable
    snapshot and need no locking.
    """

    def __init__(self, path: Union[str, Path]):
        if path is None:
            raise InvariantViolationError("File is required")
        path = Path(path)
        if not path.is_file():
            raise InvariantViolationError(f"File [{path}] must exist")

        self.path = path
        self._lock = threading.Lock()
        self._type: Optional[SourceFileType] = None
        self._revisions_by_id: Dict[str, Revision] = {}
        self._ordered: List[Tuple[datetime, int, Revision]] = []
        self._snapshot: Tuple[Revision, ...] = ()

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceFile":
        return cls(path)

    @property
    def type(self) -> SourceFileType:
        """File category, resolved from the extension on first access."""
        if self._type is None:
            with self._lock:
                if self._type is None:
                    self._type = SourceFileType.from_path(self.path)
        return self._type

    def with_revision(self, revision: Revision) -> "SourceFile":
        """Append a revision; adding an id twice is an invariant violation."""
        if revision is None:
            raise InvariantViolationError("Revision is required")
        with self._lock:
            if revision.id in self._revisions_by_id:
                raise InvariantViolationError(
                    f"Revision [{revision.id}] already recorded for [{self.path}]"
                )
            self._revisions_by_id[revision.id] = revision
            entry = (revision.date_time, len(self._ordered), revision)
            bisect.insort(self._ordered, entry)
            self._snapshot = tuple(r for _, _, r in self._ordered)
        return self

    # Queries

    def revisions(self) -> Tuple[Revision, ...]:
        return self._snapshot

    def revision_count(self) -> int:
        return len(self._snapshot)

    def revision_ids(self) -> FrozenSet[str]:
        return frozenset(revision.id for revision in self._snapshot)

    def revision(self, revision_id: str) -> Optional[Revision]:
        return self._revisions_by_id.get(revision_id)

    def revisions_by(self, author: Union[Author, str]) -> Tuple[Revision, ...]:
        """Revisions by an exact Author, or by a name-or-email string."""
        if isinstance(author, Author):
            return tuple(r for r in self._snapshot if r.author == author)
        return tuple(r for r in self._snapshot if r.author.matches(author))

    def revisions_during(self, window: TimeWindow) -> Tuple[Revision, ...]:
        if window is None:
            return ()
        return tuple(r for r in self._snapshot if window.contains(r.date_time))

    def first_revision(self) -> Optional[Revision]:
        snapshot = self._snapshot
        return snapshot[0] if snapshot else None

    def last_revision(self) -> Optional[Revision]:
        snapshot = self._snapshot
        return snapshot[-1] if snapshot else None

    def first_revision_date_time(self) -> Optional[datetime]:
        first = self.first_revision()
        return first.date_time if first else None

    def last_revision_date_time(self) -> Optional[datetime]:
        last = self.last_revision()
        return last.date_time if last else None

    def was_modified_by(self, author: Union[Author, str]) -> bool:
        return bool(self.revisions_by(author))

    def was_modified_during(self, window: TimeWindow) -> bool:
        return bool(self.revisions_during(window))

    def authors(self) -> FrozenSet[Author]:
        return frozenset(revision.author for revision in self._snapshot)

    def __iter__(self) -> Iterator[Revision]:
        return iter(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __lt__(self, other: "SourceFile") -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path < other.path

    def __repr__(self) -> str:
        return f"SourceFile({str(self.path)!r}, revisions={len(self._snapshot)})"

    def __str__(self) -> str:
        return str(self.path.absolute())
