"""Per-file revision index built from a commit history."""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from git_provenance.models.author import Author
from git_provenance.models.commit import CommitHistory, PathLike, normalize_path
from git_provenance.models.revision import Revision
from git_provenance.models.source_file import SourceFile
from git_provenance.models.source_type import SourceFileType
from git_provenance.models.time_window import TimeWindow

logger = logging.getLogger(__name__)


class SourceFileIndex:
    """Maps repository-relative paths to their SourceFile."""

    def __init__(self, root: Path, source_files: Dict[str, SourceFile]):
        self.root = root
        self._source_files = source_files

    def get(self, path: PathLike) -> Optional[SourceFile]:
        return self._source_files.get(self._relative(path))

    def paths(self) -> List[str]:
        return sorted(self._source_files)

    def files_of_type(self, source_type: SourceFileType) -> List[SourceFile]:
        return [f for f in self if f.type is source_type]

    def files_modified_by(self, author: Union[Author, str]) -> List[SourceFile]:
        return [f for f in self if f.was_modified_by(author)]

    def files_modified_during(self, window: TimeWindow) -> List[SourceFile]:
        return [f for f in self if f.was_modified_during(window)]

    def _relative(self, path: PathLike) -> str:
        path = Path(path)
        if path.is_absolute():
            try:
                path = path.resolve().relative_to(self.root)
            except ValueError:
                return str(path)
        return normalize_path(path)

    def __getitem__(self, path: PathLike) -> SourceFile:
        source_file = self.get(path)
        if source_file is None:
            raise KeyError(str(path))
        return source_file

    def __contains__(self, path: PathLike) -> bool:
        return self.get(path) is not None

    def __iter__(self) -> Iterator[SourceFile]:
        return (self._source_files[p] for p in self.paths())

    def __len__(self) -> int:
        return len(self._source_files)


def build_source_file_index(
    history: CommitHistory, root: Union[str, Path]
) -> SourceFileIndex:
    """Group every commit's touched paths into SourceFiles with revisions.

    Only paths that currently exist as regular files under ``root`` get a
    SourceFile; deleted or renamed-away paths are skipped.
    """
    root = Path(root).resolve()
    source_files: Dict[str, SourceFile] = {}
    missing = set()

    for record in history:
        revision = Revision(
            author=record.author, date_time=record.date_time, id=record.hash
        )
        for path in record.files:
            if path in missing:
                continue
            source_file = source_files.get(path)
            if source_file is None:
                if not (root / path).is_file():
                    missing.add(path)
                    logger.debug("Skipping %s: not a file under %s", path, root)
                    continue
                source_file = source_files[path] = SourceFile(root / path)
            source_file.with_revision(revision)

    logger.debug(
        "Indexed %d source files (%d missing paths skipped)",
        len(source_files),
        len(missing),
    )
    return SourceFileIndex(root, source_files)
