"""Commit walking, diffing and aggregation."""

from .aggregation import SourceFileIndex, build_source_file_index
from .cancellation import CancellationToken
from .extractor import CommitHistoryExtractor, load_commit_history

__all__ = [
    "CancellationToken",
    "CommitHistoryExtractor",
    "SourceFileIndex",
    "build_source_file_index",
    "load_commit_history",
]
