"""Data models for git-provenance."""

from .author import Author
from .commit import ChangeType, CommitHistory, CommitRecord
from .revision import Revision
from .source_file import SourceFile
from .source_type import SourceFileType
from .time_window import TimeWindow

__all__ = [
    "Author",
    "ChangeType",
    "CommitHistory",
    "CommitRecord",
    "Revision",
    "SourceFile",
    "SourceFileType",
    "TimeWindow",
]
