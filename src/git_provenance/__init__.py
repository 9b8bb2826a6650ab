"""git-provenance: commit history extraction and per-file revision queries."""

from git_provenance.config import ProvenanceConfig
from git_provenance.core import (
    CancellationToken,
    CommitHistoryExtractor,
    SourceFileIndex,
    build_source_file_index,
    load_commit_history,
)
from git_provenance.errors import (
    ConfigError,
    DiffError,
    ExtractionCancelledError,
    ExtractionError,
    InvariantViolationError,
    ProvenanceError,
    ResolutionError,
)
from git_provenance.models import (
    Author,
    ChangeType,
    CommitHistory,
    CommitRecord,
    Revision,
    SourceFile,
    SourceFileType,
    TimeWindow,
)

__version__ = "0.1.0"

__all__ = [
    "Author",
    "CancellationToken",
    "ChangeType",
    "CommitHistory",
    "CommitHistoryExtractor",
    "CommitRecord",
    "ConfigError",
    "DiffError",
    "ExtractionCancelledError",
    "ExtractionError",
    "InvariantViolationError",
    "ProvenanceConfig",
    "ProvenanceError",
    "ResolutionError",
    "Revision",
    "SourceFile",
    "SourceFileIndex",
    "SourceFileType",
    "TimeWindow",
    "build_source_file_index",
    "load_commit_history",
]
