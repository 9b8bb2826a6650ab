"""Error taxonomy for git-provenance."""

from typing import Optional


class ProvenanceError(Exception):
    """Base class for every error raised by git-provenance."""


class ResolutionError(ProvenanceError):
    """A ref expression could not be resolved to a commit."""

    def __init__(self, expression: str, message: Optional[str] = None):
        self.expression = expression
        super().__init__(message or f"Failed to resolve [{expression}]")


class DiffError(ProvenanceError):
    """Two commit trees could not be compared."""


class InvariantViolationError(ProvenanceError, ValueError):
    """A model was constructed or mutated into an invalid state."""


class ExtractionError(ProvenanceError):
    """Commit history extraction failed; the original error is the cause."""

    MESSAGE = "failed to load commit history"

    def __init__(self, message: str = MESSAGE):
        super().__init__(message)


class ExtractionCancelledError(ProvenanceError):
    """Commit history extraction was cancelled by the caller."""


class ConfigError(ProvenanceError):
    """The configuration file or environment is invalid."""
