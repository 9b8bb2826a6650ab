"""Cooperative cancellation for long-running history walks."""

import threading

from git_provenance.errors import ExtractionCancelledError


class CancellationToken:
    """Thread-safe flag checked between per-commit iterations."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ExtractionCancelledError("Commit history extraction was cancelled")
