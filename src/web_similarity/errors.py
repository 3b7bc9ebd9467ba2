"""Exception types for web similarity."""

from __future__ import annotations


class WebSimilarityError(Exception):
    """Base class for errors raised by this package."""


class FetchError(WebSimilarityError):
    """A document could not be fetched or turned into words."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {document_id}: {reason}")
        self.document_id = document_id
        self.reason = reason


class SnapshotCorruptionError(WebSimilarityError):
    """The persisted snapshot is unreadable or malformed."""
