"""Persistence for document ids and frequency vectors."""

from web_similarity.storage.id_list import (
    append_document_id,
    load_document_ids,
    save_document_ids,
)
from web_similarity.storage.snapshot import SnapshotStore

__all__ = [
    "SnapshotStore",
    "append_document_id",
    "load_document_ids",
    "save_document_ids",
]
