"""Plain-text document id list, one id per line."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


def load_document_ids(path: Path) -> list[str]:
    """Read ids from ``path``, skipping blank lines. Missing file -> []."""
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def save_document_ids(document_ids: Iterable[str], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    content = "".join(f"{document_id}\n" for document_id in document_ids)
    path.write_text(content, encoding="utf-8")


def append_document_id(document_id: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{document_id}\n")
