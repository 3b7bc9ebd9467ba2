"""Unit tests for the plain-text document id list."""

from __future__ import annotations

from pathlib import Path

from web_similarity.storage.id_list import (
    append_document_id,
    load_document_ids,
    save_document_ids,
)


class TestDocumentIdList:
    """Tests for load/save/append."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_document_ids(tmp_path / "nope.txt") == []

    def test_save_and_load_preserve_order(self, tmp_path: Path) -> None:
        path = tmp_path / "documents.txt"
        ids = ["https://b.example", "https://a.example", "https://c.example"]

        save_document_ids(ids, path)

        assert load_document_ids(path) == ids
        assert path.read_text(encoding="utf-8").count("\n") == 3

    def test_blank_lines_and_whitespace_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "documents.txt"
        path.write_text("https://a.example\n\n   \n  https://b.example  \n", encoding="utf-8")

        assert load_document_ids(path) == ["https://a.example", "https://b.example"]

    def test_append_creates_parent(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "documents.txt"

        append_document_id("https://a.example", path)
        append_document_id("https://b.example", path)

        assert load_document_ids(path) == ["https://a.example", "https://b.example"]
