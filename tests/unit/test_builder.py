"""Unit tests for the concurrent vector builder."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from web_similarity.config import BuildConfig
from web_similarity.core.frequency import FrequencyVector
from web_similarity.engine.builder import ConcurrentVectorBuilder
from web_similarity.extraction.tokenizer import TokenMode


class TestConcurrentVectorBuilder:
    """Tests for ConcurrentVectorBuilder.build."""

    async def test_builds_every_document(
        self, make_fetcher: Callable, sample_texts: dict[str, str]
    ) -> None:
        builder = ConcurrentVectorBuilder(make_fetcher(sample_texts))

        vectors = await builder.build(sample_texts)

        assert list(vectors) == list(sample_texts)
        cats = vectors["https://example.com/cats"]
        assert cats.frequency("the") == 3
        assert cats.frequency("cat") == 2

    async def test_failed_document_is_omitted(
        self,
        make_fetcher: Callable,
        sample_texts: dict[str, str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        failing = "https://example.com/dogs"
        builder = ConcurrentVectorBuilder(make_fetcher(sample_texts, failing=[failing]))

        with caplog.at_level(logging.WARNING, logger="web_similarity.engine.builder"):
            vectors = await builder.build(sample_texts)

        assert len(vectors) == len(sample_texts) - 1
        assert failing not in vectors
        assert "Skipping https://example.com/dogs" in caplog.text

    async def test_unknown_document_is_omitted_not_empty(
        self, make_fetcher: Callable, sample_texts: dict[str, str]
    ) -> None:
        builder = ConcurrentVectorBuilder(make_fetcher(sample_texts))

        vectors = await builder.build(["https://example.com/cats", "https://missing.example"])

        assert list(vectors) == ["https://example.com/cats"]

    async def test_wordless_document_is_kept_with_warning(
        self, make_fetcher: Callable, caplog: pytest.LogCaptureFixture
    ) -> None:
        texts = {"https://example.com/blank": "!!! ... ???", "https://example.com/cats": "cat"}
        builder = ConcurrentVectorBuilder(make_fetcher(texts))

        with caplog.at_level(logging.WARNING, logger="web_similarity.engine.builder"):
            vectors = await builder.build(texts)

        assert list(vectors) == list(texts)
        assert vectors["https://example.com/blank"].is_zero()
        assert "No words extracted from https://example.com/blank" in caplog.text
        assert "example.com/cats" not in caplog.text

    async def test_repeatable(self, make_fetcher: Callable, sample_texts: dict[str, str]) -> None:
        fetcher = make_fetcher(sample_texts, failing=["https://example.com/python"])
        builder = ConcurrentVectorBuilder(fetcher)

        first = await builder.build(sample_texts)
        second = await builder.build(sample_texts)

        assert first == second

    async def test_duplicate_ids_built_once(
        self, make_fetcher: Callable, sample_texts: dict[str, str]
    ) -> None:
        fetcher = make_fetcher(sample_texts)
        builder = ConcurrentVectorBuilder(fetcher)
        doc = "https://example.com/cats"

        vectors = await builder.build([doc, doc, doc])

        assert list(vectors) == [doc]
        assert [call[0] for call in fetcher.calls] == [doc]

    async def test_empty_input(self, make_fetcher: Callable) -> None:
        assert await ConcurrentVectorBuilder(make_fetcher({})).build([]) == {}

    async def test_concurrency_is_bounded(self, make_fetcher: Callable) -> None:
        texts = {f"doc-{i}": f"word{i} shared" for i in range(12)}
        fetcher = make_fetcher(texts, delay=0.01)
        builder = ConcurrentVectorBuilder(fetcher, BuildConfig(max_concurrency=3))

        vectors = await builder.build(texts)

        assert len(vectors) == 12
        assert 1 < fetcher.max_in_flight <= 3

    async def test_passes_token_mode(self, make_fetcher: Callable) -> None:
        fetcher = make_fetcher({"doc": "state-of-the-art"})
        builder = ConcurrentVectorBuilder(fetcher, mode=TokenMode.WHITESPACE)

        vectors = await builder.build(["doc"])

        assert fetcher.calls == [("doc", TokenMode.WHITESPACE)]
        assert vectors["doc"] == FrequencyVector({"stateoftheart": 1})


class TestBuildConfig:
    """Validation of build settings."""

    def test_rejects_zero_concurrency(self) -> None:
        with pytest.raises(ValueError, match="max_concurrency"):
            BuildConfig(max_concurrency=0)
