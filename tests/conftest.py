"""Shared fixtures: an in-memory fetcher and a small document corpus."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from web_similarity.config import SimilarityConfig
from web_similarity.errors import FetchError
from web_similarity.extraction.tokenizer import TokenMode, tokenize

SAMPLE_TEXTS: dict[str, str] = {
    "https://example.com/cats": "The cat sat on the mat. Cats purr; the cat sleeps.",
    "https://example.com/kittens": "A kitten is a young cat. The kitten and the cat play.",
    "https://example.com/dogs": "The dog barks. Dogs fetch the ball and the dog runs.",
    "https://example.com/puppies": "A puppy is a young dog. The puppy and the dog play.",
    "https://example.com/python": "Python lists, dicts and sets. Python runs scripts.",
}


class FakeFetcher:
    """DocumentFetcher over in-memory texts; unknown or failing ids raise FetchError."""

    def __init__(
        self,
        texts: dict[str, str],
        failing: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self.texts = dict(texts)
        self.failing = set(failing)
        self.delay = delay
        self.calls: list[tuple[str, TokenMode]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, document_id: str, mode: TokenMode = TokenMode.NON_WORD) -> list[str]:
        self.calls.append((document_id, mode))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if document_id in self.failing or document_id not in self.texts:
                raise FetchError(document_id, "unreachable")
            return tokenize(self.texts[document_id], mode)
        finally:
            self.in_flight -= 1


@pytest.fixture
def sample_texts() -> dict[str, str]:
    return dict(SAMPLE_TEXTS)


@pytest.fixture
def make_fetcher() -> Callable[..., FakeFetcher]:
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated data directory, also exported as WSIM_HOME."""
    path = tmp_path / "wsim"
    monkeypatch.setenv("WSIM_HOME", str(path))
    return path


@pytest.fixture
def similarity_config(data_dir: Path) -> SimilarityConfig:
    return SimilarityConfig(data_dir=data_dir)
