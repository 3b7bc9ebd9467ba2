"""Concurrent fan-out/fan-in build of frequency vectors."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from web_similarity.config import BuildConfig
from web_similarity.core.frequency import FrequencyVector
from web_similarity.extraction.tokenizer import TokenMode

if TYPE_CHECKING:
    from web_similarity.extraction.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)


class ConcurrentVectorBuilder:
    """
    Builds one frequency vector per document id, concurrently.

    One task is launched per id; at most ``max_concurrency`` fetches run
    at a time. Tasks share no state and the caller only sees the joined
    result. A failed task is logged and its id is left out of the
    result: absence is the failure signal, never an empty vector.
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        config: BuildConfig | None = None,
        mode: TokenMode = TokenMode.NON_WORD,
    ) -> None:
        self._fetcher = fetcher
        self._config = config or BuildConfig()
        self._mode = mode

    async def _build_one(self, document_id: str, semaphore: asyncio.Semaphore) -> FrequencyVector:
        async with semaphore:
            words = await self._fetcher.fetch(document_id, self._mode)
        return FrequencyVector.from_words(words)

    async def build(self, document_ids: Iterable[str]) -> dict[str, FrequencyVector]:
        """
        Fetch and count words for every document id.

        Args:
            document_ids: Ids to build; duplicates are built once

        Returns:
            Mapping of id -> vector for the ids that succeeded, in input order
        """
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return {}

        logger.info("Building frequency vectors for %d documents", len(ids))
        semaphore = asyncio.Semaphore(self._config.max_concurrency)
        results = await asyncio.gather(
            *[self._build_one(document_id, semaphore) for document_id in ids],
            return_exceptions=True,
        )

        vectors: dict[str, FrequencyVector] = {}
        for document_id, result in zip(ids, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Skipping %s: %s", document_id, result)
                logger.debug("Build failure for %s", document_id, exc_info=result)
                continue
            vectors[document_id] = result
            if result.is_zero():
                logger.warning("No words extracted from %s", document_id)
            else:
                logger.debug("Built vector for %s with %d words", document_id, len(result))

        logger.info("Built %d of %d frequency vectors", len(vectors), len(ids))
        return vectors
