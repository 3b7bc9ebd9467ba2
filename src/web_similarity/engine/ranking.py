"""Read-only similarity rankings for presentation layers."""

from __future__ import annotations

import heapq
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from web_similarity.core.frequency import FrequencyVector
from web_similarity.engine.similarity import cosine_similarity


class RankCategory(StrEnum):
    """Which plot series a ranked document belongs to."""

    REFERENCE = "reference"
    SIMILAR = "similar"
    OTHER = "other"


@dataclass(frozen=True)
class RankedDocument:
    """
    One point of a similarity dataset.

    Attributes:
        document_id: The ranked document
        similarity: Cosine similarity to the reference document
        category: Series the point belongs to
    """

    document_id: str
    similarity: float
    category: RankCategory = RankCategory.OTHER

    def to_dict(self) -> dict[str, str | float]:
        return {
            "document_id": self.document_id,
            "similarity": self.similarity,
            "category": self.category.value,
        }


def rank_by_similarity(
    vectors: Mapping[str, FrequencyVector],
    reference_id: str,
    highlight: Sequence[str] = (),
) -> list[RankedDocument]:
    """
    Similarity of every document to ``reference_id``, most similar first.

    The reference itself is included at 1.0. Documents listed in
    ``highlight`` are tagged as SIMILAR, the rest as OTHER.

    Returns:
        Ranked documents, or an empty list if the reference is unknown
    """
    reference = vectors.get(reference_id)
    if reference is None:
        return []

    highlighted = set(highlight)
    ranked: list[RankedDocument] = []
    for document_id, vector in vectors.items():
        if document_id == reference_id:
            ranked.append(RankedDocument(document_id, 1.0, RankCategory.REFERENCE))
            continue
        category = RankCategory.SIMILAR if document_id in highlighted else RankCategory.OTHER
        ranked.append(RankedDocument(document_id, cosine_similarity(vector, reference), category))

    ranked.sort(key=lambda doc: doc.similarity, reverse=True)
    return ranked


def most_similar(
    vectors: Mapping[str, FrequencyVector],
    reference_id: str,
    candidates: Sequence[str],
    top_n: int = 5,
) -> list[str]:
    """
    The ``top_n`` candidates most similar to ``reference_id``.

    The reference and candidates without a vector are skipped.
    """
    reference = vectors.get(reference_id)
    if reference is None or top_n <= 0:
        return []

    scored = [
        (cosine_similarity(reference, vectors[candidate]), candidate)
        for candidate in dict.fromkeys(candidates)
        if candidate != reference_id and candidate in vectors
    ]
    best = heapq.nlargest(top_n, scored, key=lambda pair: pair[0])
    return [candidate for _, candidate in best]
