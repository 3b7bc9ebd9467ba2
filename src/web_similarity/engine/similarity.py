"""Cosine similarity between frequency vectors."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from web_similarity.core.frequency import FrequencyVector

logger = logging.getLogger(__name__)


def cosine_similarity(a: FrequencyVector | None, b: FrequencyVector | None) -> float:
    """
    Cosine similarity of two frequency vectors.

    The dot product and both norms run over the union of the two
    vocabularies; a word missing from one side contributes 0. A vector
    with no positive count has zero magnitude, and the similarity is
    then 0.0 instead of NaN.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity in [0.0, 1.0]

    Raises:
        ValueError: If either vector is None
    """
    if a is None or b is None:
        raise ValueError("Frequency vectors cannot be None.")

    dot = 0
    norm_a = 0
    for word, count in a.items():
        norm_a += count * count
        dot += count * b.frequency(word)

    norm_b = 0
    for _, count in b.items():
        norm_b += count * count

    denominator = math.sqrt(norm_a * norm_b)
    if denominator == 0:
        return 0.0

    similarity = dot / denominator
    logger.debug("Similarity over %d/%d words: %.4f", len(a), len(b), similarity)
    return similarity
