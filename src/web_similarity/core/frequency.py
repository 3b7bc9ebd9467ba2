"""Word-frequency vectors - the document model."""

from __future__ import annotations

import re
from collections.abc import ItemsView, Iterable, Iterator, KeysView, Mapping
from typing import Any

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_word(word: str | None) -> str:
    """Lowercase a word and strip every character that is not a letter or digit."""
    if not word:
        return ""
    return _NON_ALNUM.sub("", word.lower())


class FrequencyVector:
    """
    Bag-of-words count model for one document.

    Keys are normalized words (lowercase, alphanumeric, non-empty) and
    values are non-negative counts. Adding a word increments its count,
    it never replaces it. The vector is mutated only through
    ``add_word``, ``merge`` and ``divide``.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[str, int] | None = None) -> None:
        self._counts: dict[str, int] = {}
        if counts:
            for word, count in counts.items():
                self.add_word(word, count)

    @classmethod
    def from_words(cls, words: Iterable[str]) -> FrequencyVector:
        """Build a vector counting every non-empty word once per occurrence."""
        vector = cls()
        for word in words:
            if word:
                vector.add_word(word, 1)
        return vector

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FrequencyVector:
        return cls({str(word): int(count) for word, count in data.items()})

    def to_dict(self) -> dict[str, int]:
        return dict(self._counts)

    def add_word(self, word: str, count: int = 1) -> None:
        """
        Add ``count`` occurrences of ``word``.

        The word is normalized first; nothing happens when the normalized
        form is empty.

        Raises:
            ValueError: If count is negative
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        normalized = normalize_word(word)
        if not normalized:
            return
        self._counts[normalized] = self._counts.get(normalized, 0) + count

    def merge(self, other: FrequencyVector) -> None:
        """Add every count of ``other`` into this vector."""
        for word, count in other.items():
            self._counts[word] = self._counts.get(word, 0) + count

    def divide(self, divisor: int) -> None:
        """
        Integer-divide every count by ``divisor``.

        Truncating: counts smaller than the divisor become 0 but keep
        their key.

        Raises:
            ValueError: If divisor is zero
        """
        if divisor == 0:
            raise ValueError("Divisor cannot be zero.")
        for word, count in self._counts.items():
            self._counts[word] = count // divisor

    def frequency(self, word: str | None) -> int:
        """Count for ``word`` (normalized before lookup), 0 when absent."""
        return self._counts.get(normalize_word(word), 0)

    def words(self) -> KeysView[str]:
        return self._counts.keys()

    def items(self) -> ItemsView[str, int]:
        return self._counts.items()

    def total_word_count(self) -> int:
        return sum(self._counts.values())

    def is_zero(self) -> bool:
        """True when the vector has no positive count."""
        return not any(self._counts.values())

    def copy(self) -> FrequencyVector:
        clone = FrequencyVector()
        clone._counts = dict(self._counts)
        return clone

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_word(word) in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyVector):
            return NotImplemented
        return self._counts == other._counts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FrequencyVector(words={len(self._counts)}, total={self.total_word_count()})"
