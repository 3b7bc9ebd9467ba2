"""Core data models for web similarity."""

from web_similarity.core.frequency import FrequencyVector, normalize_word
from web_similarity.core.site import Edge, Site

__all__ = [
    "Edge",
    "FrequencyVector",
    "Site",
    "normalize_word",
]
