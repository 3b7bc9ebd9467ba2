"""Sites and edges - the nodes and connections of the similarity graph."""

from __future__ import annotations

from dataclasses import dataclass, field

from web_similarity.core.frequency import FrequencyVector


@dataclass
class Site:
    """
    A document in the graph.

    Attributes:
        id: Unique document identifier (usually a URL)
        vector: Word-frequency vector of the document
        score: Free scalar carried for callers; not used by the algorithms
    """

    id: str
    vector: FrequencyVector = field(default_factory=FrequencyVector)
    score: float = 0.0


@dataclass(frozen=True)
class Edge:
    """
    Undirected weighted connection between two sites.

    The weight is the cosine similarity at creation time. It is never
    recomputed, so an edge goes stale if either endpoint changes.

    Attributes:
        source: Id of the first endpoint
        target: Id of the second endpoint
        weight: Similarity score between the endpoints
    """

    source: str
    target: str
    weight: float

    def other(self, site_id: str) -> str | None:
        """Return the endpoint opposite ``site_id``, or None if it is not an endpoint."""
        if site_id == self.source:
            return self.target
        if site_id == self.target:
            return self.source
        return None

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> dict[str, str | float]:
        return {"source": self.source, "target": self.target, "weight": self.weight}
