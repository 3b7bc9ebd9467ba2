"""Dijkstra search over the similarity graph."""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from web_similarity.core.site import Edge
    from web_similarity.engine.graph import GraphView, SimilarityGraph

logger = logging.getLogger(__name__)


def path_cost(path: Sequence[Edge]) -> float:
    """Sum of edge weights along a path."""
    return sum(edge.weight for edge in path)


class ShortestPathFinder:
    """
    Shortest path between two documents.

    The cost of an edge is its raw similarity score, summed along the
    path. Minimizing that sum favours chains of *dissimilar* documents;
    it is not a "most similar route". The weighting is kept as is
    rather than transformed to ``1 - similarity``.
    """

    def __init__(self, graph: SimilarityGraph | GraphView) -> None:
        self._graph = graph

    def distances(self, source: str) -> tuple[dict[str, float], dict[str, Edge]]:
        """
        Run the search from ``source``.

        Returns:
            (best known distance per site, predecessor edge per reached site)
        """
        dist: dict[str, float] = {site_id: math.inf for site_id in self._graph.site_ids}
        previous: dict[str, Edge] = {}
        if source not in dist:
            return dist, previous

        dist[source] = 0.0
        # Counter breaks distance ties by insertion order
        counter = itertools.count()
        queue: list[tuple[float, int, str]] = [(0.0, next(counter), source)]

        while queue:
            current_dist, _, current = heapq.heappop(queue)

            # Stale duplicate: a shorter distance was recorded after this push
            if current_dist > dist[current]:
                continue

            for edge in self._graph.incident_edges(current):
                neighbor = edge.other(current)
                if neighbor is None or neighbor not in dist:
                    continue

                new_dist = current_dist + edge.weight
                if new_dist < dist[neighbor]:
                    dist[neighbor] = new_dist
                    previous[neighbor] = edge
                    heapq.heappush(queue, (new_dist, next(counter), neighbor))

        return dist, previous

    def find_path(self, source: str, target: str) -> list[Edge]:
        """
        Edges of the cheapest path from ``source`` to ``target``.

        Returns an empty list when either id is unknown, when no path
        exists, or when source and target are the same site.
        """
        if source == target:
            return []
        if not self._graph.has_site(source) or not self._graph.has_site(target):
            logger.debug("Path query on unknown site: %s -> %s", source, target)
            return []

        _, previous = self.distances(source)

        path: list[Edge] = []
        seen: set[str] = set()
        at: str | None = target
        while at is not None and at in previous and at not in seen:
            seen.add(at)
            edge = previous[at]
            path.append(edge)
            at = edge.other(at)

        if at != source:
            return []

        path.reverse()
        return path
