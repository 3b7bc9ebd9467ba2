"""K-means clustering of frequency vectors with cosine closeness."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from web_similarity.config import ClusteringConfig
from web_similarity.core.frequency import FrequencyVector
from web_similarity.engine.similarity import cosine_similarity

logger = logging.getLogger(__name__)


@dataclass
class Cluster:
    """
    One group produced by a clustering run.

    Attributes:
        centroid: Average vector of the members
        members: Member vectors
        member_indices: Positions of the members in the clustered sequence
    """

    centroid: FrequencyVector
    members: list[FrequencyVector] = field(default_factory=list)
    member_indices: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class ClusteringResult:
    """
    Outcome of a k-means run.

    Attributes:
        clusters: Non-empty clusters, in centroid order
        centroids: All final centroids, including those of empty clusters
        iterations: Assignment/update rounds performed
        converged: False when the iteration cap stopped the run
    """

    clusters: list[Cluster]
    centroids: list[FrequencyVector]
    iterations: int
    converged: bool

    @property
    def total_members(self) -> int:
        return sum(len(cluster) for cluster in self.clusters)


class KMeansClusterer:
    """
    K-means over frequency vectors.

    Closeness is cosine similarity, so each point joins the centroid it
    is *most* similar to. Centroids are integer averages, which quantizes
    them; exact-equality convergence can then cycle, so every run is
    bounded by ``max_iterations``.
    """

    def __init__(self, config: ClusteringConfig | None = None) -> None:
        self._config = config or ClusteringConfig()
        self._rng = random.Random(self._config.seed)

    @property
    def config(self) -> ClusteringConfig:
        return self._config

    def cluster(
        self,
        data: Sequence[FrequencyVector],
        initial_centroids: Sequence[FrequencyVector] | None = None,
    ) -> ClusteringResult:
        """
        Cluster ``data`` into at most ``k`` groups.

        Args:
            data: Vectors to cluster
            initial_centroids: Starting centroids (default: k random samples)

        Returns:
            ClusteringResult whose member counts add up to len(data)
        """
        if not data:
            return ClusteringResult(clusters=[], centroids=[], iterations=0, converged=True)

        if initial_centroids is not None:
            if not initial_centroids:
                raise ValueError("initial_centroids must not be empty")
            centroids = [centroid.copy() for centroid in initial_centroids]
        else:
            centroids = self._initialize_centroids(data)

        converged = False
        iterations = 0
        assignments = self._assign(data, centroids)
        while iterations < self._config.max_iterations:
            iterations += 1
            new_centroids = self._update(data, assignments, centroids)
            if new_centroids == centroids:
                converged = True
                break
            centroids = new_centroids
            assignments = self._assign(data, centroids)

        if not converged:
            logger.warning(
                "K-means stopped after %d iterations without converging", iterations
            )
        else:
            logger.debug("K-means converged after %d iterations", iterations)

        clusters = [
            Cluster(
                centroid=centroid,
                members=[data[i] for i in indices],
                member_indices=list(indices),
            )
            for centroid, indices in zip(centroids, assignments, strict=True)
            if indices
        ]
        return ClusteringResult(
            clusters=clusters,
            centroids=centroids,
            iterations=iterations,
            converged=converged,
        )

    def _initialize_centroids(self, data: Sequence[FrequencyVector]) -> list[FrequencyVector]:
        """Sample k data points uniformly, with replacement."""
        return [self._rng.choice(data).copy() for _ in range(self._config.k)]

    def _assign(
        self,
        data: Sequence[FrequencyVector],
        centroids: Sequence[FrequencyVector],
    ) -> list[list[int]]:
        """Group point indices under the centroid each point is most similar to."""
        assignments: list[list[int]] = [[] for _ in centroids]
        for index, point in enumerate(data):
            best = 0
            best_similarity = float("-inf")
            for position, centroid in enumerate(centroids):
                similarity = cosine_similarity(point, centroid)
                if similarity > best_similarity:
                    best_similarity = similarity
                    best = position
            assignments[best].append(index)
        return assignments

    def _update(
        self,
        data: Sequence[FrequencyVector],
        assignments: Sequence[Sequence[int]],
        centroids: Sequence[FrequencyVector],
    ) -> list[FrequencyVector]:
        """Average each cluster's members; empty clusters keep their centroid."""
        new_centroids: list[FrequencyVector] = []
        for centroid, indices in zip(centroids, assignments, strict=True):
            if not indices:
                new_centroids.append(centroid)
                continue
            average = FrequencyVector()
            for index in indices:
                average.merge(data[index])
            average.divide(len(indices))
            new_centroids.append(average)
        return new_centroids
