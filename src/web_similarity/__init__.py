"""Web Similarity - document similarity graphs, paths and clusters."""

from web_similarity.config import SimilarityConfig
from web_similarity.core import Edge, FrequencyVector, Site
from web_similarity.engine import (
    ConcurrentVectorBuilder,
    DisjointSetForest,
    KMeansClusterer,
    ShortestPathFinder,
    SimilarityGraph,
    SimilarityWorkspace,
    cosine_similarity,
)
from web_similarity.errors import FetchError, SnapshotCorruptionError, WebSimilarityError

__version__ = "0.1.0"

__all__ = [
    "ConcurrentVectorBuilder",
    "DisjointSetForest",
    "Edge",
    "FetchError",
    "FrequencyVector",
    "KMeansClusterer",
    "ShortestPathFinder",
    "SimilarityConfig",
    "SimilarityGraph",
    "SimilarityWorkspace",
    "Site",
    "SnapshotCorruptionError",
    "WebSimilarityError",
    "__version__",
    "cosine_similarity",
]
