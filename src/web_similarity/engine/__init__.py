"""Graph and clustering engine."""

from web_similarity.engine.builder import ConcurrentVectorBuilder
from web_similarity.engine.disjoint_set import DisjointSetForest
from web_similarity.engine.graph import GraphView, SimilarityGraph
from web_similarity.engine.kmeans import Cluster, ClusteringResult, KMeansClusterer
from web_similarity.engine.shortest_path import ShortestPathFinder, path_cost
from web_similarity.engine.similarity import cosine_similarity
from web_similarity.engine.workspace import DocumentCluster, SimilarityWorkspace

__all__ = [
    "Cluster",
    "ClusteringResult",
    "ConcurrentVectorBuilder",
    "DisjointSetForest",
    "DocumentCluster",
    "GraphView",
    "KMeansClusterer",
    "ShortestPathFinder",
    "SimilarityGraph",
    "SimilarityWorkspace",
    "cosine_similarity",
    "path_cost",
]
