"""Similarity graph: sites, weighted edges and their derived indexes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from itertools import combinations

from web_similarity.core.frequency import FrequencyVector
from web_similarity.core.site import Edge, Site
from web_similarity.engine.disjoint_set import DisjointSetForest
from web_similarity.engine.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def connect(a: Site, b: Site) -> Edge:
    """Create an edge between two sites weighted by their current similarity."""
    return Edge(source=a.id, target=b.id, weight=cosine_similarity(a.vector, b.vector))


class SimilarityGraph:
    """
    Documents and their pairwise similarities as an undirected graph.

    Sites and edges are append-only. The site index, the adjacency
    index and the disjoint-set forest are derived from (sites, edges)
    alone and are rebuilt from scratch after every topology change.

    The graph assumes a single writer; callers that share it across
    tasks must serialize mutating calls themselves.
    """

    def __init__(
        self,
        sites: Iterable[Site] = (),
        edges: Iterable[Edge] = (),
    ) -> None:
        self._sites: list[Site] = list(sites)
        self._edges: list[Edge] = list(edges)
        self._site_index: dict[str, Site] = {}
        self._adjacency: dict[str, list[Edge]] = {}
        self._forest = DisjointSetForest()
        self.rebuild()

    @classmethod
    def from_vectors(
        cls,
        vectors: Mapping[str, FrequencyVector],
        min_edge_weight: float = 0.0,
    ) -> SimilarityGraph:
        """
        Build a graph with one site per vector and one edge per pair.

        Args:
            vectors: Document id -> frequency vector
            min_edge_weight: Pairs less similar than this get no edge

        Returns:
            A fully rebuilt graph
        """
        sites = [Site(id=doc_id, vector=vector) for doc_id, vector in vectors.items()]
        edges = []
        for a, b in combinations(sites, 2):
            edge = connect(a, b)
            if edge.weight >= min_edge_weight:
                edges.append(edge)

        logger.info("Built graph with %d sites and %d edges", len(sites), len(edges))
        return cls(sites, edges)

    # ========== Mutation ==========

    def add_site(self, site: Site) -> None:
        self._sites.append(site)
        self.rebuild()

    def add_edge(self, edge: Edge) -> None:
        self._edges.append(edge)
        self.rebuild()

    def extend(self, sites: Iterable[Site] = (), edges: Iterable[Edge] = ()) -> None:
        """Append a batch of sites and edges, then rebuild once."""
        self._sites.extend(sites)
        self._edges.extend(edges)
        self.rebuild()

    def rebuild(self) -> None:
        """Recompute the site index, adjacency index and forest from scratch."""
        site_index: dict[str, Site] = {}
        for site in self._sites:
            site_index[site.id] = site

        adjacency: dict[str, list[Edge]] = {}
        for edge in self._edges:
            adjacency.setdefault(edge.source, []).append(edge)
            if not edge.is_self_loop:
                adjacency.setdefault(edge.target, []).append(edge)

        forest = DisjointSetForest(site_index)
        for edge in self._edges:
            forest.union(edge.source, edge.target)

        self._site_index = site_index
        self._adjacency = adjacency
        self._forest = forest

    # ========== Queries ==========

    @property
    def sites(self) -> tuple[Site, ...]:
        return tuple(self._sites)

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    @property
    def site_ids(self) -> tuple[str, ...]:
        return tuple(self._site_index)

    def has_site(self, site_id: str | None) -> bool:
        return site_id is not None and site_id in self._site_index

    def get_site(self, site_id: str | None) -> Site | None:
        if site_id is None:
            return None
        return self._site_index.get(site_id)

    def incident_edges(self, site_id: str | None) -> tuple[Edge, ...]:
        if site_id is None:
            return ()
        return tuple(self._adjacency.get(site_id, ()))

    def find(self, site_id: str | None) -> str | None:
        """Root of the connected component containing ``site_id``."""
        return self._forest.find(site_id)

    def connected(self, a: str, b: str) -> bool:
        return self._forest.connected(a, b)

    def disjoint_set_count(self) -> int:
        """Number of connected components after the latest rebuild."""
        return self._forest.count_disjoint_sets()

    def components(self) -> list[list[str]]:
        """Connected components as lists of site ids, largest first."""
        groups = list(self._forest.groups().values())
        groups.sort(key=len, reverse=True)
        return groups

    def __len__(self) -> int:
        return len(self._site_index)

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._site_index


class GraphView:
    """
    Read-only facade over a SimilarityGraph.

    Exposes the query side only, so code holding a view cannot append
    sites or edges behind the owner's back. The view follows the graph
    it was created from; an owner that swaps in a new graph hands out a
    new view.
    """

    __slots__ = ("_graph",)

    def __init__(self, graph: SimilarityGraph) -> None:
        self._graph = graph

    @property
    def sites(self) -> tuple[Site, ...]:
        return self._graph.sites

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._graph.edges

    @property
    def site_ids(self) -> tuple[str, ...]:
        return self._graph.site_ids

    def has_site(self, site_id: str | None) -> bool:
        return self._graph.has_site(site_id)

    def get_site(self, site_id: str | None) -> Site | None:
        return self._graph.get_site(site_id)

    def incident_edges(self, site_id: str | None) -> tuple[Edge, ...]:
        return self._graph.incident_edges(site_id)

    def find(self, site_id: str | None) -> str | None:
        return self._graph.find(site_id)

    def connected(self, a: str, b: str) -> bool:
        return self._graph.connected(a, b)

    def disjoint_set_count(self) -> int:
        return self._graph.disjoint_set_count()

    def components(self) -> list[list[str]]:
        return self._graph.components()

    def __len__(self) -> int:
        return len(self._graph)

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._graph
