"""Single-writer owner of documents, vectors and the similarity graph."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from web_similarity.config import ClusteringConfig, SimilarityConfig
from web_similarity.core.frequency import FrequencyVector
from web_similarity.core.site import Edge, Site
from web_similarity.engine.builder import ConcurrentVectorBuilder
from web_similarity.engine.graph import GraphView, SimilarityGraph, connect
from web_similarity.engine.kmeans import KMeansClusterer
from web_similarity.engine.ranking import RankedDocument, most_similar, rank_by_similarity
from web_similarity.engine.shortest_path import ShortestPathFinder
from web_similarity.errors import SnapshotCorruptionError
from web_similarity.extraction.tokenizer import TokenMode
from web_similarity.storage.id_list import append_document_id, load_document_ids
from web_similarity.storage.snapshot import SnapshotStore

if TYPE_CHECKING:
    from web_similarity.extraction.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentCluster:
    """A k-means cluster expressed in document ids."""

    centroid: FrequencyVector
    document_ids: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.document_ids)


class SimilarityWorkspace:
    """
    Coordinates the document set, its snapshot and the similarity graph.

    This is the single writer: every mutating coroutine runs under one
    asyncio lock, and every topology change ends in one full graph
    rebuild. Queries are synchronous and only hand out read-only views.
    """

    def __init__(
        self,
        config: SimilarityConfig,
        fetcher: DocumentFetcher,
        store: SnapshotStore | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._store = store or SnapshotStore(config.snapshot_path)
        self._lock = asyncio.Lock()
        self._document_ids: list[str] = []
        self._vectors: dict[str, FrequencyVector] = {}
        self._graph = SimilarityGraph()

    @property
    def config(self) -> SimilarityConfig:
        return self._config

    @property
    def document_ids(self) -> tuple[str, ...]:
        """Ids from the id list, in list order (including ones that failed to build)."""
        return tuple(self._document_ids)

    @property
    def vectors(self) -> Mapping[str, FrequencyVector]:
        return MappingProxyType(self._vectors)

    @property
    def graph(self) -> GraphView:
        """Read-only view of the current graph; mutate through the workspace."""
        return GraphView(self._graph)

    # ========== Lifecycle ==========

    async def load(self) -> None:
        """
        Load the id list and snapshot, then build the graph.

        A corrupt snapshot, or an empty one while ids are listed, is
        rebuilt from the id list with the fetcher and saved again.
        """
        async with self._lock:
            self._document_ids = load_document_ids(self._config.documents_path)

            vectors: dict[str, FrequencyVector] = {}
            try:
                await self._open_store()
                vectors = await self._store.load()
            except SnapshotCorruptionError:
                logger.warning("Snapshot is corrupt, rebuilding from id list", exc_info=True)
                await self._reset_store()

            if not vectors and self._document_ids:
                await self._rebuild_locked()
                return

            self._vectors = self._ordered(vectors)
            self._rebuild_graph()

    async def rebuild(self) -> None:
        """Rebuild every vector from the id list and save the snapshot."""
        async with self._lock:
            self._document_ids = load_document_ids(self._config.documents_path)
            await self._open_store()
            await self._rebuild_locked()

    async def save(self) -> None:
        async with self._lock:
            await self._open_store()
            await self._store.save(self._vectors)

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> SimilarityWorkspace:
        await self.load()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ========== Mutation ==========

    async def add_document(self, document_id: str) -> bool:
        """
        Fetch a new document and connect it to every existing site.

        Returns:
            False when the id is blank or already known, True once added

        Raises:
            FetchError: If the document cannot be fetched
        """
        document_id = document_id.strip()
        async with self._lock:
            if not document_id or document_id in self._vectors:
                return False

            words = await self._fetcher.fetch(document_id, TokenMode.WHITESPACE)
            vector = FrequencyVector.from_words(words)

            site = Site(id=document_id, vector=vector)
            edges: list[Edge] = []
            for existing in self._graph.sites:
                edge = connect(site, existing)
                if edge.weight >= self._config.graph.min_edge_weight:
                    edges.append(edge)
            self._graph.extend([site], edges)

            self._vectors[document_id] = vector
            if document_id not in self._document_ids:
                self._document_ids.append(document_id)
                append_document_id(document_id, self._config.documents_path)

            await self._open_store()
            await self._store.save(self._vectors)

        logger.info("Added %s with %d edges", document_id, len(edges))
        return True

    # ========== Queries ==========

    def shortest_path(self, source: str, target: str) -> list[Edge]:
        return ShortestPathFinder(self._graph).find_path(source, target)

    def disjoint_set_count(self) -> int:
        return self._graph.disjoint_set_count()

    def cluster(self, config: ClusteringConfig | None = None) -> list[DocumentCluster]:
        """Group the loaded documents with k-means, largest cluster first."""
        document_ids = list(self._vectors)
        data = [self._vectors[document_id] for document_id in document_ids]
        result = KMeansClusterer(config or self._config.clustering).cluster(data)

        clusters = [
            DocumentCluster(
                centroid=cluster.centroid,
                document_ids=tuple(document_ids[i] for i in cluster.member_indices),
            )
            for cluster in result.clusters
        ]
        clusters.sort(key=len, reverse=True)
        return clusters

    def most_similar(
        self,
        document_id: str,
        top_n: int = 5,
        clusters: list[DocumentCluster] | None = None,
    ) -> list[str]:
        """The ``top_n`` documents most similar to ``document_id`` within its cluster."""
        if document_id not in self._vectors:
            return []
        if clusters is None:
            clusters = self.cluster()

        for cluster in clusters:
            if document_id in cluster.document_ids:
                return most_similar(self._vectors, document_id, cluster.document_ids, top_n)
        return []

    def rank(self, reference_id: str, highlight_top: int = 0) -> list[RankedDocument]:
        """
        Similarity dataset against ``reference_id`` for plotting.

        Args:
            reference_id: Document every other one is compared to
            highlight_top: Tag this many in-cluster neighbours as SIMILAR
        """
        highlight: list[str] = []
        if highlight_top > 0:
            highlight = self.most_similar(reference_id, top_n=highlight_top)
        return rank_by_similarity(self._vectors, reference_id, highlight)

    # ========== Internals ==========

    async def _open_store(self) -> None:
        if not self._store.is_open:
            await self._store.initialize()

    async def _reset_store(self) -> None:
        """Move a corrupt snapshot aside and start an empty one."""
        await self._store.close()
        path = self._store.db_path
        if path.exists():
            corrupt = path.with_name(path.name + ".corrupt")
            path.replace(corrupt)
            logger.warning("Moved corrupt snapshot to %s", corrupt)
        await self._store.initialize()

    async def _rebuild_locked(self) -> None:
        builder = ConcurrentVectorBuilder(self._fetcher, self._config.build)
        vectors = await builder.build(self._document_ids)
        missing = len(set(self._document_ids)) - len(vectors)
        if missing:
            logger.warning("%d documents could not be built", missing)

        self._vectors = self._ordered(vectors)
        self._rebuild_graph()
        await self._store.save(self._vectors)

    def _ordered(self, vectors: Mapping[str, FrequencyVector]) -> dict[str, FrequencyVector]:
        """Vectors in id-list order; snapshot entries not in the list go last."""
        ordered = {doc_id: vectors[doc_id] for doc_id in self._document_ids if doc_id in vectors}
        for doc_id, vector in vectors.items():
            ordered.setdefault(doc_id, vector)
        return ordered

    def _rebuild_graph(self) -> None:
        self._graph = SimilarityGraph.from_vectors(
            self._vectors, min_edge_weight=self._config.graph.min_edge_weight
        )
