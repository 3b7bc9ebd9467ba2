"""
Basic usage example for Web Similarity.

This example demonstrates:
1. Building frequency vectors for a set of documents
2. Exploring the similarity graph (components, shortest path)
3. Clustering the documents and ranking them against a reference

Documents come from an in-memory fetcher so the example runs offline.
Swap in HttpDocumentFetcher to fetch real URLs.
"""

import asyncio
import tempfile
from pathlib import Path

from web_similarity import SimilarityConfig, SimilarityWorkspace
from web_similarity.config import ClusteringConfig
from web_similarity.errors import FetchError
from web_similarity.extraction.tokenizer import TokenMode, tokenize

DOCUMENTS = {
    "https://example.org/cats": "Cats are small carnivorous mammals. A cat purrs and sleeps.",
    "https://example.org/lions": "Lions are large cats. A lion hunts and sleeps in the sun.",
    "https://example.org/python": "Python is a programming language. Python code is readable.",
    "https://example.org/rust": "Rust is a programming language focused on safe systems code.",
}


class InMemoryFetcher:
    """Serves documents from a dict instead of the network."""

    def __init__(self, documents: dict[str, str]) -> None:
        self._documents = documents

    async def fetch(self, document_id: str, mode: TokenMode = TokenMode.NON_WORD) -> list[str]:
        if document_id not in self._documents:
            raise FetchError(document_id, "not in the example corpus")
        return tokenize(self._documents[document_id], mode)


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        config = SimilarityConfig(data_dir=Path(tmp))

        # 1. Add documents one by one; each add connects to every existing site
        async with SimilarityWorkspace(config, InMemoryFetcher(DOCUMENTS)) as workspace:
            print("Adding documents...")
            for url in DOCUMENTS:
                await workspace.add_document(url)
                print(f"  - {url}: {len(workspace.vectors[url])} distinct words")

            # 2. Graph queries
            graph = workspace.graph
            print(f"\nGraph: {len(graph)} sites, {len(graph.edges)} edges")
            print(f"Disjoint sets: {workspace.disjoint_set_count()}")

            path = workspace.shortest_path(
                "https://example.org/cats", "https://example.org/rust"
            )
            print("\nShortest path cats -> rust:")
            for edge in path:
                print(f"  {edge.source} -> {edge.target} (score: {edge.weight:.4f})")

            # 3. Clustering and ranking
            clusters = workspace.cluster(ClusteringConfig(k=2, seed=7))
            print(f"\n{len(clusters)} clusters:")
            for i, cluster in enumerate(clusters, 1):
                print(f"  [{i}] {', '.join(cluster.document_ids)}")

            print("\nRanking against cats:")
            for doc in workspace.rank("https://example.org/cats"):
                print(f"  {doc.similarity:.4f}  [{doc.category}]  {doc.document_id}")


if __name__ == "__main__":
    asyncio.run(main())
