"""Web Similarity CLI main entry point."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Annotated, Any, Optional

import typer

from web_similarity.cli.commands.config_cmd import config_app
from web_similarity.cli.setup import setup_data_dir
from web_similarity.config import ClusteringConfig, SimilarityConfig
from web_similarity.engine.shortest_path import path_cost
from web_similarity.engine.workspace import SimilarityWorkspace
from web_similarity.errors import FetchError
from web_similarity.extraction.fetcher import DocumentFetcher, HttpDocumentFetcher

# Main app
app = typer.Typer(
    name="wsim",
    help="Web Similarity - compare web documents as a similarity graph",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_config() -> SimilarityConfig:
    """Get configuration from the data directory."""
    return SimilarityConfig.load()


def create_fetcher(config: SimilarityConfig) -> DocumentFetcher:
    return HttpDocumentFetcher(config.fetch)


async def open_workspace(config: SimilarityConfig) -> SimilarityWorkspace:
    """Create a workspace and load its documents."""
    workspace = SimilarityWorkspace(config, create_fetcher(config))
    await workspace.load()
    return workspace


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Output result in appropriate format; errors exit with status 1."""
    if as_json:
        typer.echo(json.dumps(data, indent=2, default=str))
    elif "error" in data:
        typer.secho(f"Error: {data['error']}", fg=typer.colors.RED)
    elif "message" in data:
        typer.secho(data["message"], fg=typer.colors.GREEN)
        for warning in data.get("warnings", []):
            typer.secho(warning, fg=typer.colors.YELLOW)
    elif "lines" in data:
        for line in data["lines"]:
            typer.echo(line)
    else:
        typer.echo(str(data))

    if "error" in data:
        raise typer.Exit(1)


# =============================================================================
# Document Commands
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing config.toml")
    ] = False,
) -> None:
    """Create the data directory with config.toml and an empty document list.

    Examples:
        wsim init
        WSIM_HOME=./data wsim init --force
    """
    config = get_config()
    created = setup_data_dir(config, force=force)
    if created:
        typer.secho(f"Initialized {config.data_dir}", fg=typer.colors.GREEN)
    else:
        typer.echo(f"{config.config_path} already exists (use --force to overwrite)")


@app.command()
def add(
    url: Annotated[str, typer.Argument(help="URL of the document to add")],
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Fetch a document, connect it to the graph and save it.

    Examples:
        wsim add https://en.wikipedia.org/wiki/Graph_theory
    """

    async def _add() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        try:
            added = await workspace.add_document(url)
        except FetchError as e:
            return {"error": str(e)}
        finally:
            await workspace.close()

        if not added:
            return {"error": f"{url} is empty or already in the graph"}

        vector = workspace.vectors[url.strip()]
        return {
            "message": f"Added {url.strip()} ({len(vector)} distinct words)",
            "document_id": url.strip(),
            "words": len(vector),
            "sites": len(workspace.graph),
            "edges": len(workspace.graph.edges),
        }

    output_result(asyncio.run(_add()), json_output)


@app.command()
def build(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Rebuild every frequency vector from the document list.

    Documents that fail to fetch are skipped and reported.
    """

    async def _build() -> dict[str, Any]:
        config = get_config()
        workspace = SimilarityWorkspace(config, create_fetcher(config))
        try:
            await workspace.rebuild()
        finally:
            await workspace.close()

        failed = [doc_id for doc_id in workspace.document_ids if doc_id not in workspace.vectors]
        return {
            "message": f"Built {len(workspace.vectors)} of {len(workspace.document_ids)} documents",
            "built": len(workspace.vectors),
            "failed": failed,
            "warnings": [f"[!] Could not build {doc_id}" for doc_id in failed],
        }

    output_result(asyncio.run(_build()), json_output)


@app.command("list")
def list_documents(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List known documents with their vocabulary size."""

    async def _list() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        await workspace.close()

        documents = []
        for doc_id in workspace.document_ids:
            vector = workspace.vectors.get(doc_id)
            documents.append(
                {
                    "document_id": doc_id,
                    "words": len(vector) if vector is not None else None,
                    "total": vector.total_word_count() if vector is not None else None,
                }
            )

        lines = [
            f"{doc['document_id']}  ({doc['words']} words)"
            if doc["words"] is not None
            else f"{doc['document_id']}  (not built)"
            for doc in documents
        ]
        return {"documents": documents, "lines": lines or ["No documents."]}

    output_result(asyncio.run(_list()), json_output)


# =============================================================================
# Graph Queries
# =============================================================================


@app.command()
def path(
    source: Annotated[str, typer.Argument(help="Start document")],
    target: Annotated[str, typer.Argument(help="End document")],
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Find the shortest path between two documents.

    Edge cost is the raw similarity score, summed along the path.
    """

    async def _path() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        await workspace.close()

        edges = workspace.shortest_path(source, target)
        if not edges:
            return {"error": f"No path found between {source} and {target}"}

        lines = ["Shortest path:"]
        lines += [f"  {e.source} -> {e.target} (score: {e.weight:.4f})" for e in edges]
        lines.append(f"Total cost: {path_cost(edges):.4f}")
        return {
            "edges": [edge.to_dict() for edge in edges],
            "cost": path_cost(edges),
            "lines": lines,
        }

    output_result(asyncio.run(_path()), json_output)


@app.command()
def components(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the connected components of the similarity graph."""

    async def _components() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        await workspace.close()

        groups = workspace.graph.components()
        lines = [f"Disjoint sets: {workspace.disjoint_set_count()}"]
        for i, group in enumerate(groups, 1):
            lines.append(f"  [{i}] {len(group)} documents")
            lines += [f"      {doc_id}" for doc_id in group]
        return {"count": workspace.disjoint_set_count(), "components": groups, "lines": lines}

    output_result(asyncio.run(_components()), json_output)


@app.command()
def cluster(
    k: Annotated[Optional[int], typer.Option("--k", "-k", help="Number of clusters")] = None,
    max_iterations: Annotated[
        Optional[int], typer.Option("--max-iterations", "-m", help="Iteration cap")
    ] = None,
    seed: Annotated[Optional[int], typer.Option("--seed", "-s", help="Random seed")] = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Group documents with k-means over their word frequencies.

    Examples:
        wsim cluster
        wsim cluster -k 4 --seed 7
    """

    async def _cluster() -> dict[str, Any]:
        config = get_config()
        base = config.clustering
        try:
            clustering = ClusteringConfig(
                k=k if k is not None else base.k,
                max_iterations=max_iterations if max_iterations is not None else base.max_iterations,
                seed=seed if seed is not None else base.seed,
            )
        except ValueError as e:
            return {"error": str(e)}

        workspace = await open_workspace(config)
        await workspace.close()

        clusters = workspace.cluster(clustering)
        lines = [f"{len(clusters)} clusters over {len(workspace.vectors)} documents"]
        for i, group in enumerate(clusters, 1):
            lines.append(f"  [{i}] {len(group)} documents")
            lines += [f"      {doc_id}" for doc_id in group.document_ids]
        return {
            "clusters": [list(group.document_ids) for group in clusters],
            "lines": lines,
        }

    output_result(asyncio.run(_cluster()), json_output)


@app.command()
def rank(
    url: Annotated[str, typer.Argument(help="Reference document")],
    top: Annotated[int, typer.Option("--top", "-n", help="Rows to show (0 = all)")] = 0,
    highlight: Annotated[
        int, typer.Option("--highlight", help="Tag this many in-cluster neighbours as similar")
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Rank every document by similarity to a reference document."""

    async def _rank() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        await workspace.close()

        ranked = workspace.rank(url, highlight_top=highlight)
        if not ranked:
            return {"error": f"Unknown document: {url}"}
        if top > 0:
            ranked = ranked[:top]

        lines = [f"{doc.similarity:.4f}  [{doc.category}]  {doc.document_id}" for doc in ranked]
        return {"ranking": [doc.to_dict() for doc in ranked], "lines": lines}

    output_result(asyncio.run(_rank()), json_output)


@app.command()
def similar(
    url: Annotated[str, typer.Argument(help="Reference document")],
    top: Annotated[int, typer.Option("--top", "-n", help="Number of results")] = 5,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the documents most similar to URL within its k-means cluster."""

    async def _similar() -> dict[str, Any]:
        workspace = await open_workspace(get_config())
        await workspace.close()

        if url not in workspace.vectors:
            return {"error": f"Unknown document: {url}"}

        neighbours = workspace.most_similar(url, top_n=top)
        lines = [f"  {doc_id}" for doc_id in neighbours] or ["No similar documents in cluster."]
        return {"document_id": url, "similar": neighbours, "lines": lines}

    output_result(asyncio.run(_similar()), json_output)


# =============================================================================
# Utility Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from web_similarity import __version__

    typer.echo(f"web-similarity v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
