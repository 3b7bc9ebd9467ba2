"""Integration tests for the wsim command line."""

from __future__ import annotations

import importlib
import inspect
import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from web_similarity import __version__
from web_similarity.cli.main import app
from web_similarity.extraction.fetcher import HttpDocumentFetcher
from web_similarity.storage.id_list import load_document_ids, save_document_ids

CATS = "https://example.com/cats"
KITTENS = "https://example.com/kittens"
PUPPIES = "https://example.com/puppies"

runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_network(
    monkeypatch: pytest.MonkeyPatch,
    make_fetcher: Callable,
    sample_texts: dict[str, str],
    data_dir: Path,
) -> None:
    """Route every fetch through the in-memory corpus."""
    fetcher = make_fetcher(sample_texts)
    cli_main = importlib.import_module("web_similarity.cli.main")
    monkeypatch.setattr(cli_main, "create_fetcher", lambda config: fetcher)


def _json(args: list[str]) -> dict:
    result = runner.invoke(app, [*args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.fixture
def populated(data_dir: Path, sample_texts: dict[str, str]) -> Path:
    save_document_ids(sample_texts, data_dir / "documents.txt")
    result = runner.invoke(app, ["build"])
    assert result.exit_code == 0, result.output
    return data_dir


class TestInitAndConfig:
    """Tests for init and config commands."""

    def test_init_creates_files(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (data_dir / "config.toml").exists()
        assert (data_dir / "documents.txt").exists()

    def test_init_twice_needs_force(self, data_dir: Path) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])
        assert "already exists" in result.stdout

        result = runner.invoke(app, ["init", "--force"])
        assert "Initialized" in result.stdout

    def test_config_set_and_show(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["config", "set", "clustering.k", "3"])
        assert result.exit_code == 0, result.output
        assert "10 -> 3" in result.stdout

        shown = runner.invoke(app, ["config", "show"])
        assert "k = 3" in shown.stdout

    def test_config_set_rejects_unknown_key(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["config", "set", "graph.nope", "1"])

        assert result.exit_code == 1
        assert not (data_dir / "config.toml").exists()

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert __version__ in result.stdout

    def test_cli_package_exposes_main_module(self) -> None:
        package = importlib.import_module("web_similarity.cli")

        assert inspect.ismodule(package.main)
        assert callable(package.main.create_fetcher)


class TestDocumentCommands:
    """Tests for add, build and list."""

    def test_add(self, data_dir: Path) -> None:
        data = _json(["add", CATS])

        assert data["document_id"] == CATS
        assert data["sites"] == 1
        assert data["edges"] == 0
        assert load_document_ids(data_dir / "documents.txt") == [CATS]

    def test_add_twice_fails(self) -> None:
        runner.invoke(app, ["add", CATS])

        result = runner.invoke(app, ["add", CATS])

        assert result.exit_code == 1
        assert "already in the graph" in result.stdout

    def test_add_malformed_url_fails(
        self, monkeypatch: pytest.MonkeyPatch, data_dir: Path
    ) -> None:
        cli_main = importlib.import_module("web_similarity.cli.main")
        monkeypatch.setattr(cli_main, "create_fetcher", lambda config: HttpDocumentFetcher())

        result = runner.invoke(app, ["add", "http://[::1"])

        assert result.exit_code == 1
        assert "Error: Failed to fetch http://[::1" in result.stdout
        assert load_document_ids(data_dir / "documents.txt") == []

    def test_add_unreachable_fails(self, data_dir: Path) -> None:
        result = runner.invoke(app, ["add", "https://unreachable.example", "--json"])

        assert result.exit_code == 1
        assert "error" in json.loads(result.stdout)
        assert load_document_ids(data_dir / "documents.txt") == []

    def test_build_reports_failures(self, data_dir: Path, sample_texts: dict[str, str]) -> None:
        ids = [*sample_texts, "https://unreachable.example"]
        save_document_ids(ids, data_dir / "documents.txt")

        data = _json(["build"])

        assert data["built"] == 5
        assert data["failed"] == ["https://unreachable.example"]

    def test_list(self, populated: Path) -> None:
        data = _json(["list"])

        assert len(data["documents"]) == 5
        assert all(doc["words"] > 0 for doc in data["documents"])

    def test_list_empty(self) -> None:
        result = runner.invoke(app, ["list"])
        assert "No documents." in result.stdout


class TestGraphCommands:
    """Tests for the query commands over a built graph."""

    def test_path(self, populated: Path) -> None:
        data = _json(["path", CATS, PUPPIES])

        assert data["edges"]
        assert data["edges"][0]["source"] == CATS or data["edges"][0]["target"] == CATS
        assert data["cost"] == pytest.approx(sum(e["weight"] for e in data["edges"]))

    def test_path_to_self_is_error(self, populated: Path) -> None:
        result = runner.invoke(app, ["path", CATS, CATS])

        assert result.exit_code == 1
        assert "No path found" in result.stdout

    def test_components(self, populated: Path) -> None:
        data = _json(["components"])

        assert data["count"] == 1
        assert len(data["components"][0]) == 5

    def test_cluster(self, populated: Path) -> None:
        data = _json(["cluster", "-k", "2", "--seed", "1"])

        assert 1 <= len(data["clusters"]) <= 2
        assert sum(len(c) for c in data["clusters"]) == 5

    def test_cluster_rejects_zero_k(self, populated: Path) -> None:
        result = runner.invoke(app, ["cluster", "-k", "0"])

        assert result.exit_code == 1
        assert "k must be" in result.stdout

    def test_rank(self, populated: Path) -> None:
        data = _json(["rank", CATS, "--top", "3"])

        assert len(data["ranking"]) == 3
        assert data["ranking"][0] == {
            "document_id": CATS,
            "similarity": 1.0,
            "category": "reference",
        }

    def test_rank_unknown(self, populated: Path) -> None:
        result = runner.invoke(app, ["rank", "https://unknown.example"])
        assert result.exit_code == 1

    def test_similar(self, populated: Path) -> None:
        runner.invoke(app, ["config", "set", "clustering.k", "1"])

        data = _json(["similar", CATS, "--top", "1"])

        assert data["similar"] == [KITTENS]
