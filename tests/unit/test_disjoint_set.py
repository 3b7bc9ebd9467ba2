"""Unit tests for the disjoint-set forest."""

from __future__ import annotations

from web_similarity.engine.disjoint_set import DisjointSetForest


class TestDisjointSetForest:
    """Tests for find/union/count."""

    def test_initial_count_equals_elements(self) -> None:
        forest = DisjointSetForest(["a", "b", "c", "d"])
        assert forest.count_disjoint_sets() == 4
        assert len(forest) == 4

    def test_find_unregistered_returns_none(self) -> None:
        forest = DisjointSetForest(["a"])
        assert forest.find("zzz") is None
        assert forest.find(None) is None

    def test_find_self_root(self) -> None:
        forest = DisjointSetForest(["a", "b"])
        assert forest.find("a") == "a"

    def test_union_joins(self) -> None:
        forest = DisjointSetForest(["a", "b", "c"])

        assert forest.union("a", "b") is True
        assert forest.find("a") == forest.find("b")
        assert forest.connected("a", "b")
        assert not forest.connected("a", "c")

    def test_union_attaches_root_a_under_root_b(self) -> None:
        forest = DisjointSetForest(["a", "b"])
        forest.union("a", "b")
        assert forest.find("a") == "b"

    def test_each_union_decrements_count(self) -> None:
        forest = DisjointSetForest(["a", "b", "c", "d", "e"])

        forest.union("a", "b")
        assert forest.count_disjoint_sets() == 4
        forest.union("c", "d")
        assert forest.count_disjoint_sets() == 3
        forest.union("b", "d")
        assert forest.count_disjoint_sets() == 2

    def test_redundant_union_keeps_count(self) -> None:
        forest = DisjointSetForest(["a", "b", "c"])
        forest.union("a", "b")
        forest.union("b", "c")

        assert forest.union("a", "c") is False
        assert forest.count_disjoint_sets() == 1

    def test_union_with_unregistered_is_noop(self) -> None:
        forest = DisjointSetForest(["a", "b"])
        assert forest.union("a", "missing") is False
        assert forest.count_disjoint_sets() == 2

    def test_find_is_idempotent_and_compresses(self) -> None:
        forest = DisjointSetForest(["a", "b", "c", "d"])
        # Build chain a -> b -> c -> d
        forest.union("a", "b")
        forest.union("b", "c")
        forest.union("c", "d")

        root = forest.find("a")
        assert root == "d"
        assert forest.find("a") == root
        # After compression every node points straight at the root
        assert forest._parent["a"] == "d"
        assert forest._parent["b"] == "d"

    def test_groups(self) -> None:
        forest = DisjointSetForest(["a", "b", "c"])
        forest.union("a", "c")

        groups = forest.groups()
        assert sorted(sorted(members) for members in groups.values()) == [["a", "c"], ["b"]]

    def test_contains(self) -> None:
        forest = DisjointSetForest(["a"])
        assert "a" in forest
        assert "b" not in forest
