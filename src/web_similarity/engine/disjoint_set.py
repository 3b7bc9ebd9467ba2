"""Union-Find over document ids for connectivity tracking."""

from __future__ import annotations

from collections.abc import Iterable


class DisjointSetForest:
    """Union-Find (disjoint set) with full path compression.

    Elements are registered once, at construction. ``union`` always
    attaches the root of ``a`` under the root of ``b``; there is no
    union-by-rank, so operations are amortized O(log n) rather than
    the near-constant bound of rank plus compression.
    """

    __slots__ = ("_parent",)

    def __init__(self, elements: Iterable[str] = ()) -> None:
        self._parent: dict[str, str] = {element: element for element in elements}

    def find(self, element: str | None) -> str | None:
        """Find the root of ``element``, or None if it was never registered."""
        if element is None or element not in self._parent:
            return None

        root = element
        while self._parent[root] != root:
            root = self._parent[root]

        # Repoint every node on the walked path straight at the root
        while element != root:
            next_element = self._parent[element]
            self._parent[element] = root
            element = next_element

        return root

    def union(self, a: str, b: str) -> bool:
        """Merge the sets containing a and b. Returns True if two sets were joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a is None or root_b is None or root_a == root_b:
            return False
        self._parent[root_a] = root_b
        return True

    def connected(self, a: str, b: str) -> bool:
        root_a = self.find(a)
        return root_a is not None and root_a == self.find(b)

    def count_disjoint_sets(self) -> int:
        """Number of distinct roots across all registered elements."""
        return len({self.find(element) for element in list(self._parent)})

    def groups(self) -> dict[str, list[str]]:
        """Return all groups as root -> members, in registration order."""
        result: dict[str, list[str]] = {}
        for element in list(self._parent):
            root = self.find(element)
            assert root is not None
            result.setdefault(root, []).append(element)
        return result

    def __contains__(self, element: object) -> bool:
        return element in self._parent

    def __len__(self) -> int:
        return len(self._parent)
