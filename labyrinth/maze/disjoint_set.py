"""Disjoint-set forest over the integers ``0 .. size - 1``.

Union by rank with full path compression. ``find`` walks to the root in a
loop and then rewrites every visited parent pointer, so very large mazes do
not hit the recursion limit.
"""

from __future__ import annotations

from typing import List


class DisjointSet:
    """Union-find with a live count of the disjoint sets remaining."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be non-negative")
        self.size = size
        self._parent: List[int] = list(range(size))
        self._rank: List[int] = [0] * size
        self._count = size

    @property
    def count(self) -> int:
        """Number of disjoint sets remaining."""

        return self._count

    def __len__(self) -> int:
        return self._count

    def find(self, i: int) -> int:
        if not 0 <= i < self.size:
            raise IndexError(f"element {i} is out of range for a set of size {self.size}")
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        while i != root:
            parent = self._parent[i]
            self._parent[i] = root
            i = parent
        return root

    def union(self, i: int, j: int) -> bool:
        """Merge the sets holding ``i`` and ``j``.

        Returns False, leaving the forest untouched, when they already share a
        root. On equal ranks ``j``'s root is attached under ``i``'s root.
        """

        i_root = self.find(i)
        j_root = self.find(j)
        if i_root == j_root:
            return False
        if self._rank[i_root] < self._rank[j_root]:
            self._parent[i_root] = j_root
        else:
            self._parent[j_root] = i_root
            if self._rank[i_root] == self._rank[j_root]:
                self._rank[i_root] += 1
        self._count -= 1
        return True

    def connected(self, i: int, j: int) -> bool:
        return self.find(i) == self.find(j)

    def rank(self, i: int) -> int:
        """Rank of the root of ``i``'s tree."""

        return self._rank[self.find(i)]


__all__ = ["DisjointSet"]
