"""Random spanning tree over the junction graph of a maze.

A maze of ``height x width`` cells has a half-scale junction graph of
``(height - 1) // 2`` by ``(width - 1) // 2`` nodes. Randomized Kruskal keeps
a shuffled edge only when it joins two components, which yields a uniformly
shuffled spanning tree. Each kept edge becomes the wall cell between the two
junctions it links.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cell import Cell, CellKind
from .disjoint_set import DisjointSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    first: int
    second: int


class PassageTree:
    """Carve a perfect maze as a list of connector PASSAGE cells."""

    def __init__(self, height: int, width: int, *, rng: Optional[random.Random] = None) -> None:
        self.height = max(0, (height - 1) // 2)
        self.width = max(0, (width - 1) // 2)
        self._rng = rng if rng is not None else random.Random()

    def generate(self) -> List[Cell]:
        edges = self.edges()
        self._rng.shuffle(edges)
        tree = self.spanning_tree(edges)
        logger.debug(
            "Junction graph %dx%d: kept %d of %d edges",
            self.height,
            self.width,
            len(tree),
            len(edges),
        )
        return [self._passage(edge) for edge in tree]

    def edges(self) -> List[Edge]:
        """Every horizontal and vertical junction adjacency, once each."""

        edges: List[Edge] = []
        for row in range(self.height):
            for column in range(self.width):
                if column > 0:
                    edges.append(Edge(self.to_index(row, column), self.to_index(row, column - 1)))
                if row > 0:
                    edges.append(Edge(self.to_index(row, column), self.to_index(row - 1, column)))
        return edges

    def spanning_tree(self, edges: Sequence[Edge]) -> List[Edge]:
        disjoint_set = DisjointSet(self.height * self.width)
        return [edge for edge in edges if disjoint_set.union(edge.first, edge.second)]

    def to_index(self, row: int, column: int) -> int:
        return row * self.width + column

    def from_index(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.width)

    def _passage(self, edge: Edge) -> Cell:
        first_row, first_column = self.from_index(edge.first)
        second_row, second_column = self.from_index(edge.second)
        return Cell(
            first_row + second_row + 1,
            first_column + second_column + 1,
            CellKind.PASSAGE,
        )


__all__ = ["Edge", "PassageTree"]
