"""A* escape search over a maze grid.

Moves are the four orthogonal steps at uniform cost, the heuristic is the
Manhattan distance to the exit. The open set is a binary heap ordered by
``(f, h, insertion order)``; when a queued node is reached by a strictly
cheaper path it is pushed again and the outdated heap entry is dropped when
popped.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import List, Optional, Sequence, Set, Tuple

from .cell import Cell, CellKind

logger = logging.getLogger(__name__)

EDGE_COST = 1
# up, left, right, down
DELTAS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))


class Node:
    """Search state for one grid position."""

    __slots__ = ("row", "column", "is_wall", "g", "h", "f", "parent", "opened")

    def __init__(self, row: int, column: int, is_wall: bool, goal: Tuple[int, int]) -> None:
        self.row = row
        self.column = column
        self.is_wall = is_wall
        self.g = 0
        self.h = abs(goal[0] - row) + abs(goal[1] - column)
        self.f = 0
        self.parent: Optional[Node] = None
        self.opened = False

    def has_better_path(self, node: "Node") -> bool:
        """True when reaching this node through ``node`` is strictly cheaper."""

        return node.g + EDGE_COST < self.g

    def update_path(self, node: "Node") -> None:
        self.parent = node
        self.g = node.g + EDGE_COST
        self.f = self.g + self.h

    def to_cell(self) -> Cell:
        return Cell(self.row, self.column, CellKind.ESCAPE)

    def __repr__(self) -> str:
        return f"Node(row={self.row}, column={self.column}, g={self.g}, f={self.f})"


class Fugitive:
    """Find the shortest escape from ``start`` to ``end`` in a grid of cells.

    The grid is only read: nodes are built from it once and the result is a
    new list of ESCAPE cells for the caller to apply.
    """

    def __init__(self, grid: Sequence[Sequence[Cell]], start: Cell, end: Cell) -> None:
        if not grid or not grid[0]:
            raise ValueError("Cannot search an empty grid")
        self.height = len(grid)
        self.width = len(grid[0])
        for cell in (start, end):
            if not self.in_bounds(cell.row, cell.column):
                raise ValueError(f"Cell ({cell.row}, {cell.column}) is outside the grid")
        goal = (end.row, end.column)
        self._nodes: List[List[Node]] = [
            [Node(row, column, grid[row][column].is_wall, goal) for column in range(self.width)]
            for row in range(self.height)
        ]
        self.start = self._nodes[start.row][start.column]
        self.end = self._nodes[end.row][end.column]

    def find_escape(self) -> List[Cell]:
        """Return the escape path, both ends included, or ``[]`` if there is none."""

        if self.start.is_wall or self.end.is_wall:
            logger.debug("Escape endpoint is a wall")
            return []
        counter = itertools.count()
        self.start.f = self.start.h
        self.start.opened = True
        open_heap: List[Tuple[int, int, int, Node]] = [
            (self.start.f, self.start.h, next(counter), self.start)
        ]
        closed: Set[Tuple[int, int]] = set()
        expanded = 0

        while open_heap:
            f, _, _, cur = heapq.heappop(open_heap)
            if (cur.row, cur.column) in closed or f != cur.f:
                continue
            if cur is self.end:
                path = self._reconstruct_path(cur)
                logger.debug("Escape of %d cells found after %d expansions", len(path), expanded)
                return path
            closed.add((cur.row, cur.column))
            expanded += 1
            for node in self._neighbors(cur):
                if node.is_wall or (node.row, node.column) in closed:
                    continue
                if node.opened and not node.has_better_path(cur):
                    continue
                node.update_path(cur)
                node.opened = True
                heapq.heappush(open_heap, (node.f, node.h, next(counter), node))

        logger.debug("No escape after %d expansions", expanded)
        return []

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.height and 0 <= column < self.width

    def _neighbors(self, node: Node) -> List[Node]:
        neighbors = []
        for d_row, d_column in DELTAS:
            row, column = node.row + d_row, node.column + d_column
            if self.in_bounds(row, column):
                neighbors.append(self._nodes[row][column])
        return neighbors

    @staticmethod
    def _reconstruct_path(node: Node) -> List[Cell]:
        path: List[Cell] = []
        current: Optional[Node] = node
        while current is not None:
            path.append(current.to_cell())
            current = current.parent
        path.reverse()
        return path


def find_escape(grid: Sequence[Sequence[Cell]], start: Cell, end: Cell) -> List[Cell]:
    return Fugitive(grid, start, end).find_escape()


__all__ = ["EDGE_COST", "Fugitive", "Node", "find_escape"]
