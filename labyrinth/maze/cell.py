"""Cell value type shared by the maze model, generator and solver."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class CellKind(Enum):
    WALL = "wall"
    PASSAGE = "passage"
    ESCAPE = "escape"


@dataclass(frozen=True)
class Cell:
    """A typed grid position. Equality and hashing cover row, column and kind."""

    row: int
    column: int
    kind: CellKind

    @property
    def position(self) -> tuple:
        return (self.row, self.column)

    @property
    def is_wall(self) -> bool:
        return self.kind is CellKind.WALL

    @property
    def is_passage(self) -> bool:
        return self.kind is CellKind.PASSAGE

    @property
    def is_escape(self) -> bool:
        return self.kind is CellKind.ESCAPE

    def with_kind(self, kind: CellKind) -> "Cell":
        return replace(self, kind=kind)


__all__ = ["Cell", "CellKind"]
