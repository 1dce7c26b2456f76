"""Maze grid model: lattice construction, generation, escape caching and persistence.

The grid alternates walls and passages: a cell with an even row or an even
column starts as a wall, every odd/odd cell is a junction passage. The
entrance is ``(0, 1)`` and the exit sits on the last row at
``width - 3 + width % 2``.

The text format used by :meth:`MazeModel.export` and :meth:`MazeModel.load`
is a ``"<height> <width>"`` header followed by ``height`` lines of ``width``
space-separated bits, ``1`` for a wall and ``0`` for anything else. Escape
cells are therefore saved as passages and do not survive a round trip.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np

from .cell import Cell, CellKind
from .fugitive import Fugitive
from .passage_tree import PassageTree

logger = logging.getLogger(__name__)

MIN_SIZE = 3

WALL_GLYPH = "██"
ESCAPE_GLYPH = "▓▓"
PASSAGE_GLYPH = "  "

WALL_BIT = 1
OPEN_BIT = 0


class InvalidMazeSizeError(ValueError):
    """Raised when a maze is requested with a side shorter than ``MIN_SIZE``."""


class InvalidMazeFormatError(ValueError):
    """Raised when serialized maze text cannot be parsed."""


def exit_column(width: int) -> int:
    return width - 3 + width % 2


class MazeModel:
    """A rectangular perfect maze and its (lazily computed) escape path."""

    def __init__(
        self,
        height: int,
        width: Optional[int] = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        if width is None:
            width = height
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        _check_size(height, width)
        self.height = height
        self.width = width
        self._grid: List[List[Cell]] = []
        self._escape: Optional[List[Cell]] = None
        if rng is None:
            rng = random.Random(seed)
        self._fill_alternately()
        self._fill_gaps()
        self._make_entrance_and_exit()
        self.apply(PassageTree(height, width, rng=rng).generate())
        logger.debug("Generated %dx%d maze", height, width)

    @classmethod
    def _from_grid(cls, grid: List[List[Cell]]) -> "MazeModel":
        model = cls.__new__(cls)
        model.height = len(grid)
        model.width = len(grid[0])
        model._grid = grid
        model._escape = None
        return model

    # ------------------------------------------------------------------
    # construction

    def _put(self, row: int, column: int, kind: CellKind) -> None:
        self._grid[row][column] = Cell(row, column, kind)

    def _fill_alternately(self) -> None:
        self._grid = [
            [
                Cell(row, column, CellKind.WALL if row % 2 == 0 or column % 2 == 0 else CellKind.PASSAGE)
                for column in range(self.width)
            ]
            for row in range(self.height)
        ]

    def _fill_gaps(self) -> None:
        if self.height % 2 == 0:
            for column in range(self.width):
                self._put(self.height - 1, column, CellKind.WALL)
        if self.width % 2 == 0:
            for row in range(self.height):
                self._put(row, self.width - 1, CellKind.WALL)

    def _make_entrance_and_exit(self) -> None:
        column = exit_column(self.width)
        self._put(0, 1, CellKind.PASSAGE)
        self._put(self.height - 1, column, CellKind.PASSAGE)
        if self.height % 2 == 0:
            self._put(self.height - 2, column, CellKind.PASSAGE)

    # ------------------------------------------------------------------
    # access

    @property
    def grid(self) -> Tuple[Tuple[Cell, ...], ...]:
        """Read-only snapshot of the grid rows."""

        return tuple(tuple(row) for row in self._grid)

    @property
    def entrance(self) -> Cell:
        return self._grid[0][1]

    @property
    def exit(self) -> Cell:
        return self._grid[self.height - 1][exit_column(self.width)]

    @property
    def is_solved(self) -> bool:
        return self._escape is not None

    def cell(self, row: int, column: int) -> Cell:
        if not (0 <= row < self.height and 0 <= column < self.width):
            raise IndexError(f"({row}, {column}) is outside a {self.height}x{self.width} maze")
        return self._grid[row][column]

    def cells(self) -> Iterable[Cell]:
        for row in self._grid:
            yield from row

    def apply(self, cells: Iterable[Cell]) -> None:
        """Overwrite grid positions with the given cells."""

        for cell in cells:
            self._grid[cell.row][cell.column] = cell

    def to_array(self) -> np.ndarray:
        """Wall mask of the grid as a ``uint8`` array (1 = wall)."""

        return np.array(
            [[WALL_BIT if cell.is_wall else OPEN_BIT for cell in row] for row in self._grid],
            dtype=np.uint8,
        )

    # ------------------------------------------------------------------
    # solving

    def find_escape(self) -> List[Cell]:
        """Solve the maze once and mark the path with ESCAPE cells.

        Later calls return the cached path without searching again.
        """

        if self._escape is None:
            escape = Fugitive(self._grid, self.entrance, self.exit).find_escape()
            self.apply(escape)
            self._escape = escape
            if not escape:
                logger.warning("No escape from %s to %s", self.entrance.position, self.exit.position)
        return list(self._escape)

    # ------------------------------------------------------------------
    # rendering

    def render(self, show_escape: bool = False) -> str:
        lines = []
        for row in self._grid:
            glyphs = []
            for cell in row:
                if cell.is_wall:
                    glyphs.append(WALL_GLYPH)
                elif show_escape and cell.is_escape:
                    glyphs.append(ESCAPE_GLYPH)
                else:
                    glyphs.append(PASSAGE_GLYPH)
            lines.append("".join(glyphs))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render(show_escape=False)

    def __repr__(self) -> str:
        return f"MazeModel(height={self.height}, width={self.width}, solved={self.is_solved})"

    # ------------------------------------------------------------------
    # persistence

    def export(self) -> str:
        lines = [f"{self.height} {self.width}"]
        for row in self._grid:
            lines.append(" ".join(str(WALL_BIT if cell.is_wall else OPEN_BIT) for cell in row))
        return "\n".join(lines) + "\n"

    @classmethod
    def load(cls, text: str) -> "MazeModel":
        """Parse exported maze text. Raises :class:`InvalidMazeFormatError`."""

        try:
            lines = [line.split() for line in text.strip().splitlines()]
            if not lines or len(lines[0]) != 2:
                raise ValueError("header must be '<height> <width>'")
            height, width = (int(token) for token in lines[0])
            _check_size(height, width)
            rows = lines[1:]
            if len(rows) != height:
                raise ValueError(f"expected {height} rows, found {len(rows)}")
            for row, tokens in enumerate(rows):
                if len(tokens) != width:
                    raise ValueError(f"row {row} has {len(tokens)} values, expected {width}")
            return cls.from_array([[int(token) for token in tokens] for tokens in rows])
        except ValueError as exc:
            raise InvalidMazeFormatError(f"Cannot load the maze. It has an invalid format: {exc}") from exc

    @classmethod
    def from_array(cls, bits) -> "MazeModel":
        """Build an unsolved model from a 2D wall mask (1 = wall, 0 = passage)."""

        rows = [list(row) for row in bits]
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise InvalidMazeFormatError("Wall mask must be a non-empty rectangle")
        try:
            _check_size(len(rows), len(rows[0]))
        except InvalidMazeSizeError as exc:
            raise InvalidMazeFormatError(str(exc)) from exc
        grid = [
            [Cell(row, column, _kind_from_bit(value)) for column, value in enumerate(values)]
            for row, values in enumerate(rows)
        ]
        return cls._from_grid(grid)

    def save(self, path: Union[str, Path]) -> Path:
        destination = Path(path)
        destination.write_text(self.export(), encoding="utf-8")
        logger.info("Saved %dx%d maze to %s", self.height, self.width, destination)
        return destination

    @classmethod
    def open(cls, path: Union[str, Path]) -> "MazeModel":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidMazeFormatError(f"Cannot load the maze. It is not a text file: {exc.reason}") from exc
        return cls.load(text)


def _check_size(height: int, width: int) -> None:
    if height < MIN_SIZE or width < MIN_SIZE:
        raise InvalidMazeSizeError(
            f"Both the height and the width of the maze must be at least {MIN_SIZE}"
        )


def _kind_from_bit(value: int) -> CellKind:
    if value == WALL_BIT:
        return CellKind.WALL
    if value == OPEN_BIT:
        return CellKind.PASSAGE
    raise InvalidMazeFormatError(f"unexpected cell value {value!r}")


def generate(height: int, width: Optional[int] = None, *, rng: Optional[random.Random] = None) -> MazeModel:
    return MazeModel(height, width, rng=rng)


__all__ = [
    "InvalidMazeFormatError",
    "InvalidMazeSizeError",
    "MIN_SIZE",
    "MazeModel",
    "exit_column",
    "generate",
]
