"""Maze escape evaluator for stored maze records."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from ..records import MazeRecordStore, PathLike
from .cell import Cell, CellKind
from .fugitive import find_escape
from .model import MazeModel

logger = logging.getLogger(__name__)

RED_THRESHOLD = 150
RED_DOMINANCE = 80

Position = Tuple[int, int]
Candidate = Union[PathLike, Sequence[Sequence[int]]]


@dataclass
class MazeEvaluationResult:
    puzzle_id: str
    connected: bool
    touches_exit: bool
    stray_in_walls: bool
    path_cells: List[Position]
    path_length: int
    optimal_length: int
    message: str

    @property
    def is_valid_escape(self) -> bool:
        return self.connected and self.touches_exit and not self.stray_in_walls

    @property
    def is_optimal(self) -> bool:
        return self.is_valid_escape and self.path_length == self.optimal_length

    def to_dict(self) -> dict:
        return {
            "puzzle_id": self.puzzle_id,
            "connected": self.connected,
            "touches_exit": self.touches_exit,
            "stray_in_walls": self.stray_in_walls,
            "path_cells": [list(cell) for cell in self.path_cells],
            "path_length": self.path_length,
            "optimal_length": self.optimal_length,
            "is_valid_escape": self.is_valid_escape,
            "is_optimal": self.is_optimal,
            "message": self.message,
        }

class MazeEvaluator:
    """Check a candidate escape against a stored maze record.

    A candidate is either a sequence of ``(row, column)`` positions or the
    path of an image with the escape drawn in red over the rendered maze.
    """

    def __init__(self, metadata_path: PathLike, *, base_dir: Optional[PathLike] = None) -> None:
        self.store = MazeRecordStore(metadata_path, base_dir=base_dir)
        self.records: Dict[str, Dict[str, Any]] = self.store.load()

    def get_record(self, puzzle_id: str) -> Dict[str, Any]:
        try:
            return self.records[puzzle_id]
        except KeyError as exc:
            raise KeyError(f"Maze id '{puzzle_id}' not found in {self.store.path}") from exc

    def evaluate(
        self,
        puzzle_id: str,
        candidate: Candidate,
        *,
        trim_tolerance: int = 12,
    ) -> MazeEvaluationResult:
        record = self.get_record(puzzle_id)
        model = MazeModel.from_array(record["maze_grid"])
        entrance = (int(record["entrance"][0]), int(record["entrance"][1]))
        exit_ = (int(record["exit"][0]), int(record["exit"][1]))
        optimal_length = len(find_escape(model.grid, model.cell(*entrance), model.cell(*exit_)))

        if isinstance(candidate, (str, Path)):
            cells, stray_in_walls = self._cells_from_image(record, Path(candidate), model, trim_tolerance)
            connected, touches_exit = self._connects(model, cells, entrance, exit_)
        else:
            cells = [(int(row), int(column)) for row, column in candidate]
            stray_in_walls = any(self._is_wall(model, cell) for cell in cells)
            connected, touches_exit = self._check_sequence(cells, entrance, exit_)

        if not cells:
            message = "No escape path detected."
        elif stray_in_walls:
            message = "Escape path overlaps walls."
        elif not touches_exit:
            message = "Escape path does not reach the exit."
        elif not connected:
            message = "Escape path is not continuous from entrance to exit."
        elif len(cells) != optimal_length:
            message = f"Escape path is valid but not shortest ({len(cells)} cells, optimum {optimal_length})."
        else:
            message = "Escape path is a shortest route from entrance to exit."
        logger.debug("Maze %s: %s", puzzle_id, message)

        return MazeEvaluationResult(
            puzzle_id=puzzle_id,
            connected=connected,
            touches_exit=touches_exit,
            stray_in_walls=stray_in_walls,
            path_cells=cells,
            path_length=len(cells),
            optimal_length=optimal_length,
            message=message,
        )

    # ------------------------------------------------------------------

    @staticmethod
    def _is_wall(model: MazeModel, cell: Position) -> bool:
        row, column = cell
        if not (0 <= row < model.height and 0 <= column < model.width):
            return True
        return model.cell(row, column).is_wall

    def _cells_from_image(
        self,
        record: Dict[str, Any],
        candidate_path: Path,
        model: MazeModel,
        trim_tolerance: int,
    ) -> Tuple[List[Position], bool]:
        """Open cells painted red in the candidate, and whether any wall is painted."""

        if not candidate_path.exists():
            raise FileNotFoundError(f"Candidate image not found: {candidate_path}")
        with Image.open(self.store.resolve(record["solution_image_path"])) as reference:
            canvas_size = reference.size
        with Image.open(candidate_path) as image:
            pixels = np.asarray(self._fit_to_canvas(image.convert("RGB"), canvas_size, trim_tolerance))

        painted = self._escape_mask(pixels, record["cell_bboxes"])
        walls = model.to_array().astype(bool)
        cells = [(int(row), int(column)) for row, column in np.argwhere(painted & ~walls)]
        return cells, bool(np.any(painted & walls))

    @staticmethod
    def _fit_to_canvas(image: Image.Image, canvas_size: Tuple[int, int], tolerance: int) -> Image.Image:
        """Crop a uniform margin away and scale the maze back onto the rendered canvas."""

        if image.size == canvas_size:
            return image
        pixels = np.asarray(image).astype(np.int16)
        margin_color = pixels[0, 0]
        content = np.abs(pixels - margin_color).max(axis=2) > tolerance
        rows = np.flatnonzero(content.any(axis=1))
        columns = np.flatnonzero(content.any(axis=0))
        if rows.size and columns.size:
            image = image.crop((int(columns[0]), int(rows[0]), int(columns[-1]) + 1, int(rows[-1]) + 1))
        if image.size != canvas_size:
            image = image.resize(canvas_size, Image.NEAREST)
        return image

    @staticmethod
    def _escape_mask(pixels: np.ndarray, boxes: Sequence[Sequence[Sequence[int]]]) -> np.ndarray:
        """Boolean ``(rows, columns)`` mask of cells whose inner area holds red pixels."""

        rgb = pixels.astype(np.int16)
        red = (rgb[..., 0] >= RED_THRESHOLD) & (rgb[..., 0] - rgb[..., 1:].max(axis=2) >= RED_DOMINANCE)
        mask = np.zeros((len(boxes), len(boxes[0])), dtype=bool)
        for row, row_boxes in enumerate(boxes):
            for column, (left, top, right, bottom) in enumerate(row_boxes):
                inset = max(1, (right - left) // 6)
                mask[row, column] = bool(red[top + inset:bottom - inset, left + inset:right - inset].any())
        return mask

    @staticmethod
    def _connects(
        model: MazeModel,
        cells: Sequence[Position],
        entrance: Position,
        exit_: Position,
    ) -> Tuple[bool, bool]:
        """Solve the maze restricted to the painted cells."""

        painted = set(cells)
        grid = [
            [
                Cell(row, column, CellKind.PASSAGE if (row, column) in painted else CellKind.WALL)
                for column in range(model.width)
            ]
            for row in range(model.height)
        ]
        route = find_escape(grid, grid[entrance[0]][entrance[1]], grid[exit_[0]][exit_[1]])
        return bool(route), exit_ in painted

    @staticmethod
    def _check_sequence(
        cells: Sequence[Position],
        entrance: Position,
        exit_: Position,
    ) -> Tuple[bool, bool]:
        if not cells:
            return False, False
        touches_exit = cells[-1] == exit_
        steps_ok = all(
            abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1 for a, b in zip(cells, cells[1:])
        )
        return cells[0] == entrance and steps_ok and touches_exit, touches_exit


__all__ = ["MazeEvaluator", "MazeEvaluationResult"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate a candidate maze escape")
    parser.add_argument("metadata", type=Path, help="Path to the mazes metadata JSON")
    parser.add_argument("puzzle_id", type=str, help="Identifier of the maze to evaluate")
    parser.add_argument("candidate", type=Path, help="Image or JSON list of [row, column] pairs")
    parser.add_argument("--base-dir", type=Path, default=None)
    parser.add_argument("--trim-tolerance", type=int, default=12)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    evaluator = MazeEvaluator(args.metadata, base_dir=args.base_dir)
    candidate: Candidate = args.candidate
    if args.candidate.suffix == ".json":
        candidate = json.loads(args.candidate.read_text(encoding="utf-8"))
    result = evaluator.evaluate(args.puzzle_id, candidate, trim_tolerance=args.trim_tolerance)
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
