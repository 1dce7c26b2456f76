"""Maze dataset generator: perfect mazes with their solved escape paths."""

from __future__ import annotations

import argparse
import logging
import random
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..records import MazeRecordStore, PathLike
from .model import MazeModel, MIN_SIZE
from .render import cell_bboxes, render_image

logger = logging.getLogger(__name__)


@dataclass
class MazePuzzleRecord:
    id: str
    grid_size: Tuple[int, int]
    cell_size: int
    maze_grid: List[List[int]]
    entrance: Tuple[int, int]
    exit: Tuple[int, int]
    escape: List[Tuple[int, int]]
    cell_bboxes: List[List[Tuple[int, int, int, int]]]
    maze_path: str
    puzzle_image_path: str
    solution_image_path: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "grid_size": list(self.grid_size),
            "cell_size": self.cell_size,
            "maze_grid": self.maze_grid,
            "entrance": list(self.entrance),
            "exit": list(self.exit),
            "escape": [list(position) for position in self.escape],
            "cell_bboxes": [
                [list(map(int, bbox)) for bbox in row] for row in self.cell_bboxes
            ],
            "maze_path": self.maze_path,
            "puzzle_image_path": self.puzzle_image_path,
            "solution_image_path": self.solution_image_path,
        }


class MazeGenerator:
    """Generate mazes, solve them and write text and image assets."""

    def __init__(
        self,
        output_dir: PathLike = "data/maze",
        *,
        height: int = 15,
        width: Optional[int] = None,
        cell_size: int = 16,
        seed: Optional[int] = None,
    ) -> None:
        width = height if width is None else width
        if height < MIN_SIZE or width < MIN_SIZE:
            raise ValueError(f"height and width must be at least {MIN_SIZE}")
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.height = height
        self.width = width
        self.cell_size = cell_size
        self.rng = random.Random(seed)

        self.output_dir = Path(output_dir)
        self.maze_dir = self.output_dir / "mazes"
        self.puzzle_dir = self.output_dir / "puzzles"
        self.solution_dir = self.output_dir / "solutions"
        for directory in (self.maze_dir, self.puzzle_dir, self.solution_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def create_puzzle(self, *, puzzle_id: Optional[str] = None) -> MazePuzzleRecord:
        puzzle_uuid = puzzle_id or str(uuid.uuid4())
        model = MazeModel(self.height, self.width, rng=self.rng)
        maze_path = model.save(self.maze_dir / f"{puzzle_uuid}.maze")

        puzzle_image = render_image(model, cell_size=self.cell_size)
        escape = model.find_escape()
        if not escape:
            raise RuntimeError("Generated maze has no escape")
        solution_image = render_image(model, cell_size=self.cell_size, show_escape=True)

        puzzle_path = self.puzzle_dir / f"{puzzle_uuid}_puzzle.png"
        solution_path = self.solution_dir / f"{puzzle_uuid}_solution.png"
        puzzle_image.save(puzzle_path)
        solution_image.save(solution_path)
        logger.info("Maze %s: %dx%d, escape of %d cells", puzzle_uuid, model.height, model.width, len(escape))

        return MazePuzzleRecord(
            id=puzzle_uuid,
            grid_size=(model.height, model.width),
            cell_size=self.cell_size,
            maze_grid=model.to_array().tolist(),
            entrance=model.entrance.position,
            exit=model.exit.position,
            escape=[cell.position for cell in escape],
            cell_bboxes=cell_bboxes(model, self.cell_size),
            maze_path=self._relative(maze_path),
            puzzle_image_path=self._relative(puzzle_path),
            solution_image_path=self._relative(solution_path),
        )

    def create_random_puzzle(self) -> MazePuzzleRecord:
        return self.create_puzzle()

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[MazePuzzleRecord]:
        """Generate ``count`` solved mazes, recording them in ``metadata_path`` if given."""

        if count < 0:
            raise ValueError("count must be non-negative")
        records = [self.create_random_puzzle() for _ in range(count)]
        if metadata_path is not None:
            MazeRecordStore(metadata_path).write((record.to_dict() for record in records), append=append)
        return records

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.output_dir).as_posix()


__all__ = ["MazeGenerator", "MazePuzzleRecord"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate solved perfect mazes")
    parser.add_argument("count", type=int, help="Number of mazes to generate")
    parser.add_argument("--output-dir", type=Path, default=Path("data/maze"), help="Where to save assets")
    parser.add_argument("--height", type=int, default=15)
    parser.add_argument("--width", type=int, default=None, help="Defaults to the height")
    parser.add_argument("--cell-size", type=int, default=16)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    generator = MazeGenerator(
        output_dir=args.output_dir,
        height=args.height,
        width=args.width,
        cell_size=args.cell_size,
        seed=args.seed,
    )
    metadata_path = generator.output_dir / "mazes.json"
    generator.generate_dataset(args.count, metadata_path=metadata_path)


if __name__ == "__main__":
    main()
