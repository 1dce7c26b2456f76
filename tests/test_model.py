import random
import tempfile
import unittest
from collections import deque
from pathlib import Path

import numpy as np

from labyrinth.maze import (
    CellKind,
    InvalidMazeFormatError,
    InvalidMazeSizeError,
    MazeModel,
    generate,
)
from labyrinth.maze.model import exit_column


def reachable_from(model, start):
    seen = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = r + dr, c + dc
            if 0 <= nr < model.height and 0 <= nc < model.width and (nr, nc) not in seen:
                if not model.cell(nr, nc).is_wall:
                    seen.add((nr, nc))
                    queue.append((nr, nc))
    return seen


SIZES = [(3, 3), (3, 8), (4, 4), (5, 5), (6, 9), (10, 10), (11, 7), (20, 31)]


class MazeModelGenerationTests(unittest.TestCase):
    def test_rejects_sides_below_three(self) -> None:
        for height, width in ((2, 3), (3, 2), (0, 10), (-1, -1)):
            with self.assertRaises(InvalidMazeSizeError):
                generate(height, width)
        self.assertTrue(issubclass(InvalidMazeSizeError, ValueError))

    def test_rng_and_seed_are_exclusive(self) -> None:
        with self.assertRaises(ValueError):
            MazeModel(5, 5, rng=random.Random(1), seed=1)

    def test_single_argument_builds_a_square_maze(self) -> None:
        model = MazeModel(7, seed=1)
        self.assertEqual((model.height, model.width), (7, 7))

    def test_entrance_and_exit_positions(self) -> None:
        model = generate(5, 5, rng=random.Random(5))
        self.assertEqual(model.entrance.position, (0, 1))
        self.assertEqual(model.exit.position, (4, 3))
        self.assertEqual(exit_column(8), 5)
        self.assertEqual(generate(6, 8).exit.position, (5, 5))

    def test_even_height_carves_the_cell_above_the_exit(self) -> None:
        model = generate(6, 7, rng=random.Random(0))
        column = exit_column(7)
        self.assertFalse(model.cell(5, column).is_wall)
        self.assertFalse(model.cell(4, column).is_wall)

    def test_borders_are_walls_except_entrance_and_exit(self) -> None:
        for height, width in SIZES:
            model = generate(height, width, rng=random.Random(height * width))
            openings = {model.entrance.position, model.exit.position}
            for cell in model.cells():
                on_border = cell.row in (0, height - 1) or cell.column in (0, width - 1)
                if on_border and cell.position not in openings:
                    self.assertTrue(cell.is_wall, cell)
                if cell.row % 2 == 0 and cell.column % 2 == 0:
                    self.assertTrue(cell.is_wall, cell)

    def test_open_cell_count_matches_spanning_tree(self) -> None:
        for height, width in SIZES:
            model = generate(height, width, rng=random.Random(7))
            junctions = ((height - 1) // 2) * ((width - 1) // 2)
            extra = 3 if height % 2 == 0 else 2
            open_cells = int((model.to_array() == 0).sum())
            self.assertEqual(open_cells, junctions + (junctions - 1) + extra, (height, width))

    def test_every_open_cell_is_reachable_from_the_entrance(self) -> None:
        for height, width in SIZES:
            model = generate(height, width, rng=random.Random(height + width))
            reachable = reachable_from(model, model.entrance.position)
            open_cells = {cell.position for cell in model.cells() if not cell.is_wall}
            self.assertEqual(reachable, open_cells, (height, width))

    def test_same_seed_gives_same_maze(self) -> None:
        first = MazeModel(15, 21, seed=42)
        second = MazeModel(15, 21, seed=42)
        np.testing.assert_array_equal(first.to_array(), second.to_array())

    def test_grid_snapshot_is_read_only(self) -> None:
        model = generate(5, 5)
        grid = model.grid
        self.assertIsInstance(grid, tuple)
        self.assertIsInstance(grid[0], tuple)
        self.assertEqual(len(grid), 5)


class MazeModelEscapeTests(unittest.TestCase):
    def test_five_by_five_escape_runs_from_entrance_to_exit(self) -> None:
        model = generate(5, 5, rng=random.Random(123))
        escape = model.find_escape()
        self.assertEqual(escape[0].position, (0, 1))
        self.assertEqual(escape[-1].position, (4, 3))
        for a, b in zip(escape, escape[1:]):
            self.assertEqual(abs(a.row - b.row) + abs(a.column - b.column), 1)
        self.assertTrue(all(cell.kind is CellKind.ESCAPE for cell in escape))
        self.assertTrue(all(model.cell(*cell.position).is_escape for cell in escape))

    def test_minimum_maze_has_a_straight_escape(self) -> None:
        model = generate(3, 3)
        escape = model.find_escape()
        self.assertEqual([cell.position for cell in escape], [(0, 1), (1, 1), (2, 1)])

    def test_find_escape_is_cached(self) -> None:
        model = generate(11, 13, rng=random.Random(8))
        self.assertFalse(model.is_solved)
        first = model.find_escape()
        snapshot = model.grid
        second = model.find_escape()
        self.assertTrue(model.is_solved)
        self.assertEqual(first, second)
        self.assertEqual(model.grid, snapshot)

    def test_severed_maze_has_no_escape(self) -> None:
        bits = [
            [1, 0, 1, 1, 1],
            [1, 0, 1, 0, 1],
            [1, 1, 1, 0, 1],
            [1, 0, 0, 0, 1],
            [1, 1, 1, 0, 1],
        ]
        model = MazeModel.from_array(bits)
        self.assertEqual(model.find_escape(), [])
        self.assertTrue(model.is_solved)
        self.assertFalse(any(cell.is_escape for cell in model.cells()))


    def test_walled_entrance_is_left_untouched(self) -> None:
        model = MazeModel.load("3 3\n1 1 1\n1 0 1\n1 0 1\n")
        self.assertEqual(model.find_escape(), [])
        self.assertEqual(model.export(), "3 3\n1 1 1\n1 0 1\n1 0 1\n")


class MazeModelRenderTests(unittest.TestCase):
    def test_render_glyphs(self) -> None:
        model = generate(3, 3)
        self.assertEqual(str(model), "██  ██\n██  ██\n██  ██\n")
        model.find_escape()
        self.assertEqual(model.render(), "██  ██\n██  ██\n██  ██\n")
        self.assertEqual(model.render(show_escape=True), "██▓▓██\n██▓▓██\n██▓▓██\n")


class MazeModelPersistenceTests(unittest.TestCase):
    def test_export_format(self) -> None:
        model = generate(3, 3)
        self.assertEqual(model.export(), "3 3\n1 0 1\n1 0 1\n1 0 1\n")

    def test_round_trip_keeps_layout(self) -> None:
        model = generate(9, 12, rng=random.Random(4))
        loaded = MazeModel.load(model.export())
        np.testing.assert_array_equal(loaded.to_array(), model.to_array())
        self.assertFalse(loaded.is_solved)

    def test_escape_cells_are_saved_as_passages(self) -> None:
        model = generate(9, 9, rng=random.Random(6))
        escape = model.find_escape()
        loaded = MazeModel.load(model.export())
        self.assertFalse(any(cell.is_escape for cell in loaded.cells()))
        for cell in escape:
            self.assertTrue(loaded.cell(*cell.position).is_passage)
        self.assertEqual(
            [cell.position for cell in loaded.find_escape()],
            [cell.position for cell in escape],
        )

    def test_malformed_text_is_rejected(self) -> None:
        bad_inputs = [
            "",
            "abc",
            "3\n1 0 1\n1 0 1\n1 0 1",
            "3 3 3\n1 0 1\n1 0 1\n1 0 1",
            "3 3\n1 0 1\n1 0 1",
            "3 3\n1 0 1\n1 0 1\n1 0 1\n1 0 1",
            "3 3\n1 0 1\n1 0\n1 0 1",
            "3 3\n1 0 1\n1 0 1 1\n1 0 1",
            "3 3\n1 0 1\n1 x 1\n1 0 1",
            "3 3\n1 0 1\n1 2 1\n1 0 1",
            "2 3\n1 0 1\n1 0 1",
        ]
        for text in bad_inputs:
            with self.assertRaises(InvalidMazeFormatError, msg=repr(text)):
                MazeModel.load(text)

    def test_save_and_open(self) -> None:
        model = generate(7, 9, rng=random.Random(10))
        with tempfile.TemporaryDirectory() as tmp:
            path = model.save(Path(tmp) / "maze.txt")
            loaded = MazeModel.open(path)
        np.testing.assert_array_equal(loaded.to_array(), model.to_array())

    def test_open_binary_file_is_a_format_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "binary.maze"
            path.write_bytes(b"3 3\n1 \xff 1\n1 0 1\n1 0 1\n")
            with self.assertRaises(InvalidMazeFormatError):
                MazeModel.open(path)

    def test_open_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                MazeModel.open(Path(tmp) / "missing.txt")


if __name__ == "__main__":
    unittest.main()
