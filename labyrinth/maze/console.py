"""Interactive text menu for generating, saving, loading and solving mazes."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import List, Optional, TextIO

from .model import InvalidMazeFormatError, InvalidMazeSizeError, MazeModel

logger = logging.getLogger(__name__)

INCORRECT_OPTION = "Incorrect option. Please try again"


class Console:
    """Menu loop holding at most one maze at a time."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        *,
        seed: Optional[int] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.rng = random.Random(seed)
        self.maze: Optional[MazeModel] = None

    @property
    def is_maze_available(self) -> bool:
        return self.maze is not None

    def start(self) -> None:
        actions = {
            "1": self.generate,
            "2": self.load,
            "3": self.save,
            "4": self.display,
            "5": self.find_escape,
        }
        while True:
            self.help()
            choice = self._read_line()
            if choice is None or choice == "0":
                self._print("Bye!")
                return
            action = actions.get(choice)
            if action is None or (choice in ("3", "4", "5") and not self.is_maze_available):
                self._print(INCORRECT_OPTION)
                continue
            action()

    def help(self) -> None:
        self._print("=== Menu ===")
        self._print("1. Generate a new maze")
        self._print("2. Load a maze")
        if self.is_maze_available:
            self._print("3. Save the maze")
            self._print("4. Display the maze")
            self._print("5. Find the escape")
        self._print("0. Exit")

    def generate(self) -> None:
        self._print("Enter the size of the new maze (in the [size] or [height width] format)")
        line = self._read_line() or ""
        try:
            sizes = [int(token) for token in line.split()]
            if len(sizes) not in (1, 2):
                raise InvalidMazeSizeError("Expected one or two integers")
            self.maze = MazeModel(*sizes, rng=self.rng)
        except ValueError as exc:
            logger.debug("Rejected maze size %r: %s", line, exc)
            self._print(f"Cannot generate a maze. Invalid size: {line.strip()!r}")
            return
        self.display()

    def load(self) -> None:
        self._print("Enter the filename")
        filename = (self._read_line() or "").strip()
        try:
            self.maze = MazeModel.open(filename)
        except FileNotFoundError:
            self._print(f"The file {filename} does not exist")
        except InvalidMazeFormatError as exc:
            self._print(str(exc))
        except OSError as exc:
            self._print(f"Cannot read the file {filename}: {exc.strerror}")
        else:
            self._print("The maze is loaded")

    def save(self) -> None:
        self._print("Enter the filename")
        filename = (self._read_line() or "").strip()
        try:
            self.maze.save(filename)
        except OSError:
            self._print(f"Cannot write to file {filename}")
        else:
            self._print("The maze is saved")

    def display(self) -> None:
        self._print(self.maze.render())

    def find_escape(self) -> None:
        if not self.maze.find_escape():
            self._print("The maze has no escape")
        self._print(self.maze.render(show_escape=True))

    def _read_line(self) -> Optional[str]:
        line = self.stdin.readline()
        if not line:
            return None
        return line.strip()

    def _print(self, text: str) -> None:
        print(text, file=self.stdout)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive perfect maze generator and solver")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible mazes")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    Console(seed=args.seed).start()


__all__ = ["Console", "main"]


if __name__ == "__main__":
    main()
