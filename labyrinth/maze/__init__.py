"""Perfect maze generation, escape search and dataset tooling."""

__all__ = [
    "Cell",
    "CellKind",
    "DisjointSet",
    "Edge",
    "PassageTree",
    "Fugitive",
    "find_escape",
    "MazeModel",
    "InvalidMazeSizeError",
    "InvalidMazeFormatError",
    "generate",
    "MazeGenerator",
    "MazePuzzleRecord",
    "MazeEvaluator",
    "MazeEvaluationResult",
]

from .cell import Cell, CellKind
from .disjoint_set import DisjointSet
from .passage_tree import Edge, PassageTree
from .fugitive import Fugitive, find_escape
from .model import InvalidMazeFormatError, InvalidMazeSizeError, MazeModel, generate
from .generator import MazeGenerator, MazePuzzleRecord
from .evaluator import MazeEvaluator, MazeEvaluationResult
