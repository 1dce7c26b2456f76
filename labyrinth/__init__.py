"""Perfect maze generation and solving toolkit."""

__all__ = [
    "InvalidMazeRecordError",
    "MazeRecordStore",
    "Cell",
    "CellKind",
    "MazeModel",
    "InvalidMazeSizeError",
    "InvalidMazeFormatError",
    "generate",
    "find_escape",
    "MazeGenerator",
    "MazeEvaluator",
    "MazePuzzleRecord",
    "MazeEvaluationResult",
]

from .records import InvalidMazeRecordError, MazeRecordStore
from .maze import (
    Cell,
    CellKind,
    MazeModel,
    InvalidMazeSizeError,
    InvalidMazeFormatError,
    generate,
    find_escape,
    MazeGenerator,
    MazeEvaluator,
    MazePuzzleRecord,
    MazeEvaluationResult,
)
