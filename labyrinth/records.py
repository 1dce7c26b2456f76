"""Maze record metadata: a JSON list of records on disk, checked on load.

A record is the ``to_dict()`` form of :class:`labyrinth.maze.MazePuzzleRecord`.
Evaluation reads the wall mask, the entrance and exit and the per-cell pixel
boxes, so those fields are validated against ``grid_size`` before anything
indexes them.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

PathLike = Union[str, Path]

REQUIRED_FIELDS = ("id", "grid_size", "maze_grid", "entrance", "exit", "cell_bboxes")

logger = logging.getLogger(__name__)


class InvalidMazeRecordError(ValueError):
    """Raised when stored maze metadata is missing fields or inconsistent."""


def _int_pair(record: Mapping[str, Any], field: str) -> tuple:
    value = record[field]
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidMazeRecordError(f"Record {record['id']!r}: '{field}' must be a [row, column] pair")
    try:
        return int(value[0]), int(value[1])
    except (TypeError, ValueError) as exc:
        raise InvalidMazeRecordError(f"Record {record['id']!r}: '{field}' must hold integers") from exc


def _is_table(value: Any, height: int, width: int) -> bool:
    return (
        isinstance(value, list)
        and len(value) == height
        and all(isinstance(row, list) and len(row) == width for row in value)
    )


def validate_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Check that a record describes a consistent maze and return it as a dict."""

    if not isinstance(record, Mapping):
        raise InvalidMazeRecordError("Each maze record must be a JSON object")
    missing = [field for field in REQUIRED_FIELDS if field not in record]
    if missing:
        raise InvalidMazeRecordError(f"Maze record is missing {', '.join(missing)}")
    if not record["id"]:
        raise InvalidMazeRecordError("Each maze record must include a non-empty 'id'")

    height, width = _int_pair(record, "grid_size")
    grid = record["maze_grid"]
    if not _is_table(grid, height, width):
        raise InvalidMazeRecordError(f"Record {record['id']!r}: maze_grid is not {height}x{width}")
    if any(value not in (0, 1) for row in grid for value in row):
        raise InvalidMazeRecordError(f"Record {record['id']!r}: maze_grid may only hold 0 and 1")

    for field in ("entrance", "exit"):
        row, column = _int_pair(record, field)
        if not (0 <= row < height and 0 <= column < width):
            raise InvalidMazeRecordError(f"Record {record['id']!r}: {field} ({row}, {column}) is outside the maze")

    boxes = record["cell_bboxes"]
    if not _is_table(boxes, height, width):
        raise InvalidMazeRecordError(f"Record {record['id']!r}: cell_bboxes is not {height}x{width}")
    if any(not isinstance(box, list) or len(box) != 4 for row in boxes for box in row):
        raise InvalidMazeRecordError(f"Record {record['id']!r}: every cell box needs four coordinates")
    return dict(record)


class MazeRecordStore:
    """Read and append maze records kept in one JSON file."""

    def __init__(self, path: PathLike, *, base_dir: Optional[PathLike] = None) -> None:
        self.path = Path(path)
        self.base_dir = Path(base_dir) if base_dir is not None else self.path.parent

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise InvalidMazeRecordError(f"{self.path} must hold a JSON list of maze records")
        return raw

    def write(self, records: Iterable[Mapping[str, Any]], *, append: bool = True) -> int:
        """Store ``records``, after the existing ones when ``append`` is set.

        Returns the number of records in the file afterwards.
        """

        payload = self.read() if append else []
        payload.extend(dict(record) for record in records)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Wrote %d maze records to %s", len(payload), self.path)
        return len(payload)

    def load(self) -> Dict[str, Dict[str, Any]]:
        """Validated records keyed by id. Duplicate ids are rejected."""

        if not self.path.exists():
            raise FileNotFoundError(f"Metadata file not found: {self.path}")
        records: Dict[str, Dict[str, Any]] = {}
        for raw in self.read():
            record = validate_record(raw)
            record_id = str(record["id"])
            if record_id in records:
                raise InvalidMazeRecordError(f"Duplicate maze id {record_id!r} in {self.path}")
            records[record_id] = record
        logger.debug("Loaded %d maze records from %s", len(records), self.path)
        return records

    def resolve(self, value: object) -> Path:
        """Resolve a record asset path relative to ``base_dir``."""

        path = Path(str(value))
        return path if path.is_absolute() else self.base_dir / path


__all__ = [
    "InvalidMazeRecordError",
    "MazeRecordStore",
    "PathLike",
    "REQUIRED_FIELDS",
    "validate_record",
]
