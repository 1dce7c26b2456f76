"""Pillow rendering of maze models."""

from __future__ import annotations

from typing import List, Tuple

from PIL import Image, ImageDraw

from .model import MazeModel

WALL_COLOR = (0, 0, 0)
PASSAGE_COLOR = (255, 255, 255)
ENTRANCE_COLOR = (220, 30, 30)
EXIT_COLOR = (40, 180, 80)
ESCAPE_COLOR = (220, 0, 0)

BBox = Tuple[int, int, int, int]


def cell_bboxes(model: MazeModel, cell_size: int) -> List[List[BBox]]:
    """Pixel box ``(left, top, right, bottom)`` of every cell, row by row."""

    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    return [
        [
            (column * cell_size, row * cell_size, (column + 1) * cell_size, (row + 1) * cell_size)
            for column in range(model.width)
        ]
        for row in range(model.height)
    ]


def render_image(model: MazeModel, *, cell_size: int = 16, show_escape: bool = False) -> Image.Image:
    boxes = cell_bboxes(model, cell_size)
    canvas = Image.new("RGB", (model.width * cell_size, model.height * cell_size), WALL_COLOR)
    draw = ImageDraw.Draw(canvas)

    entrance = model.entrance.position
    exit_ = model.exit.position
    for cell in model.cells():
        if cell.position == entrance:
            fill = ENTRANCE_COLOR
        elif cell.position == exit_:
            fill = EXIT_COLOR
        elif cell.is_wall:
            continue
        elif show_escape and cell.is_escape:
            fill = ESCAPE_COLOR
        else:
            fill = PASSAGE_COLOR
        left, top, right, bottom = boxes[cell.row][cell.column]
        draw.rectangle((left, top, right - 1, bottom - 1), fill=fill)

    if show_escape:
        thickness = max(2, cell_size // 3)
        for position in (entrance, exit_):
            if model.cell(*position).is_escape:
                _draw_marker(draw, boxes[position[0]][position[1]], thickness)
    return canvas


def _draw_marker(draw: ImageDraw.ImageDraw, bbox: BBox, thickness: int) -> None:
    left, top, right, bottom = bbox
    cx = (left + right) / 2
    cy = (top + bottom) / 2
    draw.ellipse(
        (cx - thickness / 2, cy - thickness / 2, cx + thickness / 2, cy + thickness / 2),
        fill=ESCAPE_COLOR,
    )


__all__ = ["cell_bboxes", "render_image"]
