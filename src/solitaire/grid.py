"""
Cell arithmetic on a row-major grid.

(shared by both board kinds and everything that walks them)
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class Direction(StrEnum):
    UP = "U"
    DOWN = "D"
    LEFT = "L"
    RIGHT = "R"

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)


Vector = tuple[int, int]

DIRECTION_VECTORS: dict[Direction, Vector] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Grid:
    columns: int
    rows: int

    @property
    def size(self) -> int:
        return self.columns * self.rows

    def column(self, cell: int) -> int:
        return cell % self.columns

    def row(self, cell: int) -> int:
        return cell // self.columns

    def cell(self, column: int, row: int) -> int:
        return row * self.columns + column

    def is_within_bounds(self, column: int, row: int) -> bool:
        return (0 <= column < self.columns) and (0 <= row < self.rows)

    def step(self, cell: int, direction: Direction) -> Optional[int]:
        """Neighbouring cell in the given direction, or None when that leaves the grid."""
        dx, dy = DIRECTION_VECTORS[direction]
        column = self.column(cell) + dx
        row = self.row(cell) + dy
        if not self.is_within_bounds(column, row):
            return None
        return self.cell(column, row)

    def neighbours(self, cell: int) -> list[int]:
        """The (up to) 4 orthogonal neighbours of a cell."""
        stepped = (self.step(cell, direction) for direction in Direction)
        return [neighbour for neighbour in stepped if neighbour is not None]
