"""
What keeps a traditional tile from being picked.
----

A tile is free when nothing rests on top of it and at least one of its long sides (left or right)
is open. Positions are compared in half units: a tile in column x sits at 2x, or 2x + 1 when it is
shifted by a half-step, and the same goes for rows.

Obstructions are kept as sets of tile ids per tile id, so removing a tile only means discarding
its id from the sets of the tiles around it.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from src.solitaire.board import StackedBoard
from src.solitaire.tiles import designs_match


@dataclass
class Obstruction:
    overlapping: set[int] = field(default_factory=set)
    left: set[int] = field(default_factory=set)
    right: set[int] = field(default_factory=set)

    def discard(self, tile_id: int) -> None:
        self.overlapping.discard(tile_id)
        self.left.discard(tile_id)
        self.right.discard(tile_id)

    @property
    def is_free(self) -> bool:
        return not self.overlapping and (not self.left or not self.right)


@dataclass(frozen=True)
class HalfUnitPosition:
    column: int
    row: int
    level: int
    x: int
    y: int


def half_unit_positions(board: StackedBoard) -> dict[int, HalfUnitPosition]:
    positions: dict[int, HalfUnitPosition] = {}
    grid = board.grid
    for cell, stack in enumerate(board.stacks):
        column, row = grid.column(cell), grid.row(cell)
        for level, tile in enumerate(stack):
            if tile is None:
                continue
            positions[tile.id] = HalfUnitPosition(
                column,
                row,
                level,
                2 * column + int(tile.x_half_step),
                2 * row + int(tile.y_half_step),
            )
    return positions


def compute_obstructions(
    board: StackedBoard, tile_ids: Optional[Iterable[int]] = None
) -> dict[int, Obstruction]:
    """
    Obstructions between the given tiles (all tile slots by default).
    Only tiles in neighbouring cells can touch, so every tile checks the 3x3 block of stacks around it.
    """
    positions = half_unit_positions(board)
    considered = set(positions) if tile_ids is None else set(tile_ids)
    grid = board.grid

    obstructions: dict[int, Obstruction] = {}
    for tile_id in sorted(considered):
        here = positions[tile_id]
        obstruction = Obstruction()
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if not grid.is_within_bounds(here.column + dx, here.row + dy):
                    continue
                for other in board.stacks[grid.cell(here.column + dx, here.row + dy)]:
                    if other is None or other.id == tile_id or other.id not in considered:
                        continue
                    there = positions[other.id]
                    _classify(obstruction, other.id, here, there, dx)
        obstructions[tile_id] = obstruction
    return obstructions


def _classify(
    obstruction: Obstruction,
    other_id: int,
    here: HalfUnitPosition,
    there: HalfUnitPosition,
    dx: int,
) -> None:
    x_offset = there.x - here.x
    y_offset = there.y - here.y
    if there.level == here.level + 1:
        if abs(x_offset) < 2 and abs(y_offset) < 2:
            obstruction.overlapping.add(other_id)
    elif there.level == here.level and abs(y_offset) <= 1:
        if dx == -1 and x_offset in (-2, -1):
            obstruction.left.add(other_id)
        elif dx == 1 and x_offset in (1, 2):
            obstruction.right.add(other_id)


# --- PLAY ---
def free_tiles(board: StackedBoard) -> list[int]:
    """Ids of all tiles that can currently be picked."""
    live = board.occupied_ids()
    obstructions = compute_obstructions(board, live)
    return [tile_id for tile_id in live if obstructions[tile_id].is_free]


def is_valid_match(board: StackedBoard, first: int, second: int) -> bool:
    if first == second:
        return False
    if not designs_match(board.tile(first).design, board.tile(second).design):
        return False
    free = set(free_tiles(board))
    return first in free and second in free


def find_all_free_matches(board: StackedBoard) -> list[tuple[int, int]]:
    """Every pair of free tiles with matching designs, lowest id first."""
    free = free_tiles(board)
    tiles = board.tiles
    return [
        (first, second)
        for index, first in enumerate(free)
        for second in free[index + 1 :]
        if designs_match(tiles[first].design, tiles[second].design)
    ]
