"""
Two-corner path finding
----

Two tiles match when they can be connected by at most 3 straight segments (2 corners) that only
cross empty cells. Paths may leave the tiles' area and run through the empty border.

Key idea: depth-first search over an explicit work list of partial paths. Each partial path is a
list of segments; popping one moves its last segment a single step forward and, while corners are
left, forks off the perpendicular directions that still lead towards the target.

The work list is a deque. Directions that head towards the target are pushed on the right (and so
popped first), the others on the left.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from src.solitaire.board import FlatBoard
from src.solitaire.grid import Direction, Grid
from src.solitaire.tiles import designs_match

MAX_SEGMENTS = 3


@dataclass
class Segment:
    direction: Direction
    cells: list[int] = field(default_factory=list)

    def copy(self) -> "Segment":
        return Segment(self.direction, list(self.cells))


Path = list[Segment]


def _fork(path: Path, direction: Direction, cell: int) -> Path:
    return [segment.copy() for segment in path] + [Segment(direction, [cell])]


def _push(work: deque[Path], path: Path, preferred: bool) -> None:
    if preferred:
        work.append(path)
    else:
        work.appendleft(path)


# --- SINGLE TARGET ---
def find_path(board: FlatBoard, first: int, second: int) -> Optional[Path]:
    """
    Simplest legal path between two tiles, or None if they do not match.

    A path of 1 or 2 segments is returned as soon as it is found: a pair that lines up needs 1
    segment and can never be joined by 2, so nothing shorter can still be out there.
    A 3-segment path is only kept as a fallback while the search continues.
    """
    if first == second:
        return None
    if not designs_match(board.tile(first).design, board.tile(second).design):
        return None

    grid = board.grid
    target_column, target_row = grid.column(second), grid.row(second)
    dx = target_column - grid.column(first)
    dy = target_row - grid.row(first)

    # Seed only the directions that are not pointing away from the target on both axes
    work: deque[Path] = deque()
    if dy != 0 or dx > 0:
        work.append([Segment(Direction.RIGHT, [first])])
    if dy != 0 or dx < 0:
        _push(work, [Segment(Direction.LEFT, [first])], dx < 0)
    if dx != 0 or dy > 0:
        _push(work, [Segment(Direction.DOWN, [first])], dy >= 0)
    if dx != 0 or dy < 0:
        work.append([Segment(Direction.UP, [first])])

    fallback: Optional[Path] = None
    while work:
        path = work.pop()
        if fallback is not None and len(path) == MAX_SEGMENTS:
            continue

        segment = path[-1]
        next_cell = grid.step(segment.cells[-1], segment.direction)
        if next_cell is None:
            continue

        if next_cell == second:
            segment.cells.append(next_cell)
            if len(path) < MAX_SEGMENTS:
                return path
            fallback = path
            continue

        if board.tiles[next_cell].design is not None:
            # obstruction
            continue

        segment.cells.append(next_cell)
        column, row = grid.column(next_cell), grid.row(next_cell)

        if segment.direction.is_horizontal:
            aligned = column == target_column
            if len(path) < MAX_SEGMENTS and not (len(path) == 2 and not aligned):
                if target_row < row:
                    _push(work, _fork(path, Direction.UP, next_cell), dy < 0)
                elif target_row > row:
                    _push(work, _fork(path, Direction.DOWN, next_cell), dy >= 0)
        else:
            aligned = row == target_row
            if len(path) < MAX_SEGMENTS and not (len(path) == 2 and not aligned):
                if target_column < column:
                    _push(work, _fork(path, Direction.LEFT, next_cell), dx < 0)
                elif target_column > column:
                    _push(work, _fork(path, Direction.RIGHT, next_cell), dx >= 0)

        if len(path) == 2 and _overshot(segment.direction, column - target_column, row - target_row):
            continue
        _push(work, path, _is_towards(segment.direction, dx, dy))
    return fallback


def _overshot(direction: Direction, column_offset: int, row_offset: int) -> bool:
    """The second segment went past the target: the last turn can no longer reach it."""
    match direction:
        case Direction.RIGHT:
            return column_offset > 0
        case Direction.LEFT:
            return column_offset < 0
        case Direction.DOWN:
            return row_offset > 0
        case Direction.UP:
            return row_offset < 0


def _is_towards(direction: Direction, dx: int, dy: int) -> bool:
    match direction:
        case Direction.RIGHT:
            return dx >= 0
        case Direction.LEFT:
            return dx < 0
        case Direction.DOWN:
            return dy >= 0
        case Direction.UP:
            return dy < 0


# --- MANY TARGETS ---
@dataclass
class TargetBounds:
    """Columns/rows the remaining targets occupy. Used to prune forks."""

    columns: set[int]
    rows: set[int]

    @classmethod
    def of(cls, grid: Grid, targets: set[int]) -> "TargetBounds":
        return cls({grid.column(t) for t in targets}, {grid.row(t) for t in targets})


def reachable_targets(
    grid: Grid,
    source: int,
    targets: set[int],
    is_open: Callable[[int], bool],
) -> list[tuple[int, int]]:
    """
    Every target reachable from `source` by a path of at most 3 segments.
    Returns (target, number of segments) in the order they were found. A found target stops
    being a target (and from then on blocks paths, unless `is_open` says otherwise).
    """
    remaining = set(targets)
    found: list[tuple[int, int]] = []
    if not remaining:
        return found
    bounds = TargetBounds.of(grid, remaining)

    work: list[Path] = [[Segment(direction, [source])] for direction in Direction]
    while work and remaining:
        path = work.pop()
        segment = path[-1]
        next_cell = grid.step(segment.cells[-1], segment.direction)
        if next_cell is None:
            continue

        if next_cell in remaining:
            found.append((next_cell, len(path)))
            remaining.discard(next_cell)
            if remaining:
                bounds = TargetBounds.of(grid, remaining)
            continue

        if not is_open(next_cell):
            continue

        segment.cells.append(next_cell)
        column, row = grid.column(next_cell), grid.row(next_cell)

        if segment.direction.is_horizontal:
            aligned = column in bounds.columns
            if len(path) < MAX_SEGMENTS and not (len(path) == 2 and not aligned):
                if min(bounds.rows) < row:
                    work.append(_fork(path, Direction.UP, next_cell))
                if max(bounds.rows) > row:
                    work.append(_fork(path, Direction.DOWN, next_cell))
        else:
            aligned = row in bounds.rows
            if len(path) < MAX_SEGMENTS and not (len(path) == 2 and not aligned):
                if min(bounds.columns) < column:
                    work.append(_fork(path, Direction.LEFT, next_cell))
                if max(bounds.columns) > column:
                    work.append(_fork(path, Direction.RIGHT, next_cell))

        if len(path) == 2 and _past_all(segment.direction, column, row, bounds):
            continue
        work.append(path)
    return found


def _past_all(direction: Direction, column: int, row: int, bounds: TargetBounds) -> bool:
    match direction:
        case Direction.RIGHT:
            return max(bounds.columns) < column
        case Direction.LEFT:
            return min(bounds.columns) > column
        case Direction.DOWN:
            return max(bounds.rows) < row
        case Direction.UP:
            return min(bounds.rows) > row


def find_all_matches(board: FlatBoard) -> list[tuple[int, int]]:
    """
    Every pair of tiles that can currently be matched.
    Each tile only searches for same-design tiles with a higher id, so every pair shows up once.
    """
    grid = board.grid
    tiles = board.tiles
    occupied = board.occupied_ids()

    def is_open(cell: int) -> bool:
        return tiles[cell].design is None

    matches: list[tuple[int, int]] = []
    for index, source in enumerate(occupied):
        targets = {
            other
            for other in occupied[index + 1 :]
            if designs_match(tiles[source].design, tiles[other].design)
        }
        for target, _ in reachable_targets(grid, source, targets, is_open):
            matches.append((source, target))
    return matches
