"""
Board generation for the two-corner variant.

The pre-solved shuffle plays the game backwards: starting from the outside of the shape it keeps
picking an exposed tile and a partner it could legally be matched with, assigns both the same
design, and pretends they were removed. Matching the pairs in the order they were assigned clears
the board.
"""

import logging
from typing import Optional

from src.core.exceptions import NoBoardError, UnreachablePairError
from src.core.shared_types import TileDistribution
from src.solitaire.board import FlatBoard
from src.solitaire.distribution import build_pair_queue, slot_designs
from src.solitaire.flat_layout import FlatLayout
from src.solitaire.grid import Grid
from src.solitaire.paths import reachable_targets
from src.solitaire.rng import SeededRandom
from src.solitaire.tiles import design_alphabet

logger = logging.getLogger(__name__)

BORDER = 1


def layout_cells(layout: FlatLayout, grid: Grid, border: int = BORDER) -> list[int]:
    """Cells of the bordered grid that should hold a tile, row-major."""
    return [
        grid.cell(column + border, row + border)
        for row in range(layout.height)
        for column in range(layout.width)
        if layout.is_occupied(column, row)
    ]


def _new_board(layout: FlatLayout, rng: SeededRandom, layout_code: str) -> FlatBoard:
    board = FlatBoard.empty(layout.width, layout.height, BORDER)
    board.seed = rng.seed
    board.layout_code = layout_code
    return board


def simple_shuffle(
    layout: FlatLayout,
    rng: SeededRandom,
    distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS,
    layout_code: str = "",
) -> FlatBoard:
    """Fill every slot, then shuffle the designs. Fast, but the board may not be solvable."""
    board = _new_board(layout, rng, layout_code)
    cells = layout_cells(layout, board.grid)
    if len(cells) < 2:
        raise NoBoardError(f"Layout {layout_code!r} has fewer than 2 tiles")

    # an odd tile out can never be matched
    if len(cells) % 2 == 1:
        logger.debug("Dropping the last of %d tiles", len(cells))
        cells.pop()

    stream = slot_designs(design_alphabet(), distribution, rng)
    designs = [next(stream) for _ in cells]
    rng.shuffle(designs)
    for cell, design in zip(cells, designs):
        board.tiles[cell].design = design
    return board


def presolved_shuffle(
    layout: FlatLayout,
    rng: SeededRandom,
    distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS,
    layout_code: str = "",
) -> FlatBoard:
    """Grow matching pairs inwards from the edge of the shape. The result is always solvable."""
    board = _new_board(layout, rng, layout_code)
    grid = board.grid
    cells = layout_cells(layout, grid)
    if len(cells) < 2:
        raise NoBoardError(f"Layout {layout_code!r} has fewer than 2 tiles")

    num_pairs = len(cells) // 2
    queue = build_pair_queue(num_pairs, design_alphabet(), distribution, rng)

    # tiles that did not get a design yet still block paths
    pending = set(cells)
    edge: list[int] = [
        cell
        for cell in cells
        if any(neighbour not in pending for neighbour in grid.neighbours(cell))
    ]

    def expose_neighbours(cell: int) -> None:
        for neighbour in grid.neighbours(cell):
            if neighbour in pending and neighbour not in edge:
                edge.append(neighbour)

    for pair_index in range(num_pairs):
        if not edge:
            break
        tile = edge[rng.below(len(edge))]
        expose_neighbours(tile)
        edge.remove(tile)

        try:
            partner = _pick_partner(grid, tile, edge, pending, rng)
        except UnreachablePairError as err:
            logger.warning("Skipping stranded tile: %s", err)
            continue

        design = queue[pair_index]
        board.tiles[tile].design = design
        board.tiles[partner].design = design
        pending.discard(tile)
        pending.discard(partner)
        expose_neighbours(partner)
        edge.remove(partner)

    if pending:
        logger.info("%d tile(s) could not be paired and were left out", len(pending))
    if board.num_tiles < 2:
        raise NoBoardError(f"Could not pair any tiles of layout {layout_code!r}")
    return board


def _pick_partner(
    grid: Grid, tile: int, edge: list[int], pending: set[int], rng: SeededRandom
) -> int:
    """Random reachable edge tile, preferring partners that need at least one corner."""
    candidates = reachable_targets(
        grid, tile, set(edge), is_open=lambda cell: cell not in pending
    )
    if not candidates:
        raise UnreachablePairError(f"No edge tile can be reached from cell {tile}")

    cornered = [cell for cell, segments in candidates if segments > 1]
    pool: list[int] = cornered or [cell for cell, _ in candidates]
    return pool[rng.below(len(pool))]


def generate_flat_board(
    layout: FlatLayout,
    rng: SeededRandom,
    distribution: TileDistribution,
    simple: bool = False,
    layout_code: Optional[str] = None,
) -> FlatBoard:
    code = layout_code if layout_code is not None else layout.to_code()
    if simple:
        return simple_shuffle(layout, rng, distribution, code)
    return presolved_shuffle(layout, rng, distribution, code)
