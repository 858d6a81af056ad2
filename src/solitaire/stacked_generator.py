"""
Board generation for the traditional variant.

Obstructions are computed once, up front, for the empty layout. The pre-solved shuffle then
repeatedly picks two free tiles, gives them the same design and takes them off the (imaginary)
board, which can free up the tiles around them.
"""

import logging
from typing import Optional

from src.core.exceptions import NoBoardError
from src.core.shared_types import TileDistribution
from src.solitaire.board import StackedBoard
from src.solitaire.distribution import build_pair_queue, slot_designs
from src.solitaire.obstructions import Obstruction, compute_obstructions
from src.solitaire.rng import SeededRandom
from src.solitaire.stacked_layout import StackedLayout
from src.solitaire.tiles import FaceRotation, design_alphabet

logger = logging.getLogger(__name__)


def simple_shuffle(
    layout: StackedLayout,
    rng: SeededRandom,
    distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS,
    with_wildcards: bool = True,
    layout_code: str = "",
) -> StackedBoard:
    board = StackedBoard.from_layout(layout, rng.seed, layout_code)
    tiles = board.tiles
    if len(tiles) < 2:
        raise NoBoardError(f"Layout {layout_code!r} has fewer than 2 tiles")
    if len(tiles) % 2 == 1:
        logger.debug("Dropping the last of %d tiles", len(tiles))
        tiles.pop()

    rotation = FaceRotation(rng)
    stream = slot_designs(design_alphabet(with_wildcards), distribution, rng)
    designs = [rotation.place(next(stream)) for _ in tiles]
    rng.shuffle(designs)
    for tile, design in zip(tiles, designs):
        tile.design = design
    return board


def overlap_depths(obstructions: dict[int, Obstruction]) -> dict[int, int]:
    """
    How many tiles are piled up underneath every tile.
    A tile that rests on nothing has depth 0, a tile resting on others sits one above the deepest of them.
    """
    resting_on: dict[int, list[int]] = {tile_id: [] for tile_id in obstructions}
    for tile_id, obstruction in obstructions.items():
        for above in obstruction.overlapping:
            resting_on[above].append(tile_id)

    depths: dict[int, int] = {}
    for tile_id in obstructions:
        # walk down iteratively, piles can be as deep as the layout allows
        pending = [tile_id]
        while pending:
            current = pending[-1]
            if current in depths:
                pending.pop()
                continue
            unresolved = [below for below in resting_on[current] if below not in depths]
            if unresolved:
                pending.extend(unresolved)
                continue
            depths[current] = max((depths[b] + 1 for b in resting_on[current]), default=0)
            pending.pop()
    return depths


def _depth_groups(obstructions: dict[int, Obstruction], rng: SeededRandom) -> list[list[int]]:
    depths = overlap_depths(obstructions)
    groups: list[list[int]] = [[] for _ in range(max(depths.values(), default=-1) + 1)]
    for tile_id in sorted(depths):
        groups[depths[tile_id]].append(tile_id)
    for group in groups:
        rng.shuffle(group)
    return [group for group in groups if group]


def presolved_shuffle(
    layout: StackedLayout,
    rng: SeededRandom,
    distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS,
    with_wildcards: bool = True,
    layout_code: str = "",
) -> StackedBoard:
    board = StackedBoard.from_layout(layout, rng.seed, layout_code)
    tiles = board.tiles
    if len(tiles) < 2:
        raise NoBoardError(f"Layout {layout_code!r} has fewer than 2 tiles")

    obstructions = compute_obstructions(board)
    num_pairs = len(tiles) // 2
    queue = build_pair_queue(num_pairs, design_alphabet(with_wildcards), distribution, rng)
    rotation = FaceRotation(rng)

    # Tall piles must not be left for last: once few pairs remain, take from the top of the deepest
    depth_groups = _depth_groups(obstructions, rng)

    for pair_index in range(num_pairs):
        candidates = [
            tile_id for tile_id, obstruction in obstructions.items() if obstruction.is_free
        ]
        if len(candidates) < 2:
            logger.error(
                "Ran out of free tiles after %d of %d pairs; layout %r cannot be fully populated",
                pair_index,
                num_pairs,
                layout_code,
            )
            break

        if num_pairs - pair_index <= len(depth_groups) * 2:
            free = set(candidates)
            candidates = [
                tile_id
                for group in reversed(depth_groups)
                for tile_id in group
                if tile_id in free
            ][:2]

        first = candidates.pop(rng.below(len(candidates)))
        second = candidates[rng.below(len(candidates))]

        design = queue[pair_index]
        tiles[first].design = rotation.place(design)
        tiles[second].design = rotation.place(design)

        for removed in (first, second):
            del obstructions[removed]
            for obstruction in obstructions.values():
                obstruction.discard(removed)
        depth_groups = [
            [tile_id for tile_id in group if tile_id not in (first, second)]
            for group in depth_groups
        ]
        depth_groups = [group for group in depth_groups if group]

    if obstructions:
        logger.info("%d tile(s) could not be paired and were left out", len(obstructions))
    if board.num_tiles < 2:
        raise NoBoardError(f"Could not pair any tiles of layout {layout_code!r}")
    return board


def generate_stacked_board(
    layout: StackedLayout,
    rng: SeededRandom,
    distribution: TileDistribution,
    simple: bool = False,
    with_wildcards: bool = True,
    layout_code: Optional[str] = None,
) -> StackedBoard:
    code = layout_code if layout_code is not None else layout.to_code()
    if simple:
        return simple_shuffle(layout, rng, distribution, with_wildcards, code)
    return presolved_shuffle(layout, rng, distribution, with_wildcards, code)
