"""
Entry point into the domain layer for the service layer.
----

* generate: layout code (or width x height) + seed + options -> Board, or NoBoard
* find_path: validate a two-corner match and return the connecting path
* is_valid_match / find_all_matches / round_status: the same questions for either variant

Variant specific behaviour is looked up in dictionaries keyed by GameVariant.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from src.core.exceptions import (
    GenerationError,
    InvalidDimensionsError,
    InvalidFormatError,
    LayoutCodeError,
    SolitaireError,
)
from src.core.models import BoardModel
from src.core.shared_types import GameVariant, RoundStatus, TileDistribution
from src.solitaire import obstructions, paths
from src.solitaire.board import Board, FlatBoard, StackedBoard
from src.solitaire.flat_generator import generate_flat_board
from src.solitaire.flat_layout import FlatLayout
from src.solitaire.rng import SeededRandom, derive_seed
from src.solitaire.stacked_generator import generate_stacked_board
from src.solitaire.stacked_layout import StackSlot, StackedLayout

logger = logging.getLogger(__name__)

Layout = FlatLayout | StackedLayout


@dataclass(frozen=True)
class NoBoard:
    """Generation produced nothing usable. The caller decides what to fall back to."""

    reason: SolitaireError
    seed: Optional[int] = None


@dataclass(frozen=True)
class LayoutResult:
    """Outcome of decoding a layout code: either a layout or the reason there is none."""

    layout: Optional[Layout] = None
    error: Optional[LayoutCodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# --- LAYOUTS ---
LAYOUT_DECODERS: dict[GameVariant, Callable[[str], Layout]] = {
    GameVariant.TWO_CORNER: FlatLayout.from_code,
    GameVariant.TRADITIONAL: StackedLayout.from_code,
}


def _single_layer(width: int, height: int) -> StackedLayout:
    layout = StackedLayout.empty(width, height)
    for row in range(height):
        layout.add_row(row, range(width), StackSlot())
    return layout


RECTANGLE_LAYOUTS: dict[GameVariant, Callable[[int, int], Layout]] = {
    GameVariant.TWO_CORNER: FlatLayout.rectangle,
    GameVariant.TRADITIONAL: _single_layer,
}


def variant_of_code(code: str) -> GameVariant:
    if not isinstance(code, str):
        raise InvalidFormatError(f"Layout codes are strings, got {type(code).__name__}")
    try:
        return GameVariant(code[:3])
    except ValueError as err:
        raise InvalidFormatError(f"Unknown game variant in layout code {code!r}") from err


def decode_layout(code: str, variant: Optional[GameVariant] = None) -> LayoutResult:
    """Never raises: malformed codes come back as a LayoutResult holding the error."""
    try:
        if not isinstance(code, str):
            raise InvalidFormatError(f"Layout codes are strings, got {type(code).__name__}")
        variant = variant or variant_of_code(code)
        return LayoutResult(layout=LAYOUT_DECODERS[variant](code))
    except LayoutCodeError as err:
        logger.debug("Rejected layout code %r: %s", code, err)
        return LayoutResult(error=err)


def encode_layout(layout: Layout) -> str:
    return layout.to_code()


def _resolve_layout(
    variant: GameVariant,
    layout_code: Optional[str],
    width: Optional[int],
    height: Optional[int],
) -> tuple[Layout, str]:
    if layout_code is not None:
        result = decode_layout(layout_code, variant)
        if result.error is not None:
            raise result.error
        return result.layout, layout_code

    if width is None or height is None:
        raise InvalidDimensionsError("Need either a layout code or both width and height")
    layout = RECTANGLE_LAYOUTS[variant](width, height)
    return layout, layout.to_code()


# --- GENERATION ---
GeneratorFn = Callable[[Layout, SeededRandom, TileDistribution, bool, bool, str], Board]


def _generate_two_corner(
    layout: Layout,
    rng: SeededRandom,
    distribution: TileDistribution,
    simple: bool,
    with_wildcards: bool,
    code: str,
) -> Board:
    # the two-corner ruleset has no wildcard tiles
    return generate_flat_board(layout, rng, distribution, simple, code)


def _generate_traditional(
    layout: Layout,
    rng: SeededRandom,
    distribution: TileDistribution,
    simple: bool,
    with_wildcards: bool,
    code: str,
) -> Board:
    return generate_stacked_board(layout, rng, distribution, simple, with_wildcards, code)


GENERATORS: dict[GameVariant, GeneratorFn] = {
    GameVariant.TWO_CORNER: _generate_two_corner,
    GameVariant.TRADITIONAL: _generate_traditional,
}


def generate(
    variant: GameVariant,
    layout_code: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    seed: Optional[int | str] = None,
    distribution: TileDistribution = TileDistribution.PRIORITIZE_BOTH_PAIRS,
    simple_shuffle: bool = False,
    with_wildcards: bool = True,
) -> Board | NoBoard:
    """Build a board. Invalid input is reported through NoBoard, never raised."""
    final_seed = derive_seed(seed)
    try:
        layout, code = _resolve_layout(variant, layout_code, width, height)
        board = GENERATORS[variant](
            layout, SeededRandom(final_seed), distribution, simple_shuffle, with_wildcards, code
        )
    except (LayoutCodeError, GenerationError) as err:
        logger.warning("No %s board for %r: %s", variant.name, layout_code, err)
        return NoBoard(reason=err, seed=final_seed)

    logger.info(
        "Generated %s board %s: seed %d, %s shuffle, %s, %d tiles",
        variant.name,
        board.layout_code,
        final_seed,
        "simple" if simple_shuffle else "pre-solved",
        distribution.value,
        board.num_tiles,
    )
    return board


# --- PLAY ---
def find_path(board: FlatBoard, first: int, second: int) -> Optional[paths.Path]:
    """Connecting path between two two-corner tiles, or None when they do not match."""
    return paths.find_path(board, first, second)


def _is_valid_two_corner_match(board: Board, first: int, second: int) -> bool:
    return paths.find_path(board, first, second) is not None


MATCH_RULES: dict[GameVariant, Callable[[Board, int, int], bool]] = {
    GameVariant.TWO_CORNER: _is_valid_two_corner_match,
    GameVariant.TRADITIONAL: obstructions.is_valid_match,
}

MATCH_FINDERS: dict[GameVariant, Callable[[Board], list[tuple[int, int]]]] = {
    GameVariant.TWO_CORNER: paths.find_all_matches,
    GameVariant.TRADITIONAL: obstructions.find_all_free_matches,
}

BOARD_TYPES: dict[GameVariant, type[FlatBoard] | type[StackedBoard]] = {
    GameVariant.TWO_CORNER: FlatBoard,
    GameVariant.TRADITIONAL: StackedBoard,
}


def is_valid_match(board: Board, first: int, second: int) -> bool:
    return MATCH_RULES[board.variant](board, first, second)


def find_all_matches(board: Board) -> list[tuple[int, int]]:
    """All pairs that could be matched right now. Empty means the round is over."""
    return MATCH_FINDERS[board.variant](board)


def round_status(
    board: Board, matches: Optional[list[tuple[int, int]]] = None
) -> RoundStatus:
    if board.num_tiles == 0:
        return RoundStatus.WON
    if matches is None:
        matches = find_all_matches(board)
    return RoundStatus.IN_PROGRESS if matches else RoundStatus.LOST


def board_from_model(model: BoardModel) -> Board:
    try:
        variant = GameVariant(model.variant)
    except ValueError as err:
        raise InvalidFormatError(f"Unknown game variant {model.variant!r}") from err
    return BOARD_TYPES[variant].from_model(model)
