"""Unit tests for src/services/board_service.py"""

from collections import Counter
from dataclasses import asdict
from typing import Callable

import pytest

from src.api.models import (
    BoardPayload,
    EncodeLayoutRequest,
    GenerateBoardRequest,
    HintRequest,
    MatchRequest,
    StackSlotPayload,
)
from src.core.config import Settings
from src.core.exceptions import LayoutCodeError, TileNotFoundError
from src.core.shared_types import GameVariant, RoundStatus, TileDistribution
from src.services.board_service import BoardService
from src.solitaire.board import Board, FlatBoard, StackedBoard
from src.solitaire.default_layouts import TraditionalLayout, TwoCornerLayout
from src.solitaire.stacked_layout import StackedLayout

FlatBoardFactory = Callable[[str, int], FlatBoard]

ROW_OF_FOUR = """
    . . . . . .
    . 1 2 2 1 .
    . . . . . .
"""


def to_payload(board: Board) -> BoardPayload:
    return BoardPayload(**asdict(board.to_model()))


@pytest.fixture
def service(settings: Settings) -> BoardService:
    return BoardService(settings)


# --- SERVICE - GENERATE BOARD ---
def test_generate_board_from_code(service: BoardService) -> None:
    """The variant is read from the layout code when the request does not name one."""
    response = service.generate_board(
        GenerateBoardRequest(layout_code=TwoCornerLayout.SMALL, seed=4)
    )
    assert not response.fallback_used
    assert response.error is None
    assert response.board.variant == GameVariant.TWO_CORNER
    assert response.board.layout_code == TwoCornerLayout.SMALL
    assert response.board.seed == 4
    assert response.num_tiles == sum(design is not None for design in response.board.designs)


def test_generate_traditional_board(service: BoardService) -> None:
    response = service.generate_board(
        GenerateBoardRequest(layout_code=TraditionalLayout.TURTLE, seed=4)
    )
    assert response.board.variant == GameVariant.TRADITIONAL
    assert response.variant_name == "Traditional Mahjong Tile Solitaire"
    assert len(response.board.designs) == 144


def test_generate_board_uses_configured_distribution() -> None:
    settings = Settings(_env_file=None, default_distribution=TileDistribution.SINGLE_PAIRS)
    response = BoardService(settings).generate_board(
        GenerateBoardRequest(layout_code=TwoCornerLayout.SMALL)
    )
    counts = Counter(design for design in response.board.designs if design is not None)
    assert set(counts.values()) == {2}


def test_request_overrides_settings(service: BoardService) -> None:
    response = service.generate_board(
        GenerateBoardRequest(
            layout_code=TwoCornerLayout.SMALL,
            simple_shuffle=True,
            tile_distribution=TileDistribution.SINGLE_PAIRS,
        )
    )
    # the simple shuffle fills every slot
    assert response.num_tiles == 40
    counts = Counter(design for design in response.board.designs if design is not None)
    assert set(counts.values()) == {2}


@pytest.mark.parametrize(
    "request_args",
    [
        {},  # neither a code nor dimensions
        {"layout_code": "2CO01h8lgVVVVVVVW"},  # checksum mismatch
        {"variant": GameVariant.TWO_CORNER, "width": 25, "height": 4},
    ],
)
def test_generate_board_falls_back(service: BoardService, request_args: dict) -> None:
    response = service.generate_board(GenerateBoardRequest(**request_args))
    assert response.fallback_used
    assert response.error
    assert response.board.layout_code == TwoCornerLayout.LARGE
    assert response.num_tiles > 0


def test_generate_board_falls_back_per_variant(service: BoardService) -> None:
    response = service.generate_board(
        GenerateBoardRequest(variant=GameVariant.TRADITIONAL, layout_code=TwoCornerLayout.SMALL)
    )
    assert response.fallback_used
    assert response.board.layout_code == TraditionalLayout.TURTLE


def test_broken_fallback_raises() -> None:
    settings = Settings(_env_file=None, fallback_two_corner_code="2CO01")
    with pytest.raises(LayoutCodeError):
        BoardService(settings).generate_board(GenerateBoardRequest(layout_code="garbage"))


# --- SERVICE - MATCH TILES ---
def test_check_valid_match(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(ROW_OF_FOUR, 1))
    response = service.check_match(MatchRequest(board=payload, first_tile=8, second_tile=9))

    assert response.valid
    assert response.path is not None
    assert [segment.cells for segment in response.path] == [[8, 9]]
    assert response.path[0].direction == "R"
    assert response.board.designs[8] is None
    assert response.board.designs[9] is None
    assert response.status == RoundStatus.IN_PROGRESS


def test_clear_the_board(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(ROW_OF_FOUR, 1))
    first = service.check_match(MatchRequest(board=payload, first_tile=8, second_tile=9))
    last = service.check_match(MatchRequest(board=first.board, first_tile=7, second_tile=10))

    assert last.valid
    assert last.path is not None
    assert len(last.path) == 1
    assert last.status == RoundStatus.WON


def test_check_invalid_match(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(ROW_OF_FOUR, 1))
    response = service.check_match(MatchRequest(board=payload, first_tile=7, second_tile=8))

    assert not response.valid
    assert response.path is None
    assert response.board.designs == payload.designs


def test_check_match_unknown_tile(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(ROW_OF_FOUR, 1))
    with pytest.raises(TileNotFoundError):
        service.check_match(MatchRequest(board=payload, first_tile=8, second_tile=100))


def test_check_stacked_match(service: BoardService) -> None:
    layout = StackedLayout.empty(3, 1)
    layout.add_row(0, range(3))
    board = StackedBoard.from_layout(layout, layout_code=layout.to_code())
    for tile, design in zip(board.tiles, [5, 6, 5]):
        tile.design = design

    response = service.check_match(
        MatchRequest(board=to_payload(board), first_tile=0, second_tile=2)
    )
    assert response.valid
    assert response.path is None
    assert response.board.designs == [None, 6, None]
    assert response.status == RoundStatus.LOST


# --- SERVICE - HINTS ---
def test_hint(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(ROW_OF_FOUR, 1))
    response = service.hint(HintRequest(board=payload))
    assert sorted(response.matches) == [(7, 10), (8, 9)]
    assert response.status == RoundStatus.IN_PROGRESS


def test_hint_on_a_dead_board(service: BoardService, flat_board: FlatBoardFactory) -> None:
    payload = to_payload(flat_board(". . . .\n. 1 2 .\n. . . .", 1))
    response = service.hint(HintRequest(board=payload))
    assert response.matches == []
    assert response.status == RoundStatus.LOST


# --- SERVICE - LAYOUT EDITOR ---
@pytest.mark.parametrize(
    "request_args, code, num_tiles",
    [
        ({"width": 5, "height": 3}, "2CO015Fklvgtgvg", 14),
        ({"width": 3, "height": 2, "mask": "101011"}, "2CO01F26Bqm", 4),
    ],
)
def test_encode_two_corner_layout(
    service: BoardService, request_args: dict, code: str, num_tiles: int
) -> None:
    response = service.encode_layout(
        EncodeLayoutRequest(variant=GameVariant.TWO_CORNER, **request_args)
    )
    assert response.layout_code == code
    assert response.num_tiles == num_tiles


def test_encode_traditional_layout(service: BoardService) -> None:
    flat, shifted = StackSlotPayload(), StackSlotPayload(x_half_step=True)
    response = service.encode_layout(
        EncodeLayoutRequest(
            variant=GameVariant.TRADITIONAL,
            width=2,
            height=2,
            stacks=[[flat], [flat], [], [shifted, flat]],
        )
    )
    assert response.layout_code == "MJS0122d7LZDCzD"
    assert response.num_tiles == 4


def test_encode_traditional_rectangle(service: BoardService) -> None:
    response = service.encode_layout(
        EncodeLayoutRequest(variant=GameVariant.TRADITIONAL, width=4, height=2)
    )
    assert response.num_tiles == 8
    assert StackedLayout.from_code(response.layout_code).num_tiles == 8
