"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest

from src.core.config import Settings, get_settings
from src.solitaire.board import FlatBoard, StackedBoard
from src.solitaire.rng import SeededRandom
from src.solitaire.stacked_layout import StackedLayout, StackSlot

TEST_SEED = 20240611


@pytest.fixture
def rng() -> SeededRandom:
    return SeededRandom(TEST_SEED)


@pytest.fixture
def flat_board() -> Callable[[str, int], FlatBoard]:
    """Call the inner function with a board diagram ('.' for empty cells) and its border width"""

    def _create_board(diagram: str, border: int = 0) -> FlatBoard:
        return FlatBoard.from_diagram(diagram, border=border)

    return _create_board


@pytest.fixture
def stacked_board() -> Callable[[int, int, dict[tuple[int, int], list[int]]], StackedBoard]:
    """
    Call the inner function with the grid size and {(column, row): [design, design, ...]}.
    Every listed design becomes one tile of the stack, bottom to top, without half-steps.
    """

    def _create_board(
        width: int, height: int, piles: dict[tuple[int, int], list[int]]
    ) -> StackedBoard:
        layout = StackedLayout.empty(width, height)
        for (column, row), designs in piles.items():
            layout.stack(column, row).extend(StackSlot() for _ in designs)
        board = StackedBoard.from_layout(layout)
        for (column, row), designs in piles.items():
            for tile, design in zip(board.stacks[row * width + column], designs):
                tile.design = design
        return board

    return _create_board


@pytest.fixture
def settings() -> Generator[Settings, None, None]:
    """Settings without any environment influence. The cached instance is reset afterwards."""
    get_settings.cache_clear()
    yield Settings(_env_file=None)
    get_settings.cache_clear()
