"""Unit tests for src/solitaire/stacked_layout.py"""

import pytest

from src.core.exceptions import InvalidDimensionsError, InvalidFormatError
from src.core.shared_types import GameVariant
from src.solitaire.default_layouts import TraditionalLayout
from src.solitaire.layout_code import REPEAT_MARKER, LayoutHeader
from src.solitaire.stacked_layout import (
    MAX_STACK_DEPTH,
    StackedLayout,
    StackSlot,
    trim_stack,
    turtle_layout,
)

FLAT = StackSlot()
SHIFTED_X = StackSlot(x_half_step=True)


def single_layer(width: int, height: int) -> StackedLayout:
    layout = StackedLayout.empty(width, height)
    for row in range(height):
        layout.add_row(row, range(width))
    return layout


# --- TURTLE ---
def test_turtle_layout_shape() -> None:
    layout = turtle_layout()
    assert (layout.width, layout.height) == (15, 8)
    assert layout.num_tiles == 144
    assert layout.max_depth == 5


def test_turtle_encodes_to_default_code() -> None:
    assert turtle_layout().to_code() == TraditionalLayout.TURTLE


def test_decode_turtle() -> None:
    layout = StackedLayout.from_code(TraditionalLayout.TURTLE)
    assert layout == turtle_layout()

    half_steps = [
        slot
        for stack in layout.cells
        for slot in stack
        if slot is not None and (slot.x_half_step or slot.y_half_step)
    ]
    assert len(half_steps) == 4


# --- SMALL LAYOUTS ---
def test_encode_small_layout_with_half_step() -> None:
    """Cell 2 is empty, cell 3 holds a horizontally shifted tile with a regular tile on top."""
    layout = StackedLayout(2, 2, [[FLAT], [FLAT], [], [SHIFTED_X, FLAT]])
    assert layout.to_code() == "MJS0122d7LZDCzD"
    assert StackedLayout.from_code("MJS0122d7LZDCzD") == layout


def test_gaps_inside_a_stack_survive() -> None:
    layout = StackedLayout(1, 1, [[FLAT, None, FLAT]])
    assert StackedLayout.from_code(layout.to_code()).cells == [[FLAT, None, FLAT]]


def test_empty_levels_on_top_are_dropped() -> None:
    assert trim_stack([FLAT, None, None]) == [FLAT]
    assert trim_stack([None]) == []

    layout = StackedLayout(2, 1, [[FLAT, None], [None]])
    assert StackedLayout.from_code(layout.to_code()).cells == [[FLAT], []]


def test_layout_without_tiles_round_trips() -> None:
    layout = StackedLayout.empty(3, 2)
    code = layout.to_code()
    assert code == "MJS01F2CC"
    assert StackedLayout.from_code(code) == layout


def test_large_regular_layout_uses_repeat_headers() -> None:
    layout = single_layer(20, 12)
    code = layout.to_code()
    assert REPEAT_MARKER in code
    assert StackedLayout.from_code(code) == layout
    assert StackedLayout.from_code(code).num_tiles == 240


# --- ERRORS ---
def test_too_deep_stack() -> None:
    layout = StackedLayout(1, 1, [[FLAT] * (MAX_STACK_DEPTH + 1)])
    with pytest.raises(InvalidDimensionsError):
        layout.to_code()


def test_cell_count_must_match_grid() -> None:
    layout = StackedLayout(2, 2, [[FLAT]])
    with pytest.raises(InvalidDimensionsError):
        layout.to_code()


@pytest.mark.parametrize(
    "width, height, payload",
    [
        (1, 1, "000080000080"),  # two stacks in a single cell
        (2, 1, "000083"),  # skips 3 cells of a 2 cell grid
        (1, 1, "00008"),  # not a whole segment
        (1, 1, "v00080"),  # more than 29 bits
        (1, 1, "-7000080"),  # repeat header expands past the grid
    ],
)
def test_decode_rejects_overflowing_payloads(width: int, height: int, payload: str) -> None:
    code = LayoutHeader(GameVariant.TRADITIONAL, width, height, payload).to_code()
    with pytest.raises(InvalidFormatError):
        StackedLayout.from_code(code)


def test_decode_rejects_two_corner_code() -> None:
    with pytest.raises(InvalidFormatError):
        StackedLayout.from_code("2CO01h8lgVVVVVVVV")
