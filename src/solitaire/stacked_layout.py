"""
Layout codes for the traditional (layered) variant.

Each grid cell holds a stack. Every non-empty stack is written as one 29 bit segment, rendered as 6
base 32 digits:

    bits  0 -  7   number of empty cells skipped since the previous segment
    bits  8 - 14   occupancy, one bit per height
    bits 15 - 21   horizontal half-step, one bit per height
    bits 22 - 28   vertical half-step, one bit per height

Segments are compressed twice: common substrings become letters, then runs of repeated windows
become a repeat header.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import InvalidDimensionsError, InvalidFormatError
from src.core.shared_types import GameVariant
from src.solitaire.layout_code import (
    LayoutHeader,
    LiteralTable,
    check_dimensions,
    compress_literals,
    compress_runs,
    expand_literals,
    expand_runs,
    from_base32,
    is_base32,
    to_base32,
)

logger = logging.getLogger(__name__)

MAX_STACK_DEPTH = 7
SEGMENT_DIGITS = 6
MAX_SKIPPED_CELLS = 0xFF
LEVEL_MASK = (1 << MAX_STACK_DEPTH) - 1
OCCUPANCY_SHIFT = 8
X_HALF_STEP_SHIFT = 15
Y_HALF_STEP_SHIFT = 22
SEGMENT_BITS = 29

TRADITIONAL_LITERALS: LiteralTable = (
    "0000o00000o00000o00000o0",
    "000080000080000080000080",
    None,
    "0001o00001o0",
    "0000o00000o0",
    "000080000080",
    "0007o0",
    "0003o0",
    None,
    "0001o0",
    "0000o0",
    "000080",
    "0007o",
    "0003o",
    None,
    "0001o",
    "0000o",
    "00008",
    "000",
    "00",
)


@dataclass(frozen=True)
class StackSlot:
    """Position of one tile inside a stack. The height is its index in the stack."""

    x_half_step: bool = False
    y_half_step: bool = False


Stack = list[Optional[StackSlot]]


def trim_stack(stack: Stack) -> Stack:
    """Drop empty levels at the top. A stack of only empty levels becomes []"""
    trimmed = list(stack)
    while trimmed and trimmed[-1] is None:
        trimmed.pop()
    return trimmed


@dataclass
class StackedLayout:
    width: int
    height: int
    cells: list[Stack]

    @classmethod
    def empty(cls, width: int, height: int) -> Self:
        check_dimensions(width, height)
        return cls(width, height, [[] for _ in range(width * height)])

    @property
    def num_tiles(self) -> int:
        return sum(slot is not None for stack in self.cells for slot in stack)

    @property
    def max_depth(self) -> int:
        return max((len(trim_stack(stack)) for stack in self.cells), default=0)

    def stack(self, column: int, row: int) -> Stack:
        return self.cells[row * self.width + column]

    def add_row(
        self, row: int, columns: range, slot: StackSlot = StackSlot()
    ) -> None:
        """Put one more tile on top of every stack in a run of columns."""
        for column in columns:
            self.stack(column, row).append(slot)

    # --- CODEC ---
    def to_code(self) -> str:
        check_dimensions(self.width, self.height)
        if len(self.cells) != self.width * self.height:
            raise InvalidDimensionsError(
                f"{len(self.cells)} cells do not fit a {self.width}x{self.height} grid"
            )

        segments: list[str] = []
        skipped = 0
        for stack in self.cells:
            stack = trim_stack(stack)
            if not stack:
                skipped += 1
                continue
            segments.append(to_base32(self._segment(stack, skipped), width=SEGMENT_DIGITS))
            skipped = 0

        payload = compress_literals("".join(segments), TRADITIONAL_LITERALS)
        payload = compress_runs(payload)
        return LayoutHeader(GameVariant.TRADITIONAL, self.width, self.height, payload).to_code()

    @staticmethod
    def _segment(stack: Stack, skipped: int) -> int:
        if len(stack) > MAX_STACK_DEPTH:
            raise InvalidDimensionsError(
                f"Stacks can be at most {MAX_STACK_DEPTH} tiles high, got {len(stack)}"
            )
        occupancy = x_half_steps = y_half_steps = 0
        for level, slot in enumerate(stack):
            if slot is None:
                continue
            occupancy |= 1 << level
            if slot.x_half_step:
                x_half_steps |= 1 << level
            if slot.y_half_step:
                y_half_steps |= 1 << level
        return (
            min(skipped, MAX_SKIPPED_CELLS)
            | occupancy << OCCUPANCY_SHIFT
            | x_half_steps << X_HALF_STEP_SHIFT
            | y_half_steps << Y_HALF_STEP_SHIFT
        )

    @classmethod
    def from_code(cls, code: str) -> Self:
        header = LayoutHeader.from_code(code, GameVariant.TRADITIONAL)
        num_cells = header.width * header.height
        max_length = num_cells * SEGMENT_DIGITS

        payload = expand_runs(header.payload, max_length)
        payload = expand_literals(payload, TRADITIONAL_LITERALS)
        if len(payload) > max_length:
            raise InvalidFormatError(f"Layout code {code!r} overflows its grid")
        if payload and (len(payload) % SEGMENT_DIGITS != 0 or not is_base32(payload)):
            raise InvalidFormatError(f"Payload of {code!r} is not a list of segments")

        cells: list[Stack] = []
        for start in range(0, len(payload), SEGMENT_DIGITS):
            segment = from_base32(payload[start : start + SEGMENT_DIGITS])
            if segment >> SEGMENT_BITS:
                raise InvalidFormatError(f"Segment {start // SEGMENT_DIGITS} of {code!r} is too large")

            skipped = segment & MAX_SKIPPED_CELLS
            if len(cells) + skipped + 1 > num_cells:
                raise InvalidFormatError(f"Layout code {code!r} overflows its grid")
            cells.extend([] for _ in range(skipped))
            cells.append(cls._stack(segment))

        cells.extend([] for _ in range(num_cells - len(cells)))
        layout = cls(header.width, header.height, cells)
        logger.debug("Decoded traditional layout %s with %d tiles", code, layout.num_tiles)
        return layout

    @staticmethod
    def _stack(segment: int) -> Stack:
        occupancy = (segment >> OCCUPANCY_SHIFT) & LEVEL_MASK
        x_half_steps = (segment >> X_HALF_STEP_SHIFT) & LEVEL_MASK
        y_half_steps = (segment >> Y_HALF_STEP_SHIFT) & LEVEL_MASK
        return [
            StackSlot(bool(x_half_steps >> level & 1), bool(y_half_steps >> level & 1))
            if occupancy >> level & 1
            else None
            for level in range(occupancy.bit_length())
        ]


# --- BUILT-IN LAYOUTS ---
TURTLE_WIDTH, TURTLE_HEIGHT = 15, 8

# (row, first column, last column + 1, slot), stacked in the listed order
TURTLE_RUNS: tuple[tuple[int, int, int, StackSlot], ...] = (
    (0, 1, 13, StackSlot()),
    (1, 3, 11, StackSlot()),
    (1, 4, 10, StackSlot()),
    (2, 2, 12, StackSlot()),
    (2, 4, 10, StackSlot()),
    (2, 5, 9, StackSlot()),
    (3, 0, 1, StackSlot(y_half_step=True)),
    (3, 1, 13, StackSlot()),
    (3, 13, 15, StackSlot(y_half_step=True)),
    (3, 4, 10, StackSlot()),
    (3, 5, 9, StackSlot()),
    (3, 6, 8, StackSlot()),
    (3, 6, 7, StackSlot(x_half_step=True, y_half_step=True)),
    (4, 1, 13, StackSlot()),
    (4, 4, 10, StackSlot()),
    (4, 5, 9, StackSlot()),
    (4, 6, 8, StackSlot()),
    (5, 2, 12, StackSlot()),
    (5, 4, 10, StackSlot()),
    (5, 5, 9, StackSlot()),
    (6, 3, 11, StackSlot()),
    (6, 4, 10, StackSlot()),
    (7, 1, 13, StackSlot()),
)


def turtle_layout() -> StackedLayout:
    """The classic 144 tile "turtle", the default traditional board."""
    layout = StackedLayout.empty(TURTLE_WIDTH, TURTLE_HEIGHT)
    for row, start, stop, slot in TURTLE_RUNS:
        layout.add_row(row, range(start, stop), slot)
    return layout
