"""
Layout codes for the two-corner variant.

Every row is written as one "line word": a guard bit, then one bit per column (1 = tile), padded
with zeros to a whole number of base 32 digits. The guard bit keeps leading empty columns from
disappearing when the word is rendered as a number.
"""

import logging
from dataclasses import dataclass
from math import ceil
from typing import Optional, Self

from src.core.exceptions import InvalidFormatError
from src.core.shared_types import GameVariant
from src.solitaire.layout_code import (
    LayoutHeader,
    LiteralTable,
    check_dimensions,
    compress_literals,
    expand_literals,
    from_base32,
    is_base32,
    to_base32,
)

logger = logging.getLogger(__name__)

BITS_PER_DIGIT = 5

# Most common substrings of two-corner payloads, longest first. Row i is written as chr(ord("G") + i).
TWO_CORNER_LITERALS: LiteralTable = (
    "g0000g0000g0000g0000",
    "vvvvgvvvvgvvvvgvvvvg",
    None,
    "g0000g0000",
    "vvvvgvvvvg",
    "000080000080",
    "000000",
    "vvvvvv",
    None,
    "g0000",
    "001g",
    "0000",
    "vvvvg",
    "vvvv",
    None,
    "vvvs",
    "vvs",
    "vvv",
    "vu",
    "vv",
)


def digits_per_line(width: int) -> int:
    """Base 32 digits needed for the guard bit plus one bit per column."""
    return ceil((width + 1) / BITS_PER_DIGIT)


@dataclass
class FlatLayout:
    width: int
    height: int
    rows: list[list[bool]]

    @classmethod
    def rectangle(cls, width: int, height: int) -> Self:
        """Full rectangle. When both sides are odd the centre stays empty to keep the count even."""
        check_dimensions(width, height)
        rows = [[True] * width for _ in range(height)]
        if width % 2 == 1 and height % 2 == 1:
            rows[height // 2][width // 2] = False
        return cls(width, height, rows)

    @classmethod
    def from_mask(cls, width: int, height: int, mask: str) -> Self:
        """Row-major string of '0'/'1', one character per cell."""
        check_dimensions(width, height)
        if len(mask) != width * height or set(mask) - {"0", "1"}:
            raise InvalidFormatError(
                f"Mask must hold exactly {width * height} characters of '0' or '1'"
            )
        rows = [
            [character == "1" for character in mask[row * width : (row + 1) * width]]
            for row in range(height)
        ]
        return cls(width, height, rows)

    def to_mask(self) -> str:
        return "".join("1" if occupied else "0" for row in self.rows for occupied in row)

    @property
    def num_tiles(self) -> int:
        return sum(sum(row) for row in self.rows)

    def is_occupied(self, column: int, row: int) -> bool:
        return self.rows[row][column]

    # --- CODEC ---
    def to_code(self) -> str:
        check_dimensions(self.width, self.height)
        num_digits = digits_per_line(self.width)
        payload = "".join(self._line_word(row, num_digits) for row in self.rows)
        compressed = compress_literals(payload, TWO_CORNER_LITERALS)
        return LayoutHeader(GameVariant.TWO_CORNER, self.width, self.height, compressed).to_code()

    @staticmethod
    def _line_word(row: list[bool], num_digits: int) -> str:
        bits = "1" + "".join("1" if occupied else "0" for occupied in row)
        bits = bits.ljust(num_digits * BITS_PER_DIGIT, "0")
        return to_base32(int(bits, 2), width=num_digits)

    @classmethod
    def from_code(cls, code: str) -> Self:
        header = LayoutHeader.from_code(code, GameVariant.TWO_CORNER)
        width, height = header.width, header.height
        num_digits = digits_per_line(width)

        payload = expand_literals(header.payload, TWO_CORNER_LITERALS)
        if len(payload) != num_digits * height or not is_base32(payload):
            raise InvalidFormatError(
                f"Payload of {code!r} does not describe {height} rows of width {width}"
            )

        num_bits = num_digits * BITS_PER_DIGIT
        rows: list[list[bool]] = []
        for row in range(height):
            word = from_base32(payload[row * num_digits : (row + 1) * num_digits])
            if word >> (num_bits - 1) != 1:
                raise InvalidFormatError(f"Row {row} of {code!r} lost its guard bit")
            bits = format(word, "b")[1 : width + 1]
            rows.append([bit == "1" for bit in bits])

        logger.debug("Decoded two-corner layout %s with %d tiles", code, sum(map(sum, rows)))
        return cls(width, height, rows)


def encode_flat_layout(width: int, height: int, mask: Optional[str] = None) -> str:
    """Layout code of a (masked) rectangle."""
    if mask is None:
        return FlatLayout.rectangle(width, height).to_code()
    return FlatLayout.from_mask(width, height, mask).to_code()
