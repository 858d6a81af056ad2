"""
Machinery shared by both layout codecs.
----

A layout code reads
    <variant id (3)><version (2)><width (1)><height (1)><checksum (2)><payload>

ex) the default two-corner board is 2CO01h8lgVVVVVVVV:
* "2CO" is the two-corner variant, "01" the format version
* "h" and "8" are the width (17) and height (8) in base 32
* "lg" is the checksum of the compressed payload
* "VVVVVVVV" is the compressed payload: 8 identical rows

Everything after the version is written in base 32 and then "sanitized": vowels are swapped for
characters base 32 never produces, so a shared code can never spell out a word.
"""

import logging
from dataclasses import dataclass
from string import ascii_uppercase
from typing import Optional, Self

from src.core.exceptions import (
    ChecksumMismatchError,
    InvalidDimensionsError,
    InvalidFormatError,
)
from src.core.shared_types import GameVariant

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
MAX_WIDTH = 20
MAX_HEIGHT = 12

BASE32_DIGITS = "0123456789abcdefghijklmnopqrstuv"
CHECKSUM_MODULUS = 1024

# --- SANITIZATION ---
# NOTE: lowercase first on the way in, uppercase first on the way out. "u" is not a vowel, but its
# replacement frees up "U" for the same treatment as the other uppercase vowels.
LOWERCASE_SUBSTITUTES: dict[str, str] = {"a": "w", "e": "x", "i": "y", "o": "z"}
UPPERCASE_SUBSTITUTES: dict[str, str] = {"u": "B", "0": "C", "1": "D", "3": "F"}

_SANITIZE = str.maketrans(LOWERCASE_SUBSTITUTES)
_SANITIZE_DIGITS = str.maketrans(UPPERCASE_SUBSTITUTES)
_UNSANITIZE_DIGITS = str.maketrans({v: k for k, v in UPPERCASE_SUBSTITUTES.items()})
_UNSANITIZE = str.maketrans({v: k for k, v in LOWERCASE_SUBSTITUTES.items()})

# --- RUN-LENGTH COMPRESSION ---
REPEAT_MARKER = "-"
REPEAT_WINDOWS: tuple[int, ...] = (1, 2, 3, 4)
MIN_REPEATS = 2
MAX_REPEATS = 9
MAX_EXPANSION_PASSES = 3


def to_base32(value: int, width: int = 0) -> str:
    """Render a non-negative integer in base 32, left-padded with zeros to `width` digits."""
    if value < 0:
        raise ValueError(f"Cannot render negative value {value} in base 32")
    digits: list[str] = []
    while True:
        value, remainder = divmod(value, 32)
        digits.append(BASE32_DIGITS[remainder])
        if value == 0:
            break
    return "".join(reversed(digits)).rjust(width, "0")


def is_base32(text: str) -> bool:
    return bool(text) and all(character in BASE32_DIGITS for character in text)


def from_base32(text: str) -> int:
    """Strict counterpart of to_base32: lowercase digits only."""
    if not is_base32(text):
        raise InvalidFormatError(f"Not a base 32 number: {text!r}")
    return int(text, 32)


def checksum(payload: str) -> str:
    """Sum of the character codes, modulo 1024, always 2 digits."""
    total = sum(ord(character) for character in payload)
    return to_base32(total % CHECKSUM_MODULUS, width=2)


def sanitize(text: str) -> str:
    return text.translate(_SANITIZE).translate(_SANITIZE_DIGITS)


def unsanitize(text: str) -> str:
    return text.translate(_UNSANITIZE_DIGITS).translate(_UNSANITIZE)


# --- LITERAL SUBSTITUTION ---
LiteralTable = tuple[Optional[str], ...]


def substitution_letter(index: int) -> str:
    """Row i of a literal table is written as the i-th letter after F."""
    return ascii_uppercase[ascii_uppercase.index("G") + index]


def compress_literals(payload: str, table: LiteralTable) -> str:
    """Replace common substrings top to bottom; the first (longest) pattern wins."""
    for index, pattern in enumerate(table):
        if pattern is not None:
            payload = payload.replace(pattern, substitution_letter(index))
    return payload


def expand_literals(payload: str, table: LiteralTable) -> str:
    for index, pattern in enumerate(table):
        if pattern is not None:
            payload = payload.replace(substitution_letter(index), pattern)
    return payload


# --- RUN-LENGTH ---
def _repeat_header(window_index: int, repeats: int) -> str:
    code = window_index * (MAX_REPEATS - MIN_REPEATS + 1) + (repeats - MIN_REPEATS)
    return REPEAT_MARKER + BASE32_DIGITS[code]


def _count_repeats(payload: str, start: int, window: int) -> int:
    pattern = payload[start : start + window]
    if len(pattern) < window:
        return 0
    repeats = 1
    position = start + window
    while repeats < MAX_REPEATS and payload[position : position + window] == pattern:
        repeats += 1
        position += window
    return repeats


def compress_runs(payload: str) -> str:
    """
    Single greedy pass, left to right.
    At every position take the (window, repeats) combination that saves the most characters.
    The output never contains nested headers because the pattern copies are taken from the input.
    """
    pieces: list[str] = []
    position = 0
    while position < len(payload):
        best_saving = 0
        best: Optional[tuple[int, int]] = None
        for window_index, window in enumerate(REPEAT_WINDOWS):
            repeats = _count_repeats(payload, position, window)
            if repeats < MIN_REPEATS:
                continue
            saving = window * repeats - (len(REPEAT_MARKER) + 1 + window)
            if saving > best_saving:
                best_saving = saving
                best = (window_index, repeats)

        if best is None:
            pieces.append(payload[position])
            position += 1
            continue

        window_index, repeats = best
        window = REPEAT_WINDOWS[window_index]
        pieces.append(_repeat_header(window_index, repeats))
        pieces.append(payload[position : position + window])
        position += window * repeats
    return "".join(pieces)


def _expand_once(payload: str, max_length: int) -> str:
    pieces: list[str] = []
    length = 0
    position = 0
    while position < len(payload):
        character = payload[position]
        if character != REPEAT_MARKER:
            pieces.append(character)
            length += 1
            position += 1
        else:
            code_char = payload[position + 1 : position + 2]
            if not code_char or code_char not in BASE32_DIGITS:
                raise InvalidFormatError("Malformed repeat header in layout code")
            window_index, offset = divmod(
                BASE32_DIGITS.index(code_char), MAX_REPEATS - MIN_REPEATS + 1
            )
            window = REPEAT_WINDOWS[window_index]
            pattern = payload[position + 2 : position + 2 + window]
            if len(pattern) < window:
                raise InvalidFormatError("Truncated repeat pattern in layout code")
            repeats = offset + MIN_REPEATS
            pieces.append(pattern * repeats)
            length += window * repeats
            position += 2 + window

        if length > max_length:
            raise InvalidFormatError("Layout code expands beyond the declared grid")
    return "".join(pieces)


def expand_runs(payload: str, max_length: int) -> str:
    """Reverse compress_runs. Nested headers get a bounded number of passes, then fail closed."""
    for _ in range(MAX_EXPANSION_PASSES):
        if REPEAT_MARKER not in payload:
            return payload
        payload = _expand_once(payload, max_length)
    if REPEAT_MARKER in payload:
        raise InvalidFormatError(
            f"Repeat headers still unresolved after {MAX_EXPANSION_PASSES} passes"
        )
    return payload


# --- HEADER ---
def check_dimensions(width: int, height: int) -> None:
    numeric = all(
        isinstance(value, int) and not isinstance(value, bool) for value in (width, height)
    )
    if not numeric:
        raise InvalidDimensionsError(f"Dimensions must be numbers: {width!r}x{height!r}")
    if not (1 <= width <= MAX_WIDTH and 1 <= height <= MAX_HEIGHT):
        raise InvalidDimensionsError(
            f"Board of {width}x{height} is outside of 1x1 - {MAX_WIDTH}x{MAX_HEIGHT}"
        )


@dataclass
class LayoutHeader:
    """The part of a layout code that does not depend on the variant."""

    variant: GameVariant
    width: int
    height: int
    payload: str

    def to_code(self) -> str:
        """Assemble, checksum and sanitize a code around an already compressed payload."""
        check_dimensions(self.width, self.height)
        body = (
            to_base32(self.width)
            + to_base32(self.height)
            + checksum(self.payload)
            + self.payload
        )
        return f"{self.variant.value}{to_base32(FORMAT_VERSION, width=2)}{sanitize(body)}"

    @classmethod
    def from_code(cls, code: str, variant: GameVariant) -> Self:
        """Validate id, version, dimensions and checksum. The payload stays compressed."""
        identifier, version, body = code[:3], code[3:5], code[5:]
        if identifier != variant.value:
            raise InvalidFormatError(
                f"Layout code {code!r} is not a {variant.name} code"
            )
        if not is_base32(version) or from_base32(version) != FORMAT_VERSION:
            raise InvalidFormatError(f"Unsupported layout code version: {version!r}")

        body = unsanitize(body)
        # an empty payload is left to the variant: a layout without tiles has one
        if len(body) < 4:
            raise InvalidFormatError(f"Layout code {code!r} is too short")

        width_char, height_char, expected, payload = body[0], body[1], body[2:4], body[4:]
        if not (is_base32(width_char) and is_base32(height_char)):
            raise InvalidDimensionsError(
                f"Cannot read dimensions from {width_char!r}x{height_char!r}"
            )
        width, height = from_base32(width_char), from_base32(height_char)
        check_dimensions(width, height)

        if checksum(payload) != expected:
            raise ChecksumMismatchError(
                f"Checksum {expected!r} does not match payload of layout code {code!r}"
            )
        logger.debug("Parsed %s header: %dx%d", variant.name, width, height)
        return cls(variant, width, height, payload)
