"""
Tile designs.

Designs are small integers. The 34 regular designs (0x00 - 0x21) follow the order of the Unicode
mahjong block. The traditional ruleset adds two wildcard families: in an alphabet they show up as a
single family marker, and on a board every marker is replaced by one of the family's 4 faces.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.solitaire.rng import SeededRandom

NUM_REGULAR_DESIGNS = 0x22


class WildcardFamily(Enum):
    FLOWERS = 0x22
    SEASONS = 0x23


FAMILY_FACES: dict[WildcardFamily, tuple[int, ...]] = {
    WildcardFamily.FLOWERS: (0x22, 0x23, 0x24, 0x25),
    WildcardFamily.SEASONS: (0x26, 0x27, 0x28, 0x29),
}

FACE_TO_FAMILY: dict[int, WildcardFamily] = {
    face: family for family, faces in FAMILY_FACES.items() for face in faces
}


@dataclass
class Tile:
    """A single tile slot. `design is None` means the slot is empty."""

    id: int
    design: Optional[int] = None
    x_half_step: bool = False
    y_half_step: bool = False


def design_alphabet(with_wildcards: bool = False) -> list[int]:
    """All designs a board can draw from. Wildcard families appear as their marker value."""
    size = NUM_REGULAR_DESIGNS + (len(WildcardFamily) if with_wildcards else 0)
    return list(range(size))


def family_of(face: int) -> Optional[WildcardFamily]:
    """Family of a design already placed on a board."""
    return FACE_TO_FAMILY.get(face)


def designs_match(first: Optional[int], second: Optional[int]) -> bool:
    if first is None or second is None:
        return False
    if first == second:
        return True
    family = family_of(first)
    return family is not None and family == family_of(second)


class FaceRotation:
    """Hands out the faces of every wildcard family in turn, in a seeded order."""

    def __init__(self, rng: SeededRandom) -> None:
        self._faces: dict[int, list[int]] = {}
        for family, faces in FAMILY_FACES.items():
            shuffled = list(faces)
            rng.shuffle(shuffled)
            self._faces[family.value] = shuffled
        self._next: dict[int, int] = {marker: 0 for marker in self._faces}

    def place(self, design: int) -> int:
        """Translate an alphabet entry into the design that actually goes on the board."""
        if design not in self._faces:
            return design
        faces = self._faces[design]
        face = faces[self._next[design] % len(faces)]
        self._next[design] += 1
        return face
