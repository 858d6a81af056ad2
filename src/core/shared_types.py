"""
Type definitions used across layers
"""

from enum import StrEnum


class GameVariant(StrEnum):
    """The value doubles as the 3 character identifier at the start of a layout code."""

    TWO_CORNER = "2CO"
    TRADITIONAL = "MJS"


VARIANT_NAMES: dict[GameVariant, str] = {
    GameVariant.TWO_CORNER: "Two-Corner Mahjong Tile Solitaire",
    GameVariant.TRADITIONAL: "Traditional Mahjong Tile Solitaire",
}


class TileDistribution(StrEnum):
    SINGLE_PAIRS = "single pairs"
    PRIORITIZE_BOTH_PAIRS = "prioritize both pairs"
    ALWAYS_BOTH_PAIRS = "always both pairs"
    RANDOM_PER_SET = "random per set"
    RANDOM = "random"


class RoundStatus(StrEnum):
    IN_PROGRESS = "in progress"
    WON = "won"
    LOST = "lost"
