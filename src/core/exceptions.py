"""
Exceptions raised across layers.

Codec and generator internals raise these; the domain facade (src/solitaire/game.py) turns
layout/generation failures into result values before they reach the service layer.
"""


class SolitaireError(Exception):
    """Base class for everything the puzzle engine raises on purpose."""


# --- LAYOUT CODES ---
class LayoutCodeError(SolitaireError):
    pass


class InvalidDimensionsError(LayoutCodeError):
    """Width/height outside of the supported grid, or not a number at all."""


class InvalidFormatError(LayoutCodeError):
    """Wrong variant id, unsupported version, or a payload that cannot be decompressed."""


class ChecksumMismatchError(LayoutCodeError):
    pass


# --- GENERATION ---
class GenerationError(SolitaireError):
    pass


class NoBoardError(GenerationError):
    """Valid-looking input that still leaves fewer than 2 usable tiles."""


class UnreachablePairError(GenerationError):
    """A pre-solve candidate without any legal partner. Logged by the generator, never propagated."""


# --- PLAY ---
class TileNotFoundError(SolitaireError):
    pass


# --- REQUESTS ---
class InvalidRequestError(SolitaireError):
    pass
