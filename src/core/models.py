"""
Boundary layer data model(s).

The Service hands these to the domain layer and gets them back, so the API layer never needs to
know how a FlatBoard or StackedBoard is laid out in memory.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make BoardModel easier to read
TileId = int
Design = Optional[int]


@dataclass
class BoardModel:
    """Transport-safe representation of a board used between API, Service, and domain layers.

    The layout code already describes where every tile sits, so only the designs (indexed by
    tile id) have to travel alongside it.
    """

    variant: str
    width: int
    height: int
    layout_code: str
    seed: int
    designs: list[Design] = field(default_factory=list)
