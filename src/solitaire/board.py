"""Boards hold the tiles of a single round. Designs are the only thing that change during play."""

from dataclasses import dataclass
from typing import ClassVar, Optional, Self

from src.core.exceptions import InvalidFormatError, TileNotFoundError
from src.core.models import BoardModel
from src.core.shared_types import GameVariant
from src.solitaire.grid import Grid
from src.solitaire.stacked_layout import StackedLayout
from src.solitaire.tiles import Tile

EMPTY_CELL = "."


@dataclass
class FlatBoard:
    """
    Two-corner board.
    ----

    The playing field is surrounded by `border` empty cells on every side, so paths can run around
    the outside of the tiles. Tile ids are cell indices, row-major, border included:

        . . . .
        . 3 3 .      <- a 2x1 board with border 1: tiles 5 and 6 hold design 3
        . . . .
    """

    variant: ClassVar[GameVariant] = GameVariant.TWO_CORNER

    width: int
    height: int
    tiles: list[Tile]
    border: int = 1
    seed: int = 0
    layout_code: str = ""

    @classmethod
    def empty(cls, width: int, height: int, border: int = 1) -> Self:
        size = (width + 2 * border) * (height + 2 * border)
        return cls(width, height, [Tile(cell) for cell in range(size)], border)

    @classmethod
    def from_diagram(cls, diagram: str, border: int = 0) -> Self:
        """Build a board from rows of whitespace separated designs ('.' for an empty cell).

        The diagram describes the whole grid, so `border` only records how much of it is border.
        """
        rows = [line.split() for line in diagram.strip().splitlines()]
        if len({len(row) for row in rows}) != 1:
            raise InvalidFormatError("All rows of a board diagram must be equally wide")

        tiles = [
            Tile(cell, None if token == EMPTY_CELL else int(token))
            for cell, token in enumerate(token for row in rows for token in row)
        ]
        return cls(len(rows[0]) - 2 * border, len(rows) - 2 * border, tiles, border)

    def to_diagram(self) -> str:
        grid = self.grid
        lines = []
        for row in range(grid.rows):
            tokens = [
                EMPTY_CELL if tile.design is None else str(tile.design)
                for tile in self.tiles[row * grid.columns : (row + 1) * grid.columns]
            ]
            lines.append(" ".join(tokens))
        return "\n".join(lines)

    @property
    def grid(self) -> Grid:
        return Grid(self.width + 2 * self.border, self.height + 2 * self.border)

    def tile(self, tile_id: int) -> Tile:
        if not (0 <= tile_id < len(self.tiles)):
            raise TileNotFoundError(f"Tile {tile_id} is not on this board")
        return self.tiles[tile_id]

    def occupied_ids(self) -> list[int]:
        return [tile.id for tile in self.tiles if tile.design is not None]

    @property
    def num_tiles(self) -> int:
        return len(self.occupied_ids())

    def clear_pair(self, first: int, second: int) -> None:
        """Remove a matched pair from the board."""
        self.tile(first).design = None
        self.tile(second).design = None

    # --- MODEL CONVERSION ---
    def to_model(self) -> BoardModel:
        return BoardModel(
            variant=self.variant.value,
            width=self.width,
            height=self.height,
            layout_code=self.layout_code,
            seed=self.seed,
            designs=[tile.design for tile in self.tiles],
        )

    @classmethod
    def from_model(cls, model: BoardModel) -> Self:
        board = cls.empty(model.width, model.height)
        if len(model.designs) != len(board.tiles):
            raise InvalidFormatError(
                f"Expected {len(board.tiles)} designs for a {model.width}x{model.height} board, "
                f"got {len(model.designs)}"
            )
        for tile, design in zip(board.tiles, model.designs):
            tile.design = design
        board.seed = model.seed
        board.layout_code = model.layout_code
        return board


@dataclass
class StackedBoard:
    """
    Traditional board: a width x height grid of stacks.
    Tile ids run row-major over the cells, bottom to top within every stack.
    """

    variant: ClassVar[GameVariant] = GameVariant.TRADITIONAL

    width: int
    height: int
    stacks: list[list[Optional[Tile]]]
    seed: int = 0
    layout_code: str = ""

    @classmethod
    def from_layout(cls, layout: StackedLayout, seed: int = 0, layout_code: str = "") -> Self:
        """Every slot of the layout becomes a tile without a design."""
        stacks: list[list[Optional[Tile]]] = []
        next_id = 0
        for stack in layout.cells:
            tiles: list[Optional[Tile]] = []
            for slot in stack:
                if slot is None:
                    tiles.append(None)
                    continue
                tiles.append(Tile(next_id, None, slot.x_half_step, slot.y_half_step))
                next_id += 1
            stacks.append(tiles)
        return cls(layout.width, layout.height, stacks, seed, layout_code)

    @property
    def grid(self) -> Grid:
        return Grid(self.width, self.height)

    @property
    def tiles(self) -> list[Tile]:
        """All tile slots ordered by id (empty ones included)."""
        return [tile for stack in self.stacks for tile in stack if tile is not None]

    def positions(self) -> dict[int, tuple[int, int]]:
        """tile id -> (cell, level)"""
        return {
            tile.id: (cell, level)
            for cell, stack in enumerate(self.stacks)
            for level, tile in enumerate(stack)
            if tile is not None
        }

    def tile(self, tile_id: int) -> Tile:
        tiles = self.tiles
        if not (0 <= tile_id < len(tiles)):
            raise TileNotFoundError(f"Tile {tile_id} is not on this board")
        return tiles[tile_id]

    def occupied_ids(self) -> list[int]:
        return [tile.id for tile in self.tiles if tile.design is not None]

    @property
    def num_tiles(self) -> int:
        return len(self.occupied_ids())

    def clear_pair(self, first: int, second: int) -> None:
        self.tile(first).design = None
        self.tile(second).design = None

    # --- MODEL CONVERSION ---
    def to_model(self) -> BoardModel:
        return BoardModel(
            variant=self.variant.value,
            width=self.width,
            height=self.height,
            layout_code=self.layout_code,
            seed=self.seed,
            designs=[tile.design for tile in self.tiles],
        )

    @classmethod
    def from_model(cls, model: BoardModel) -> Self:
        """The layout code carries the shape, the model only carries the designs."""
        board = cls.from_layout(
            StackedLayout.from_code(model.layout_code), model.seed, model.layout_code
        )
        tiles = board.tiles
        if len(model.designs) != len(tiles):
            raise InvalidFormatError(
                f"Layout {model.layout_code!r} has {len(tiles)} tiles, got {len(model.designs)} designs"
            )
        for tile, design in zip(tiles, model.designs):
            tile.design = design
        return board


Board = FlatBoard | StackedBoard
