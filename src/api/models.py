"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GameVariant, RoundStatus, TileDistribution

TileId = int
MAX_SEED = 0xFFFFFFFF
LAYOUT_CODE_EXTRA_CHARACTERS = {"-"}


# --- SHARED PAYLOADS ---
class BoardPayload(BaseModel):
    variant: GameVariant
    width: int
    height: int
    layout_code: str
    seed: int
    designs: list[Optional[int]]


class SegmentPayload(BaseModel):
    direction: str
    cells: list[TileId]


class StackSlotPayload(BaseModel):
    x_half_step: bool = False
    y_half_step: bool = False


# --- REQUEST MODELS ---
class GenerateBoardRequest(BaseModel):
    """Either a layout code or width + height. Unset options fall back to the engine settings."""

    variant: Optional[GameVariant] = None
    layout_code: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    seed: Optional[int] = None
    tile_distribution: Optional[TileDistribution] = None
    simple_shuffle: Optional[bool] = None
    use_wildcards: Optional[bool] = None

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not (0 <= value <= MAX_SEED):
            raise InvalidRequestError(f"Seed {value} is not an unsigned 32-bit integer.")
        return value

    @field_validator("layout_code")
    @classmethod
    def validate_layout_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        allowed = all(
            (character.isascii() and character.isalnum())
            or character in LAYOUT_CODE_EXTRA_CHARACTERS
            for character in value
        )
        if not value or not allowed:
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a layout code: only letters and digits are allowed."
            )
        return value


class MatchRequest(BaseModel):
    board: BoardPayload
    first_tile: TileId
    second_tile: TileId

    @field_validator(*["first_tile", "second_tile"])
    @classmethod
    def validate_tile_id(cls, value: TileId) -> TileId:
        if value < 0:
            raise InvalidRequestError(f"Tile ids cannot be negative, got {value}.")
        return value


class HintRequest(BaseModel):
    board: BoardPayload


class EncodeLayoutRequest(BaseModel):
    """Shape of a custom board: a '0'/'1' mask for two-corner, a list of stacks for traditional."""

    variant: GameVariant
    width: int
    height: int
    mask: Optional[str] = None
    stacks: Optional[list[list[Optional[StackSlotPayload]]]] = None

    @field_validator("mask")
    @classmethod
    def validate_mask(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if set(value) - {"0", "1"}:
            raise InvalidRequestError("A layout mask may only contain '0' and '1'.")
        return value


# --- RESPONSE MODELS ---
class BoardResponse(BaseModel):
    board: BoardPayload
    variant_name: str
    num_tiles: int
    fallback_used: bool = False
    error: Optional[str] = None


class MatchResponse(BaseModel):
    valid: bool
    path: Optional[list[SegmentPayload]]
    board: BoardPayload
    status: RoundStatus


class HintResponse(BaseModel):
    matches: list[tuple[TileId, TileId]]
    status: RoundStatus


class LayoutResponse(BaseModel):
    layout_code: str
    num_tiles: int
