"""Orchestration of communication from API models to the puzzle engine (and the reverse direction)."""

import logging
from dataclasses import asdict
from typing import Optional

from src.api.models import (
    BoardPayload,
    BoardResponse,
    EncodeLayoutRequest,
    GenerateBoardRequest,
    HintRequest,
    HintResponse,
    LayoutResponse,
    MatchRequest,
    MatchResponse,
    SegmentPayload,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import InvalidFormatError
from src.core.models import BoardModel
from src.core.shared_types import VARIANT_NAMES, GameVariant
from src.solitaire import game
from src.solitaire.board import Board, FlatBoard
from src.solitaire.flat_layout import FlatLayout
from src.solitaire.stacked_layout import StackedLayout, StackSlot

logger = logging.getLogger(__name__)


class BoardService:
    """Orchestration of layers for a round of tile solitaire."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def generate_board(self, request: GenerateBoardRequest) -> BoardResponse:
        """
        New board for a round.
        ----
        The engine only reports that a layout is unusable; picking a replacement is done here: the
        configured default layout of the variant, pre-solved, with a fresh seed.
        """
        variant = request.variant or self._guess_variant(request.layout_code)
        distribution = request.tile_distribution or self.settings.default_distribution
        simple = (
            self.settings.simple_shuffle
            if request.simple_shuffle is None
            else request.simple_shuffle
        )
        wildcards = (
            self.settings.use_wildcards
            if request.use_wildcards is None
            else request.use_wildcards
        )

        result = game.generate(
            variant,
            layout_code=request.layout_code,
            width=request.width,
            height=request.height,
            seed=request.seed,
            distribution=distribution,
            simple_shuffle=simple,
            with_wildcards=wildcards,
        )
        if not isinstance(result, game.NoBoard):
            return BoardResponse(
                board=self._to_payload(result),
                variant_name=VARIANT_NAMES[variant],
                num_tiles=result.num_tiles,
            )

        fallback_code = self.settings.fallback_code(variant)
        logger.warning(
            "Falling back to %s after generation failed: %s", fallback_code, result.reason
        )
        fallback = game.generate(
            variant,
            layout_code=fallback_code,
            distribution=distribution,
            with_wildcards=wildcards,
        )
        if isinstance(fallback, game.NoBoard):
            # the configured fallback itself is broken; nothing sensible left to do
            raise fallback.reason
        return BoardResponse(
            board=self._to_payload(fallback),
            variant_name=VARIANT_NAMES[variant],
            num_tiles=fallback.num_tiles,
            fallback_used=True,
            error=str(result.reason),
        )

    def check_match(self, request: MatchRequest) -> MatchResponse:
        """Attempt to match two tiles. A valid pair is removed from the returned board."""
        board = self._from_payload(request.board)
        first, second = request.first_tile, request.second_tile

        # raise early for ids that are not on the board
        board.tile(first)
        board.tile(second)

        path = None
        if isinstance(board, FlatBoard):
            path = game.find_path(board, first, second)
            valid = path is not None
        else:
            valid = game.is_valid_match(board, first, second)

        if valid:
            board.clear_pair(first, second)
        logger.debug("Match %d-%d valid: %s", first, second, valid)

        return MatchResponse(
            valid=valid,
            path=(
                [
                    SegmentPayload(direction=segment.direction.value, cells=segment.cells)
                    for segment in path
                ]
                if path is not None
                else None
            ),
            board=self._to_payload(board),
            status=game.round_status(board),
        )

    def hint(self, request: HintRequest) -> HintResponse:
        """All pairs that can currently be matched, and whether the round is over."""
        board = self._from_payload(request.board)
        matches = game.find_all_matches(board)
        return HintResponse(matches=matches, status=game.round_status(board, matches))

    def encode_layout(self, request: EncodeLayoutRequest) -> LayoutResponse:
        """Layout code for a custom board shape (layout editor)."""
        if request.variant == GameVariant.TWO_CORNER:
            layout = (
                FlatLayout.rectangle(request.width, request.height)
                if request.mask is None
                else FlatLayout.from_mask(request.width, request.height, request.mask)
            )
        elif request.stacks is None:
            layout = game.RECTANGLE_LAYOUTS[request.variant](request.width, request.height)
        else:
            layout = StackedLayout(
                request.width,
                request.height,
                [
                    [
                        StackSlot(slot.x_half_step, slot.y_half_step)
                        if slot is not None
                        else None
                        for slot in stack
                    ]
                    for stack in request.stacks
                ],
            )

        return LayoutResponse(
            layout_code=game.encode_layout(layout), num_tiles=layout.num_tiles
        )

    # --- Helper methods ---
    def _guess_variant(self, layout_code: Optional[str]) -> GameVariant:
        """Variant named by the layout code, else the configured default."""
        if layout_code:
            try:
                return game.variant_of_code(layout_code)
            except InvalidFormatError:
                logger.debug("No variant prefix in %r", layout_code)
        return self.settings.default_variant

    @staticmethod
    def _to_payload(board: Board) -> BoardPayload:
        return BoardPayload(**asdict(board.to_model()))

    @staticmethod
    def _from_payload(payload: BoardPayload) -> Board:
        return game.board_from_model(BoardModel(**payload.model_dump()))
