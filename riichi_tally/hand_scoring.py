from __future__ import annotations

import logging
from typing import Sequence

from riichi_tally.decomposition import (
    Decomposition,
    SpecialShape,
    decompose,
    detect_special_shape,
    is_seven_pairs,
)
from riichi_tally.exceptions import HandEvaluationError, InvalidHandStructureError, NoYakuError
from riichi_tally.fu import SEVEN_PAIRS_FU, calculate_fu
from riichi_tally.points import calculate_points, point_label
from riichi_tally.schemas import ContextInput, EvaluationError, EvaluationResult, HandInput
from riichi_tally.tiles import Tile, wind_tile
from riichi_tally.validators import (
    resolve_tiles,
    resolve_winning_tile,
    validate_context,
    validate_tile_counts,
)
from riichi_tally.yaku import YAKUMAN_NAMES, WinFlags, classify

logger = logging.getLogger(__name__)

HAND_SIZES = (13, 14)


def find_hand_shape(hand: Sequence[Tile]) -> Decomposition | SpecialShape:
    """Special shapes first, then seven pairs, then the first standard partition."""
    special = detect_special_shape(hand)
    if special is not None:
        return special
    if is_seven_pairs(hand):
        return SpecialShape.seven_pairs

    decompositions = decompose(hand)
    if not decompositions:
        raise InvalidHandStructureError("Invalid winning hand structure (no 4-meld-1-pair).")
    if len(decompositions) > 1:
        logger.debug("%d decompositions found, scoring the first", len(decompositions))
    return decompositions[0]


def _flags(context: ContextInput) -> WinFlags:
    return WinFlags(
        is_tsumo=context.is_tsumo,
        is_riichi=context.is_riichi,
        is_double_riichi=context.is_double_riichi,
        is_first_turn_win=context.is_first_turn_win,
        is_first_turn_for_player=context.is_first_turn_for_player,
        remaining_tiles=context.remaining_tiles,
        is_closed=context.is_closed,
        is_dealer=context.is_dealer,
    )


def score_hand_shape(hand: HandInput, context: ContextInput) -> EvaluationResult:
    """Hand + context -> score. Raises ``HandEvaluationError`` subclasses."""
    tiles = resolve_tiles(hand.tiles, "hand tile")
    winning_tile = resolve_winning_tile(hand.winning_tile)
    dora_indicators = resolve_tiles(context.dora_indicators, "dora indicator")
    ura_dora_indicators = resolve_tiles(context.ura_dora_indicators, "ura dora indicator")

    validate_context(context, tiles)
    validate_tile_counts(tiles)
    if len(tiles) not in HAND_SIZES:
        raise InvalidHandStructureError(f"A winning hand needs 14 tiles, got {len(tiles)}.")

    shape = find_hand_shape(tiles)
    prevalent_wind = wind_tile(context.prevalent_wind)
    seat_wind = wind_tile(context.seat_wind)

    yaku = classify(
        tiles,
        shape,
        dora_indicators,
        ura_dora_indicators,
        prevalent_wind,
        seat_wind,
        winning_tile,
        _flags(context),
    )
    if not yaku:
        raise NoYakuError("No yaku: dora-only hands cannot win.")

    total_han = sum(yaku.values())
    if YAKUMAN_NAMES.intersection(yaku):
        fu = 0
    elif shape is SpecialShape.seven_pairs:
        fu = SEVEN_PAIRS_FU
    else:
        fu = calculate_fu(
            shape,
            winning_tile,
            prevalent_wind,
            seat_wind,
            is_tsumo=context.is_tsumo,
            is_pinfu="Pinfu" in yaku,
            is_closed=context.is_closed,
        )

    return EvaluationResult(
        han_by_name=yaku,
        total_fu=fu,
        total_han=total_han,
        total_points=calculate_points(fu, total_han, context.is_dealer),
        point_label=point_label(total_han),
    )


def evaluate_hand(hand: HandInput, context: ContextInput) -> EvaluationResult:
    """Public entry point: every rejection comes back as ``result.error``."""
    try:
        return score_hand_shape(hand, context)
    except HandEvaluationError as exc:
        logger.info("Hand rejected (%s): %s", exc.kind, exc)
        return EvaluationResult(error=EvaluationError(kind=exc.kind, message=str(exc)))
