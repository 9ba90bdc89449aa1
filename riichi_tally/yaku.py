from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from riichi_tally.decomposition import (
    SPECIAL_SHAPE_HAN,
    Decomposition,
    SpecialShape,
    has_four_wind_pungs,
)
from riichi_tally.tiles import Suit, Tile, dora_successor, is_dragon, is_honor, is_simple

BONUS_YAKU = frozenset({"Dora", "Ura Dora"})
YAKUMAN_NAMES = frozenset(
    {"Blessing of Heaven", "Blessing of Earth"}
    | {shape.value for shape in SpecialShape if shape != SpecialShape.seven_pairs}
)


@dataclass(frozen=True)
class WinFlags:
    is_tsumo: bool = True
    is_riichi: bool = False
    is_double_riichi: bool = False
    is_first_turn_win: bool = False
    is_first_turn_for_player: bool = False
    remaining_tiles: int = 70
    is_closed: bool = True
    is_dealer: bool = False


def _is_value_tile(tile: Tile, prevalent_wind: Tile, seat_wind: Tile) -> bool:
    return is_dragon(tile) or tile.kind == prevalent_wind.kind or tile.kind == seat_wind.kind


def is_pinfu(
    decomposition: Decomposition,
    winning_tile: Tile,
    prevalent_wind: Tile,
    seat_wind: Tile,
    is_closed: bool,
) -> bool:
    """All chows, plain pair, and the winning tile sits in the middle of a chow."""
    if not is_closed or len(decomposition.chows) != 4:
        return False
    if _is_value_tile(decomposition.pair, prevalent_wind, seat_wind):
        return False
    for chow in decomposition.chows:
        middle = sorted(chow.tiles)[1]
        if middle.kind == winning_tile.kind:
            return True
    return False


def count_dora(hand: Sequence[Tile], indicators: Sequence[Tile], count_red_fives: bool = True) -> int:
    targets = {dora_successor(indicator).kind for indicator in indicators}
    count = 0
    for tile in hand:
        if count_red_fives and tile.is_red_five:
            count += 1
        if tile.kind in targets:
            count += 1
    return count


def _yakuhai(decomposition: Decomposition, prevalent_wind: Tile, seat_wind: Tile) -> dict[str, int]:
    pungs = decomposition.pungs
    yaku: dict[str, int] = {}

    seat = sum(1 for m in pungs if m.tile.kind == seat_wind.kind)
    if seat:
        yaku[f"Yakuhai ({seat_wind.value})"] = seat
    if prevalent_wind.kind != seat_wind.kind:
        prevalent = sum(1 for m in pungs if m.tile.kind == prevalent_wind.kind)
        if prevalent:
            yaku[f"Yakuhai ({prevalent_wind.value})"] = prevalent
    dragons = sum(1 for m in pungs if is_dragon(m.tile))
    if dragons:
        yaku["Yakuhai (dragons)"] = dragons
    return yaku


def _has_iipeikou(decomposition: Decomposition) -> bool:
    chows = [tuple(t.kind for t in sorted(m.tiles)) for m in decomposition.chows]
    return len(set(chows)) < len(chows)


def classify(
    hand: Sequence[Tile],
    shape: Decomposition | SpecialShape,
    dora_indicators: Sequence[Tile],
    ura_dora_indicators: Sequence[Tile],
    prevalent_wind: Tile,
    seat_wind: Tile,
    winning_tile: Tile,
    flags: WinFlags,
) -> dict[str, int]:
    """Rule name -> han for one hand shape.

    First-turn wins and special shapes return a single entry. Otherwise
    every rule is checked independently; an empty dict means the hand has
    no yaku (dora alone never counts).
    """
    if flags.is_first_turn_win:
        return {"Blessing of Heaven" if flags.is_dealer else "Blessing of Earth": 13}

    if isinstance(shape, SpecialShape):
        return {shape.value: SPECIAL_SHAPE_HAN[shape]}

    decomposition = shape
    if has_four_wind_pungs(decomposition):
        return {SpecialShape.four_wind_pungs.value: SPECIAL_SHAPE_HAN[SpecialShape.four_wind_pungs]}

    yaku: dict[str, int] = {}

    if flags.is_double_riichi and flags.is_riichi and flags.is_closed and flags.is_first_turn_for_player:
        yaku["Double Riichi"] = 2
    elif flags.is_riichi and flags.is_closed:
        yaku["Riichi"] = 1

    if flags.is_tsumo and flags.is_closed:
        yaku["Menzen Tsumo"] = 1

    if is_pinfu(decomposition, winning_tile, prevalent_wind, seat_wind, flags.is_closed):
        yaku["Pinfu"] = 1

    if all(is_simple(tile) for tile in hand):
        yaku["All Simples"] = 1

    yaku.update(_yakuhai(decomposition, prevalent_wind, seat_wind))

    if flags.is_closed and _has_iipeikou(decomposition):
        yaku["Iipeikou"] = 1

    suits = {tile.suit for tile in hand if tile.suit != Suit.honor}
    if len(suits) == 1:
        if any(is_honor(tile) for tile in hand):
            yaku["Honitsu"] = 3 if flags.is_closed else 2
        else:
            yaku["Chinitsu"] = 6 if flags.is_closed else 5

    if flags.remaining_tiles == 0:
        yaku["Under the Sea" if flags.is_tsumo else "Under the River"] = 1

    dora = count_dora(hand, dora_indicators)
    if dora:
        yaku["Dora"] = dora
    ura_dora = count_dora(hand, ura_dora_indicators, count_red_fives=False)
    if ura_dora:
        yaku["Ura Dora"] = ura_dora

    if sum(han for name, han in yaku.items() if name not in BONUS_YAKU) == 0:
        return {}
    return yaku
