from __future__ import annotations

from riichi_tally.decomposition import Decomposition
from riichi_tally.tiles import Tile, is_dragon, is_terminal_or_honor

BASE_FU = 20
CLOSED_RON_FU = 10
SEVEN_PAIRS_FU = 25


def _pung_fu(tile: Tile, is_closed: bool) -> int:
    if is_terminal_or_honor(tile):
        return 8 if is_closed else 4
    return 4 if is_closed else 2


def calculate_fu(
    decomposition: Decomposition,
    winning_tile: Tile,
    prevalent_wind: Tile,
    seat_wind: Tile,
    is_tsumo: bool,
    is_pinfu: bool,
    is_closed: bool,
) -> int:
    if is_pinfu:
        return 20 if is_tsumo else 30

    fu = BASE_FU
    if is_closed and not is_tsumo:
        fu += CLOSED_RON_FU

    for meld in decomposition.pungs:
        fu += _pung_fu(meld.tile, is_closed)

    pair = decomposition.pair
    if is_dragon(pair) or pair.kind in {prevalent_wind.kind, seat_wind.kind}:
        fu += 2
    # tanki
    if pair.kind == winning_tile.kind:
        fu += 2

    return ((fu + 9) // 10) * 10
