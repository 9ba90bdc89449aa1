from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from riichi_tally.exceptions import InvalidCombinationError
from riichi_tally.schemas import ContextInput
from riichi_tally.tiles import Tile, find_tile, is_terminal_or_honor

logger = logging.getLogger(__name__)

MAX_COPIES = 4


def resolve_tiles(tile_ids: Iterable[str], label: str = "tile") -> list[Tile]:
    """Catalog lookup that skips unknown ids with a warning."""
    tiles: list[Tile] = []
    for tile_id in tile_ids:
        tile = find_tile(tile_id)
        if tile is None:
            logger.warning("Unknown %s id skipped: %s", label, tile_id)
            continue
        tiles.append(tile)
    return tiles


def resolve_winning_tile(tile_id: str) -> Tile:
    tile = find_tile(tile_id)
    if tile is None:
        raise InvalidCombinationError(f"Unknown winning tile: {tile_id}")
    return tile


def validate_tile_counts(hand: Sequence[Tile]) -> None:
    counts = Counter(tile.kind for tile in hand)
    for kind, count in counts.items():
        if count > MAX_COPIES:
            raise InvalidCombinationError(f"Tile appears {count} times in hand: {kind}")


def validate_context(context: ContextInput, hand: Sequence[Tile]) -> None:
    if context.is_double_riichi and not context.is_riichi:
        raise InvalidCombinationError("Invalid combination: Double Riichi must be used with Riichi.")
    if context.is_double_riichi and not context.is_first_turn_for_player:
        raise InvalidCombinationError(
            "Invalid combination: Double Riichi must be on the first draw of the player."
        )
    if context.is_riichi and not context.is_closed:
        raise InvalidCombinationError("Invalid combination: Riichi can only be declared on a closed hand.")
    if context.is_first_turn_win and (context.is_riichi or context.is_double_riichi):
        raise InvalidCombinationError(
            "Invalid combination: First turn win (Tenhou/Chiihou) cannot be combined with Riichi."
        )
    if context.is_tsumo and not context.is_closed and not any(is_terminal_or_honor(t) for t in hand):
        raise InvalidCombinationError(
            "Invalid combination: Open Tsumo hands must have a scoring element that is not a simple tile."
        )
