from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Literal, Sequence

from riichi_tally.tiles import (
    KIND_IDS,
    NUM_KINDS,
    TERMINAL_OR_HONOR_IDS,
    TILES,
    Tile,
    is_honor,
    is_wind,
)

MeldKind = Literal["pung", "chow"]

# kind indices below this are numerals
_HONOR_START = 27


class SpecialShape(str, Enum):
    thirteen_orphans_wait = "Thirteen Orphans (13-sided wait)"
    thirteen_orphans = "Thirteen Orphans"
    all_honors = "All Honors"
    four_wind_pungs = "Four Pungs of Winds"
    seven_pairs = "Seven Pairs"


SPECIAL_SHAPE_HAN = {
    SpecialShape.thirteen_orphans_wait: 26,
    SpecialShape.thirteen_orphans: 13,
    SpecialShape.all_honors: 13,
    SpecialShape.four_wind_pungs: 26,
    SpecialShape.seven_pairs: 2,
}


@dataclass(frozen=True)
class Meld:
    kind: MeldKind
    tiles: tuple[Tile, Tile, Tile]

    @property
    def tile(self) -> Tile:
        return self.tiles[0]

    @property
    def is_pung(self) -> bool:
        return self.kind == "pung"

    @property
    def is_chow(self) -> bool:
        return self.kind == "chow"


@dataclass(frozen=True)
class Decomposition:
    melds: tuple[Meld, ...]
    pair: Tile

    @property
    def chows(self) -> list[Meld]:
        return [m for m in self.melds if m.is_chow]

    @property
    def pungs(self) -> list[Meld]:
        return [m for m in self.melds if m.is_pung]


def _kind_counts(hand: Sequence[Tile]) -> list[int]:
    counts = [0] * NUM_KINDS
    for tile in hand:
        counts[tile.kind_index] += 1
    return counts


@lru_cache(maxsize=20000)
def _find_melds(counts: tuple[int, ...]) -> tuple[tuple[Meld, ...], ...]:
    """Every meld list reachable from ``counts``, including partial ones.

    The lowest remaining tile is taken as a pung, as the head of a chow, or
    skipped. Skipped tiles leave the result short of melds, so callers keep
    only results of the length they need.
    """
    first = next((i for i, c in enumerate(counts) if c > 0), -1)
    if first == -1:
        return ((),)

    tile = TILES[KIND_IDS[first]]
    results: list[tuple[Meld, ...]] = []

    if counts[first] >= 3:
        work = list(counts)
        work[first] -= 3
        pung = Meld("pung", (tile, tile, tile))
        results.extend((pung,) + rest for rest in _find_melds(tuple(work)))

    if first < _HONOR_START and first % 9 <= 6 and counts[first + 1] > 0 and counts[first + 2] > 0:
        work = list(counts)
        work[first] -= 1
        work[first + 1] -= 1
        work[first + 2] -= 1
        chow = Meld("chow", (tile, TILES[KIND_IDS[first + 1]], TILES[KIND_IDS[first + 2]]))
        results.extend((chow,) + rest for rest in _find_melds(tuple(work)))

    work = list(counts)
    work[first] -= 1
    results.extend(_find_melds(tuple(work)))
    return tuple(results)


def decompose(hand: Sequence[Tile]) -> list[Decomposition]:
    """All four-melds-one-pair partitions of ``hand``.

    Pair candidates are tried in order of first appearance in the hand and
    meld lists in search order, so ``decompose(hand)[0]`` is stable for a
    given tile order.
    """
    counts = _kind_counts(hand)
    pair_order = list(dict.fromkeys(tile.kind_index for tile in hand))

    decompositions: list[Decomposition] = []
    for index in pair_order:
        if counts[index] < 2:
            continue
        work = counts[:]
        work[index] -= 2
        pair = TILES[KIND_IDS[index]]
        for melds in _find_melds(tuple(work)):
            if len(melds) == 4:
                decompositions.append(Decomposition(melds=melds, pair=pair))
    return decompositions


def is_seven_pairs(hand: Sequence[Tile]) -> bool:
    counts = Counter(tile.kind for tile in hand)
    return len(hand) == 14 and len(counts) == 7 and all(c == 2 for c in counts.values())


def detect_special_shape(hand: Sequence[Tile]) -> SpecialShape | None:
    """Shapes that win without a meld partition, in priority order."""
    counts = Counter(tile.kind for tile in hand)
    orphans = set(counts) == TERMINAL_OR_HONOR_IDS
    if len(hand) == 13 and orphans and all(c == 1 for c in counts.values()):
        return SpecialShape.thirteen_orphans_wait
    if len(hand) == 14 and orphans:
        return SpecialShape.thirteen_orphans
    if len(hand) == 14 and all(is_honor(tile) for tile in hand):
        return SpecialShape.all_honors
    return None


def has_four_wind_pungs(decomposition: Decomposition) -> bool:
    wind_pungs = [m for m in decomposition.melds if m.is_pung and is_wind(m.tile)]
    return len(wind_pungs) == 4
