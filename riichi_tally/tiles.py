"""Static tile catalog.

Tiles are interned by id: every lookup returns the same ``Tile`` object for
the same id, and equality, hashing and ordering are defined on the id.
Red fives are distinct catalog entries that share the ``kind`` of their
plain five, so shape detection works on kinds while dora counting can
still tell them apart.
"""

from __future__ import annotations

from enum import Enum
from functools import total_ordering
from types import MappingProxyType

from riichi_tally.schemas import Wind


class Suit(str, Enum):
    man = "man"
    pin = "pin"
    sou = "sou"
    honor = "honor"


NUMERAL_SUITS = (Suit.man, Suit.pin, Suit.sou)
WIND_VALUES = ("east", "south", "west", "north")
DRAGON_VALUES = ("white", "green", "red")
HONOR_VALUES = WIND_VALUES + DRAGON_VALUES

_SUIT_GLYPHS = {Suit.man: "万", Suit.pin: "筒", Suit.sou: "索"}
_HONOR_GLYPHS = {
    "east": "東",
    "south": "南",
    "west": "西",
    "north": "北",
    "white": "白",
    "green": "發",
    "red": "中",
}


@total_ordering
class Tile:
    __slots__ = ("id", "suit", "value", "display", "is_red_five")

    def __init__(self, id: str, suit: Suit, value: int | str, display: str, is_red_five: bool = False) -> None:
        self.id = id
        self.suit = suit
        self.value = value
        self.display = display
        self.is_red_five = is_red_five

    @property
    def kind(self) -> str:
        """Id of the plain tile this tile counts as when forming shapes."""
        if self.is_red_five:
            return f"{self.suit.value}-{self.value}"
        return self.id

    @property
    def kind_index(self) -> int:
        return KIND_INDEX[self.kind]

    @property
    def rank(self) -> int | None:
        return self.value if isinstance(self.value, int) else None

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.kind_index, int(self.is_red_five))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: Tile) -> bool:
        return self.sort_key < other.sort_key

    def __repr__(self) -> str:
        return f"Tile({self.id!r})"

    def __str__(self) -> str:
        if self.is_red_five:
            return f"Red {self.display}"
        return self.display


def _build_catalog() -> tuple[dict[str, Tile], list[str]]:
    tiles: dict[str, Tile] = {}
    kinds: list[str] = []
    for suit in NUMERAL_SUITS:
        for rank in range(1, 10):
            tile = Tile(f"{suit.value}-{rank}", suit, rank, f"{rank}{_SUIT_GLYPHS[suit]}")
            tiles[tile.id] = tile
            kinds.append(tile.id)
    for value in HONOR_VALUES:
        tile = Tile(f"honor-{value}", Suit.honor, value, _HONOR_GLYPHS[value])
        tiles[tile.id] = tile
        kinds.append(tile.id)
    for suit in NUMERAL_SUITS:
        tile = Tile(f"{suit.value}-5-dora", suit, 5, f"5{_SUIT_GLYPHS[suit]}", is_red_five=True)
        tiles[tile.id] = tile
    return tiles, kinds


_tiles, _kinds = _build_catalog()

TILES = MappingProxyType(_tiles)
KIND_IDS: tuple[str, ...] = tuple(_kinds)
KIND_INDEX = MappingProxyType({kind: i for i, kind in enumerate(KIND_IDS)})
NUM_KINDS = len(KIND_IDS)

TERMINAL_IDS = frozenset(f"{suit.value}-{rank}" for suit in NUMERAL_SUITS for rank in (1, 9))
HONOR_IDS = frozenset(f"honor-{value}" for value in HONOR_VALUES)
WIND_IDS = frozenset(f"honor-{value}" for value in WIND_VALUES)
DRAGON_IDS = frozenset(f"honor-{value}" for value in DRAGON_VALUES)
TERMINAL_OR_HONOR_IDS = TERMINAL_IDS | HONOR_IDS


def get_tile(tile_id: str) -> Tile:
    """Catalog lookup. Unknown ids raise ``KeyError``."""
    return TILES[tile_id]


def find_tile(tile_id: str) -> Tile | None:
    return TILES.get(tile_id)


def kind_tile(tile: Tile) -> Tile:
    return TILES[tile.kind]


def wind_tile(wind: Wind) -> Tile:
    return TILES[f"honor-{wind.value}"]


def is_honor(tile: Tile) -> bool:
    return tile.kind in HONOR_IDS


def is_terminal(tile: Tile) -> bool:
    return tile.kind in TERMINAL_IDS


def is_simple(tile: Tile) -> bool:
    return not (is_honor(tile) or is_terminal(tile))


def is_terminal_or_honor(tile: Tile) -> bool:
    return tile.kind in TERMINAL_OR_HONOR_IDS


def is_wind(tile: Tile) -> bool:
    return tile.kind in WIND_IDS


def is_dragon(tile: Tile) -> bool:
    return tile.kind in DRAGON_IDS


def dora_successor(indicator: Tile) -> Tile:
    """Tile made dora by ``indicator``.

    Numerals wrap 9 -> 1 inside their suit, winds cycle E-S-W-N and dragons
    cycle white-green-red. A red five indicates the plain six.
    """
    if indicator.id not in TILES:
        raise KeyError(indicator.id)
    if indicator.suit != Suit.honor:
        rank = 1 if indicator.value == 9 else indicator.value + 1
        return TILES[f"{indicator.suit.value}-{rank}"]
    order = WIND_VALUES if indicator.value in WIND_VALUES else DRAGON_VALUES
    nxt = order[(order.index(indicator.value) + 1) % len(order)]
    return TILES[f"honor-{nxt}"]
