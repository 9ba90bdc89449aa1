import pytest

from riichi_tally.schemas import Wind
from riichi_tally.tiles import (
    KIND_IDS,
    TILES,
    dora_successor,
    find_tile,
    get_tile,
    is_dragon,
    is_honor,
    is_simple,
    is_terminal,
    is_terminal_or_honor,
    is_wind,
    kind_tile,
    wind_tile,
)


def test_catalog_has_thirty_seven_entries_and_thirty_four_kinds():
    assert len(TILES) == 37
    assert len(KIND_IDS) == 34
    assert KIND_IDS[0] == "man-1"
    assert KIND_IDS[-1] == "honor-red"


def test_lookup_returns_the_same_object():
    assert get_tile("pin-3") is get_tile("pin-3")
    assert find_tile("pin-3") is TILES["pin-3"]


def test_unknown_id():
    assert find_tile("pin-0") is None
    with pytest.raises(KeyError):
        get_tile("pin-0")


def test_red_five_counts_as_plain_five():
    red = get_tile("sou-5-dora")
    assert red.is_red_five
    assert red.kind == "sou-5"
    assert kind_tile(red) is get_tile("sou-5")
    assert red != get_tile("sou-5")
    assert str(red) == "Red 5索"


def test_ordering_is_by_kind_then_red_five():
    hand = [get_tile(i) for i in ["honor-east", "pin-5-dora", "man-9", "pin-5", "sou-1"]]
    assert [t.id for t in sorted(hand)] == ["man-9", "pin-5", "pin-5-dora", "sou-1", "honor-east"]


def test_categories():
    assert is_terminal(get_tile("man-1"))
    assert not is_terminal(get_tile("honor-east"))
    assert is_honor(get_tile("honor-green"))
    assert is_wind(get_tile("honor-north"))
    assert is_dragon(get_tile("honor-white"))
    assert not is_dragon(get_tile("honor-west"))
    assert is_simple(get_tile("pin-5-dora"))
    assert not is_simple(get_tile("sou-9"))
    assert is_terminal_or_honor(get_tile("sou-9"))


def test_wind_tile():
    assert wind_tile(Wind.west).id == "honor-west"


@pytest.mark.parametrize(
    ("indicator", "dora"),
    [
        ("man-1", "man-2"),
        ("sou-9", "sou-1"),
        ("pin-5-dora", "pin-6"),
        ("honor-north", "honor-east"),
        ("honor-east", "honor-south"),
        ("honor-red", "honor-white"),
        ("honor-white", "honor-green"),
    ],
)
def test_dora_successor(indicator, dora):
    assert dora_successor(get_tile(indicator)).id == dora


@pytest.mark.parametrize(("start", "cycle_length"), [("man-3", 9), ("sou-9", 9), ("honor-south", 4), ("honor-green", 3)])
def test_dora_successor_cycles_back_to_start(start, cycle_length):
    tile = get_tile(start)
    seen = [tile]
    for _ in range(cycle_length - 1):
        tile = dora_successor(tile)
        seen.append(tile)
    assert len(set(seen)) == cycle_length
    assert all(t.suit == seen[0].suit for t in seen)
    assert dora_successor(tile) == get_tile(start)
