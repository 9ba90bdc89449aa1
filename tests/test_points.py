import pytest

from riichi_tally.decomposition import decompose
from riichi_tally.fu import calculate_fu
from riichi_tally.points import calculate_points, point_label
from riichi_tally.tiles import get_tile


def tiles(*ids: str):
    return [get_tile(i) for i in ids]


EAST = get_tile("honor-east")
SOUTH = get_tile("honor-south")


@pytest.mark.parametrize(
    ("han", "is_dealer", "expected", "label"),
    [
        (13, False, 32000, "Yakuman"),
        (26, True, 48000, "Yakuman"),
        (11, False, 24000, "Sanbaiman"),
        (8, True, 24000, "Baiman"),
        (7, False, 12000, "Haneman"),
        (5, True, 12000, "Mangan"),
    ],
)
def test_limit_brackets(han, is_dealer, expected, label):
    assert calculate_points(30, han, is_dealer) == expected
    assert point_label(han) == label


def test_below_mangan_uses_base_formula_for_everyone():
    assert calculate_points(30, 2, False) == 1920
    assert calculate_points(30, 2, True) == 1920
    assert calculate_points(40, 4, False) == 10240
    assert point_label(4) is None


def test_zero_han_scores_nothing():
    assert calculate_points(30, 0, False) == 0


def test_closed_ron_honor_pung_with_tanki():
    hand = tiles(
        "man-1", "man-2", "man-3", "pin-4", "pin-5", "pin-6", "sou-7", "sou-8", "sou-9",
        "honor-east", "honor-east", "honor-east", "pin-2", "pin-2",
    )
    decomposition = decompose(hand)[0]
    winning = get_tile("pin-2")
    assert calculate_fu(decomposition, winning, EAST, SOUTH, False, False, True) == 40
    assert calculate_fu(decomposition, winning, EAST, SOUTH, True, False, True) == 30
    assert calculate_fu(decomposition, winning, EAST, SOUTH, False, False, False) == 30


def test_simple_pung_rounds_up():
    hand = tiles(
        "man-2", "man-2", "man-2", "pin-3", "pin-4", "pin-5", "sou-6", "sou-7", "sou-8",
        "man-6", "man-7", "man-8", "sou-2", "sou-2",
    )
    decomposition = decompose(hand)[0]
    assert calculate_fu(decomposition, get_tile("sou-7"), EAST, SOUTH, False, False, True) == 40


def test_value_pair_adds_fu():
    hand = tiles(
        "man-2", "man-3", "man-4", "pin-3", "pin-4", "pin-5", "sou-6", "sou-7", "sou-8",
        "man-6", "man-7", "man-8", "honor-south", "honor-south",
    )
    decomposition = decompose(hand)[0]
    # 20 + 10 closed ron + 2 seat wind pair -> 32
    assert calculate_fu(decomposition, get_tile("man-7"), EAST, SOUTH, False, False, True) == 40


def test_pinfu_fu_is_fixed():
    hand = tiles(
        "man-2", "man-3", "man-4", "pin-3", "pin-4", "pin-5", "sou-4", "sou-5", "sou-6",
        "sou-6", "sou-7", "sou-8", "pin-8", "pin-8",
    )
    decomposition = decompose(hand)[0]
    winning = get_tile("pin-4")
    assert calculate_fu(decomposition, winning, EAST, SOUTH, True, True, True) == 20
    assert calculate_fu(decomposition, winning, EAST, SOUTH, False, True, True) == 30
