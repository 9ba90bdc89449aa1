from __future__ import annotations

# (threshold han, label, non-dealer points, dealer points), highest first
LIMIT_HANDS = (
    (13, "Yakuman", 32000, 48000),
    (11, "Sanbaiman", 24000, 36000),
    (8, "Baiman", 16000, 24000),
    (6, "Haneman", 12000, 18000),
    (5, "Mangan", 8000, 12000),
)


def point_label(han: int) -> str | None:
    for threshold, label, _, _ in LIMIT_HANDS:
        if han >= threshold:
            return label
    return None


def calculate_points(fu: int, han: int, is_dealer: bool) -> int:
    """Point total for a hand.

    From 5 han up the named brackets apply regardless of fu. Below that the
    total is ``fu * 4 * 2 ** (han + 2)`` for dealer and non-dealer alike;
    splitting the payment between losers is left to the caller. Zero han
    yields zero, which is never a real win.
    """
    for threshold, _, non_dealer, dealer in LIMIT_HANDS:
        if han >= threshold:
            return dealer if is_dealer else non_dealer
    if han <= 0:
        return 0
    return fu * 4 * 2 ** (han + 2)
