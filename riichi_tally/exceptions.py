from __future__ import annotations


class HandEvaluationError(ValueError):
    kind = "structure"


class InvalidCombinationError(HandEvaluationError):
    """Context flags contradict each other or the tile input is malformed."""

    kind = "validation"


class InvalidHandStructureError(HandEvaluationError):
    """No four-melds-one-pair partition and no special shape."""

    kind = "structure"


class NoYakuError(HandEvaluationError):
    """Hand has no scoring rule besides dora."""

    kind = "no_yaku"


class MatchError(ValueError):
    pass


class StorageNotConfiguredError(RuntimeError):
    """Persistence backend selected without the settings it needs."""
