"""Match state machine: seats, scores, dealer and wind rotation, history.

Seat order is fixed for the life of a match; winds rotate over it. Every
transition either completes, including the persistence write, or leaves
the match exactly as it was.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence
from uuid import uuid4

from pydantic import TypeAdapter

from riichi_tally.exceptions import MatchError
from riichi_tally.schemas import (
    GameHistoryEntry,
    GamePhase,
    GameRanking,
    MatchState,
    PlayerState,
    Wind,
    WinType,
)
from riichi_tally.storage import KeyValueStore
from riichi_tally.tiles import Tile, dora_successor, find_tile
from riichi_tally.validators import resolve_tiles

logger = logging.getLogger(__name__)

MATCH_STATE_KEY = "mahjongGameState"
FINAL_RANKING_KEY = "mahjongFinalRanking"
HISTORY_KEY = "mahjongGameHistory"

STARTING_SCORE = 25000
HISTORY_LIMIT = 5
WIND_ORDER = (Wind.east, Wind.south, Wind.west, Wind.north)
MIN_PLAYERS = 2
MAX_PLAYERS = len(WIND_ORDER)

_history_adapter = TypeAdapter(list[GameHistoryEntry])
_ranking_adapter = TypeAdapter(list[GameRanking])


@dataclass
class Player:
    name: str
    score: int = STARTING_SCORE
    wind: Wind | None = None
    is_dealer: bool = False


def _validate_names(names: Sequence[str]) -> None:
    if not MIN_PLAYERS <= len(names) <= MAX_PLAYERS:
        raise MatchError(f"A match needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {len(names)}")
    if len(set(names)) != len(names):
        raise MatchError("Player names must be unique")


def _validate_seating(state: MatchState) -> None:
    """Winds must follow seat order starting from the dealer, who alone is east."""
    count = len(state.players)
    if not MIN_PLAYERS <= count <= MAX_PLAYERS:
        raise MatchError(f"A match needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {count}")
    if state.dealer_index >= count:
        raise MatchError(f"Dealer index {state.dealer_index} out of range")
    for offset in range(count):
        player = state.players[(state.dealer_index + offset) % count]
        if player.wind != WIND_ORDER[offset] or player.is_dealer != (offset == 0):
            raise MatchError(f"Seat of {player.name} does not match dealer index {state.dealer_index}")


def load_history(store: KeyValueStore) -> list[GameHistoryEntry]:
    """Finished matches, most recent first."""
    raw = store.get(HISTORY_KEY)
    if raw is None:
        return []
    return _history_adapter.validate_json(raw)


def load_final_ranking(store: KeyValueStore) -> list[GameRanking]:
    raw = store.get(FINAL_RANKING_KEY)
    if raw is None:
        return []
    return _ranking_adapter.validate_json(raw)


class Match:
    def __init__(
        self,
        player_names: Sequence[str],
        store: KeyValueStore,
        starting_score: int = STARTING_SCORE,
        history_limit: int = HISTORY_LIMIT,
        rng: random.Random | None = None,
    ) -> None:
        _validate_names(player_names)
        self._store = store
        self.starting_score = starting_score
        self.history_limit = history_limit

        names = list(player_names)
        if rng is not None:
            rng.shuffle(names)
        self._init_fresh(names)

    def _init_fresh(self, names: Sequence[str]) -> None:
        # doubles as the history entry id
        self.match_id = f"game-{uuid4()}"
        self.players = [Player(name, self.starting_score) for name in names]
        self.prevalent_wind = Wind.east
        self.current_round = 1
        self.dealer_index = 0
        self.dora_indicators: list[Tile] = []
        self.game_phase = GamePhase.waiting
        self._update_winds()

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def dealer(self) -> Player:
        return self.players[self.dealer_index]

    def _update_winds(self) -> None:
        for offset in range(self.num_players):
            player = self.players[(self.dealer_index + offset) % self.num_players]
            player.wind = WIND_ORDER[offset]
            player.is_dealer = offset == 0

    def _advance_prevalent_wind(self) -> None:
        index = WIND_ORDER.index(self.prevalent_wind)
        self.prevalent_wind = WIND_ORDER[(index + 1) % len(WIND_ORDER)]
        logger.info("Prevalent wind has changed to %s", self.prevalent_wind.value)

    def _find_player(self, name: str) -> Player:
        for player in self.players:
            if player.name == name:
                return player
        raise MatchError(f"Player not found: {name}")

    def _require_phase(self, *phases: GamePhase) -> None:
        if self.game_phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise MatchError(f"Operation requires phase {allowed}, match is {self.game_phase.value}")

    def _reveal_dora(self, tile_id: str) -> None:
        tile = find_tile(tile_id)
        if tile is None:
            logger.warning("Unknown dora indicator skipped: %s", tile_id)
            return
        self.dora_indicators.append(tile)
        logger.info("Dora indicator is %s, dora is %s", tile, dora_successor(tile))

    # -- persistence --

    def to_state(self) -> MatchState:
        return MatchState(
            match_id=self.match_id,
            players=[
                PlayerState(name=p.name, points=p.score, wind=p.wind, is_dealer=p.is_dealer)
                for p in self.players
            ],
            prevalent_wind=self.prevalent_wind,
            current_round=self.current_round,
            dealer_index=self.dealer_index,
            game_phase=self.game_phase,
            dora_indicators=[tile.id for tile in self.dora_indicators],
        )

    def _apply_state(self, state: MatchState) -> None:
        if state.match_id:
            self.match_id = state.match_id
        self.players = [
            Player(name=p.name, score=p.points, wind=p.wind, is_dealer=p.is_dealer) for p in state.players
        ]
        self.prevalent_wind = state.prevalent_wind
        self.current_round = state.current_round
        self.dealer_index = state.dealer_index
        self.game_phase = state.game_phase
        self.dora_indicators = resolve_tiles(state.dora_indicators, "dora indicator")

    def save(self) -> None:
        self._store.set(MATCH_STATE_KEY, self.to_state().model_dump_json())

    def _commit(self, snapshot: MatchState) -> None:
        try:
            self.save()
        except Exception:
            self._apply_state(snapshot)
            raise

    @classmethod
    def from_state(cls, state: MatchState, store: KeyValueStore, **kwargs) -> Match:
        _validate_seating(state)
        match = cls([p.name for p in state.players], store, **kwargs)
        match._apply_state(state)
        return match

    @classmethod
    def load(cls, store: KeyValueStore, **kwargs) -> Match | None:
        """Resume the persisted match, if any."""
        raw = store.get(MATCH_STATE_KEY)
        if raw is None:
            logger.info("No saved match state found")
            return None
        match = cls.from_state(MatchState.model_validate_json(raw), store, **kwargs)
        logger.info("Match state loaded: round %d, phase %s", match.current_round, match.game_phase.value)
        return match

    # -- transitions --

    def start_round(self, initial_dora_id: str) -> None:
        self._require_phase(GamePhase.waiting, GamePhase.finished)
        snapshot = self.to_state()

        self.dora_indicators = []
        logger.info(
            "Starting round %d, prevalent wind %s, dealer %s",
            self.current_round,
            self.prevalent_wind.value,
            self.dealer.name,
        )
        self._reveal_dora(initial_dora_id)
        self.game_phase = GamePhase.playing
        self._commit(snapshot)

    def kan(self, dora_id: str) -> None:
        self._require_phase(GamePhase.playing)
        snapshot = self.to_state()
        self._reveal_dora(dora_id)
        self._commit(snapshot)

    def finish_round(
        self,
        winner_name: str,
        win_type: WinType | str,
        loser_name: str | None = None,
        points: int = 0,
    ) -> None:
        """Settle a win and rotate dealer/winds.

        Tsumo splits ``points`` evenly with floor division; the remainder is
        not paid by anyone.
        """
        self._require_phase(GamePhase.playing)
        try:
            win_type = WinType(win_type)
        except ValueError as exc:
            raise MatchError(f"Invalid win type: {win_type}") from exc
        if points < 0:
            raise MatchError("Points must not be negative")

        winner = self._find_player(winner_name)
        loser: Player | None = None
        if win_type == WinType.ron:
            if not loser_name:
                raise MatchError("Ron win requires a discarder's name")
            loser = self._find_player(loser_name)
            if loser is winner:
                raise MatchError("Winner and discarder must be different players")

        snapshot = self.to_state()

        if loser is not None:
            winner.score += points
            loser.score -= points
            logger.info("%s won by ron, %s pays %d", winner.name, loser.name, points)
        else:
            share = points // (self.num_players - 1)
            for player in self.players:
                if player is not winner:
                    player.score -= share
                    winner.score += share
            logger.info("%s won by tsumo, others pay %d each", winner.name, share)

        if winner.is_dealer:
            logger.info("Dealer %s keeps the seat", winner.name)
        else:
            self.dealer_index = (self.dealer_index + 1) % self.num_players
            self._update_winds()
            logger.info("Dealer rotated to %s", self.dealer.name)

        self.current_round += 1
        if (self.current_round - 1) % self.num_players == 0:
            self._advance_prevalent_wind()

        self.dora_indicators = []
        self.game_phase = GamePhase.finished
        self._commit(snapshot)

    def rename_players(self, names: Sequence[str]) -> None:
        if len(names) != self.num_players:
            raise MatchError(f"Expected {self.num_players} names, got {len(names)}")
        _validate_names(names)
        snapshot = self.to_state()
        for player, name in zip(self.players, names):
            player.name = name
        self._commit(snapshot)

    def ranking(self) -> list[GameRanking]:
        ranked = sorted(self.players, key=lambda p: p.score, reverse=True)
        return [GameRanking(rank=i + 1, name=p.name, points=p.score) for i, p in enumerate(ranked)]

    def get_history(self) -> list[GameHistoryEntry]:
        return load_history(self._store)

    def finish_match(self) -> GameHistoryEntry:
        """Record the final ranking in history and reset to a fresh match.

        The entry id is the match id, so finishing a match again after a
        crash between the history write and the reset replaces its entry.
        """
        ranking = self.ranking()
        entry = GameHistoryEntry(
            id=self.match_id,
            date=datetime.now(timezone.utc).isoformat(),
            players=[p.name for p in self.players],
            final_ranking=ranking,
            total_rounds=self.current_round - 1,
        )
        for item in ranking:
            logger.info("Rank %d: %s with %d points", item.rank, item.name, item.points)

        self._store.set(FINAL_RANKING_KEY, _ranking_adapter.dump_json(ranking).decode())
        earlier = [e for e in self.get_history() if e.id != entry.id]
        history = [entry, *earlier][: self.history_limit]
        self._store.set(HISTORY_KEY, _history_adapter.dump_json(history).decode())

        self.reset()
        return entry

    def reset(self) -> None:
        """Drop the persisted state and start over with the same seats."""
        self._store.remove(MATCH_STATE_KEY)
        self._init_fresh([p.name for p in self.players])
        logger.info("Match state cleared, ready for a new match")
