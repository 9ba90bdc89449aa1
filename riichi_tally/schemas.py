from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, confloat, conint


class Wind(str, Enum):
    east = "east"
    south = "south"
    west = "west"
    north = "north"


class WinType(str, Enum):
    ron = "ron"
    tsumo = "tsumo"


class GamePhase(str, Enum):
    waiting = "waiting"
    playing = "playing"
    finished = "finished"


TileId = str
ErrorKind = Literal["validation", "structure", "no_yaku"]


class HandInput(BaseModel):
    tiles: list[TileId]
    winning_tile: TileId


class ContextInput(BaseModel):
    prevalent_wind: Wind
    seat_wind: Wind
    dora_indicators: list[TileId] = Field(default_factory=list)
    ura_dora_indicators: list[TileId] = Field(default_factory=list)
    is_riichi: bool = False
    is_double_riichi: bool = False
    is_tsumo: bool = True
    is_closed: bool = True
    is_dealer: bool = False
    is_first_turn_win: bool = False
    is_first_turn_for_player: bool = False
    remaining_tiles: conint(ge=0) = 70


class EvaluateRequest(BaseModel):
    hand: HandInput
    context: ContextInput


class EvaluationError(BaseModel):
    kind: ErrorKind
    message: str


class EvaluationResult(BaseModel):
    han_by_name: dict[str, int] | None = None
    total_fu: int | None = None
    total_han: int | None = None
    total_points: int | None = None
    point_label: str | None = None
    error: EvaluationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Detection(BaseModel):
    tile_code: str
    confidence: confloat(ge=0.0, le=1.0)


class RecognizeResponse(BaseModel):
    tiles: list[TileId]
    warnings: list[str] = Field(default_factory=list)


class PlayerState(BaseModel):
    name: str
    points: int
    wind: Wind
    is_dealer: bool


class MatchState(BaseModel):
    """Serialized snapshot of a match, written as one blob per transition."""

    match_id: str = ""
    players: list[PlayerState]
    prevalent_wind: Wind
    current_round: conint(ge=1)
    dealer_index: conint(ge=0)
    game_phase: GamePhase
    dora_indicators: list[TileId] = Field(default_factory=list)


class GameRanking(BaseModel):
    rank: int
    name: str
    points: int

    model_config = ConfigDict(frozen=True)


class GameHistoryEntry(BaseModel):
    id: str
    date: str
    players: list[str]
    final_ranking: list[GameRanking]
    total_rounds: int

    model_config = ConfigDict(frozen=True)


class NewMatchRequest(BaseModel):
    player_names: list[str]
    shuffle_seats: bool = False


class StartRoundRequest(BaseModel):
    dora_indicator: TileId


class KanRequest(BaseModel):
    dora_indicator: TileId


class FinishRoundRequest(BaseModel):
    winner: str
    win_type: WinType
    loser: str | None = None
    points: conint(ge=0)


class RenamePlayersRequest(BaseModel):
    player_names: list[str]
