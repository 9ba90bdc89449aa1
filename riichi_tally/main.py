from __future__ import annotations

import random
from contextlib import asynccontextmanager
from io import BytesIO

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from PIL import Image, UnidentifiedImageError

from riichi_tally.config import settings
from riichi_tally.detection import OpenAIDetector, recognize_tiles
from riichi_tally.exceptions import MatchError, StorageNotConfiguredError
from riichi_tally.hand_scoring import evaluate_hand
from riichi_tally.logging import setup_logging
from riichi_tally.match import Match, load_history
from riichi_tally.schemas import (
    EvaluateRequest,
    EvaluationResult,
    FinishRoundRequest,
    GameHistoryEntry,
    KanRequest,
    MatchState,
    NewMatchRequest,
    RecognizeResponse,
    RenamePlayersRequest,
    StartRoundRequest,
)
from riichi_tally.storage import KeyValueStore, build_store


class ActiveMatch:
    """The single match driven by this process, resumed lazily from the store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._match: Match | None = None
        self._loaded = False

    def _options(self) -> dict:
        return {"starting_score": settings.starting_score, "history_limit": settings.history_limit}

    def get(self) -> Match | None:
        if not self._loaded:
            self._match = Match.load(self.store, **self._options())
            self._loaded = True
        return self._match

    def require(self) -> Match:
        match = self.get()
        if match is None:
            raise HTTPException(status_code=404, detail="no active match")
        return match

    def create(self, req: NewMatchRequest) -> Match:
        rng = random.Random() if req.shuffle_seats else None
        match = Match(req.player_names, self.store, rng=rng, **self._options())
        match.save()
        self._match = match
        self._loaded = True
        return match


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging(settings)
    yield


app = FastAPI(title="Riichi Tally", version="0.1.0", lifespan=lifespan)
store = build_store(settings)
active = ActiveMatch(store)
detector = OpenAIDetector()


@app.exception_handler(MatchError)
async def match_error_handler(_: Request, exc: MatchError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StorageNotConfiguredError)
async def storage_error_handler(_: Request, exc: StorageNotConfiguredError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/v1/evaluate", response_model=EvaluationResult)
def evaluate(req: EvaluateRequest) -> EvaluationResult:
    result = evaluate_hand(req.hand, req.context)
    if result.error is not None:
        raise HTTPException(status_code=422, detail=result.error.model_dump())
    return result


@app.post("/api/v1/recognize", response_model=RecognizeResponse)
async def recognize(image: UploadFile = File(...)) -> RecognizeResponse:
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="image is required")
    try:
        Image.open(BytesIO(image_bytes)).verify()
    except (UnidentifiedImageError, OSError) as exc:
        raise HTTPException(status_code=400, detail="invalid image file") from exc

    try:
        payload = recognize_tiles(image_bytes, detector)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return RecognizeResponse(**payload)


@app.post("/api/v1/match", response_model=MatchState)
def new_match(req: NewMatchRequest) -> MatchState:
    return active.create(req).to_state()


@app.get("/api/v1/match", response_model=MatchState)
def get_match() -> MatchState:
    return active.require().to_state()


@app.delete("/api/v1/match", response_model=MatchState)
def reset_match() -> MatchState:
    match = active.require()
    match.reset()
    return match.to_state()


@app.put("/api/v1/match/players", response_model=MatchState)
def rename_players(req: RenamePlayersRequest) -> MatchState:
    match = active.require()
    match.rename_players(req.player_names)
    return match.to_state()


@app.post("/api/v1/match/rounds", response_model=MatchState)
def start_round(req: StartRoundRequest) -> MatchState:
    match = active.require()
    match.start_round(req.dora_indicator)
    return match.to_state()


@app.post("/api/v1/match/kan", response_model=MatchState)
def kan(req: KanRequest) -> MatchState:
    match = active.require()
    match.kan(req.dora_indicator)
    return match.to_state()


@app.post("/api/v1/match/rounds/finish", response_model=MatchState)
def finish_round(req: FinishRoundRequest) -> MatchState:
    match = active.require()
    match.finish_round(req.winner, req.win_type, req.loser, req.points)
    return match.to_state()


@app.post("/api/v1/match/finish", response_model=GameHistoryEntry)
def finish_match() -> GameHistoryEntry:
    return active.require().finish_match()


@app.get("/api/v1/history", response_model=list[GameHistoryEntry])
def history() -> list[GameHistoryEntry]:
    return load_history(store)
