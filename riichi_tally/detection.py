from __future__ import annotations

import base64
import json
import logging
from typing import Any, Iterable, Protocol

from openai import OpenAI

from riichi_tally.config import settings
from riichi_tally.schemas import Detection
from riichi_tally.tiles import Tile, find_tile

logger = logging.getLogger(__name__)

TILE_CODE_TO_ID = {
    # sou (bamboo)
    **{f"{n}B": f"sou-{n}" for n in range(1, 10)},
    # pin (circles)
    **{f"{n}D": f"pin-{n}" for n in range(1, 10)},
    # man (characters)
    **{f"{n}C": f"man-{n}" for n in range(1, 10)},
    "EW": "honor-east",
    "SW": "honor-south",
    "WW": "honor-west",
    "NW": "honor-north",
    "WD": "honor-white",
    "GD": "honor-green",
    "RD": "honor-red",
}

SYSTEM_PROMPT = f"""You are a mahjong tile detector.
Return JSON only.
Detect every tile in a single image, left to right.
Use tile codes: {", ".join(sorted(TILE_CODE_TO_ID))}.
Return {{"detections": [{{"tile_code": <code>, "confidence": <0..1>}}]}}."""


class Detector(Protocol):
    def detect(self, image_bytes: bytes) -> Iterable[Detection]: ...


def parse_detections(detections: Iterable[Detection]) -> tuple[list[Tile], list[str]]:
    """Detections -> catalog tiles. Unmapped codes are skipped with a warning."""
    tiles: list[Tile] = []
    warnings: list[str] = []
    for detection in detections:
        tile_id = TILE_CODE_TO_ID.get(detection.tile_code)
        tile = find_tile(tile_id) if tile_id else None
        if tile is None:
            message = f"Could not find a mapping for tile code: {detection.tile_code}"
            logger.warning(message)
            warnings.append(message)
            continue
        tiles.append(tile)
    return tiles, warnings


def _normalize_detections(raw: list[dict[str, Any]]) -> list[Detection]:
    detections = []
    for item in raw:
        confidence = float(item.get("confidence", 0.0))
        detections.append(
            Detection(tile_code=str(item.get("tile_code")), confidence=min(max(confidence, 0.0), 1.0))
        )
    return detections


class OpenAIDetector:
    """Vision-model detector speaking the detector code table."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model

    def detect(self, image_bytes: bytes) -> list[Detection]:
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY is not set")

        client = OpenAI(api_key=self.api_key)
        image_b64 = base64.b64encode(image_bytes).decode("ascii")
        response = client.chat.completions.create(
            model=self.model,
            temperature=0,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "Return strict JSON with key: detections."},
                        {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"}},
                    ],
                },
            ],
        )
        payload = json.loads(response.choices[0].message.content or "{}")
        return _normalize_detections(payload.get("detections", []))


def recognize_tiles(image_bytes: bytes, detector: Detector) -> dict[str, Any]:
    """Image -> tile ids. This module must not score."""
    tiles, warnings = parse_detections(detector.detect(image_bytes))
    return {"tiles": [tile.id for tile in tiles], "warnings": warnings}
