import pytest

from riichi_tally.detection import (
    TILE_CODE_TO_ID,
    OpenAIDetector,
    _normalize_detections,
    parse_detections,
    recognize_tiles,
)
from riichi_tally.schemas import Detection


class StaticDetector:
    def __init__(self, codes: list[str]) -> None:
        self.codes = codes

    def detect(self, image_bytes: bytes) -> list[Detection]:
        return [Detection(tile_code=code, confidence=0.9) for code in self.codes]


def test_code_table_covers_every_kind():
    assert len(TILE_CODE_TO_ID) == 34
    assert TILE_CODE_TO_ID["1C"] == "man-1"
    assert TILE_CODE_TO_ID["5D"] == "pin-5"
    assert TILE_CODE_TO_ID["9B"] == "sou-9"
    assert TILE_CODE_TO_ID["GD"] == "honor-green"


def test_parse_detections_skips_unknown_codes():
    tiles, warnings = parse_detections(StaticDetector(["1C", "XX", "RD"]).detect(b""))
    assert [t.id for t in tiles] == ["man-1", "honor-red"]
    assert warnings == ["Could not find a mapping for tile code: XX"]


def test_recognize_tiles_keeps_order():
    payload = recognize_tiles(b"img", StaticDetector(["EW", "3B", "7D"]))
    assert payload == {"tiles": ["honor-east", "sou-3", "pin-7"], "warnings": []}


def test_normalize_clamps_confidence():
    detections = _normalize_detections([{"tile_code": "1C", "confidence": 1.7}, {"tile_code": "2C"}])
    assert [d.confidence for d in detections] == [1.0, 0.0]


def test_openai_detector_requires_key(monkeypatch):
    detector = OpenAIDetector(api_key="")
    monkeypatch.setattr(detector, "api_key", None)
    with pytest.raises(ValueError):
        detector.detect(b"img")
