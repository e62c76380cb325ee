from __future__ import annotations

import json
from pathlib import Path

import pytest

from snippet_lid.model import LanguageModel, clear_model_cache, parse_model

# def/"):" vote python, func votes go; anything else falls through to small defaults.
TINY_MODEL = {
    "format_version": 1,
    "vocabulary": [["def", 0], ["func", 1], ["):", 2]],
    "labels": [[0, "go"], [1, "python"]],
    "forest": [
        [2, 10, [0, 10, [0, 0.1], [1, 0.8]], [1, 0.9]],
        [1, 10, [1, 0.2], [0, 0.9]],
    ],
}


@pytest.fixture
def tiny_payload() -> dict:
    return json.loads(json.dumps(TINY_MODEL))


@pytest.fixture
def tiny_model(tiny_payload: dict) -> LanguageModel:
    return parse_model(tiny_payload, source="tiny")


@pytest.fixture
def tiny_model_path(tmp_path: Path, tiny_payload: dict) -> Path:
    p = tmp_path / "tiny_model.json"
    p.write_text(json.dumps(tiny_payload), encoding="utf-8")
    return p


@pytest.fixture(autouse=True)
def _fresh_model_cache(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SNIPPET_LID_MODEL_PATH", raising=False)
    yield
    clear_model_cache()
