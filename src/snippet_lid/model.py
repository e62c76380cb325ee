from __future__ import annotations

import json
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .errors import MalformedModelError
from .forest import InternalNode, LeafNode, Node
from .labels import LabelTable
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)

MODEL_FORMAT_VERSION = 1
MODEL_PATH_ENV = "SNIPPET_LID_MODEL_PATH"


@dataclass(frozen=True)
class LanguageModel:
    """
    Immutable, validated model handle: vocabulary + forest + label table.

    Build one with `load_model` / `parse_model`, or share the process-wide one from
    `default_model()`.
    """

    vocabulary: Vocabulary
    forest: tuple[Node, ...]
    labels: LabelTable
    source: str = "<memory>"

    @property
    def n_label_slots(self) -> int:
        # Label ids are dense, so the table size bounds every accumulator index.
        return len(self.labels)


def packaged_model_path() -> Path:
    return Path(__file__).with_name("_data") / "language_model.json"


def resolve_model_path(explicit_path: Optional[str] = None) -> Path:
    """Explicit path, then $SNIPPET_LID_MODEL_PATH, then the packaged asset."""
    if explicit_path:
        return Path(explicit_path).expanduser()
    env = os.getenv(MODEL_PATH_ENV)
    if env:
        return Path(env).expanduser()
    return packaged_model_path()


def _as_number(x: Any, *, where: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise MalformedModelError(f"{where} must be a number")
    v = float(x)
    if not math.isfinite(v):
        raise MalformedModelError(f"{where} must be finite")
    return v


def _as_int(x: Any, *, where: str) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise MalformedModelError(f"{where} must be an integer")
    return x


def _parse_node(raw: Any, *, vocabulary: Vocabulary, labels: LabelTable, where: str) -> Node:
    # The asset distinguishes node kinds by arity only: [label, weight] vs
    # [feature, threshold, left, right].
    if not isinstance(raw, (list, tuple)):
        raise MalformedModelError(f"{where}: node must be a list")
    if len(raw) == 2:
        label_id = _as_int(raw[0], where=f"{where}.label_id")
        if label_id not in labels:
            raise MalformedModelError(f"{where}: leaf references unknown label id {label_id}")
        return LeafNode(label_id=label_id, weight=_as_number(raw[1], where=f"{where}.weight"))
    if len(raw) == 4:
        feature_id = _as_int(raw[0], where=f"{where}.feature_id")
        if not (0 <= feature_id < len(vocabulary)):
            raise MalformedModelError(f"{where}: feature id {feature_id} is out of range")
        return InternalNode(
            feature_id=feature_id,
            threshold=_as_number(raw[1], where=f"{where}.threshold"),
            left=_parse_node(raw[2], vocabulary=vocabulary, labels=labels, where=f"{where}.L"),
            right=_parse_node(raw[3], vocabulary=vocabulary, labels=labels, where=f"{where}.R"),
        )
    raise MalformedModelError(f"{where}: node has arity {len(raw)} (expected 2 or 4)")


def parse_model(payload: Any, *, source: str = "<memory>") -> LanguageModel:
    """
    Parse and validate a decoded model asset.

    Expected shape:
      {"format_version": 1,
       "vocabulary": [[token, id], ...],
       "forest": [tree, ...],
       "labels": [[id, symbol], ...]}
    """
    if not isinstance(payload, dict):
        raise MalformedModelError("Model asset must be a JSON object")

    version = payload.get("format_version", MODEL_FORMAT_VERSION)
    if version != MODEL_FORMAT_VERSION:
        raise MalformedModelError(
            f"Unsupported model format_version={version!r} (expected {MODEL_FORMAT_VERSION})"
        )
    for key in ("vocabulary", "forest", "labels"):
        if not isinstance(payload.get(key), list):
            raise MalformedModelError(f"Model asset is missing a '{key}' list")

    vocabulary = Vocabulary.from_pairs(payload["vocabulary"])
    labels = LabelTable.from_pairs(payload["labels"])

    raw_forest = payload["forest"]
    if not raw_forest:
        raise MalformedModelError("Model forest is empty")
    try:
        forest = tuple(
            _parse_node(t, vocabulary=vocabulary, labels=labels, where=f"forest[{i}]")
            for i, t in enumerate(raw_forest)
        )
    except RecursionError:
        raise MalformedModelError("Model tree is too deep to parse") from None

    return LanguageModel(vocabulary=vocabulary, forest=forest, labels=labels, source=source)


def load_model(path: str | Path) -> LanguageModel:
    """Read and validate a model asset from disk."""
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedModelError(f"Model asset is not UTF-8 text: {p}: {e}") from e
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedModelError(f"Model asset is not valid JSON: {p}: {e}") from e
    model = parse_model(payload, source=str(p))
    logger.info(
        "Loaded language model from %s (%d features, %d trees, %d labels)",
        p,
        len(model.vocabulary),
        len(model.forest),
        len(model.labels),
    )
    return model


_CACHE_LOCK = threading.Lock()
_CACHE: dict[str, LanguageModel] = {}


def default_model(path: Optional[str] = None) -> LanguageModel:
    """
    Return the process-wide model for `path` (resolved via `resolve_model_path`).

    Each asset is parsed at most once per process; concurrent first callers block on a lock
    until the single load finishes. Later calls take no lock.
    """
    key = str(resolve_model_path(path))
    model = _CACHE.get(key)
    if model is not None:
        return model
    with _CACHE_LOCK:
        model = _CACHE.get(key)
        if model is None:
            logger.debug("Initializing shared language model: %s", key)
            model = load_model(key)
            _CACHE[key] = model
    return model


def clear_model_cache() -> None:
    with _CACHE_LOCK:
        _CACHE.clear()
