from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .config import ClassifierConfig
from .forest import aggregate_votes
from .model import LanguageModel, default_model
from .tokens import tokenize
from .vectorize import frequency_vector

logger = logging.getLogger(__name__)

EventHook = Callable[[dict[str, Any]], None]


def _emit(hook: Optional[EventHook], event: dict[str, Any]) -> None:
    if hook is None:
        return
    try:
        hook(event)
    except Exception:
        # Hooks must never break classification.
        logger.debug("on_event hook failed for stage %s", event.get("stage"), exc_info=True)


@dataclass(frozen=True)
class ClassificationResult:
    language: str
    label_id: int
    # Language symbol -> accumulated leaf weight, in forest first-appearance order.
    votes: dict[str, float]
    n_tokens: int
    n_known_tokens: int


def read_buffer(source: object) -> str:
    """
    Return the full text of a buffer-like source.

    Accepts str, bytes/bytearray (UTF-8), or objects with `getvalue()` (StringIO/BytesIO)
    or `read()` (open files).
    """
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8", errors="replace")
    getvalue = getattr(source, "getvalue", None)
    if callable(getvalue):
        return read_buffer(getvalue())
    read = getattr(source, "read", None)
    if callable(read):
        return read_buffer(read())
    raise TypeError(f"Unsupported buffer type: {type(source).__name__}")


class LanguageClassifier:
    """
    Snippet -> programming language classifier:
      tokenize -> vectorize -> forest vote -> label

    Holds an explicit model handle. Instances are read-only after construction and safe to
    share across threads.
    """

    def __init__(
        self,
        *,
        model: Optional[LanguageModel] = None,
        config: Optional[ClassifierConfig] = None,
        on_event: Optional[EventHook] = None,
    ):
        self.config = (config or ClassifierConfig()).normalized()
        self.model = model if model is not None else default_model(self.config.model_path)
        self.on_event = on_event

    def analyze(self, text: str) -> ClassificationResult:
        cfg = self.config
        model = self.model
        if cfg.max_input_chars is not None:
            text = text[: cfg.max_input_chars]

        tokens = tokenize(text)
        _emit(
            self.on_event,
            {"stage": "tokenize", "n_tokens": len(tokens), "tokens_preview": tokens[:12]},
        )

        vector = frequency_vector(tokens, model.vocabulary)
        _emit(
            self.on_event,
            {
                "stage": "vectorize",
                "n_tokens": vector.n_tokens,
                "n_known_tokens": vector.n_known,
                "mass": vector.total(),
            },
        )

        tally = aggregate_votes(model.forest, vector, model.n_label_slots)
        votes = {model.labels.resolve(lid): total for lid, total in tally.totals}
        language = model.labels.resolve(tally.winner)
        _emit(self.on_event, {"stage": "vote", "n_trees": len(model.forest), "votes": votes})

        result = ClassificationResult(
            language=language,
            label_id=tally.winner,
            votes=votes,
            n_tokens=vector.n_tokens,
            n_known_tokens=vector.n_known,
        )
        _emit(self.on_event, {"stage": "done", "language": language})
        return result

    def classify(self, text: str) -> str:
        return self.analyze(text).language

    def classify_buffer(self, source: object) -> str:
        return self.classify(read_buffer(source))

    def classify_many(self, texts: Iterable[str]) -> list[str]:
        return [self.classify(t) for t in texts]


def classify_text(text: str, *, model: Optional[LanguageModel] = None) -> str:
    """Return the language symbol for `text`. Raises EmptyInputError if it has no tokens."""
    return LanguageClassifier(model=model).classify(text)


def classify_buffer(source: object, *, model: Optional[LanguageModel] = None) -> str:
    """Read the full contents of a text buffer and classify it."""
    return classify_text(read_buffer(source), model=model)
