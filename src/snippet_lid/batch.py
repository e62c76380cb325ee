from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .classifier import LanguageClassifier
from .config import ClassifierConfig
from .errors import SnippetLidError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchProcessSummary:
    n_rows_in: int
    n_rows_out: int
    n_errors: int


@dataclass(frozen=True)
class EvalSummary:
    n_rows: int
    n_correct: int
    n_errors: int
    accuracy: float
    # expected -> predicted -> count
    confusion: dict[str, dict[str, int]] = field(default_factory=dict)


def process_jsonl_batch(
    in_path: str | Path,
    out_path: str | Path,
    *,
    text_key: str = "text",
    output_key: str = "language",
    config: Optional[ClassifierConfig] = None,
    classifier: Optional[LanguageClassifier] = None,
) -> BatchProcessSummary:
    """
    Classify every record of a JSONL file, writing `output_key` into each record.

    Records that fail (bad JSON, empty text) are counted and left out of the output.
    """

    in_p = Path(in_path)
    out_p = Path(out_path)
    out_p.parent.mkdir(parents=True, exist_ok=True)

    clf = classifier or LanguageClassifier(config=config)
    n_in = 0
    n_out = 0
    n_err = 0

    with in_p.open("r", encoding="utf-8") as f_in, out_p.open("w", encoding="utf-8") as f_out:
        for line_no, line in enumerate(f_in, start=1):
            s = (line or "").strip()
            if not s:
                continue
            n_in += 1
            try:
                rec = json.loads(s)
                rec[output_key] = clf.classify(str(rec.get(text_key, "") or ""))
            except (json.JSONDecodeError, AttributeError, SnippetLidError) as e:
                n_err += 1
                logger.warning("Skipping %s line %d: %s", in_p, line_no, e)
                continue
            f_out.write(json.dumps(rec, ensure_ascii=True) + "\n")
            n_out += 1

    return BatchProcessSummary(n_rows_in=n_in, n_rows_out=n_out, n_errors=n_err)


def evaluate_jsonl(
    path: str | Path,
    *,
    text_key: str = "text",
    label_key: str = "language",
    config: Optional[ClassifierConfig] = None,
    classifier: Optional[LanguageClassifier] = None,
) -> EvalSummary:
    """
    Score the classifier against labeled JSONL records: {"text": ..., "language": ...}.

    Lines that are not JSON objects, and records that cannot be classified, count as errors
    (and as incorrect). Only classified records enter the confusion table.
    """

    p = Path(path)
    clf = classifier or LanguageClassifier(config=config)
    n = 0
    n_correct = 0
    n_err = 0
    confusion: dict[str, dict[str, int]] = {}

    with p.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            s = (line or "").strip()
            if not s:
                continue
            n += 1
            try:
                rec = json.loads(s)
            except json.JSONDecodeError as e:
                n_err += 1
                logger.warning("Skipping %s line %d: %s", p, line_no, e)
                continue
            if not isinstance(rec, dict):
                n_err += 1
                logger.warning("Skipping %s line %d: expected a JSON object", p, line_no)
                continue

            expected = str(rec.get(label_key, "") or "").strip()
            try:
                predicted = clf.classify(str(rec.get(text_key, "") or ""))
            except SnippetLidError:
                n_err += 1
                predicted = "<error>"
            if predicted == expected:
                n_correct += 1
            row = confusion.setdefault(expected, {})
            row[predicted] = row.get(predicted, 0) + 1

    return EvalSummary(
        n_rows=n,
        n_correct=n_correct,
        n_errors=n_err,
        accuracy=(n_correct / n) if n else 0.0,
        confusion=confusion,
    )
