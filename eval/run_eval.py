from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from snippet_lid.batch import evaluate_jsonl
from snippet_lid.config import ClassifierConfig


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument(
        "--dataset",
        default=str(Path(__file__).parent / "datasets" / "smoke.jsonl"),
        help="Labeled JSONL: {\"text\": ..., \"language\": ...} per line.",
    )
    p.add_argument("--model", default=None, help="Model asset (JSON) to evaluate.")
    args = p.parse_args()

    res = evaluate_jsonl(args.dataset, config=ClassifierConfig(model_path=args.model))
    print(json.dumps(asdict(res), ensure_ascii=True, indent=2))


if __name__ == "__main__":
    main()
