from __future__ import annotations

import argparse
import statistics
import time

from snippet_lid import LanguageClassifier, classify_text, default_model


def _samples() -> list[str]:
    return [
        "def foo(x):\n    return x + 1\n",
        "package main\nfunc main() {}",
        "SELECT name FROM users WHERE id = 1",
        "#include <stdio.h>\nint main(void) { printf(\"hi\\n\"); return 0; }",
        "fn main() {\n    let mut v = Vec::new();\n    v.push(1);\n}",
        "<?php echo $name; ?>",
    ]


def _bench_classifier(n: int) -> dict[str, float]:
    texts = _samples()
    clf = LanguageClassifier()

    # Warmup (also forces the one-time model load).
    _ = clf.classify_many(texts)

    t0 = time.perf_counter()
    for _ in range(n):
        _ = clf.classify_many(texts)
    total = time.perf_counter() - t0

    return {
        "total_s": float(total),
        "per_iter_s": float(total / max(1, n)),
        "iters": float(n),
        "n_texts": float(len(texts)),
    }


def _bench_classify_text(n: int) -> dict[str, float]:
    texts = _samples()
    model = default_model()
    for s in texts:
        _ = classify_text(s, model=model)

    vals: list[float] = []
    for _ in range(n):
        t0 = time.perf_counter()
        for s in texts:
            _ = classify_text(s, model=model)
        vals.append(time.perf_counter() - t0)

    return {
        "runs": float(n),
        "n_texts": float(len(texts)),
        "mean_s": float(statistics.mean(vals)) if vals else 0.0,
        "p50_s": float(statistics.median(vals)) if vals else 0.0,
        "min_s": float(min(vals)) if vals else 0.0,
    }


def main() -> None:
    p = argparse.ArgumentParser(description="Micro-benchmark for snippet-lid.")
    p.add_argument("--n", type=int, default=200, help="Number of benchmark iterations.")
    p.add_argument(
        "--mode",
        choices=["classifier", "classify_text"],
        default="classifier",
        help="Benchmark LanguageClassifier.classify_many or classify_text.",
    )
    args = p.parse_args()

    n = max(1, int(args.n))
    if args.mode == "classify_text":
        print(_bench_classify_text(n))
        return
    print(_bench_classifier(n))


if __name__ == "__main__":
    main()
