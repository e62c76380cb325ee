from __future__ import annotations

from typing import Sequence

import regex as re

# A word is a run of ASCII letters/digits/underscore; a symbol is a run of anything that is
# neither a word character nor whitespace. Whitespace matches str.isspace(): `\s` plus the
# \x1c-\x1f separators, which Unicode does not class as White_Space.
_SINGLE_RE = re.compile(r"[A-Za-z0-9_]+|[^A-Za-z0-9_\s\x1c-\x1f]+", flags=re.VERSION1)


def split_singles(text: str) -> list[str]:
    return [m.group(0) for m in _SINGLE_RE.finditer(text or "")]


def make_pairs(singles: Sequence[str]) -> list[str]:
    return [f"{a} {b}" for a, b in zip(singles, singles[1:])]


def tokenize(text: str) -> list[str]:
    """
    Split text into feature tokens: all singles in order, followed by all adjacent-pair bigrams.

    `"x = 1"` -> `["x", "=", "1", "x =", "= 1"]`. Text without singles yields `[]`.
    """
    singles = split_singles(text)
    if not singles:
        return []
    return singles + make_pairs(singles)
