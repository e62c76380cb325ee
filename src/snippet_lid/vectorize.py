from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import EmptyInputError
from .vocabulary import Vocabulary

# Total mass when every token is recognized.
FREQUENCY_SCALE = 1000.0


@dataclass(frozen=True)
class FrequencyVector:
    """
    Per-call normalized token frequencies, stored densely by vocabulary id.

    `values[i]` is the summed increment for feature id `i`. The total mass is
    `FREQUENCY_SCALE * n_known / n_tokens`.
    """

    values: tuple[float, ...]
    n_tokens: int
    n_known: int

    def get(self, feature_id: int, default: float = 0.0) -> float:
        if 0 <= feature_id < len(self.values):
            return self.values[feature_id]
        return default

    def total(self) -> float:
        return float(sum(self.values))

    def nonzero(self) -> Iterator[tuple[int, float]]:
        for fid, v in enumerate(self.values):
            if v:
                yield fid, v


def frequency_vector(tokens: Sequence[str], vocabulary: Vocabulary) -> FrequencyVector:
    """
    Build the frequency vector for a token sequence.

    Unknown tokens contribute nothing but still count toward the per-token increment.
    Raises EmptyInputError for an empty token sequence.
    """
    n = len(tokens)
    if n == 0:
        raise EmptyInputError("Cannot classify input with no tokens")

    increment = FREQUENCY_SCALE / n
    values = [0.0] * len(vocabulary)
    n_known = 0
    for tok in tokens:
        fid = vocabulary.lookup(tok)
        if fid is None:
            continue
        values[fid] += increment
        n_known += 1
    return FrequencyVector(values=tuple(values), n_tokens=n, n_known=n_known)
