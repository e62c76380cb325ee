from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .errors import MalformedModelError


@dataclass(frozen=True)
class Vocabulary:
    """Static token -> feature id table. Ids are unique and dense over 0..len-1."""

    ids: Mapping[str, int]

    def lookup(self, token: str) -> Optional[int]:
        return self.ids.get(token)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, token: object) -> bool:
        return token in self.ids

    @classmethod
    def from_pairs(cls, pairs: Iterable[object]) -> "Vocabulary":
        out: dict[str, int] = {}
        seen_ids: set[int] = set()
        for i, pair in enumerate(pairs):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise MalformedModelError(f"vocabulary[{i}] must be a [token, id] pair")
            token, fid = pair
            if not isinstance(token, str) or not token:
                raise MalformedModelError(f"vocabulary[{i}] token must be a non-empty string")
            if isinstance(fid, bool) or not isinstance(fid, int):
                raise MalformedModelError(f"vocabulary[{i}] id must be an integer")
            if token in out:
                raise MalformedModelError(f"Duplicate vocabulary token: {token!r}")
            if fid in seen_ids:
                raise MalformedModelError(f"Duplicate vocabulary id: {fid}")
            out[token] = fid
            seen_ids.add(fid)

        # Dense: the id set must be exactly 0..n-1.
        if seen_ids != set(range(len(out))):
            raise MalformedModelError("Vocabulary ids must be dense over 0..len-1")
        return cls(ids=MappingProxyType(out))
