from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import MalformedModelError, UnknownLabelError


@dataclass(frozen=True)
class LabelTable:
    """Fixed bijection between classifier label ids and language symbols."""

    symbols: Mapping[int, str]

    def resolve(self, label_id: int) -> str:
        try:
            return self.symbols[label_id]
        except KeyError:
            raise UnknownLabelError(f"Unknown label id: {label_id}") from None

    def __contains__(self, label_id: object) -> bool:
        return label_id in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def languages(self) -> tuple[str, ...]:
        return tuple(self.symbols[k] for k in sorted(self.symbols))

    @classmethod
    def from_pairs(cls, pairs: Iterable[object]) -> "LabelTable":
        out: dict[int, str] = {}
        seen: set[str] = set()
        for i, pair in enumerate(pairs):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise MalformedModelError(f"labels[{i}] must be an [id, symbol] pair")
            lid, symbol = pair
            if isinstance(lid, bool) or not isinstance(lid, int) or lid < 0:
                raise MalformedModelError(f"labels[{i}] id must be a non-negative integer")
            if not isinstance(symbol, str) or not symbol.strip():
                raise MalformedModelError(f"labels[{i}] symbol must be a non-empty string")
            if lid in out:
                raise MalformedModelError(f"Duplicate label id: {lid}")
            if symbol in seen:
                raise MalformedModelError(f"Duplicate label symbol: {symbol!r}")
            out[lid] = symbol
            seen.add(symbol)
        if not out:
            raise MalformedModelError("Label table is empty")
        if set(out) != set(range(len(out))):
            raise MalformedModelError("Label ids must be dense over 0..len-1")
        return cls(symbols=MappingProxyType(out))
