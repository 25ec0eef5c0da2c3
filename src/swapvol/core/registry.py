from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence

from swapvol.core.dto import Token


class TokenRegistry:
    """
    Read-only snapshot of token metadata keyed by address.

    - Built once per refresh; never mutated afterwards
    - Duplicate addresses: the later record wins
    - Addresses are matched exactly (no case folding)
    """

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        by_address: Dict[str, Token] = {}
        for t in tokens:
            by_address[t.address] = t
        self._tokens: Mapping[str, Token] = MappingProxyType(by_address)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "TokenRegistry":
        return cls(Token.from_record(r) for r in records)

    def lookup(self, address: str) -> Optional[Token]:
        return self._tokens.get(address)

    def symbol_for(self, address: str) -> str:
        token = self.lookup(address)
        if token is None or not token.symbol:
            return address
        return token.symbol

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, address: object) -> bool:
        return address in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)


def format_path(path: Sequence[str], registry: TokenRegistry) -> str:
    return " -> ".join(registry.symbol_for(hop) for hop in path)
