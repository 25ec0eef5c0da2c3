from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from swapvol.core.errors import ParseError


def _require(record: Mapping[str, Any], key: str, kind: str) -> Any:
    if not isinstance(record, Mapping):
        raise ParseError(f"{kind} record must be an object, got {type(record).__name__}")
    if key not in record or record[key] is None:
        raise ParseError(f"{kind} record missing '{key}': {dict(record)}")
    return record[key]


def _non_negative_int(value: Any, key: str, kind: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"{kind} '{key}' must be an integer, got {value!r}")
    if value < 0:
        raise ParseError(f"{kind} '{key}' must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int
    price: Optional[float] = None     # None = unknown reference price

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Token":
        address = str(_require(record, "address", "token"))
        symbol = str(_require(record, "symbol", "token"))
        decimals = _non_negative_int(_require(record, "decimals", "token"), "decimals", "token")

        price = record.get("price")
        if price is not None:
            if isinstance(price, bool) or not isinstance(price, (int, float)):
                raise ParseError(f"token 'price' must be a number, got {price!r}")
            try:
                price = float(price)
            except OverflowError as e:
                raise ParseError(f"token 'price' out of range: {price}") from e
            # json.loads accepts NaN / Infinity
            if not math.isfinite(price):
                raise ParseError(f"token 'price' must be finite, got {price}")
            if price < 0:
                raise ParseError(f"token 'price' must be >= 0, got {price}")

        return cls(address=address, symbol=symbol, decimals=decimals, price=price)


@dataclass(frozen=True)
class Trade:
    origin: str
    token_in: str
    token_out: str
    path: Tuple[str, ...]
    amount_in: str          # raw smallest-unit amount, base-10
    amount_out: str         # raw smallest-unit amount, base-10
    block_num: int
    extrinsic_index: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Trade":
        path = _require(record, "path", "trade")
        if not isinstance(path, (list, tuple)) or not path:
            raise ParseError(f"trade 'path' must be a non-empty list, got {path!r}")

        return cls(
            origin=str(_require(record, "origin", "trade")),
            token_in=str(_require(record, "token_in", "trade")),
            token_out=str(_require(record, "token_out", "trade")),
            path=tuple(str(p) for p in path),
            amount_in=str(_require(record, "amount_in", "trade")),
            amount_out=str(_require(record, "amount_out", "trade")),
            block_num=_non_negative_int(_require(record, "block_num", "trade"), "block_num", "trade"),
            extrinsic_index=_non_negative_int(
                _require(record, "extrinsic_index", "trade"), "extrinsic_index", "trade"
            ),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "token_in": self.token_in,
            "token_out": self.token_out,
            "path": list(self.path),
            "amount_in": self.amount_in,
            "amount_out": self.amount_out,
            "block_num": self.block_num,
            "extrinsic_index": self.extrinsic_index,
        }


@dataclass(frozen=True)
class IndexerStatus:
    indexed_till: int


@dataclass(frozen=True)
class TradesPage:
    data: List[Trade] = field(default_factory=list)
    is_complete: bool = True
