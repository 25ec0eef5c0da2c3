import json
from pathlib import Path

from swapvol.adapters.indexer.http_indexer_adapter import parse_records
from swapvol.ports.indexer_port import IndexerPort
from swapvol.core.dto import IndexerStatus, Token, Trade, TradesPage
from swapvol.core.errors import DataSourceError
from typing import Optional, List

class StaticIndexerAdapter(IndexerPort):
    def __init__(self,
                 tokens: Optional[List[Token]] = None,
                 trades: Optional[List[Trade]] = None,
                 indexed_till: Optional[int] = None,
                 ):
        self._tokens = list(tokens or [])
        self._trades = list(trades or [])
        if indexed_till is None:
            indexed_till = max((t.block_num for t in self._trades), default=0)
        self._indexed_till = indexed_till

    @classmethod
    def from_files(cls, tokens_path: Optional[str] = None, trades_path: Optional[str] = None):
        tokens = parse_records(_load_json_list(tokens_path, "tokens"), Token.from_record, "token")
        trades = parse_records(_load_json_list(trades_path, "trades"), Trade.from_record, "trade")
        return cls(tokens=tokens, trades=trades)

    def get_tokens(self):
        return list(self._tokens)

    def get_status(self):
        return IndexerStatus(indexed_till=self._indexed_till)

    def get_trades(self, block_start, block_stop, contract_address = None):
        items = [
            t for t in self._trades
            if t.block_num >= block_start
            and t.block_num <= block_stop
            and (not contract_address or t.origin == contract_address)
        ]
        return TradesPage(data=items, is_complete=True)


def _load_json_list(path: Optional[str], kind: str) -> list:
    if not path:
        return []
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise DataSourceError(f"Cannot read {kind} file {path}: {e}") from e

    # trades dumps may keep the indexer's {"data": [...], "is_complete": ...} envelope
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        data = data["data"]
    if not isinstance(data, list):
        raise DataSourceError(f"Expected a JSON list of {kind} in {path}")
    return data
