from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence

from swapvol.ports.indexer_port import IndexerPort
from swapvol.core.amounts import format_amount_with_token
from swapvol.core.dto import Trade
from swapvol.core.errors import ParseError
from swapvol.core.models import QueryConfig, TradeHistory, TradeRow
from swapvol.core.registry import TokenRegistry, format_path
from swapvol.core.volume import aggregate_volume

ProgressFn = Callable[[str, Dict[str, Any]], None]


def _noop_progress(event: str, data: Dict[str, Any]) -> None:
    return None


class HistoryService:
    """
    Builds a priced swap history for the recent block window.

    - Registry: one token snapshot per run
    - Trades: newest block first
    - Volume: per trade and in total; unpriceable trades are reported, not zeroed
    """

    def __init__(self, indexer: IndexerPort) -> None:
        self.indexer = indexer

    def run(self, cfg: QueryConfig, on_progress: Optional[ProgressFn] = None) -> TradeHistory:
        progress = on_progress or _noop_progress
        progress("start", {"account": cfg.account, "window_blocks": cfg.window_blocks})

        registry = self.load_registry()
        progress("tokens", {"count": len(registry)})

        trades, is_complete = self._fetch(cfg)
        progress("trades", {"count": len(trades), "is_complete": is_complete})

        history = self.build_history(trades, registry)
        history.is_complete = is_complete
        progress(
            "done",
            {
                "trades": len(history.rows),
                "skipped": len(history.skipped),
                "total_volume": history.total_volume,
            },
        )
        return history

    def load_registry(self) -> TokenRegistry:
        return TokenRegistry(self.indexer.get_tokens())

    def fetch_trades(self, cfg: QueryConfig) -> List[Trade]:
        trades, _ = self._fetch(cfg)
        return trades

    def build_history(self, trades: Sequence[Trade], registry: TokenRegistry) -> TradeHistory:
        totals = aggregate_volume(trades, registry)
        rows = [self._row(t, vol, registry) for t, vol in zip(trades, totals.volumes)]
        return TradeHistory(rows=rows, total_volume=totals.total, skipped=list(totals.skipped))

    # -------------------------
    # Helpers
    # -------------------------

    def _fetch(self, cfg: QueryConfig):
        status = self.indexer.get_status()
        block_stop = status.indexed_till
        block_start = max(0, block_stop - int(cfg.window_blocks))

        page = self.indexer.get_trades(
            block_start,
            block_stop,
            contract_address=cfg.account or None,
        )
        # newest first; equal blocks keep indexer order
        trades = sorted(page.data, key=lambda t: t.block_num, reverse=True)
        return trades, page.is_complete

    @staticmethod
    def _row(trade: Trade, volume: Optional[Decimal], registry: TokenRegistry) -> TradeRow:
        try:
            sell = format_amount_with_token(trade.amount_in, trade.token_in, registry)
        except ParseError:
            sell = trade.amount_in
        try:
            buy = format_amount_with_token(trade.amount_out, trade.token_out, registry)
        except ParseError:
            buy = trade.amount_out

        return TradeRow(
            block_num=trade.block_num,
            extrinsic_index=trade.extrinsic_index,
            user=trade.origin,
            sell_amount=sell,
            buy_amount=buy,
            path=format_path(trade.path, registry),
            volume=volume,
        )
