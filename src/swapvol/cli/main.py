from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
import time
from typing import List, Optional

from swapvol.config import settings
from swapvol.core.errors import SwapVolError
from swapvol.core.models import QueryConfig, TradeHistory
from swapvol.services.history_service import HistoryService
from swapvol.io.output_writer import (
    NO_TRADES_MESSAGE,
    TABLE_HEADERS,
    history_table_rows,
    write_history_json,
    write_summary_md,
)

from swapvol.adapters.indexer.http_indexer_adapter import HttpIndexerAdapter
from swapvol.adapters.indexer.static_indexer_adapter import StaticIndexerAdapter


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="swapvol", description="Swap trade history and volume")
    p.add_argument("--account", required=False, help="Only show trades of this account")
    p.add_argument("--window-blocks", type=int, default=settings.TRADE_WINDOW_BLOCKS, help="Blocks to look back from the indexer head")
    p.add_argument("--out", default="out", help="Output folder")
    p.add_argument("--no-write", action="store_true", help="Print only; do not write history.json / summary.md")
    p.add_argument("--tokens-file", help="Read tokens from a JSON file instead of the indexer")
    p.add_argument("--trades-file", help="Read trades from a JSON file instead of the indexer")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    return p


def _make_progress_reporter(cfg: QueryConfig):
    start_time = time.time()

    def _ts() -> str:
        return dt.datetime.now().strftime("%H:%M:%S")

    def progress(event: str, data: dict) -> None:
        if event == "start":
            who = cfg.account or "all accounts"
            print(f"[{_ts()}] Querying trades for {who} • last {cfg.window_blocks} blocks")
            return
        if event == "tokens":
            print(f"Loaded {data.get('count', 0)} token(s)")
            return
        if event == "trades":
            suffix = "" if data.get("is_complete", True) else " (partial)"
            print(f"Fetched {data.get('count', 0)} trade(s){suffix}")
            return
        if event == "done":
            elapsed = time.time() - start_time
            print(
                f"[{_ts()}] Done in {elapsed:.1f}s • "
                f"{data['trades']} trades • {data['skipped']} skipped"
            )
            return
        if event == "error":
            print(f"[{_ts()}] Error: {data.get('message', 'Unknown error')}", file=sys.stderr)

    return progress


def render_table(history: TradeHistory) -> List[str]:
    rows = history_table_rows(history)
    if not rows:
        return [NO_TRADES_MESSAGE]

    widths = [len(h) for h in TABLE_HEADERS]
    for row in rows:
        widths = [max(w, len(c)) for w, c in zip(widths, row)]

    def line(cells: List[str]) -> str:
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    out = [line(TABLE_HEADERS), line(["-" * w for w in widths])]
    out.extend(line(r) for r in rows)
    return out


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.window_blocks < 0:
        print("--window-blocks must be >= 0", file=sys.stderr)
        return 2

    cfg = QueryConfig(account=args.account or None, window_blocks=args.window_blocks)
    progress = _make_progress_reporter(cfg)

    # Ports
    try:
        if args.tokens_file or args.trades_file:
            indexer = StaticIndexerAdapter.from_files(args.tokens_file, args.trades_file)
            adapter_label = "StaticIndexerAdapter (files)"
        else:
            indexer = HttpIndexerAdapter()
            adapter_label = f"HttpIndexerAdapter ({settings.INDEXER_BASE_URL})"
    except SwapVolError as exc:
        progress("error", {"message": str(exc)})
        return 2

    svc = HistoryService(indexer=indexer)
    print(f"Adapter: {adapter_label}")
    try:
        history = svc.run(cfg, on_progress=progress)
    except SwapVolError as exc:
        progress("error", {"message": f"{exc.__class__.__name__}: {exc}"})
        return 1

    print(f"Total Volume: {format(history.total_volume, 'f')}")
    print()
    for text in render_table(history):
        print(text)

    if args.no_write:
        return 0

    # Outputs
    history_path = write_history_json(history, args.out)
    summary_path = write_summary_md(history, args.out, account=cfg.account)
    print()
    print(f"Wrote: {history_path}")
    print(f"Wrote: {summary_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
