from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from swapvol.core.models import TradeHistory
from swapvol.io.schemas import history_to_dict

TABLE_HEADERS = ["Block Number", "User", "Sell Amount", "Buy Amount", "Path", "Volume"]
NO_TRADES_MESSAGE = "No trades found for this account."


def history_table_rows(history: TradeHistory) -> List[List[str]]:
    return [
        [
            str(r.block_num),
            r.user,
            r.sell_amount,
            r.buy_amount,
            r.path,
            format(r.volume, "f") if r.volume is not None else "n/a",
        ]
        for r in history.rows
    ]


def write_history_json(history: TradeHistory, out_dir: str, filename: str = "history.json") -> str:
    p = Path(out_dir)
    p.mkdir(parents=True, exist_ok=True)

    out_path = p / filename
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(history_to_dict(history), f, indent=2)

    return str(out_path)


def write_summary_md(
    history: TradeHistory,
    out_dir: str,
    filename: str = "summary.md",
    account: Optional[str] = None,
) -> str:
    """
    Trade history table with the total volume on top.
    """
    p = Path(out_dir)
    p.mkdir(parents=True, exist_ok=True)

    out_path = p / filename

    def cell(text: str) -> str:
        return text.replace("|", "\\|")

    lines = []
    lines.append("# Trade History\n\n")
    if account:
        lines.append(f"- Account: **{account}**\n")
    lines.append(f"- Trades: **{len(history.rows)}**\n")
    lines.append(f"- Total Volume: **{format(history.total_volume, 'f')}**\n")
    if not history.is_complete:
        lines.append("- _The indexer returned a partial result for this window._\n")
    lines.append("\n")

    if not history.rows:
        lines.append(f"_{NO_TRADES_MESSAGE}_\n")
    else:
        lines.append("| " + " | ".join(TABLE_HEADERS) + " |\n")
        lines.append("|" + "---|" * len(TABLE_HEADERS) + "\n")
        for row in history_table_rows(history):
            lines.append("| " + " | ".join(cell(c) for c in row) + " |\n")

    if history.skipped:
        lines.append("\n## Excluded from total volume\n\n")
        for s in history.skipped:
            lines.append(
                f"- block {s.trade.block_num} / extrinsic {s.trade.extrinsic_index}: {s.reason}\n"
            )

    with out_path.open("w", encoding="utf-8") as f:
        f.writelines(lines)

    return str(out_path)
