from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from swapvol.core.models import TradeHistory


def _dec_to_str(x: Optional[Decimal]) -> Optional[str]:
    # keep as string for JSON precision safety
    if x is None:
        return None
    return format(x, "f")


def history_to_dict(h: TradeHistory) -> Dict[str, Any]:
    return {
        "total_volume": _dec_to_str(h.total_volume),
        "is_complete": h.is_complete,
        "trades": [
            {
                "block_num": r.block_num,
                "extrinsic_index": r.extrinsic_index,
                "user": r.user,
                "sell_amount": r.sell_amount,
                "buy_amount": r.buy_amount,
                "path": r.path,
                "volume": _dec_to_str(r.volume),
            }
            for r in h.rows
        ],
        "skipped": [
            {
                "block_num": s.trade.block_num,
                "extrinsic_index": s.trade.extrinsic_index,
                "reason": s.reason,
            }
            for s in h.skipped
        ],
    }
