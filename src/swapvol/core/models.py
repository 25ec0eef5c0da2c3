from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from swapvol.config import settings
from swapvol.core.volume import SkippedTrade



# Configuration model

@dataclass(frozen=True)
class QueryConfig:
    """
    User input / run configuration for a trade history query.
    """

    account: Optional[str] = None     # None / "" = all accounts
    window_blocks: int = settings.TRADE_WINDOW_BLOCKS



# History models

@dataclass
class TradeRow:

    block_num: int
    extrinsic_index: int
    user: str

    sell_amount: str
    buy_amount: str
    path: str

    volume: Optional[Decimal]     # None when the trade could not be priced


@dataclass
class TradeHistory:

    rows: List[TradeRow] = field(default_factory=list)
    total_volume: Decimal = Decimal("0.000")
    skipped: List[SkippedTrade] = field(default_factory=list)
    is_complete: bool = True
