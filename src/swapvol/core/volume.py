from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, List, Optional

from swapvol.config import settings
from swapvol.core.amounts import parse_raw_amount, to_human_float
from swapvol.core.dto import Trade
from swapvol.core.errors import AmountRangeError, SwapVolError
from swapvol.core.registry import TokenRegistry

logger = logging.getLogger(__name__)

_QUANT = Decimal(1).scaleb(-settings.VOLUME_FRACTION_DIGITS)


def round_volume(value: float) -> Decimal:
    if not math.isfinite(value):
        raise AmountRangeError(f"Volume {value} is not finite")
    # Decimal(float) is exact, so half-up applies to the true binary value
    exact = Decimal(value)
    with localcontext() as ctx:
        # room for every integer digit plus the kept fraction
        ctx.prec = max(28, exact.adjusted() + settings.VOLUME_FRACTION_DIGITS + 2)
        return exact.quantize(_QUANT, rounding=ROUND_HALF_UP)


def _leg_value(raw_amount: str, address: str, registry: TokenRegistry) -> float:
    # malformed amounts fail even when the leg is unpriced
    amount = parse_raw_amount(raw_amount)

    token = registry.lookup(address)
    if token is None or not token.price:
        return 0.0

    value = to_human_float(amount, token.decimals) * float(token.price)
    if not math.isfinite(value):
        raise AmountRangeError(f"Value of {raw_amount} {token.symbol} is not finite")
    return value


def trade_volume(trade: Trade, registry: TokenRegistry) -> Decimal:
    """
    Monetary volume of one swap, rounded to VOLUME_FRACTION_DIGITS.

    Each leg is priced as human amount * reference price (unknown token:
    0 decimals, price 0). The larger leg is the trade's volume, so a leg
    with an unknown price never drags the estimate down. Raises ParseError
    on a malformed amount.
    """
    value_in = _leg_value(trade.amount_in, trade.token_in, registry)
    value_out = _leg_value(trade.amount_out, trade.token_out, registry)

    return round_volume(max(value_in, value_out))


@dataclass(frozen=True)
class SkippedTrade:
    trade: Trade
    reason: str


@dataclass(frozen=True)
class VolumeTotal:
    total: Decimal
    counted: int = 0
    skipped: List[SkippedTrade] = field(default_factory=list)
    volumes: List[Optional[Decimal]] = field(default_factory=list)    # per trade, input order


def aggregate_volume(trades: Iterable[Trade], registry: TokenRegistry) -> VolumeTotal:
    """
    Sum per-trade volumes into one total.

    Every trade is rounded on its own first, then the rounded values are
    added as floats and the sum is rounded again. Trades whose volume
    cannot be computed are left out, listed in `skipped` and carry None
    in `volumes`.
    """
    acc = 0.0
    counted = 0
    skipped: List[SkippedTrade] = []
    volumes: List[Optional[Decimal]] = []

    for trade in trades:
        try:
            vol = trade_volume(trade, registry)
            nxt = acc + float(str(vol))
            if not math.isfinite(nxt):
                raise AmountRangeError("Total volume would overflow a float")
        except SwapVolError as e:
            logger.warning(
                "Skipping trade at block %s (extrinsic %s): %s",
                trade.block_num,
                trade.extrinsic_index,
                e,
            )
            skipped.append(SkippedTrade(trade=trade, reason=str(e)))
            volumes.append(None)
            continue
        acc = nxt
        counted += 1
        volumes.append(vol)

    return VolumeTotal(total=round_volume(acc), counted=counted, skipped=skipped, volumes=volumes)


def total_volume(trades: Iterable[Trade], registry: TokenRegistry) -> Decimal:
    return aggregate_volume(trades, registry).total
