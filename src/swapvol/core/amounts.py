from __future__ import annotations

import re
from typing import Union

from swapvol.config import settings
from swapvol.core.errors import AmountRangeError, ParseError
from swapvol.core.registry import TokenRegistry

_DIGITS = re.compile(r"[0-9]+")

RawAmount = Union[str, int]


def parse_raw_amount(raw: RawAmount) -> int:
    """
    Parse a raw smallest-unit amount into an unbounded int.

    Only plain ASCII base-10 digits are accepted: no sign, no decimal
    point, no whitespace, no digit separators.
    """
    if isinstance(raw, bool):
        raise ParseError(f"Invalid raw amount: {raw!r}")
    if isinstance(raw, int):
        if raw < 0:
            raise ParseError(f"Raw amount must be non-negative: {raw}")
        return raw
    if not isinstance(raw, str) or not _DIGITS.fullmatch(raw):
        raise ParseError(f"Invalid raw amount: {raw!r}")
    return int(raw)


def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f"decimals must be a non-negative integer, got {decimals!r}")
    return decimals


def format_amount(raw: RawAmount, decimals: int) -> str:
    """
    Render a raw amount as a human-readable decimal string.

    The integer part is exact at any magnitude. The fraction is the
    zero-padded remainder cut to its first AMOUNT_FRACTION_DIGITS digits
    (floor truncation, never rounded). With 0 decimals only the integer
    part is returned.
    """
    value = parse_raw_amount(raw)
    decimals = _check_decimals(decimals)

    divisor = 10 ** decimals
    integer_part = value // divisor
    if decimals == 0:
        return str(integer_part)

    fraction = str(value % divisor).zfill(decimals)
    fraction = fraction[: settings.AMOUNT_FRACTION_DIGITS]
    return f"{integer_part}.{fraction}"


def to_human_float(raw: RawAmount, decimals: int) -> float:
    # lossy on purpose: pricing runs on floats
    value = parse_raw_amount(raw)
    decimals = _check_decimals(decimals)
    try:
        return value / (10 ** decimals)
    except OverflowError as e:
        raise AmountRangeError(
            f"Amount {value} with {decimals} decimals does not fit a float"
        ) from e


def format_amount_with_token(raw: RawAmount, address: str, registry: TokenRegistry) -> str:
    token = registry.lookup(address)
    if token is None:
        # unknown token: show what the indexer sent
        return str(raw)
    return f"{format_amount(raw, token.decimals)} {token.symbol}"
