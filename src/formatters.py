"""Display formatting for dashboard values.

Every formatter is total: ``None``, ``0``, ``NaN`` and anything that is not a
real number render as ``"N/A"``. Zero is deliberately treated as "no data"
because the upstream APIs report missing metrics as zero.
"""

from __future__ import annotations

import datetime as dt
import math
from numbers import Real
from typing import Any

from .config import SATS_PER_BTC

NOT_AVAILABLE = "N/A"

_MAGNITUDES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def _is_absent(value: Any) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return True
    return value == 0 or math.isnan(value)


def format_number(value: Any) -> str:
    """Scale large counts to T/B/M/K, otherwise group thousands.

    Fractions below one keep three significant digits.
    """
    if _is_absent(value):
        return NOT_AVAILABLE
    for threshold, suffix in _MAGNITUDES:
        if value >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    if float(value).is_integer():
        return f"{int(value):,}"
    if abs(value) < 1:
        return f"{value:.3g}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_hashrate(hashrate: Any) -> str:
    if _is_absent(hashrate):
        return NOT_AVAILABLE
    return f"{hashrate / 1e18:.2f} EH/s"


def format_difficulty(difficulty: Any) -> str:
    if _is_absent(difficulty):
        return NOT_AVAILABLE
    return f"{difficulty / 1e12:.2f}T"


def format_price(price: Any) -> str:
    if _is_absent(price):
        return NOT_AVAILABLE
    return f"{price:,.2f}"


def format_btc(sats: Any) -> str:
    if _is_absent(sats):
        return NOT_AVAILABLE
    return f"{sats / SATS_PER_BTC:.8f} BTC"


def format_coins(btc: Any, decimals: int = 4) -> str:
    """Amount already expressed in BTC."""
    if _is_absent(btc):
        return NOT_AVAILABLE
    return f"{btc:.{decimals}f} BTC"


def format_fee_rate(sat_per_vbyte: Any) -> str:
    if _is_absent(sat_per_vbyte):
        return NOT_AVAILABLE
    return f"{sat_per_vbyte:g} sat/vB"


def format_percent(value: Any) -> str:
    if _is_absent(value):
        return NOT_AVAILABLE
    return f"{value:.2f}%"


def format_block_time(seconds: Any) -> str:
    """Average block interval in minutes."""
    if _is_absent(seconds):
        return NOT_AVAILABLE
    return f"{seconds / 60:.1f}m"


def format_timestamp(timestamp: Any) -> str:
    """Local calendar date for a unix timestamp in seconds."""
    if _is_absent(timestamp):
        return NOT_AVAILABLE
    try:
        return dt.datetime.fromtimestamp(timestamp).strftime("%d %b %Y")
    except (OverflowError, OSError, ValueError):
        return NOT_AVAILABLE


def format_profitability(usd_per_day: Any) -> str:
    if _is_absent(usd_per_day):
        return NOT_AVAILABLE
    return f"{usd_per_day:.2f}/day per TH/s"


__all__ = [
    "NOT_AVAILABLE",
    "format_block_time",
    "format_btc",
    "format_coins",
    "format_difficulty",
    "format_fee_rate",
    "format_hashrate",
    "format_number",
    "format_percent",
    "format_price",
    "format_profitability",
    "format_timestamp",
]
