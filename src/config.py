from __future__ import annotations

import os


def _int_from_env(name: str, default: int) -> int:
    """Best-effort conversion for optional integer environment settings."""
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _float_from_env(name: str, default: float) -> float:
    """Best-effort conversion for optional float environment settings."""
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# Data sources
MEMPOOL_BASE_URL = os.environ.get("MEMPOOL_BASE_URL", "https://mempool.space")
COINGECKO_BASE_URL = os.environ.get("COINGECKO_BASE_URL", "https://api.coingecko.com")
PRICE_ASSET_ID = os.environ.get("PRICE_ASSET_ID", "bitcoin")
PRICE_CURRENCY = os.environ.get("PRICE_CURRENCY", "usd")
HASHRATE_WINDOW = os.environ.get("HASHRATE_WINDOW", "1d")
USER_AGENT = "blockboard/0.1"

REFRESH_INTERVAL_SECONDS = _float_from_env("REFRESH_INTERVAL_SECONDS", 30.0)
REQUEST_TIMEOUT = _int_from_env("REQUEST_TIMEOUT", 15)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Block subsidy in BTC, must be bumped at every halving
BLOCK_SUBSIDY_BTC = _float_from_env("BLOCK_SUBSIDY_BTC", 6.25)

# Protocol constants
BLOCKS_PER_DAY = 144
SATS_PER_BTC = 100_000_000
HASHES_PER_TH = 1e12

# Sampling windows over the recent-blocks feed
FEE_SAMPLE_BLOCKS = 10
POOL_SAMPLE_BLOCKS = 100
TOP_POOL_COUNT = 5
RECENT_BLOCKS_SHOWN = 10

UNKNOWN_POOL = "Unknown"
FETCH_ERROR_MESSAGE = "Failed to fetch Bitcoin data. Please try again."

# Palette
BITCOIN_ORANGE = "#F7931A"

__all__ = [
    "MEMPOOL_BASE_URL",
    "COINGECKO_BASE_URL",
    "PRICE_ASSET_ID",
    "PRICE_CURRENCY",
    "HASHRATE_WINDOW",
    "USER_AGENT",
    "REFRESH_INTERVAL_SECONDS",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "BLOCK_SUBSIDY_BTC",
    "BLOCKS_PER_DAY",
    "SATS_PER_BTC",
    "HASHES_PER_TH",
    "FEE_SAMPLE_BLOCKS",
    "POOL_SAMPLE_BLOCKS",
    "TOP_POOL_COUNT",
    "RECENT_BLOCKS_SHOWN",
    "UNKNOWN_POOL",
    "FETCH_ERROR_MESSAGE",
    "BITCOIN_ORANGE",
]
