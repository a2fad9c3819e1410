from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional, Sequence, Tuple

import pandas as pd
import requests

from .api_clients import CoinGeckoClient, MempoolClient
from .config import (
    BLOCK_SUBSIDY_BTC,
    BLOCKS_PER_DAY,
    FEE_SAMPLE_BLOCKS,
    HASHES_PER_TH,
    HASHRATE_WINDOW,
    POOL_SAMPLE_BLOCKS,
    PRICE_ASSET_ID,
    PRICE_CURRENCY,
    RECENT_BLOCKS_SHOWN,
    SATS_PER_BTC,
    TOP_POOL_COUNT,
    UNKNOWN_POOL,
)
from .errors import MalformedResponse, NetworkFailure
from .models import BlockSummary, PoolShare, Snapshot
from .responses import (
    BLOCKS,
    DIFFICULTY,
    FEES,
    HASHRATE,
    MEMPOOL,
    PRICE,
    TIP_HEIGHT,
    DifficultyAdjustment,
    FeeEstimate,
    HashrateSample,
    MempoolStats,
    PriceQuote,
    RawBlock,
    RawResponses,
    parse_blocks,
    parse_tip_height,
)

logger = logging.getLogger(__name__)


def average_fee_per_block(blocks: Sequence[RawBlock]) -> float:
    """Mean total fees (sats) over the most recent blocks, absent fees count as zero."""
    fees = pd.Series([block.total_fees for block in blocks[:FEE_SAMPLE_BLOCKS]], dtype="float64")
    if fees.empty:
        return 0.0
    return float(fees.fillna(0).mean())


def effective_block_reward(avg_fee_sats: float, subsidy: float = BLOCK_SUBSIDY_BTC) -> float:
    return subsidy + avg_fee_sats / SATS_PER_BTC


def daily_mining_revenue(block_reward: float, price: float) -> float:
    return block_reward * BLOCKS_PER_DAY * price


def pool_distribution(blocks: Sequence[RawBlock]) -> Tuple[PoolShare, ...]:
    """Rank pools by blocks found in the sampled window, ties keep first-seen order."""
    names = pd.Series(
        [block.pool_name or UNKNOWN_POOL for block in blocks[:POOL_SAMPLE_BLOCKS]],
        dtype="object",
    )
    if names.empty:
        return ()

    counts = (
        names.groupby(names, sort=False)
        .size()
        .sort_values(ascending=False, kind="stable")
        .head(TOP_POOL_COUNT)
    )
    return tuple(
        PoolShare(
            name=str(name),
            blocks=int(count),
            percentage=float(round(count / POOL_SAMPLE_BLOCKS * 100, 1)),
        )
        for name, count in counts.items()
    )


def mining_profitability_per_th(
    hashrate: float, price: float, subsidy: float = BLOCK_SUBSIDY_BTC
) -> Optional[float]:
    """Daily USD earned by 1 TH/s.

    Subsidy only: transaction fees are left out, so this is a floor estimate
    and intentionally differs from :func:`effective_block_reward`.
    """
    if not hashrate or not price:
        return None
    return (HASHES_PER_TH / hashrate) * BLOCKS_PER_DAY * subsidy * price


def summarize_blocks(blocks: Sequence[RawBlock]) -> Tuple[BlockSummary, ...]:
    return tuple(
        BlockSummary(
            height=block.height,
            tx_count=block.tx_count,
            pool_name=block.pool_name or UNKNOWN_POOL,
            total_fees=block.total_fees or 0,
        )
        for block in blocks[:RECENT_BLOCKS_SHOWN]
    )


def build_snapshot(
    responses: RawResponses,
    subsidy: float = BLOCK_SUBSIDY_BTC,
    asset_id: str = PRICE_ASSET_ID,
    currency: str = PRICE_CURRENCY,
    fetched_at: Optional[float] = None,
) -> Snapshot:
    """Validate all payloads of one cycle and derive the snapshot."""
    quote = PriceQuote.from_payload(responses.price, asset_id, currency)
    adjustment = DifficultyAdjustment.from_payload(responses.difficulty)
    height = parse_tip_height(responses.tip_height)
    hashrate = HashrateSample.from_payload(responses.hashrate)
    mempool = MempoolStats.from_payload(responses.mempool)
    fees = FeeEstimate.from_payload(responses.fees)
    blocks = parse_blocks(responses.blocks)

    difficulty = adjustment.difficulty
    if difficulty is None:
        difficulty = hashrate.current_difficulty
    if difficulty is None:
        raise MalformedResponse(DIFFICULTY, "difficulty")

    avg_fee = average_fee_per_block(blocks)
    block_reward = effective_block_reward(avg_fee, subsidy)

    return Snapshot(
        price=quote.price,
        price_change_24h=quote.change_24h,
        difficulty=difficulty,
        block_height=height,
        hashrate=hashrate.current_hashrate,
        next_difficulty_adjustment=adjustment.estimated_retarget,
        mempool_size=mempool.count,
        avg_block_time=adjustment.time_avg,
        network_fee_rate=fees.fastest_fee,
        block_reward=block_reward,
        block_subsidy=subsidy,
        total_fees=avg_fee,
        daily_mining_revenue=daily_mining_revenue(block_reward, quote.price),
        profitability_per_th=mining_profitability_per_th(hashrate.current_hashrate, quote.price, subsidy),
        recent_blocks=summarize_blocks(blocks),
        mining_pools=pool_distribution(blocks),
        difficulty_change=adjustment.difficulty_change,
        blocks_until_adjustment=adjustment.remaining_blocks,
        fetched_at=time.time() if fetched_at is None else fetched_at,
    )


async def _fetch(source: str, call: Callable[[], Any]) -> Any:
    try:
        return await asyncio.to_thread(call)
    except requests.JSONDecodeError as exc:
        raise MalformedResponse(source, "<body>", str(exc)) from exc
    except requests.RequestException as exc:
        raise NetworkFailure(source, exc) from exc


async def fetch_raw_responses(
    mempool: MempoolClient,
    prices: CoinGeckoClient,
    asset_id: str = PRICE_ASSET_ID,
    currency: str = PRICE_CURRENCY,
    hashrate_window: str = HASHRATE_WINDOW,
) -> RawResponses:
    """Issue all seven requests concurrently and wait for every one of them."""
    price, difficulty, tip_height, hashrate, mempool_stats, fees, blocks = await asyncio.gather(
        _fetch(PRICE, lambda: prices.get_simple_price(asset_id, currency)),
        _fetch(DIFFICULTY, mempool.get_difficulty_adjustment),
        _fetch(TIP_HEIGHT, mempool.get_tip_height),
        _fetch(HASHRATE, lambda: mempool.get_hashrate(hashrate_window)),
        _fetch(MEMPOOL, mempool.get_mempool),
        _fetch(FEES, mempool.get_recommended_fees),
        _fetch(BLOCKS, mempool.get_recent_blocks),
    )
    return RawResponses(
        price=price,
        difficulty=difficulty,
        tip_height=tip_height,
        hashrate=hashrate,
        mempool=mempool_stats,
        fees=fees,
        blocks=blocks,
    )


async def fetch_snapshot(
    mempool: MempoolClient,
    prices: CoinGeckoClient,
    subsidy: float = BLOCK_SUBSIDY_BTC,
) -> Snapshot:
    """Fetch every data source and build one complete snapshot."""
    started = time.perf_counter()
    responses = await fetch_raw_responses(mempool, prices)
    snapshot = build_snapshot(responses, subsidy=subsidy)
    logger.info(
        "Snapshot built in %.2fs: height=%d price=%.2f pools=%d",
        time.perf_counter() - started,
        snapshot.block_height,
        snapshot.price,
        len(snapshot.mining_pools),
    )
    return snapshot


__all__ = [
    "average_fee_per_block",
    "build_snapshot",
    "daily_mining_revenue",
    "effective_block_reward",
    "fetch_raw_responses",
    "fetch_snapshot",
    "mining_profitability_per_th",
    "pool_distribution",
    "summarize_blocks",
]
