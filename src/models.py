from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BlockSummary:
    height: int
    tx_count: int
    pool_name: str
    total_fees: float


@dataclass(frozen=True)
class PoolShare:
    """Blocks attributed to one pool within the sampled window."""

    name: str
    blocks: int
    percentage: float


@dataclass(frozen=True)
class Snapshot:
    """Complete, immutable view of the network produced by one refresh cycle."""

    # Price data
    price: float
    price_change_24h: float

    # Network data
    difficulty: float
    block_height: int
    hashrate: float
    next_difficulty_adjustment: Optional[float]
    mempool_size: int
    avg_block_time: float
    network_fee_rate: float

    # Mining data
    block_reward: float
    block_subsidy: float
    total_fees: float
    daily_mining_revenue: float
    profitability_per_th: Optional[float]
    recent_blocks: Tuple[BlockSummary, ...]
    mining_pools: Tuple[PoolShare, ...]
    difficulty_change: float
    blocks_until_adjustment: int

    fetched_at: float


__all__ = ["BlockSummary", "PoolShare", "Snapshot"]
