"""Presentation model for the dashboard cards.

Maps a :class:`Snapshot` onto titled sections of stat cards and the rows of
the mining-activity lists. Every value goes through :mod:`src.formatters`;
nothing here touches the UI toolkit, so the page code only lays things out.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import BLOCKS_PER_DAY, FEE_SAMPLE_BLOCKS, POOL_SAMPLE_BLOCKS, UNKNOWN_POOL
from .formatters import (
    format_block_time,
    format_btc,
    format_coins,
    format_difficulty,
    format_fee_rate,
    format_hashrate,
    format_number,
    format_percent,
    format_price,
    format_profitability,
    format_timestamp,
)
from .models import Snapshot


@dataclass(frozen=True)
class StatCard:
    title: str
    value: str
    icon: str
    subtitle: Optional[str] = None
    trend: Optional[float] = None


@dataclass(frozen=True)
class CardSection:
    title: str
    cards: Tuple[StatCard, ...]


@dataclass(frozen=True)
class PoolRow:
    name: str
    percentage: str
    blocks: str
    color: str


@dataclass(frozen=True)
class BlockRow:
    height: str
    pool: str
    transactions: str
    fees: str


def build_sections(snapshot: Snapshot) -> List[CardSection]:
    return [
        CardSection(
            "Price Information",
            (
                StatCard(
                    "Bitcoin Price (USD)",
                    format_price(snapshot.price),
                    "attach_money",
                    trend=snapshot.price_change_24h,
                ),
                StatCard("24h Price Change", format_percent(snapshot.price_change_24h), "bar_chart"),
            ),
        ),
        CardSection(
            "Mining Metrics",
            (
                StatCard("Block Reward", format_coins(snapshot.block_reward), "emoji_events", "Subsidy + Fees"),
                StatCard("Block Subsidy", format_coins(snapshot.block_subsidy), "construction", "Fixed reward"),
                StatCard(
                    "Average Block Fees",
                    format_btc(snapshot.total_fees),
                    "receipt_long",
                    f"Last {FEE_SAMPLE_BLOCKS} blocks",
                ),
                StatCard(
                    "Daily Mining Revenue",
                    format_price(snapshot.daily_mining_revenue),
                    "calculate",
                    f"{BLOCKS_PER_DAY} blocks/day",
                ),
                StatCard(
                    "Mining Profitability",
                    format_profitability(snapshot.profitability_per_th),
                    "trending_up",
                    "Estimated per TH/s",
                ),
            ),
        ),
        CardSection(
            "Network Statistics",
            (
                StatCard("Current Block Height", format_number(snapshot.block_height), "view_in_ar", "Latest block number"),
                StatCard("Network Hashrate", format_hashrate(snapshot.hashrate), "bolt", "Mining power"),
                StatCard(
                    "Mining Difficulty",
                    format_difficulty(snapshot.difficulty),
                    "insights",
                    "Current difficulty",
                    trend=snapshot.difficulty_change,
                ),
            ),
        ),
        CardSection(
            "Difficulty Adjustment",
            (
                StatCard(
                    "Blocks Until Adjustment",
                    format_number(snapshot.blocks_until_adjustment),
                    "schedule",
                    "Remaining blocks",
                ),
                StatCard(
                    "Estimated Difficulty Change",
                    format_percent(snapshot.difficulty_change),
                    "trending_up",
                    "Next adjustment",
                ),
                StatCard(
                    "Adjustment Date",
                    format_timestamp(snapshot.next_difficulty_adjustment),
                    "event",
                    "Estimated",
                ),
            ),
        ),
        CardSection(
            "Mempool & Fees",
            (
                StatCard("Mempool Size", format_number(snapshot.mempool_size), "pending", "Pending transactions"),
                StatCard("Average Block Time", format_block_time(snapshot.avg_block_time), "timer", "Last 144 blocks"),
                StatCard("Fast Fee Rate", format_fee_rate(snapshot.network_fee_rate), "speed", "Recommended fee"),
            ),
        ),
    ]


def pool_color(index: int) -> str:
    return f"hsl({index * 72}, 70%, 50%)"


def pool_rows(snapshot: Snapshot) -> List[PoolRow]:
    return [
        PoolRow(
            name=pool.name,
            percentage=f"{pool.percentage:.1f}%",
            blocks=f"{pool.blocks} blocks",
            color=pool_color(index),
        )
        for index, pool in enumerate(snapshot.mining_pools)
    ]


def block_rows(snapshot: Snapshot) -> List[BlockRow]:
    return [
        BlockRow(
            height=f"#{block.height}",
            pool="Unknown Pool" if block.pool_name == UNKNOWN_POOL else block.pool_name,
            transactions=f"{block.tx_count:,} txs",
            fees=format_btc(block.total_fees),
        )
        for block in snapshot.recent_blocks
    ]


def pool_sample_caption() -> str:
    return f"Based on last {POOL_SAMPLE_BLOCKS} blocks"


def last_updated_label(snapshot: Optional[Snapshot]) -> str:
    if snapshot is None:
        return "Last updated: never"
    return f"Last updated: {dt.datetime.fromtimestamp(snapshot.fetched_at):%H:%M:%S}"


__all__ = [
    "BlockRow",
    "CardSection",
    "PoolRow",
    "StatCard",
    "block_rows",
    "build_sections",
    "last_updated_label",
    "pool_color",
    "pool_rows",
    "pool_sample_caption",
]
