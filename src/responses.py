"""Typed parse boundary for the upstream API payloads.

Each parser turns a decoded JSON payload into a frozen dataclass and raises
:class:`MalformedResponse` as soon as a required field is missing or not a
number, so no ``None``/``NaN`` ever leaks into a snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence

from .errors import MalformedResponse

PRICE = "price"
DIFFICULTY = "difficulty-adjustment"
TIP_HEIGHT = "tip-height"
HASHRATE = "hashrate"
MEMPOOL = "mempool"
FEES = "fees"
BLOCKS = "recent-blocks"


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


def _mapping(payload: Any, source: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise MalformedResponse(source, "<payload>", payload)
    return payload


def _require_number(payload: Mapping[str, Any], key: str, source: str) -> float:
    value = payload.get(key)
    if not _is_number(value):
        raise MalformedResponse(source, key, value)
    return float(value)


def _require_count(payload: Mapping[str, Any], key: str, source: str) -> int:
    value = _require_number(payload, key, source)
    if value < 0 or not value.is_integer():
        raise MalformedResponse(source, key, payload.get(key))
    return int(value)


def _optional_number(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    return float(value) if _is_number(value) else None


@dataclass(frozen=True)
class PriceQuote:
    price: float
    change_24h: float

    @classmethod
    def from_payload(cls, payload: Any, asset_id: str, currency: str) -> "PriceQuote":
        quote = _mapping(_mapping(payload, PRICE).get(asset_id), PRICE)
        return cls(
            price=_require_number(quote, currency, PRICE),
            change_24h=_require_number(quote, f"{currency}_24h_change", PRICE),
        )


@dataclass(frozen=True)
class DifficultyAdjustment:
    difficulty: Optional[float]
    estimated_retarget: Optional[float]
    time_avg: float
    difficulty_change: float
    remaining_blocks: int

    @classmethod
    def from_payload(cls, payload: Any) -> "DifficultyAdjustment":
        data = _mapping(payload, DIFFICULTY)
        difficulty = _optional_number(data, "difficulty")
        if difficulty is None:
            difficulty = _optional_number(data, "currentDifficulty")
        return cls(
            difficulty=difficulty,
            estimated_retarget=_optional_number(data, "estimatedRetargetDate"),
            time_avg=_require_number(data, "timeAvg", DIFFICULTY),
            difficulty_change=_require_number(data, "difficultyChange", DIFFICULTY),
            remaining_blocks=_require_count(data, "remainingBlocks", DIFFICULTY),
        )


def parse_tip_height(payload: Any) -> int:
    if not _is_number(payload) or payload < 0 or not float(payload).is_integer():
        raise MalformedResponse(TIP_HEIGHT, "height", payload)
    return int(payload)


@dataclass(frozen=True)
class HashrateSample:
    current_hashrate: float
    current_difficulty: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "HashrateSample":
        data = _mapping(payload, HASHRATE)
        return cls(
            current_hashrate=_require_number(data, "currentHashrate", HASHRATE),
            current_difficulty=_optional_number(data, "currentDifficulty"),
        )


@dataclass(frozen=True)
class MempoolStats:
    count: int

    @classmethod
    def from_payload(cls, payload: Any) -> "MempoolStats":
        return cls(count=_require_count(_mapping(payload, MEMPOOL), "count", MEMPOOL))


@dataclass(frozen=True)
class FeeEstimate:
    fastest_fee: float

    @classmethod
    def from_payload(cls, payload: Any) -> "FeeEstimate":
        return cls(fastest_fee=_require_number(_mapping(payload, FEES), "fastestFee", FEES))


@dataclass(frozen=True)
class RawBlock:
    height: int
    tx_count: int
    pool_name: Optional[str] = None
    total_fees: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RawBlock":
        data = _mapping(payload, BLOCKS)
        extras = data.get("extras") or {}
        if not isinstance(extras, Mapping):
            extras = {}
        pool = extras.get("pool") or {}
        pool_name = pool.get("name") if isinstance(pool, Mapping) else None
        return cls(
            height=_require_count(data, "height", BLOCKS),
            tx_count=_require_count(data, "tx_count", BLOCKS),
            pool_name=pool_name if isinstance(pool_name, str) and pool_name else None,
            total_fees=_optional_number(extras, "totalFees"),
        )


def parse_blocks(payload: Any) -> List[RawBlock]:
    if isinstance(payload, (str, bytes)) or not isinstance(payload, Sequence):
        raise MalformedResponse(BLOCKS, "<payload>", payload)
    return [RawBlock.from_payload(entry) for entry in payload]


@dataclass(frozen=True)
class RawResponses:
    """Decoded payloads of one refresh cycle, one field per data source."""

    price: Any
    difficulty: Any
    tip_height: Any
    hashrate: Any
    mempool: Any
    fees: Any
    blocks: Any


__all__ = [
    "BLOCKS",
    "DIFFICULTY",
    "FEES",
    "HASHRATE",
    "MEMPOOL",
    "PRICE",
    "TIP_HEIGHT",
    "DifficultyAdjustment",
    "FeeEstimate",
    "HashrateSample",
    "MempoolStats",
    "PriceQuote",
    "RawBlock",
    "RawResponses",
    "parse_blocks",
    "parse_tip_height",
]
