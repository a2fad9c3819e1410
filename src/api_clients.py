from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from .config import (
    COINGECKO_BASE_URL,
    HASHRATE_WINDOW,
    MEMPOOL_BASE_URL,
    REQUEST_TIMEOUT,
    USER_AGENT,
)


class JsonApiClient:
    """Lightweight helper for read-only, unauthenticated JSON endpoints."""

    def __init__(self, base_url: str, timeout: int = REQUEST_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _build_url(self, path: str) -> str:
        return urljoin(f"{self.base_url}/", path.lstrip("/"))

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = requests.get(
            self._build_url(path),
            params=dict(params or {}),
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


class MempoolClient(JsonApiClient):
    """Blockchain statistics from a mempool.space compatible instance."""

    def __init__(self, base_url: str = MEMPOOL_BASE_URL, timeout: int = REQUEST_TIMEOUT) -> None:
        super().__init__(base_url, timeout)

    def get_difficulty_adjustment(self) -> Any:
        return self._get("/api/v1/difficulty-adjustment")

    def get_tip_height(self) -> Any:
        # Plain-text body, which decodes as a JSON integer
        return self._get("/api/blocks/tip/height")

    def get_hashrate(self, window: str = HASHRATE_WINDOW) -> Any:
        return self._get(f"/api/v1/mining/hashrate/{window}")

    def get_mempool(self) -> Any:
        return self._get("/api/mempool")

    def get_recommended_fees(self) -> Any:
        return self._get("/api/v1/fees/recommended")

    def get_recent_blocks(self) -> Any:
        return self._get("/api/v1/blocks")


class CoinGeckoClient(JsonApiClient):
    """Spot price and 24h change from the public CoinGecko API."""

    def __init__(self, base_url: str = COINGECKO_BASE_URL, timeout: int = REQUEST_TIMEOUT) -> None:
        super().__init__(base_url, timeout)

    def get_simple_price(self, asset_id: str, currency: str) -> Any:
        params = {
            "ids": asset_id,
            "vs_currencies": currency,
            "include_24hr_change": "true",
        }
        return self._get("/api/v3/simple/price", params=params)


__all__ = ["CoinGeckoClient", "JsonApiClient", "MempoolClient"]
