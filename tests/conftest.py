from __future__ import annotations

import os
import subprocess
import sys
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

import pytest
import requests

from src.metrics import build_snapshot
from src.models import Snapshot
from src.responses import RawResponses


RUN_E2E = os.environ.get("RUN_E2E", "0").lower() in {"1", "true", "yes"}

TIP_HEIGHT = 800_000
FETCHED_AT = 1_700_000_000.0
RETARGET_AT = 1_700_600_000

# 100 blocks, most recent first: counts 40/30/20/5/5 with F2Pool seen before SpiderPool
POOL_LAYOUT = (
    ["Foundry USA"] * 40
    + ["AntPool"] * 30
    + ["ViaBTC"] * 20
    + ["F2Pool"] * 5
    + ["SpiderPool"] * 5
)


def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: mark as end-to-end test")


def _make_block(
    height: int,
    pool: Optional[str] = None,
    total_fees: Optional[float] = None,
    tx_count: int = 3000,
) -> Dict[str, Any]:
    block: Dict[str, Any] = {"height": height, "tx_count": tx_count}
    extras: Dict[str, Any] = {}
    if pool is not None:
        extras["pool"] = {"name": pool}
    if total_fees is not None:
        extras["totalFees"] = total_fees
    if extras:
        block["extras"] = extras
    return block


@pytest.fixture
def block_factory() -> Callable[..., Dict[str, Any]]:
    return _make_block


@pytest.fixture
def recent_blocks_payload() -> List[Dict[str, Any]]:
    # First ten blocks carry 10M + i * 1M sats of fees: mean 14.5M sats
    return [
        _make_block(
            TIP_HEIGHT - index,
            pool=pool,
            total_fees=10_000_000 + index * 1_000_000 if index < 10 else 5_000_000,
            tx_count=3000 + index,
        )
        for index, pool in enumerate(POOL_LAYOUT)
    ]


@pytest.fixture
def payloads(recent_blocks_payload: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "price": {"bitcoin": {"usd": 50000, "usd_24h_change": 2.5}},
        "difficulty": {
            "difficulty": 9e13,
            "estimatedRetargetDate": RETARGET_AT,
            "timeAvg": 600,
            "difficultyChange": 1.2,
            "remainingBlocks": 100,
        },
        "tip_height": TIP_HEIGHT,
        "hashrate": {"currentHashrate": 5e20, "currentDifficulty": 8.8e13},
        "mempool": {"count": 15000, "vsize": 9_000_000},
        "fees": {"fastestFee": 20, "halfHourFee": 15, "hourFee": 10},
        "blocks": recent_blocks_payload,
    }


@pytest.fixture
def raw_responses(payloads: Dict[str, Any]) -> RawResponses:
    return RawResponses(**payloads)


@pytest.fixture
def snapshot(raw_responses: RawResponses) -> Snapshot:
    return build_snapshot(raw_responses, fetched_at=FETCHED_AT)


class FakeMempoolClient:
    """Serves canned payloads and records which endpoints were called."""

    def __init__(self, payloads: Dict[str, Any], failures: Optional[Dict[str, BaseException]] = None) -> None:
        self.payloads = payloads
        self.failures = failures or {}
        self.calls: List[str] = []

    def _serve(self, key: str) -> Any:
        self.calls.append(key)
        if key in self.failures:
            raise self.failures[key]
        return self.payloads[key]

    def get_difficulty_adjustment(self) -> Any:
        return self._serve("difficulty")

    def get_tip_height(self) -> Any:
        return self._serve("tip_height")

    def get_hashrate(self, window: str = "1d") -> Any:
        return self._serve("hashrate")

    def get_mempool(self) -> Any:
        return self._serve("mempool")

    def get_recommended_fees(self) -> Any:
        return self._serve("fees")

    def get_recent_blocks(self) -> Any:
        return self._serve("blocks")


class FakePriceClient(FakeMempoolClient):
    def get_simple_price(self, asset_id: str, currency: str) -> Any:
        return self._serve("price")


@pytest.fixture
def client_factory(payloads: Dict[str, Any]) -> Callable[..., tuple]:
    def factory(failures: Optional[Dict[str, BaseException]] = None) -> tuple:
        return FakeMempoolClient(payloads, failures), FakePriceClient(payloads, failures)

    return factory


def _wait_for_health(url: str, timeout: float = 25.0) -> None:
    start = time.time()
    while time.time() - start < timeout:
        try:
            response = requests.get(url, timeout=1.0)
            if response.status_code == 200:
                return
        except requests.RequestException:
            time.sleep(0.5)
    raise RuntimeError(f"Timed out waiting for NiceGUI health endpoint at {url}")


@pytest.fixture(scope="session")
def nicegui_server() -> Iterator[str]:
    if not RUN_E2E:
        pytest.skip("Set RUN_E2E=1 to run Selenium e2e tests")

    port = int(os.environ.get("E2E_APP_PORT", "8090"))

    env = os.environ.copy()
    env.pop("PYTEST_CURRENT_TEST", None)  # NiceGUI skips ui.run() when it sees this
    env.setdefault("PORT", str(port))
    env.setdefault("NICEGUI_RELOAD", "0")
    env.setdefault("REQUEST_TIMEOUT", "5")

    cmd = [sys.executable, "nicegui_app.py"]
    proc = subprocess.Popen(cmd, env=env, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    try:
        _wait_for_health(f"http://localhost:{port}/health")
        yield f"http://localhost:{port}"
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=10)
        except subprocess.TimeoutExpired:
            proc.kill()
