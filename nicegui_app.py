"""NiceGUI dashboard for BlockBoard.

Bitcoin price, network, difficulty-adjustment and mining metrics pulled from
mempool.space and CoinGecko, refreshed every 30 seconds by one process-wide
refresh loop and rendered as cards.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import Any, Callable

from nicegui import Client, app, ui
from nicegui.events import ClickEventArguments

from src.api_clients import CoinGeckoClient, MempoolClient
from src.cards import (
    StatCard,
    block_rows,
    build_sections,
    last_updated_label,
    pool_rows,
    pool_sample_caption,
)
from src.charts import build_pool_chart
from src.config import FETCH_ERROR_MESSAGE, LOG_LEVEL, REFRESH_INTERVAL_SECONDS, REQUEST_TIMEOUT
from src.metrics import fetch_snapshot
from src.models import Snapshot
from src.refresh import RefreshLoop
from src.state import DashboardState, RefreshState, RefreshStatus

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)-5s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

STATE = DashboardState()
REFRESH_LOOP = RefreshLoop(
    functools.partial(
        fetch_snapshot,
        MempoolClient(timeout=REQUEST_TIMEOUT),
        CoinGeckoClient(timeout=REQUEST_TIMEOUT),
    ),
    STATE,
    interval=REFRESH_INTERVAL_SECONDS,
)

CARD_CLASSES = "bg-slate-900 border border-slate-700 shadow-lg"
CAPTION_CLASSES = "text-xs uppercase tracking-widest text-slate-400 font-bold"


# ============================================================================
# Rendering helpers
# ============================================================================

def render_stat_card(card: StatCard) -> None:
    with ui.card().classes(f"stat-card flex-1 min-w-[220px] {CARD_CLASSES} flex flex-col"):
        with ui.row().classes("items-center justify-between w-full"):
            ui.icon(card.icon).classes("text-2xl text-orange-400")
            if card.trend is not None:
                trend_class = "text-green-400" if card.trend >= 0 else "text-red-400"
                with ui.row().classes(f"items-center gap-1 {trend_class}"):
                    ui.icon("trending_up" if card.trend >= 0 else "trending_down")
                    ui.label(f"{abs(card.trend):.2f}%").classes("text-sm font-medium")
        ui.label(card.title).classes(CAPTION_CLASSES)
        ui.label(card.value).classes("text-2xl font-bold text-slate-100")
        if card.subtitle:
            ui.label(card.subtitle).classes("text-xs text-slate-500 font-mono")


def render_mining_activity(snapshot: Snapshot) -> None:
    ui.label("Mining Activity").classes("text-2xl font-semibold text-slate-100")
    with ui.row().classes("w-full gap-4 flex-wrap items-stretch"):
        with ui.card().classes(f"pool-card flex-1 min-w-[320px] {CARD_CLASSES}"):
            ui.label("MINING POOL DISTRIBUTION").classes(CAPTION_CLASSES)
            ui.plotly(build_pool_chart(snapshot.mining_pools)).classes("w-full")
            for row in pool_rows(snapshot):
                with ui.row().classes("w-full items-center justify-between"):
                    with ui.row().classes("items-center gap-3"):
                        ui.element("div").classes("w-3 h-3 rounded-full").style(f"background-color: {row.color}")
                        ui.label(row.name).classes("text-sm font-medium text-slate-200")
                    with ui.column().classes("items-end gap-0"):
                        ui.label(row.percentage).classes("text-sm font-semibold text-slate-100")
                        ui.label(row.blocks).classes("text-xs text-slate-500")
            ui.label(pool_sample_caption()).classes("text-xs text-slate-500 mt-3")

        with ui.card().classes(f"blocks-card flex-1 min-w-[320px] {CARD_CLASSES}"):
            ui.label("RECENT BLOCKS").classes(CAPTION_CLASSES)
            with ui.column().classes("w-full gap-2 max-h-96 overflow-y-auto"):
                for row in block_rows(snapshot):
                    with ui.row().classes("w-full items-center justify-between py-2 border-b border-slate-800"):
                        with ui.column().classes("gap-0"):
                            ui.label(row.height).classes("font-medium text-slate-100")
                            ui.label(row.pool).classes("text-sm text-slate-500")
                        with ui.column().classes("items-end gap-0"):
                            ui.label(row.transactions).classes("text-sm font-semibold text-slate-100")
                            ui.label(row.fees).classes("text-xs text-slate-500 font-mono")


def render_ready(snapshot: Snapshot) -> None:
    with ui.column().classes("state-panel ready-panel w-full gap-8"):
        for section in build_sections(snapshot):
            with ui.column().classes("w-full gap-4"):
                ui.label(section.title).classes("text-2xl font-semibold text-slate-100")
                with ui.row().classes("w-full gap-4 flex-wrap items-stretch"):
                    for card in section.cards:
                        render_stat_card(card)
        render_mining_activity(snapshot)


def render_loading() -> None:
    with ui.column().classes("state-panel loading-panel w-full items-center py-20 gap-4"):
        ui.spinner(size="xl", color="orange")
        ui.label("Loading Bitcoin data...").classes("text-slate-400 font-mono")


def render_failed(state: RefreshState, on_retry: Callable[[], None]) -> None:
    with ui.column().classes("state-panel failed-panel w-full items-center py-20 gap-4"):
        ui.icon("warning_amber").classes("text-red-400 text-5xl")
        ui.label(state.error or FETCH_ERROR_MESSAGE).classes("text-slate-300")
        if state.snapshot is not None:
            ui.label(f"Last good data · {last_updated_label(state.snapshot)}").classes(
                "text-xs text-slate-500 font-mono"
            )

        def handle_retry(event: ClickEventArguments) -> None:
            event.sender.props("loading")
            on_retry()

        ui.button("Retry", on_click=handle_retry).classes("retry-button bg-orange-500 text-white px-6")


def retry_refresh() -> None:
    """Manual retry; a cycle already in flight is reused rather than duplicated."""
    if not REFRESH_LOOP.running:
        logger.warning("Retry requested while the refresh loop is stopped")
        return
    REFRESH_LOOP.trigger()


def follow_dashboard_state(state: DashboardState, client: Client, view: Any) -> Callable[[], None]:
    """Redraw `view` inside `client` on every publish until the client is deleted.

    A socket drop the browser reconnects from keeps the same client, so the
    subscription is released on deletion rather than on disconnect.
    """

    def on_state_change(_: RefreshState) -> None:
        with client:
            view.refresh()

    unsubscribe = state.subscribe(on_state_change)
    client.on_delete(unsubscribe)
    return unsubscribe


# ============================================================================
# Main UI
# ============================================================================

@ui.page("/")
def index_page() -> None:
    """Main dashboard page."""
    ui.page_title("BlockBoard · Bitcoin Network Metrics")
    ui.query("body").classes(add="bg-slate-950 text-slate-100")
    client = ui.context.client

    with ui.column().classes("w-full max-w-7xl mx-auto py-10 px-4 gap-6"):
        with ui.column().classes("dashboard-header w-full items-center gap-1"):
            ui.label("Bitcoin Network Metrics").classes("text-4xl font-bold text-orange-300 tracking-tight")
            ui.label("Real-time Bitcoin network statistics, mining metrics, and price data").classes(
                "text-sm text-slate-500 font-mono"
            )

        @ui.refreshable
        def dashboard_view() -> None:
            current = STATE.current
            with ui.row().classes("w-full justify-center items-center gap-2 text-sm text-slate-500"):
                ui.icon("schedule")
                ui.label(last_updated_label(current.snapshot)).classes("last-updated font-mono")

            if current.status is RefreshStatus.LOADING:
                render_loading()
            elif current.status is RefreshStatus.FAILED:
                render_failed(current, retry_refresh)
            else:
                render_ready(current.snapshot)

        dashboard_view()

        with ui.column().classes("w-full items-center gap-1 mt-8 text-sm text-slate-500"):
            ui.label("Data provided by mempool.space and CoinGecko APIs")
            ui.label(f"Updates automatically every {REFRESH_INTERVAL_SECONDS:g} seconds")

    follow_dashboard_state(STATE, client, dashboard_view)


@ui.page("/health")
def healthcheck() -> None:
    """Health check endpoint."""
    ui.label("ok")


async def start_refresh_loop() -> None:
    REFRESH_LOOP.start()


app.on_startup(start_refresh_loop)
app.on_shutdown(REFRESH_LOOP.stop)


if __name__ in {"__main__", "__mp_main__"}:
    port = int(os.environ.get("PORT", "8080"))
    reload_enabled = os.environ.get("NICEGUI_RELOAD", "false").lower() in {"1", "true", "yes"}

    ui.run(
        title="BlockBoard",
        host="0.0.0.0",
        port=port,
        reload=reload_enabled,
        dark=True,
    )
