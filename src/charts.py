from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd
import plotly.graph_objects as go

from .cards import pool_color
from .config import BITCOIN_ORANGE, POOL_SAMPLE_BLOCKS
from .models import PoolShare

CHART_THEME: Dict[str, str] = {
    "template": "plotly_dark",
    "paper_bg": "#1f2335",
    "plot_bg": "#252a3f",
    "font_color": "#f1f5f9",
    "grid_color": "#343c55",
    "muted_text": "#cbd5f5",
}

FONT_FAMILY = "JetBrains Mono, Consolas, monospace"


def create_placeholder_chart(title: str = "Loading...", height: int = 300) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        template=CHART_THEME["template"],
        paper_bgcolor=CHART_THEME["paper_bg"],
        plot_bgcolor=CHART_THEME["plot_bg"],
        font=dict(color=CHART_THEME["font_color"], family=FONT_FAMILY, size=11),
        title=dict(text=title, font=dict(size=14, color=CHART_THEME["muted_text"])),
        xaxis=dict(showgrid=True, gridcolor=CHART_THEME["grid_color"], showticklabels=False),
        yaxis=dict(showgrid=True, gridcolor=CHART_THEME["grid_color"], showticklabels=False),
        height=height,
        margin=dict(t=60, r=20, b=40, l=50),
    )
    return fig


def build_pool_chart(pools: Sequence[PoolShare], height: int = 300) -> go.Figure:
    """Horizontal bars of pool share, largest pool on top."""
    if not pools:
        return create_placeholder_chart("No pool data yet", height=height)

    df_pools = pd.DataFrame(
        {
            "name": [pool.name for pool in pools],
            "percentage": [pool.percentage for pool in pools],
            "blocks": [pool.blocks for pool in pools],
            "color": [pool_color(index) for index in range(len(pools))],
        }
    ).iloc[::-1]

    fig = go.Figure(
        data=[
            go.Bar(
                x=df_pools["percentage"],
                y=df_pools["name"],
                orientation="h",
                marker_color=df_pools["color"],
                text=[f"{value:.1f}%" for value in df_pools["percentage"]],
                textposition="outside",
                cliponaxis=False,
                customdata=df_pools["blocks"],
                hovertemplate="<b>%{y}</b><br>%{x:.1f}% · %{customdata} blocks<extra></extra>",
            )
        ]
    )
    fig.update_layout(
        template=CHART_THEME["template"],
        paper_bgcolor=CHART_THEME["paper_bg"],
        plot_bgcolor=CHART_THEME["plot_bg"],
        font=dict(color=CHART_THEME["font_color"], family=FONT_FAMILY, size=11),
        showlegend=False,
        height=height,
        margin=dict(t=50, r=40, b=40, l=110),
        title=dict(
            text=f"Share of last {POOL_SAMPLE_BLOCKS} blocks",
            font=dict(size=14, color=CHART_THEME["muted_text"]),
        ),
    )
    fig.update_xaxes(
        ticksuffix="%",
        range=[0, max(df_pools["percentage"].max() * 1.2, 1)],
        gridcolor=CHART_THEME["grid_color"],
    )
    fig.update_yaxes(title=None, gridcolor=CHART_THEME["grid_color"])
    fig.add_vline(x=0, line_color=BITCOIN_ORANGE, line_width=2)
    return fig


__all__ = ["CHART_THEME", "build_pool_chart", "create_placeholder_chart"]
