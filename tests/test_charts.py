from src.charts import CHART_THEME, build_pool_chart, create_placeholder_chart


def test_pool_chart_lists_largest_pool_on_top(snapshot) -> None:
    fig = build_pool_chart(snapshot.mining_pools)
    bar = fig.data[0]

    assert bar.orientation == "h"
    assert list(bar.y) == ["SpiderPool", "F2Pool", "ViaBTC", "AntPool", "Foundry USA"]
    assert list(bar.x) == [5.0, 5.0, 20.0, 30.0, 40.0]
    assert list(bar.text)[-1] == "40.0%"


def test_pool_chart_uses_palette(snapshot) -> None:
    fig = build_pool_chart(snapshot.mining_pools)

    assert fig.layout.paper_bgcolor == CHART_THEME["paper_bg"]
    assert fig.layout.plot_bgcolor == CHART_THEME["plot_bg"]
    assert fig.layout.font.color == CHART_THEME["font_color"]
    assert fig.layout.xaxis.gridcolor == CHART_THEME["grid_color"]


def test_empty_pools_fall_back_to_placeholder() -> None:
    fig = build_pool_chart(())

    assert len(fig.data) == 0
    assert fig.layout.title.text == "No pool data yet"
    assert fig.layout.title.font.color == CHART_THEME["muted_text"]


def test_placeholder_chart_height() -> None:
    fig = create_placeholder_chart("Loading...", height=120)
    assert fig.layout.height == 120
    assert fig.layout.paper_bgcolor == CHART_THEME["paper_bg"]
