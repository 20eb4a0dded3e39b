from __future__ import annotations

from mv_browser.config.model import BrowserConfig
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.dataset import Dataset
from mv_browser.core.events import PointerEvents
from mv_browser.ui.callbacks.callbacks_matrix import apply_matrix_event
from mv_browser.ui.callbacks.callbacks_scatter import apply_scatter_event
from mv_browser.ui.callbacks.callbacks_utils import box_range, first_point, point_index
from mv_browser.ui.config import AppConfig


def _make_ctx():
    ds = Dataset.from_records(
        [
            {"area": 3000, "price": 3_000_000, "bedrooms": 2, "bathrooms": 1},
            {"area": 4000, "price": 4_500_000, "bedrooms": 2, "bathrooms": 2},
            {"area": 5000, "price": 5_000_000, "bedrooms": 3, "bathrooms": 1},
            {"area": 6000, "price": 7_000_000, "bedrooms": 3, "bathrooms": 2},
            {"area": 3500, "price": 3_200_000, "bedrooms": 2, "bathrooms": 1},
        ]
    )
    events = PointerEvents()
    cfg = BrowserConfig()
    ctx = AppConfig(config=cfg, coordinator=Coordinator(ds, cfg, events=events))
    return ctx, events


def _points(**point):
    return {"points": [point]}


# -----------------------------------------------------------------------------
# Payload helpers
# -----------------------------------------------------------------------------
def test_payload_helpers():
    assert first_point(None) is None
    assert first_point({"points": []}) is None
    assert point_index({"customdata": [7]}) == 7
    assert point_index({"customdata": "x"}) is None
    assert box_range({"range": {"x": [1, 2], "y": [3, 4]}}) == ((1.0, 2.0), (3.0, 4.0))
    assert box_range({"lassoPoints": {}}) is None


# -----------------------------------------------------------------------------
# Matrix
# -----------------------------------------------------------------------------
def test_matrix_cell_click_toggles_cell():
    ctx, events = _make_ctx()
    coordinator = ctx.coordinator

    # 560 x 560 grid, 2 x 2 cells: (140, 140) is bedrooms=2, bathrooms=1
    changed, focus = apply_matrix_event(ctx, "clickData", _points(curveNumber=0, x=140, y=140), events=events)

    assert changed is True
    assert focus is None
    assert coordinator.grid.selected_cells == {(2, 1)}
    assert coordinator.current.indices == [0, 4]
    coordinator.close()


def test_matrix_box_select_is_a_range_drag():
    ctx, events = _make_ctx()
    coordinator = ctx.coordinator

    payload = {"range": {"x": [10, 500], "y": [10, 500]}, "points": []}
    changed, _ = apply_matrix_event(ctx, "selectedData", payload, events=events)

    assert changed is True
    assert len(coordinator.grid.selected_cells) == 4
    assert coordinator.selection.is_filtered is True
    assert len(coordinator.current) == 5
    coordinator.close()


def test_matrix_box_select_starting_on_an_empty_value_pair():
    ds = Dataset.from_records(
        [
            {"area": 4000, "price": 4_500_000, "bedrooms": 2, "bathrooms": 2},
            {"area": 5000, "price": 5_000_000, "bedrooms": 3, "bathrooms": 1},
            {"area": 6000, "price": 7_000_000, "bedrooms": 3, "bathrooms": 2},
        ]
    )
    events = PointerEvents()
    cfg = BrowserConfig()
    ctx = AppConfig(config=cfg, coordinator=Coordinator(ds, cfg, events=events))
    coordinator = ctx.coordinator
    assert coordinator.grid.layout.cell((2, 1)) is None

    # top-left corner lands on (2 bed, 1 bath), which has no houses
    payload = {"range": {"x": [10, 500], "y": [10, 500]}, "points": []}
    changed, _ = apply_matrix_event(ctx, "selectedData", payload, events=events)

    assert changed is True
    assert coordinator.grid.selected_cells == {(2, 1), (2, 2), (3, 1), (3, 2)}
    assert len(coordinator.history) == 2
    assert len(coordinator.current) == 3
    coordinator.close()


def test_matrix_circle_click_highlights_without_filtering():
    ctx, events = _make_ctx()
    coordinator = ctx.coordinator

    changed, focus = apply_matrix_event(ctx, "clickData", _points(curveNumber=1, customdata=3), events=events)

    assert changed is True
    assert focus == 3
    assert coordinator.selection.hovered == {3}
    assert len(coordinator.history) == 1
    coordinator.close()


def test_matrix_hover_and_unhover():
    ctx, events = _make_ctx()
    coordinator = ctx.coordinator

    assert apply_matrix_event(ctx, "hoverData", _points(curveNumber=1, customdata=2), events=events) == (True, 2)
    # same circle again changes nothing
    assert apply_matrix_event(ctx, "hoverData", _points(curveNumber=1, customdata=2), events=events) == (False, 2)
    # hovering the cell background clears item hover
    assert apply_matrix_event(ctx, "hoverData", _points(curveNumber=0, x=1, y=1), events=events) == (True, None)
    assert coordinator.selection.hovered == frozenset()
    assert apply_matrix_event(ctx, "hoverData", None, events=events) == (False, None)
    coordinator.close()


# -----------------------------------------------------------------------------
# Scatterplot
# -----------------------------------------------------------------------------
def test_scatter_box_select_brushes_in_data_units():
    ctx, _ = _make_ctx()
    coordinator = ctx.coordinator

    payload = {"range": {"x": [2900, 4100], "y": [2_000_000, 8_000_000]}}
    assert apply_scatter_event(ctx, "selectedData", payload) is True

    assert coordinator.current.indices == [0, 1, 4]
    assert coordinator.selection.is_filtered is True
    coordinator.close()


def test_scatter_deselect_clears_brush():
    ctx, _ = _make_ctx()
    coordinator = ctx.coordinator
    coordinator.selection.commit([1], filtered=False)

    assert apply_scatter_event(ctx, "selectedData", None) is True

    assert coordinator.selection.selected == frozenset()
    assert len(coordinator.history) == 1
    coordinator.close()


def test_scatter_click_commits_single_item():
    ctx, _ = _make_ctx()
    coordinator = ctx.coordinator

    assert apply_scatter_event(ctx, "clickData", _points(customdata=2)) is True
    assert coordinator.current.indices == [2]

    assert apply_scatter_event(ctx, "clickData", {"points": []}) is False
    coordinator.close()
