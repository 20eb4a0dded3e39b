from __future__ import annotations

from mv_browser.core.brush import BrushSelector, Region
from mv_browser.core.dataset import Dataset


def _make_dataset() -> Dataset:
    # area 3000..6000, price 3.0M..7.0M
    return Dataset.from_records(
        [
            {"area": 3000, "price": 3_000_000, "bedrooms": 2, "bathrooms": 1},
            {"area": 4000, "price": 4_500_000, "bedrooms": 2, "bathrooms": 2},
            {"area": 5000, "price": 5_000_000, "bedrooms": 3, "bathrooms": 1},
            {"area": 6000, "price": 7_000_000, "bedrooms": 3, "bathrooms": 2},
            {"area": 3500, "price": 3_200_000, "bedrooms": 2, "bathrooms": 1},
        ]
    )


def _make_brush(commits=None, clears=None) -> BrushSelector:
    brush = BrushSelector(100, 100)
    brush.render(
        _make_dataset(),
        "area",
        "price",
        on_commit=lambda items: commits.append(items) if commits is not None else None,
        on_clear=lambda: clears.append(True) if clears is not None else None,
    )
    return brush


def test_region_from_corners_is_normalised():
    region = Region.from_corners((50, 80), (10, 20))
    assert (region.x0, region.y0, region.x1, region.y1) == (10, 20, 50, 80)


def test_zero_area_region_is_degenerate():
    assert Region(10, 10, 10, 50).is_degenerate
    assert not Region(10, 10, 11, 50).is_degenerate


def test_projection_uses_snapshot_extent():
    brush = _make_brush()
    coords = brush.project()

    assert coords.loc[0, "px_x"] == 0.0
    assert coords.loc[3, "px_x"] == 100.0
    # highest price sits at the top of the plot
    assert coords.loc[3, "px_y"] == 0.0
    assert coords.loc[0, "px_y"] == 100.0


def test_full_region_selects_everything_inclusively():
    brush = _make_brush()
    assert brush.select(Region(0, 0, 100, 100)) == frozenset(range(5))


def test_same_region_twice_gives_identical_selection():
    brush = _make_brush()
    region = Region(0, 0, 40, 100)

    first = brush.select(region)
    second = brush.select(region)

    assert first == second == frozenset({0, 1, 4})


def test_brush_commits_matched_items_as_snapshot():
    commits = []
    brush = _make_brush(commits=commits)

    matched = brush.brush(Region(0, 0, 40, 100))

    assert matched == frozenset({0, 1, 4})
    assert len(commits) == 1
    assert commits[0].indices == [0, 1, 4]
    assert brush.active_region == Region(0, 0, 40, 100)


def test_empty_match_does_not_commit():
    commits = []
    brush = _make_brush(commits=commits)

    # area between 3500 and 4000 projects to roughly 17..33 px; nothing in 20..30
    matched = brush.brush(Region(20, 0, 30, 100))

    assert matched == frozenset()
    assert commits == []


def test_degenerate_brush_clears_instead_of_committing():
    commits, clears = [], []
    brush = _make_brush(commits=commits, clears=clears)

    assert brush.brush(Region(10, 10, 10, 90)) is None
    assert brush.brush(None) is None

    assert commits == []
    assert clears == [True, True]
    assert brush.active_region is None


def test_missing_coordinates_are_never_brushed():
    ds = Dataset.from_records(
        [
            {"area": 1000, "price": 100},
            {"area": None, "price": 150},
            {"area": 2000, "price": 200},
        ]
    )
    brush = BrushSelector(100, 100)
    brush.render(ds, "area", "price", on_commit=lambda items: None)

    assert brush.select(Region(0, 0, 100, 100)) == frozenset({0, 2})


def test_select_item_commits_single_item():
    commits = []
    brush = _make_brush(commits=commits)

    assert brush.select_item(2) is True
    assert brush.select_item(99) is False
    assert [c.indices for c in commits] == [[2]]


def test_region_from_data_round_trips_through_scales():
    brush = _make_brush()
    region = brush.region_from_data((3000, 4500), (3_000_000, 7_000_000))

    assert region == Region(0.0, 0.0, 50.0, 100.0)
