from __future__ import annotations

from mv_browser.core.brush import Region
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.dataset import Dataset
from mv_browser.core.events import PointerEvents


def _make_dataset() -> Dataset:
    """Five houses over bedrooms {2, 3} x bathrooms {1, 2}."""
    return Dataset.from_records(
        [
            {"area": 3000, "price": 3_000_000, "bedrooms": 2, "bathrooms": 1},
            {"area": 4000, "price": 4_500_000, "bedrooms": 2, "bathrooms": 2},
            {"area": 5000, "price": 5_000_000, "bedrooms": 3, "bathrooms": 1},
            {"area": 6000, "price": 7_000_000, "bedrooms": 3, "bathrooms": 2},
            {"area": 3500, "price": 3_200_000, "bedrooms": 2, "bathrooms": 1},
        ]
    )


def _make_coordinator():
    events = PointerEvents()
    return Coordinator(_make_dataset(), events=events), events


def _click(coordinator: Coordinator, events: PointerEvents, key) -> None:
    coordinator.grid.pointer_down(key)
    events.pointer_up()


def test_initial_state():
    coordinator, _ = _make_coordinator()

    assert len(coordinator.current) == 5
    assert len(coordinator.history) == 1
    assert coordinator.selection.is_filtered is False
    assert coordinator.grid.layout.shape == (2, 2)
    coordinator.close()


def test_drag_then_click_twice_end_to_end():
    coordinator, events = _make_coordinator()

    # drag across the whole 2x2 grid
    coordinator.grid.pointer_down((2, 1))
    coordinator.grid.pointer_enter((3, 2))
    events.pointer_up()

    assert len(coordinator.current) == 5
    assert coordinator.selection.is_filtered is True
    assert len(coordinator.history) == 2

    # click one cell: it becomes the lone selection
    _click(coordinator, events, (2, 1))
    assert coordinator.current.indices == [0, 4]
    assert coordinator.grid.selected_cells == {(2, 1)}

    # click it again: selection clears and the full dataset comes back
    _click(coordinator, events, (2, 1))
    assert coordinator.grid.selected_cells == frozenset()
    assert coordinator.selection.is_filtered is False
    assert len(coordinator.current) == 5
    assert len(coordinator.history) == 4
    coordinator.close()


def test_brush_commit_filters_and_highlights_hover_only():
    coordinator, _ = _make_coordinator()
    width, height = coordinator.brush.width, coordinator.brush.height

    # areas 3000..4000 project to x <= 150 of 450
    coordinator.on_brush(Region(0, 0, width * 0.4, height))

    assert coordinator.current.indices == [0, 1, 4]
    assert coordinator.selection.is_filtered is True
    assert coordinator.scatter_highlight() == (frozenset(), True)

    coordinator.on_hover([1])
    assert coordinator.scatter_highlight() == (frozenset({1}), True)
    coordinator.close()


def test_axes_are_rebuilt_from_the_current_snapshot():
    coordinator, _ = _make_coordinator()
    assert coordinator.brush.x_scale.domain == (3000.0, 6000.0)

    coordinator.on_brush(Region(0, 0, coordinator.brush.width * 0.4, coordinator.brush.height))

    assert coordinator.brush.x_scale.domain == (3000.0, 4000.0)
    coordinator.close()


def test_degenerate_brush_clears_selection_without_history():
    coordinator, _ = _make_coordinator()
    coordinator.selection.commit([1, 2], filtered=False)

    coordinator.on_brush(Region(5, 5, 5, 5))

    assert coordinator.selection.selected == frozenset()
    assert coordinator.selection.brushed is None
    assert len(coordinator.history) == 1
    coordinator.close()


def test_unknown_indices_in_commit_are_dropped():
    coordinator, _ = _make_coordinator()
    stray = Dataset.from_records([{"index": 99, "area": 1, "price": 1, "bedrooms": 2, "bathrooms": 1}])

    assert coordinator.on_commit(stray) is False
    assert len(coordinator.history) == 1
    coordinator.close()


def test_hover_never_touches_history():
    coordinator, _ = _make_coordinator()

    coordinator.on_hover([1, 99])
    assert coordinator.selection.hovered == {1}

    coordinator.on_hover_clear()
    assert coordinator.selection.hovered == frozenset()
    assert len(coordinator.history) == 1
    coordinator.close()


def test_navigation_resets_selection_and_tracks_filtered_flag():
    coordinator, events = _make_coordinator()
    _click(coordinator, events, (3, 2))
    assert coordinator.current.indices == [3]

    assert coordinator.back() is True
    assert coordinator.selection.is_filtered is False
    assert coordinator.selection.selected == frozenset()
    assert len(coordinator.current) == 5

    assert coordinator.forward() is True
    assert coordinator.selection.is_filtered is True
    assert coordinator.forward() is False
    coordinator.close()


def test_removed_item_never_reappears():
    coordinator, events = _make_coordinator()
    _click(coordinator, events, (2, 1))
    coordinator.on_hover([0])

    assert coordinator.remove(0) is True
    assert coordinator.current.indices == [4]
    assert coordinator.selection.hovered == frozenset()

    coordinator.back()
    assert 0 not in coordinator.current
    assert 0 not in coordinator.full_dataset
    assert coordinator.remove(0) is False
    coordinator.close()


def test_revision_increases_on_every_state_change():
    coordinator, events = _make_coordinator()
    seen = [coordinator.revision]

    coordinator.on_hover([1])
    seen.append(coordinator.revision)
    _click(coordinator, events, (2, 2))
    seen.append(coordinator.revision)
    coordinator.back()
    seen.append(coordinator.revision)

    assert seen == sorted(set(seen))
    coordinator.close()


def test_close_releases_global_listener():
    events = PointerEvents()
    with Coordinator(_make_dataset(), events=events):
        assert events.listener_count == 1
    assert events.listener_count == 0


def test_brush_matching_nothing_bumps_revision_without_history():
    coordinator, _ = _make_coordinator()
    before = coordinator.revision

    # top-left corner: the only item at the top sits at the far right
    assert coordinator.on_brush(Region(0, 0, 50, 50)) == frozenset()

    assert coordinator.selection.brushed == frozenset()
    assert coordinator.revision > before
    assert len(coordinator.history) == 1
    coordinator.close()


def test_matrix_highlight_dims_everything_after_navigation():
    coordinator, events = _make_coordinator()
    assert coordinator.matrix_highlight() is None

    _click(coordinator, events, (2, 1))
    assert coordinator.matrix_highlight() == frozenset({0, 4})

    coordinator.back()
    assert coordinator.matrix_highlight() == frozenset()

    _click(coordinator, events, (3, 2))
    assert coordinator.matrix_highlight() == frozenset({3})
    coordinator.close()


def test_empty_dataset_builds_an_empty_grid():
    events = PointerEvents()
    coordinator = Coordinator(Dataset.empty(), events=events)

    assert len(coordinator.current) == 0
    assert coordinator.grid.layout.shape == (0, 0)
    assert coordinator.grid.layout.key_at(10, 10) is None
    assert coordinator.matrix_highlight() is None

    coordinator.grid.pointer_down((2, 1))
    events.pointer_up()
    assert len(coordinator.history) == 1
    coordinator.close()
