from __future__ import annotations

import pytest

from mv_browser.config.model import BrowserConfig
from mv_browser.core.view_registry import ViewRegistry
from mv_browser.views import MatrixView, ScatterplotView


def test_register_and_create_views():
    registry = ViewRegistry()
    registry.register(ScatterplotView)
    registry.register(MatrixView)

    cfg = BrowserConfig(transition_ms=250)
    view = registry.create("matrix", cfg)

    assert isinstance(view, MatrixView)
    assert view.config is cfg
    assert view.transition()["duration"] == 250
    assert registry.all_classes() == [ScatterplotView, MatrixView]


def test_duplicate_and_invalid_registrations_are_rejected():
    registry = ViewRegistry()
    registry.register(ScatterplotView)

    with pytest.raises(ValueError):
        registry.register(ScatterplotView)
    with pytest.raises(TypeError):
        registry.register(object)


def test_unknown_view_id_raises_key_error():
    with pytest.raises(KeyError):
        ViewRegistry().create("nope")
