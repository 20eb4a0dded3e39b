"""
Top-level package for the multi-view browser.

This package exposes the linked-view engine, its Plotly views and the Dash UI.
Most code should import from submodules such as:
    mv_browser.core
    mv_browser.views
    mv_browser.ui
"""

__all__: list[str] = []
