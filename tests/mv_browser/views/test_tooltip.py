from __future__ import annotations

import math

from mv_browser.config.model import AttributeMapping
from mv_browser.views.tooltip import format_tooltip, label_for, ratio


def test_tooltip_lists_every_field_with_na_for_missing():
    record = {
        "price": 13_300_000,
        "area": 7420,
        "bedrooms": 4,
        "bathrooms": 2,
        "mainroad": "yes",
        "parking": float("nan"),
    }

    text = format_tooltip(record, AttributeMapping())
    lines = text.split("<br>")

    assert lines[0] == "Price: 13,300,000"
    assert lines[1] == "Price/Area: 1,792"
    assert "Main Road: yes" in lines
    assert "Parking: N/A" in lines
    assert "Furnishing Status: N/A" in lines


def test_ratio_handles_missing_and_zero():
    assert ratio(100, 4) == 25.0
    assert math.isnan(ratio(100, 0))
    assert math.isnan(ratio(None, 4))


def test_unknown_columns_are_title_cased():
    assert label_for("year_built") == "Year Built"
