from __future__ import annotations

import json
from pathlib import Path

import pytest

from mv_browser.config import load_browser_config
from mv_browser.config.loader import browser_config_from_dict, resolve_data_file
from mv_browser.core.exceptions import ConfigError


def _write_config(tmp_path, raw) -> Path:
    path = tmp_path / "browser.json"
    path.write_text(json.dumps(raw) if not isinstance(raw, str) else raw)
    return path


def test_missing_file_falls_back_to_defaults(tmp_path):
    cfg = load_browser_config(tmp_path / "absent.json")

    assert cfg.source_path is None
    assert cfg.data_file is None
    assert cfg.scatter.default_opacity == 0.3
    assert cfg.matrix.radius_range == (2.0, 20.0)
    assert cfg.transition_ms == 1000


def test_loads_overrides_and_resolves_data_file(tmp_path, monkeypatch):
    monkeypatch.delenv("MV_BROWSER_DATA_ROOT", raising=False)
    path = _write_config(
        tmp_path,
        {
            "ui_title": "Test",
            "data_file": "houses.csv",
            "attributes": {"size": "sqft", "tooltip": ["stories"]},
            "scatter": {"width": 400, "margins": {"left": 60}},
            "matrix": {"radius_range": [1, 10], "label_template": "{column}/{row}"},
            "transition_ms": 0,
        },
    )

    cfg = load_browser_config(path)

    assert cfg.ui_title == "Test"
    assert cfg.source_path == path
    assert cfg.data_file == (tmp_path / "houses.csv").resolve()
    assert cfg.attributes.size == "sqft"
    assert cfg.attributes.position == "price"
    assert cfg.attributes.tooltip == ("stories",)
    assert cfg.scatter.width == 400
    assert cfg.scatter.margins.left == 60
    assert cfg.scatter.margins.top == 100
    assert cfg.scatter.inner_width == 400 - 60 - 10
    assert cfg.matrix.radius_range == (1.0, 10.0)
    assert cfg.matrix.label_template == "{column}/{row}"
    assert cfg.transition_ms == 0
    assert cfg.required_columns == ["sqft", "price", "bedrooms", "bathrooms"]


def test_malformed_json_raises(tmp_path):
    path = _write_config(tmp_path, "{ not json")
    with pytest.raises(ConfigError):
        load_browser_config(path)


def test_non_object_top_level_raises(tmp_path):
    path = _write_config(tmp_path, [1, 2, 3])
    with pytest.raises(ConfigError):
        load_browser_config(path)


def test_unknown_attribute_role_raises(tmp_path):
    with pytest.raises(ConfigError):
        browser_config_from_dict({"attributes": {"colour": "price"}}, config_dir=tmp_path)


def test_bad_radius_range_raises(tmp_path):
    with pytest.raises(ConfigError):
        browser_config_from_dict({"matrix": {"radius_range": [1, 2, 3]}}, config_dir=tmp_path)


def test_data_root_env_wins_and_strips_redundant_prefix(tmp_path, monkeypatch):
    (tmp_path / "houses.csv").write_text("price\n1\n")
    monkeypatch.setenv("MV_BROWSER_DATA_ROOT", str(tmp_path))

    assert resolve_data_file(Path("data/houses.csv"), Path("/elsewhere")) == tmp_path / "houses.csv"
    assert resolve_data_file(Path("other.csv"), Path("/elsewhere")) == tmp_path / "other.csv"


def test_absolute_data_file_is_kept(tmp_path):
    absolute = tmp_path / "x.csv"
    assert resolve_data_file(absolute, Path("/elsewhere")) == absolute
