from __future__ import annotations

import pytest

from mv_browser.config.model import AttributeMapping, BrowserConfig
from mv_browser.core.dataset_loader import from_config, load_csv
from mv_browser.core.exceptions import DatasetSchemaError

HEADER = "price,area,bedrooms,bathrooms,stories,furnishingstatus\n"


def _write_csv(tmp_path, body: str, name: str = "housing.csv"):
    path = tmp_path / name
    path.write_text(HEADER + body)
    return path


def test_load_csv_assigns_row_ordinal_identity(tmp_path):
    path = _write_csv(
        tmp_path,
        "13300000,7420,4,2,3,furnished\n"
        "12250000,8960,4,4,4,furnished\n"
        "12250000,9960,3,2,2,semi-furnished\n",
    )

    ds = load_csv(path)

    assert len(ds) == 3
    assert ds.indices == [0, 1, 2]
    assert ds.frame.loc[2, "furnishingstatus"] == "semi-furnished"


def test_rows_without_categories_are_dropped_and_identity_is_not_reused(tmp_path):
    path = _write_csv(
        tmp_path,
        "100,10,2,1,1,furnished\n"
        "200,20,,1,1,furnished\n"
        "300,30,3,2,1,furnished\n",
    )

    ds = load_csv(path)

    assert ds.indices == [0, 2]
    # the blank does not leave float categories behind
    assert [item.cell_key("bedrooms", "bathrooms") for item in ds] == [(2, 1), (3, 2)]


def test_bad_numeric_cells_become_missing(tmp_path):
    path = _write_csv(tmp_path, "100,abc,2,1,1,furnished\n")

    ds = load_csv(path)

    assert len(ds) == 1
    assert ds.numeric("area").isna().all()


def test_missing_mapped_column_raises(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("price,area,bedrooms\n1,2,3\n")

    with pytest.raises(DatasetSchemaError):
        load_csv(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(DatasetSchemaError):
        load_csv(tmp_path / "nope.csv")


def test_explicit_identity_column_is_used(tmp_path):
    path = tmp_path / "with_id.csv"
    path.write_text("house_id,price,area,bedrooms,bathrooms\n7,1,2,3,1\n9,4,5,2,1\n")

    ds = load_csv(path, AttributeMapping(index="house_id"))

    assert ds.indices == [7, 9]


def test_from_config_requires_data_file():
    with pytest.raises(DatasetSchemaError):
        from_config(BrowserConfig())
