from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from mv_browser.config.model import AttributeMapping, BrowserConfig
from mv_browser.core.dataset import Dataset
from mv_browser.core.exceptions import DatasetSchemaError

logger = logging.getLogger(__name__)


def _validate_columns(frame: pd.DataFrame, attributes: AttributeMapping, path: Path) -> None:
    """
    Validate that every mapped numeric/categorical column exists.
    Tooltip columns are optional and only rendered when present.
    """
    required = [*attributes.numeric, *attributes.categorical]
    missing = [col for col in required if col not in frame.columns]
    if missing:
        msg = f"{path.name}: mapped columns {missing} not found in CSV header"
        logger.error(msg, extra={"path": str(path), "missing": missing})
        raise DatasetSchemaError(msg)


def frame_to_dataset(frame: pd.DataFrame, attributes: AttributeMapping, *, source: str = "<frame>") -> Dataset:
    """
    Normalise a raw DataFrame into a Dataset.

    - numeric attributes are coerced (bad cells -> NaN)
    - rows without both categorical attributes are dropped, they have no grid cell
    - identity is taken from the index column if present, else the row ordinal
    """
    frame = frame.copy()

    for col in attributes.numeric:
        frame[col] = pd.to_numeric(frame[col], errors="coerce")

    if attributes.index in frame.columns:
        if not frame[attributes.index].is_unique:
            raise DatasetSchemaError(f"{source}: identity column '{attributes.index}' has duplicates")
        frame = frame.set_index(attributes.index)
    else:
        # Identity is assigned before any row is dropped, so it is never reused
        frame.index = pd.RangeIndex(len(frame))

    missing_cat = frame[list(attributes.categorical)].isna().any(axis=1)
    if missing_cat.any():
        logger.warning(
            "Dropping %d rows without grid categories from %s",
            int(missing_cat.sum()),
            source,
            extra={"columns": list(attributes.categorical)},
        )
        frame = frame[~missing_cat].copy()

    # blanks make pandas read integer categories as float
    for col in attributes.categorical:
        values = frame[col]
        if pd.api.types.is_float_dtype(values) and (values == values.round()).all():
            frame[col] = values.astype(int)

    n_nan = int(frame[list(attributes.numeric)].isna().any(axis=1).sum())
    if n_nan:
        logger.warning(
            "%d rows in %s have missing numeric values; they are kept but never brushed",
            n_nan,
            source,
        )

    return Dataset(frame, attributes)


def load_csv(path: Path | str, attributes: Optional[AttributeMapping] = None) -> Dataset:
    """
    Materialise a Dataset from a CSV file.
    """
    path = Path(path)
    attributes = attributes or AttributeMapping()

    if not path.is_file():
        raise DatasetSchemaError(f"CSV file not found at {path}.")

    try:
        frame = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DatasetSchemaError(f"Could not parse {path}: {e}") from e

    _validate_columns(frame, attributes, path)

    dataset = frame_to_dataset(frame, attributes, source=path.name)
    logger.info("Loaded dataset", extra={"path": str(path), "n_items": len(dataset)})
    return dataset


def from_config(cfg: BrowserConfig) -> Dataset:
    if cfg.data_file is None:
        raise DatasetSchemaError("No data_file configured")
    return load_csv(cfg.data_file, cfg.attributes)
