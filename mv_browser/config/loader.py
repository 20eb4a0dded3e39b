from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from mv_browser.config.model import (
    AttributeMapping,
    BrowserConfig,
    Margins,
    MatrixConfig,
    ScatterConfig,
)
from mv_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

_KNOWN_ROLES = {"index", "size", "position", "column", "row", "tooltip"}


def _margins(raw: Dict[str, Any] | None, default: Margins) -> Margins:
    if not raw:
        return default
    return Margins(
        top=int(raw.get("top", default.top)),
        right=int(raw.get("right", default.right)),
        bottom=int(raw.get("bottom", default.bottom)),
        left=int(raw.get("left", default.left)),
    )


def _scatter(raw: Dict[str, Any]) -> ScatterConfig:
    default = ScatterConfig()
    return ScatterConfig(
        width=int(raw.get("width", default.width)),
        height=int(raw.get("height", default.height)),
        margins=_margins(raw.get("margins"), default.margins),
        default_opacity=float(raw.get("default_opacity", default.default_opacity)),
        marker_radius=float(raw.get("marker_radius", default.marker_radius)),
    )


def _matrix(raw: Dict[str, Any]) -> MatrixConfig:
    default = MatrixConfig()
    radius_range = raw.get("radius_range", default.radius_range)
    if len(radius_range) != 2:
        raise ConfigError(f"matrix.radius_range must have two values, got {radius_range!r}")

    return MatrixConfig(
        width=int(raw.get("width", default.width)),
        height=int(raw.get("height", default.height)),
        margins=_margins(raw.get("margins"), default.margins),
        cell_padding=float(raw.get("cell_padding", default.cell_padding)),
        label_height=float(raw.get("label_height", default.label_height)),
        pack_padding=float(raw.get("pack_padding", default.pack_padding)),
        radius_range=(float(radius_range[0]), float(radius_range[1])),
        default_opacity=float(raw.get("default_opacity", default.default_opacity)),
        dimmed_opacity=float(raw.get("dimmed_opacity", default.dimmed_opacity)),
        label_template=str(raw.get("label_template", default.label_template)),
    )


def resolve_data_file(path: Path, config_dir: Path) -> Path:
    """
    Resolve a relative data path.

    MV_BROWSER_DATA_ROOT wins when set, otherwise paths are taken relative
    to the directory holding the config file.
    """
    if path.is_absolute():
        return path

    data_root = os.environ.get("MV_BROWSER_DATA_ROOT")
    if data_root:
        resolved = Path(data_root) / path
        # Fallback for redundant 'data/' prefix
        if not resolved.is_file() and path.parts and path.parts[0] == "data":
            alt = Path(data_root) / Path(*path.parts[1:])
            if alt.is_file():
                resolved = alt
        return resolved

    return (config_dir / path).resolve()


def browser_config_from_dict(raw: Dict[str, Any], *, config_dir: Path) -> BrowserConfig:
    attributes_raw = raw.get("attributes", {})
    if not isinstance(attributes_raw, dict):
        raise ConfigError("'attributes' must be an object mapping roles to column names")

    unknown = set(attributes_raw) - _KNOWN_ROLES
    if unknown:
        raise ConfigError(f"Unknown attribute roles: {sorted(unknown)}")

    data_file_raw = raw.get("data_file")
    data_file = resolve_data_file(Path(data_file_raw), config_dir) if data_file_raw else None

    return BrowserConfig(
        ui_title=raw.get("ui_title", BrowserConfig.ui_title),
        data_file=data_file,
        attributes=AttributeMapping.from_raw(attributes_raw),
        scatter=_scatter(raw.get("scatter", {})),
        matrix=_matrix(raw.get("matrix", {})),
        transition_ms=int(raw.get("transition_ms", BrowserConfig.transition_ms)),
    )


def load_browser_config(path: Path | str) -> BrowserConfig:
    """
    Load the browser configuration from a JSON file.

    A missing file falls back to the defaults; a malformed one raises ConfigError.
    """
    path = Path(path)
    logger.info("Loading browser config", extra={"config_path": str(path)})

    if not path.is_file():
        logger.warning(f"Browser config not found at: {path}, using defaults")
        return BrowserConfig(source_path=None)

    try:
        with path.open() as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Top-level value of {path} must be an object")

    cfg = browser_config_from_dict(raw, config_dir=path.parent)
    cfg.source_path = path
    return cfg
