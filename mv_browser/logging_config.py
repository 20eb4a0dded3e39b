from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
        level: int = logging.INFO,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the browser

    Modes:
    - JSON (default), one object per line with any `extra` fields attached
    - plain text for local development

    Selection Order:
        1) force_format argument ("json" or "plain") if provided
        2) env var MV_BROWSER_LOG_FORMAT
        3) default = "json"

    MV_BROWSER_LOG_LEVEL (e.g. "DEBUG") overrides `level`, which is how the
    dropped-index debug messages from the engine are surfaced.
    """

    if force_format is not None:
        format_mode = force_format
    else:
        format_mode = os.getenv("MV_BROWSER_LOG_FORMAT", "json").lower()

    env_level = os.getenv("MV_BROWSER_LOG_LEVEL")
    if env_level:
        level = logging.getLevelName(env_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    if format_mode == "plain":
        handler.setFormatter(logging.Formatter(_FORMAT))
    else:
        handler.setFormatter(jsonlogger.JsonFormatter(_FORMAT))

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)
