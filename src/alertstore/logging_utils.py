"""Shared logging helpers for the alertstore service."""

from __future__ import annotations

import logging

from pythonjsonlogger import jsonlogger


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route all logging through one JSON stream handler."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[handler], force=True)
