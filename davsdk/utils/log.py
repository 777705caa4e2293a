"""Logging setup for applications embedding davsdk.

The library itself only ever calls ``logging.getLogger(__name__)``; nothing is
configured at import time.  Applications (and ad-hoc scripts) can call
:func:`configure_logging` once at start-up.
"""

from __future__ import annotations

import logging
import os

_NOISY_MODULES = ("httpx", "httpcore")


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger for console output.

    ``level`` falls back to the ``LOG_LEVEL`` environment variable, then INFO.
    """

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format="%(levelname)s - %(message)s", handlers=[logging.StreamHandler()])

    # Request-level chatter from the HTTP client drowns out our own logs
    for noisy_mod in _NOISY_MODULES:
        logging.getLogger(noisy_mod).setLevel(logging.WARNING)
