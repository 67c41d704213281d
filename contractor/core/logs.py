from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Configure the ``contractor`` logger once; ``CONTRACTOR_LOG_LEVEL`` wins over ``level``."""
    logger = logging.getLogger("contractor")
    level_name = os.getenv("CONTRACTOR_LOG_LEVEL", level).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if getattr(logger, "_configured", False):
        return logger

    logger.propagate = False
    handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger._configured = True  # type: ignore[attr-defined]
    return logger
