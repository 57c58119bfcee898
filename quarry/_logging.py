"""Logging setup for the quarry service."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_MARKER = "_quarry_handler"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach one stream handler to the quarry logger; later calls only change the level."""
    logger = logging.getLogger("quarry")
    logger.setLevel(level)
    if any(getattr(h, _MARKER, False) for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    setattr(handler, _MARKER, True)
    logger.addHandler(handler)


__all__ = ("configure_logging",)
