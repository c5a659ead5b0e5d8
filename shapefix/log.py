from __future__ import annotations

import logging
import sys

_LOGGER_CONFIGURED = False


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """Attach a console handler to the package logger once per process.

    Later calls only adjust the level.
    """
    global _LOGGER_CONFIGURED
    logger = logging.getLogger("shapefix")
    logger.setLevel(level)
    if _LOGGER_CONFIGURED:
        return logger

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ch = _StderrHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    _LOGGER_CONFIGURED = True
    return logger
