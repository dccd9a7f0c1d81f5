"""Logging utilities.

We use Python's standard `logging` module with a single-line structured format.
The store itself only logs through the logger it is handed; this module is for
entrypoints (CLI, pipeline drivers) that own the process.

- Logs go to stderr, so `pushstate dump` can stream raw bytes on stdout.
- With a log_dir, also to `<log_dir>/pushstate.log`.
"""

from __future__ import annotations
import logging
import os
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Level name for the `pushstate` logger tree (DEBUG, INFO, ...)
        log_dir: Directory for a persistent log file (None: console only)
    """
    root = logging.getLogger("pushstate")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # Replace handlers from an earlier call
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # File
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(log_dir, "pushstate.log"), encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)
