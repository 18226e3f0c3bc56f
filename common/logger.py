"""Process-wide logging setup."""

from __future__ import annotations

import logging
import os
import sys

_ROOT = "copterviz"
_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        level = os.getenv("COPTERVIZ_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level, logging.INFO))
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the copterviz hierarchy."""
    root = _configure_root()
    return root.getChild(name)
