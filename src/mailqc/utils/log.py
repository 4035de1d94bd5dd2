"""Logging setup.

Modules log through the standard ``logging`` tree. A single rich handler is
attached to the ``mailqc`` logger the first time a logger is requested.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_ROOT_NAME = "mailqc"
_HANDLER_ATTACHED = False


def _resolve_level() -> int:
    level_name = os.environ.get("MAILQC_LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the ``mailqc`` namespace."""
    global _HANDLER_ATTACHED

    root = logging.getLogger(_ROOT_NAME)
    if not _HANDLER_ATTACHED:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        _HANDLER_ATTACHED = True
    root.setLevel(_resolve_level())

    return logging.getLogger(name)
