"""Diagnostic logging for cmdpool.

Run output (task lines and the summary) is printed, not logged.
"""

from __future__ import annotations

import logging
import os

_ROOT = "cmdpool"
_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``cmdpool`` namespace."""
    return logging.getLogger(f"{_ROOT}.{name}")


def _level_from_env() -> int:
    name = os.environ.get("CMDPOOL_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(*, level: int | None = None) -> None:
    """Attach cmdpool's handlers, replacing any installed by an earlier call.

    The stream level is *level*, else ``CMDPOOL_LOG_LEVEL``, else WARNING.
    ``CMDPOOL_LOG_FILE`` adds a file handler that records at least INFO.
    """
    stream_level = level if level is not None else _level_from_env()
    formatter = logging.Formatter(_FORMAT)

    root = logging.getLogger(_ROOT)
    for handler in list(root.handlers):
        if getattr(handler, "_cmdpool_owned", False):
            root.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    handlers[0].setLevel(stream_level)

    log_file = os.environ.get("CMDPOOL_LOG_FILE", "").strip()
    if log_file:
        path = os.path.abspath(os.path.expanduser(log_file))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(min(stream_level, logging.INFO))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, "_cmdpool_owned", True)
        root.addHandler(handler)

    root.setLevel(min(h.level for h in handlers))
