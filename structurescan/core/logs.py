# structurescan/core/logs.py

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

_CONFIGURED = False


def debug_enabled() -> bool:
    return os.getenv("STRUCTURESCAN_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def get_logger(name: str) -> logging.Logger:
    """
    Module logger under the 'structurescan' hierarchy.

    When STRUCTURESCAN_DEBUG is set, the package root logger also writes to a
    rotating file (logs/structurescan.log) at DEBUG level.
    """
    _configure_root()
    return logging.getLogger(name)


def _configure_root() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    if not debug_enabled():
        return

    root = logging.getLogger("structurescan")
    root.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if reloaded in REPL/tests
    if any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        return

    log_path = os.path.join(os.getenv("STRUCTURESCAN_LOG_DIR", "logs"), "structurescan.log")
    try:
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        # logging must never break an analysis run
        return
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="(%Y-%m-%d %H:%M:%S)",
        )
    )
    root.addHandler(handler)
