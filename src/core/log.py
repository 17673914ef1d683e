# src/core/log.py
"""
Logging setup for hosts embedding the back-office controllers.

Library modules only call `logging.getLogger(__name__)`; the host decides
where records go by calling `configure_logging()` once at startup.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "src"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "(%Y-%m-%d %H:%M:%S)"


def debug_enabled() -> bool:
    return os.getenv("AUROS_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: int | str | None = None, log_path: str | Path | None = None) -> logging.Logger:
    """
    Attach a stream handler (and optionally a rotating file) to the package logger.

    Calling it again replaces the handlers it installed earlier, so tests and
    REPL reloads don't duplicate output.
    """
    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if getattr(h, "_auros", False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        p = Path(log_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(p, maxBytes=1_000_000, backupCount=3, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._auros = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
