# rivalwatch/logs.py
"""
Logging setup shared by the CLI and long-running callers.

Library modules only do `logging.getLogger(__name__)`; handlers are installed
here, once, by whoever owns the process.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_ROOT_LOGGER_NAME = "rivalwatch"
_SECRET_ENV_KEYS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY")
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "(%Y-%m-%d %H:%M:%S)"


def redact(text: str) -> str:
    """Replace any configured API key value found in `text` with [REDACTED]."""
    for key in _SECRET_ENV_KEYS:
        val = os.getenv(key)
        if val:
            text = text.replace(val, "[REDACTED]")
    return text


def configure_logging(level: str | int | None = None, log_dir: str | Path | None = "logs") -> logging.Logger:
    """
    Attach a console handler and a rotating file handler to the package logger.

    Safe to call repeatedly; handlers are only added once. File logging is
    best-effort: an unwritable `log_dir` leaves console logging in place.
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    resolved = level if level is not None else os.getenv("RIVALWATCH_LOG_LEVEL", "INFO")
    logger.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir is not None:
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(path / "rivalwatch.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        except OSError:
            logger.warning("File logging disabled: could not open %s", log_dir)

    return logger


__all__ = ["configure_logging", "redact"]
