"""
Process-wide logging: console plus daily-rotated combined and error files.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_RETENTION_DAYS = 7

_configured = False


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        path, when="midnight", backupCount=LOG_RETENTION_DAYS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def configure_logging() -> None:
    """
    LOG_LEVEL sets the threshold (default INFO). LOG_DIR (default "logs")
    holds combined.log and error.log; set LOG_DIR to an empty string to log
    to the console only.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_dir = os.getenv("LOG_DIR", "logs").strip()
    file_error = None
    if log_dir:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            handlers.append(_file_handler(Path(log_dir) / "combined.log", level))
            handlers.append(_file_handler(Path(log_dir) / "error.log", logging.ERROR))
        except OSError as exc:
            file_error = exc

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
    )
    if file_error is not None:
        logging.getLogger("app").warning("File logging disabled (%s): %s", log_dir, file_error)
    _configured = True


__all__ = ["LOG_FORMAT", "configure_logging"]
