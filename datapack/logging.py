"""Logging setup shared by the datapack CLI and library modules."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "datapack"
_CONSOLE_FORMAT = "[datapack] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``datapack.<name>``, or the package logger when ``name`` is empty."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a console handler and, when ``log_file`` is given, a file handler.

    The console shows INFO and above (DEBUG with ``verbose``). A log file
    always records DEBUG so per-entry writes and failure tracebacks survive a
    quiet run. Calling this again replaces and closes the previous handlers.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.propagate = False
    reset_logging()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    logger_level = console_level
    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger_level = logging.DEBUG

    logger.setLevel(logger_level)
    return logger


def reset_logging() -> None:
    """Detach and close every handler on the package logger."""
    logger = logging.getLogger(_ROOT)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger", "reset_logging"]
