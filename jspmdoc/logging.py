"""Logging utilities for jspmdoc."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "jspmdoc"


class SeverityFormatter(logging.Formatter):
    """Render records as ``jspmdoc - Warning: message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return f"{_LOGGER_NAME} - {record.levelname.capitalize()}: {message}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the jspmdoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def is_configured() -> bool:
    """Return True when the jspmdoc logger already has handlers attached."""
    return bool(logging.getLogger(_LOGGER_NAME).handlers)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the jspmdoc logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when configured more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(SeverityFormatter("%(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["SeverityFormatter", "configure_logging", "get_logger", "is_configured"]
