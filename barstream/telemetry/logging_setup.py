"""Centralized logging configuration for the engine."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict

from barstream.config.models import TelemetryConfig

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Serialize LogRecord fields as JSON for ingestion-friendly logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps({key: value})
            except TypeError:
                value = str(value)
            payload[key] = value
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    *,
    log_dir: Path | None = None,
    level: str = "INFO",
    logger_name: str = "barstream",
) -> Logger:
    """Configure the package logger with JSON handlers.

    Always logs to stderr; when ``log_dir`` is given a midnight-rotating
    ``barstream_current.jsonl`` file is added. Child loggers such as
    ``barstream.indicators`` inherit the handlers.
    """

    logger = logging.getLogger(logger_name)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    log_file: Path | None = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "barstream_current.jsonl"
        handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            backupCount=14,
            encoding="utf-8",
        )
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(JsonFormatter())
    logger.addHandler(stream_handler)

    logger.propagate = False
    logger.debug("JSON logging configured", extra={"log_file": str(log_file) if log_file else None})
    return logger


def configure_from_config(config: TelemetryConfig) -> Logger:
    """Apply :class:`TelemetryConfig` via :func:`configure_logging`."""

    log_dir = Path(config.log_dir) if config.log_dir else None
    return configure_logging(log_dir=log_dir, level=config.log_level, logger_name=config.logger_name)


__all__ = ["configure_logging", "configure_from_config", "JsonFormatter"]
