from __future__ import annotations

import json
import logging
from typing import Iterator

import pytest

from barstream.config.models import TelemetryConfig
from barstream.telemetry import JsonFormatter, configure_from_config, configure_logging

LOGGER_NAME = "barstream_telemetry_test"


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


def test_json_formatter_should_include_extra_fields() -> None:
    record = logging.LogRecord("barstream.indicators", logging.INFO, __file__, 1, "Indicator context built", None, None)
    record.time_frame = "1h"
    record.indicators = ["close", "sma_20"]
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "Indicator context built"
    assert payload["level"] == "INFO"
    assert payload["name"] == "barstream.indicators"
    assert payload["time_frame"] == "1h"
    assert payload["indicators"] == ["close", "sma_20"]
    assert "lineno" not in payload


def test_json_formatter_should_stringify_unserializable_extra() -> None:
    record = logging.LogRecord("x", logging.DEBUG, __file__, 1, "msg", None, None)
    record.value = object()
    payload = json.loads(JsonFormatter().format(record))
    assert payload["value"].startswith("<object object")


def test_configure_logging_should_write_json_lines(telemetry_tmpdir) -> None:
    logger = configure_logging(log_dir=telemetry_tmpdir, level="debug", logger_name=LOGGER_NAME)
    logging.getLogger(f"{LOGGER_NAME}.analysis").info("Position closed", extra={"positions": 3})
    for handler in logger.handlers:
        handler.flush()
    lines = (telemetry_tmpdir / "barstream_current.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert records[0]["message"] == "JSON logging configured"
    assert records[-1]["message"] == "Position closed"
    assert records[-1]["positions"] == 3
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_configure_logging_should_replace_existing_handlers() -> None:
    configure_logging(logger_name=LOGGER_NAME)
    logger = configure_logging(logger_name=LOGGER_NAME)
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_configure_from_config_should_apply_telemetry_section(telemetry_tmpdir) -> None:
    config = TelemetryConfig(log_level="WARNING", log_dir=str(telemetry_tmpdir / "logs"), logger_name=LOGGER_NAME)
    logger = configure_from_config(config)
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.WARNING
    assert (telemetry_tmpdir / "logs").is_dir()
    assert len(logger.handlers) == 2
