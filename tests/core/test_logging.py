"""Tests for logging configuration."""

import json
import logging
import uuid

from userbase.core.logging import (
    JsonFormatter,
    build_logging_config,
    configure_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="userbase.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Restored user %s",
        args=("abc",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    payload = json.loads(
        JsonFormatter().format(_record(user_id="abc", error_code="EMAIL_TAKEN"))
    )

    assert payload["msg"] == "Restored user abc"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "userbase.test"
    assert payload["user_id"] == "abc"
    assert payload["error_code"] == "EMAIL_TAKEN"


def test_json_formatter_drops_unknown_extras():
    payload = json.loads(JsonFormatter().format(_record(secret="hunter2")))

    assert "secret" not in payload


def test_json_formatter_serializes_non_json_values():
    user_id = uuid.uuid4()
    payload = json.loads(JsonFormatter().format(_record(user_id=user_id)))

    assert payload["user_id"] == str(user_id)


def test_configure_logging_respects_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_JSON", "true")

    configure_logging()

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, JsonFormatter)

    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_JSON", "false")
    configure_logging()


def test_build_logging_config_quiets_uvicorn_access():
    config = build_logging_config(
        "DEBUG", json_output=False, uvicorn_access=False, sql_level="WARNING"
    )

    assert config["handlers"]["console"]["formatter"] == "text"
    assert config["loggers"]["uvicorn.access"]["level"] == "WARNING"
    assert config["loggers"]["uvicorn"]["level"] == "DEBUG"
