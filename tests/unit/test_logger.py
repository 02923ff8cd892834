"""Tests for logger setup.

Covers:
- JSONFormatter output structure
- configure_logging handler setup from the observability section
"""

import json
import logging
import sys

import pytest

from ai_dispatch.observability.logger import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_package_logger():
    """Undo configure_logging so later caplog-based tests still see records."""
    lgr = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (lgr.level, list(lgr.handlers), lgr.propagate)
    yield lgr
    lgr.setLevel(saved[0])
    lgr.handlers[:] = saved[1]
    lgr.propagate = saved[2]


# ── JSONFormatter ────────────────────────────────────────────────────


class TestJSONFormatter:
    """Verify JSONFormatter produces valid JSON with required fields."""

    def _make_record(
        self, msg: str = "hello", level: int = logging.INFO, **extra: object
    ) -> logging.LogRecord:
        record = logging.LogRecord(
            name="ai_dispatch.test",
            level=level,
            pathname="test.py",
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )
        for k, v in extra.items():
            setattr(record, k, v)
        return record

    def test_required_keys(self) -> None:
        obj = json.loads(JSONFormatter().format(self._make_record()))
        for key in ("timestamp", "level", "logger", "message"):
            assert key in obj, f"missing key: {key}"

    def test_message_and_level(self) -> None:
        obj = json.loads(JSONFormatter().format(self._make_record("curl failed", level=logging.WARNING)))
        assert obj["message"] == "curl failed"
        assert obj["level"] == "WARNING"
        assert obj["logger"] == "ai_dispatch.test"

    def test_extra_fields_merged(self) -> None:
        record = self._make_record(provider="anthropic", status_code=529)
        obj = json.loads(JSONFormatter().format(record))
        assert obj["provider"] == "anthropic"
        assert obj["status_code"] == 529

    def test_non_serialisable_extra_converted(self) -> None:
        obj = json.loads(JSONFormatter().format(self._make_record(custom_obj=object())))
        assert isinstance(obj["custom_obj"], str)

    def test_single_line_output(self) -> None:
        line = JSONFormatter().format(self._make_record("no\nnewlines\nplease"))
        assert "\n" not in line

    def test_exception_included(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                name="t", level=logging.ERROR, pathname="t.py", lineno=1,
                msg="failed", args=(), exc_info=sys.exc_info(),
            )
        obj = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in obj["exception"]


# ── configure_logging ───────────────────────────────────────────────


class TestConfigureLogging:
    """Verify the observability section drives level and format."""

    def test_defaults_to_info_text(self, restore_package_logger) -> None:
        lgr = configure_logging({})
        assert lgr.name == ROOT_LOGGER_NAME
        assert lgr.level == logging.INFO
        assert not isinstance(lgr.handlers[-1].formatter, JSONFormatter)

    def test_json_format_and_level(self, restore_package_logger) -> None:
        lgr = configure_logging({"log_level": "debug", "log_format": "json"})
        assert lgr.level == logging.DEBUG
        assert isinstance(lgr.handlers[-1].formatter, JSONFormatter)

    def test_no_duplicate_handlers_on_repeated_call(self, restore_package_logger) -> None:
        before = len(restore_package_logger.handlers)
        configure_logging({})
        lgr = configure_logging({"log_format": "json"})
        assert len(lgr.handlers) == before + 1

    def test_invalid_level_raises(self, restore_package_logger) -> None:
        with pytest.raises(ValueError, match=r"log level"):
            configure_logging({"log_level": "CHATTY"})

    def test_invalid_format_raises(self, restore_package_logger) -> None:
        with pytest.raises(ValueError, match=r"log format"):
            configure_logging({"log_format": "xml"})


def test_get_logger_returns_named_logger() -> None:
    assert get_logger("ai_dispatch.scripts").name == "ai_dispatch.scripts"
    assert logging.getLogger("urllib3").level == logging.WARNING
