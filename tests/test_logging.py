"""Tests for the structured logging system (academy_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from academy_kernel.exceptions import InvalidShiftError
from academy_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "academy_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("pay_slip_issued", extra={"net_pay": 2_409_250, "month": 3})

        record = _parse_log(stream)
        assert record["net_pay"] == 2_409_250
        assert record["month"] == 3

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        staff_id = str(uuid4())
        LogContext.set(staff_id=staff_id, pay_period="2026-03")
        get_logger("test").info("composing")

        record = _parse_log(stream)
        assert record["staff_id"] == staff_id
        assert record["pay_period"] == "2026-03"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare")

        record = _parse_log(stream)
        assert "staff_id" not in record
        assert "correlation_id" not in record

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info(
            "values",
            extra={"id": uid, "due": date(2027, 1, 10), "rate": Decimal("0.033")},
        )

        record = _parse_log(stream)
        assert record["id"] == str(uid)
        assert record["due"] == "2027-01-10"
        assert record["rate"] == "0.033"

    def test_exception_code_and_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise InvalidShiftError("shift-1", "end is not after start")
        except InvalidShiftError:
            get_logger("test").exception("shift_rejected")

        record = _parse_log(stream)
        assert record["exc_type"] == "InvalidShiftError"
        assert record["exc_code"] == "INVALID_SHIFT"
        assert record["exc_shift_id"] == "shift-1"
        assert "traceback" in record

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        logger = get_logger("test")
        logger.debug("one")
        logger.info("two", extra={"n": 2})
        logger.warning("three")

        records = _parse_all_logs(stream)
        assert [r["message"] for r in records] == ["one", "two", "three"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_set_and_get(self):
        LogContext.set(correlation_id="abc", actor_id="actor")
        assert LogContext.get_all() == {"correlation_id": "abc", "actor_id": "actor"}

    def test_clear(self):
        LogContext.set(correlation_id="abc")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous(self):
        LogContext.set(staff_id="outer")
        with LogContext.bind(staff_id="inner", pay_period="2026-03"):
            assert LogContext.get_all() == {"staff_id": "inner", "pay_period": "2026-03"}
        assert LogContext.get_all() == {"staff_id": "outer"}

    def test_additive_set(self):
        LogContext.set(correlation_id="abc")
        LogContext.set(actor_id="actor")
        assert LogContext.get_all() == {"correlation_id": "abc", "actor_id": "actor"}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)
        assert len(logging.getLogger("academy_kernel").handlers) == 1

    def test_logger_hierarchy(self):
        logger = get_logger("modules.payroll.service")
        assert logger.name == "academy_kernel.modules.payroll.service"
        assert logger.parent.name.startswith("academy_kernel")

    def test_level_filters(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.WARNING)
        logger = get_logger("test")
        logger.info("hidden")
        logger.warning("shown")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["shown"]
