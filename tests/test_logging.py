"""
Unit tests for the log formatters and the request-id filter.
"""

import json
import logging

from investimentos.core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    RequestIDFilter,
    request_id_ctx,
)


def _record(msg: str = "hello %s", *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="investimentos.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args or ("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestIDFilter:
    def test_copies_context_value(self):
        token = request_id_ctx.set("abc-123")
        try:
            record = _record()
            assert RequestIDFilter().filter(record) is True
        finally:
            request_id_ctx.reset(token)
        assert record.request_id == "abc-123"

    def test_outside_request(self):
        record = _record()
        RequestIDFilter().filter(record)
        assert record.request_id is None


class TestJSONFormatter:
    def test_fields_and_extras(self):
        record = _record(request_id="abc-123", symbol="IBM", entity=None)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "abc-123"
        assert entry["symbol"] == "IBM"
        assert "entity" not in entry


class TestConsoleFormatter:
    def test_short_request_id(self):
        line = ConsoleFormatter().format(_record(request_id="abcdefgh-1234"))

        assert "[abcdefgh]" in line
        assert line.endswith("hello world")
