"""Structured Logging — JSON formatter fields and request id generation."""

import json
import logging
import sys

from directory_api.infrastructure.observability import JSONFormatter, new_request_id


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="directory_api.test", level=logging.WARNING, pathname=__file__,
        lineno=1, msg="GET %s %d", args=("/api/v1/profiles", 400), exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_emits_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "directory_api.test"
    assert payload["message"] == "GET /api/v1/profiles 400"
    assert "timestamp" in payload


def test_json_formatter_surfaces_extra_fields():
    payload = json.loads(JSONFormatter().format(_record(
        request_id="req_abc", status_code=400, duration_ms=3.2,
        error_code="VALIDATION_ERROR", total_count=None,
    )))
    assert payload["request_id"] == "req_abc"
    assert payload["status_code"] == 400
    assert payload["error_code"] == "VALIDATION_ERROR"
    assert "total_count" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


def test_request_ids_are_unique_and_prefixed():
    first, second = new_request_id(), new_request_id()
    assert first.startswith("req_")
    assert first != second
