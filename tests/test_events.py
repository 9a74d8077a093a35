"""Tests for event recording and log formatting."""

import json
import logging
import sys

from tracker.app.logging_config import SERVICE_NAME, JsonFormatter
from tracker.app.services.events import (
    FEATURE_REQUEST_CREATED,
    FEATURE_REQUEST_DELETED,
    FEATURE_REQUEST_STATUS_CHANGED,
    LoggingEventRecorder,
    feature_created_event,
    feature_deleted_event,
    status_changed_event,
)


def test_feature_created_event_structure():
    name, attrs = feature_created_event("fr-1", "Dark mode", "alice")
    assert name == FEATURE_REQUEST_CREATED
    assert attrs == {"feature_request_id": "fr-1", "title": "Dark mode", "created_by": "alice"}


def test_status_changed_event_structure():
    name, attrs = status_changed_event("fr-1", "NEW", "COMPLETED", "bob")
    assert name == FEATURE_REQUEST_STATUS_CHANGED
    assert attrs["old_status"] == "NEW"
    assert attrs["new_status"] == "COMPLETED"
    assert attrs["changed_by"] == "bob"


def test_feature_deleted_event_structure():
    name, attrs = feature_deleted_event("fr-1", 3)
    assert name == FEATURE_REQUEST_DELETED
    assert attrs == {"feature_request_id": "fr-1", "history_removed": 3}


def test_logging_recorder_writes_info(caplog):
    caplog.set_level(logging.INFO, logger="tracker.events")

    LoggingEventRecorder().record(*feature_created_event("fr-1", "Dark mode", "alice"))

    [record] = caplog.records
    assert record.levelno == logging.INFO
    assert record.event == FEATURE_REQUEST_CREATED
    assert record.attributes["feature_request_id"] == "fr-1"
    assert "feature_request.created" in record.getMessage()


def test_json_formatter_includes_extras():
    record = logging.LogRecord("tracker.events", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.event = "feature_request.created"
    record.attributes = {"feature_request_id": "fr-1"}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "info"
    assert payload["logger"] == "tracker.events"
    assert payload["service"] == SERVICE_NAME
    assert payload["event"] == "feature_request.created"
    assert payload["attributes"] == {"feature_request_id": "fr-1"}


def test_json_formatter_includes_exception():
    try:
        raise ValueError("broken")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))
    assert "ValueError: broken" in payload["exc_info"]
