"""Domain event recording.

The service reports every successful mutation to an ``EventRecorder``.
Event factories build the ``(event, attributes)`` pairs so recorders and
tests agree on the shape.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger("tracker.events")

FEATURE_REQUEST_CREATED = "feature_request.created"
FEATURE_REQUEST_STATUS_CHANGED = "feature_request.status_changed"
FEATURE_REQUEST_DELETED = "feature_request.deleted"


class EventRecorder(Protocol):
    def record(self, event: str, attributes: dict[str, Any]) -> None: ...


class LoggingEventRecorder:
    """Writes events to the ``tracker.events`` logger at INFO."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record(self, event: str, attributes: dict[str, Any]) -> None:
        self._log.info(
            "%s %s",
            event,
            " ".join(f"{k}={v}" for k, v in attributes.items()),
            extra={"event": event, "attributes": attributes},
        )


# --- Event factories ---


def feature_created_event(
    feature_id: str, title: str, created_by: str
) -> tuple[str, dict[str, Any]]:
    return FEATURE_REQUEST_CREATED, {
        "feature_request_id": feature_id,
        "title": title,
        "created_by": created_by,
    }


def status_changed_event(
    feature_id: str, old_status: str, new_status: str, changed_by: str
) -> tuple[str, dict[str, Any]]:
    return FEATURE_REQUEST_STATUS_CHANGED, {
        "feature_request_id": feature_id,
        "old_status": old_status,
        "new_status": new_status,
        "changed_by": changed_by,
    }


def feature_deleted_event(feature_id: str, history_removed: int) -> tuple[str, dict[str, Any]]:
    return FEATURE_REQUEST_DELETED, {
        "feature_request_id": feature_id,
        "history_removed": history_removed,
    }
