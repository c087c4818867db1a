"""Logging setup for DocFlow.

Every record passes through LogContextFilter, which stamps it with the
request id and the actor/document bound for the current request (see
observability.context). JSON output is for deployments; the plain format is
for local runs and tests.

A transition log line looks like:

    {"timestamp": "...", "level": "INFO", "request_id": "3f2c...",
     "logger": "docflow.documents.transition",
     "message": "Document SUBMITTED -> PENDING",
     "actor_id": "...", "actor_role": "MANAGER", "document_id": "...",
     "action": "APPROVE", "from_status": "SUBMITTED", "to_status": "PENDING"}
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .context import bound_fields, get_request_id

NO_REQUEST_ID = "-"

# Record attributes emitted as top-level JSON keys when present
CONTEXT_FIELDS = (
    "actor_id",
    "actor_role",
    "document_id",
    "action",
    "from_status",
    "to_status",
    "status_code",
    "duration_ms",
)


class LogContextFilter(logging.Filter):
    """Copy the current request's context onto each record.

    Values passed explicitly through extra= win over bound ones.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or NO_REQUEST_ID
        for key, value in bound_fields().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _json_value(value):
    if value is None or isinstance(value, (int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = _json_value(getattr(record, field))

        return json.dumps(log_data)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines if True, otherwise a plain text format
    """
    log_level = getattr(logging, level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s'
        ))
    handler.addFilter(LogContextFilter())
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
