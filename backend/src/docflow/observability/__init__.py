"""Observability module for DocFlow.

Provides structured logging, per-request log context, metrics and health checks.
"""

from .context import bind_log_context, get_request_id, start_request_context
from .logging_config import configure_logging
from .metrics import document_transitions_total, documents_uploaded_total, documents_deleted_total
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "bind_log_context",
    "get_request_id",
    "start_request_context",
    # Metrics
    "document_transitions_total",
    "documents_uploaded_total",
    "documents_deleted_total",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
