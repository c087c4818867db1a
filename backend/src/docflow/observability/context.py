"""Per-request logging context.

RequestIDMiddleware opens a context for every request. The auth dependency
binds the acting user and the document operations bind the document they
work on. Log lines of the request then carry both next to the request id
without threading them through each call.

The bound fields live in one dict per request. FastAPI runs sync
dependencies and endpoints in worker threads with a copy of the context;
the copy still points at the same dict, so fields bound in a dependency are
visible to the endpoint that runs after it.
"""

import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_fields_var: ContextVar[Optional[Dict[str, Any]]] = ContextVar("log_fields", default=None)

# Fields callers may bind; anything else is ignored
BINDABLE_FIELDS = ("actor_id", "actor_role", "document_id")


def new_request_id() -> str:
    return str(uuid.uuid4())


def start_request_context(request_id: str) -> None:
    """Begin a fresh context for one request."""
    request_id_var.set(request_id)
    _fields_var.set({})


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def bind_log_context(**fields: Any) -> None:
    """Attach fields to every later log line of the current request.

    Outside a request context (scripts, direct calls in tests) this is a
    no-op. None values are skipped.

    Example:
        bind_log_context(document_id=document.id)
    """
    bound = _fields_var.get()
    if bound is None:
        return
    for key, value in fields.items():
        if key in BINDABLE_FIELDS and value is not None:
            bound[key] = value


def bound_fields() -> Dict[str, Any]:
    """Snapshot of the fields bound in the current request."""
    return dict(_fields_var.get() or {})
