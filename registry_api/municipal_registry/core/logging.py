from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

# Request-scoped values stamped onto every log record
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
caller_var: ContextVar[Optional[str]] = ContextVar("caller", default=None)

HANDLER_NAME = "municipal_registry"

_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | caller=%(caller)s | %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Add `correlation_id` and `caller` to each record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = correlation_id_var.get() or "-"
        record.caller = caller_var.get() or "-"
        return True


# PUBLIC_INTERFACE
def configure_logging(level: int | str = logging.INFO) -> logging.Handler:
    """
    Install the registry's stdout handler on the root logger and set its level.

    Safe to call more than once (every `create_app()` does): only the handler
    installed by an earlier call is replaced, handlers added by the server or
    the test runner are left alone.

    Returns:
        The installed handler.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)
    root.setLevel(level)
    return handler
