"""Scoped logging context.

Fields pushed here (``run_id``, ``alert_id``, ``user_id``) are attached to
every log record emitted inside the scope by ``ContextualFilter``. Context is
held in a ``ContextVar`` so scheduler threads never see each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("job_alerts_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_LOG_CONTEXT.get())


def push_log_context(**fields) -> Token:
    """Merge fields into the current context.

    None values are dropped so optional identifiers do not show up as
    ``alert_id=null`` on every line.

    Returns:
        Token to pass to pop_log_context()
    """
    merged = {**_LOG_CONTEXT.get()}
    merged.update({key: value for key, value in fields.items() if value is not None})
    return _LOG_CONTEXT.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    _LOG_CONTEXT.reset(token)


def clear_log_context() -> None:
    """Drop all fields. Used by tests."""
    _LOG_CONTEXT.set({})


class log_context:
    """Context manager wrapping push_log_context/pop_log_context.

    Example:
        >>> with log_context(run_id="3f2a", alert_id="a-1"):
        ...     logger.info("Evaluating alert")  # carries run_id and alert_id
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
