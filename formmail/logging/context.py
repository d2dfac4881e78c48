"""Context propagation for structured logging.

Fields pushed here (submission id, form name, client address) are merged into
every log record emitted inside the scope. Context lives in a ContextVar so
that concurrent requests running on different worker threads never see each
other's fields.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token to pass to pop_log_context() to restore the previous state
    """
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state captured by token."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop all context fields. Mostly useful in tests."""
    LogContextVar.set({})


@contextmanager
def log_context(**kwargs) -> Iterator[Dict[str, Any]]:
    """Scope logging context fields to a with-block.

    Example:
        >>> with log_context(submission_id="3f2a9c", form="contact"):
        ...     logger.info("Submission received")
    """
    token = push_log_context(**kwargs)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
