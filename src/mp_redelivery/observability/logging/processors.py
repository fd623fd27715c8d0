"""Observability – structlog helpers: ``get_logger`` and per-message context."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


@contextmanager
def message_context(correlation_id: str, attempt_count: int, **extra: Any) -> Iterator[None]:
    """Bind the message's correlation id and attempt count to every log line
    emitted inside the block (requires ``merge_contextvars`` in the chain)."""
    with structlog.contextvars.bound_contextvars(
        correlation_id=correlation_id, attempt_count=attempt_count, **extra
    ):
        yield


__all__ = ["get_logger", "message_context"]
