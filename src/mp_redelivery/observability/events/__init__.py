"""Observability – redelivery lifecycle events."""
from mp_redelivery.observability.events.recorder import (
    ATTEMPT_OBSERVED,
    DEAD_LETTER_RECEIVED,
    DEAD_LETTERED,
    DECODE_FAILED,
    DROPPED,
    PERMANENT_ERROR,
    REQUEUED,
    SUCCEEDED,
    RedeliveryEvents,
)

__all__ = [
    "ATTEMPT_OBSERVED",
    "DEAD_LETTER_RECEIVED",
    "DEAD_LETTERED",
    "DECODE_FAILED",
    "DROPPED",
    "PERMANENT_ERROR",
    "REQUEUED",
    "RedeliveryEvents",
    "SUCCEEDED",
]
