"""Resilience – redelivery backoff, error classification and dead-lettering."""

from mp_redelivery.resilience.retry import (
    BackoffSchedule,
    DeadLetter,
    DeadLetterRouter,
    ErrorClassifier,
    ErrorKind,
    Requeue,
    RetryDecisionEngine,
    TableBackoffSchedule,
)

__all__ = [
    "BackoffSchedule",
    "DeadLetter",
    "DeadLetterRouter",
    "ErrorClassifier",
    "ErrorKind",
    "Requeue",
    "RetryDecisionEngine",
    "TableBackoffSchedule",
]
