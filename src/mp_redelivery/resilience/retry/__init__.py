"""Resilience – redelivery decisions: backoff, classification, dead-letter routing."""
from mp_redelivery.resilience.retry.backoff import (
    DEFAULT_BACKOFF_TABLE,
    BackoffSchedule,
    ExponentialBackoffSchedule,
    TableBackoffSchedule,
    default_schedule,
)
from mp_redelivery.resilience.retry.classifier import ErrorClassifier, ErrorKind
from mp_redelivery.resilience.retry.dead_letter import DEFAULT_DEAD_LETTER_TTL, DeadLetterRouter
from mp_redelivery.resilience.retry.decision import (
    DEFAULT_MAX_ATTEMPTS,
    DeadLetter,
    DeadLetterReason,
    Outcome,
    Requeue,
    RetryDecisionEngine,
)

__all__ = [
    "BackoffSchedule",
    "DEFAULT_BACKOFF_TABLE",
    "DEFAULT_DEAD_LETTER_TTL",
    "DEFAULT_MAX_ATTEMPTS",
    "DeadLetter",
    "DeadLetterReason",
    "DeadLetterRouter",
    "ErrorClassifier",
    "ErrorKind",
    "ExponentialBackoffSchedule",
    "Outcome",
    "Requeue",
    "RetryDecisionEngine",
    "TableBackoffSchedule",
    "default_schedule",
]
