"""Resilience – RetryDecisionEngine: requeue with delay, or dead-letter.

The engine is pure and holds no mutable state, so one instance can be shared
by any number of concurrent workers.
"""
from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, TypeAlias

from mp_redelivery.kernel.errors import error_detail
from mp_redelivery.kernel.messaging import Envelope
from mp_redelivery.resilience.retry.backoff import BackoffSchedule, default_schedule
from mp_redelivery.resilience.retry.classifier import ErrorClassifier, ErrorKind

DEFAULT_MAX_ATTEMPTS = 12


class DeadLetterReason(enum.StrEnum):
    PERMANENT_ERROR = "permanent_error"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"


def describe_error(error: BaseException) -> str:
    message = getattr(error, "message", None) or str(error)
    return f"{type(error).__name__}: {message}"


@dataclasses.dataclass(frozen=True)
class Requeue:
    """Send ``envelope`` back to the queue, invisible for ``delay``."""

    envelope: Envelope[Any]
    delay: timedelta
    error_kind: ErrorKind = ErrorKind.TRANSIENT
    error: str = ""
    error_detail: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class DeadLetter:
    """Move ``envelope`` to the dead-letter channel; no further retries."""

    envelope: Envelope[Any]
    reason: DeadLetterReason
    error_kind: ErrorKind
    error: str = ""
    error_detail: Mapping[str, Any] = dataclasses.field(default_factory=dict)


Outcome: TypeAlias = Requeue | DeadLetter


class RetryDecisionEngine:
    """Decide the fate of one failed delivery.

    Parameters
    ----------
    schedule:
        Backoff schedule (or any ``int -> timedelta`` callable). Defaults to
        :func:`~mp_redelivery.resilience.retry.backoff.default_schedule`.
    classifier:
        Error classifier. Defaults to :class:`ErrorClassifier` with the
        built-in permanent categories.
    max_attempts:
        Attempt budget. A message whose incremented ``attempt_count`` exceeds
        it is dead-lettered, so up to ``max_attempts + 1`` deliveries happen.
    """

    def __init__(
        self,
        schedule: BackoffSchedule | Callable[[int], timedelta] | None = None,
        classifier: ErrorClassifier | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        self.schedule = schedule or default_schedule()
        self.classifier = classifier or ErrorClassifier()
        self.max_attempts = max_attempts

    def decide(
        self,
        envelope: Envelope[Any],
        error: BaseException,
        max_attempts: int | None = None,
    ) -> Outcome:
        budget = self.max_attempts if max_attempts is None else max_attempts
        next_envelope = envelope.next_attempt()
        kind = self.classifier.classify(error)
        description = describe_error(error)
        detail = error_detail(error)

        if kind is ErrorKind.PERMANENT:
            return DeadLetter(next_envelope, DeadLetterReason.PERMANENT_ERROR, kind, description, detail)
        if next_envelope.attempt_count > budget:
            return DeadLetter(next_envelope, DeadLetterReason.ATTEMPTS_EXHAUSTED, kind, description, detail)
        delay = self.schedule(next_envelope.attempt_count)
        return Requeue(next_envelope, delay, kind, description, detail)


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DeadLetter",
    "DeadLetterReason",
    "Outcome",
    "Requeue",
    "RetryDecisionEngine",
    "describe_error",
]
