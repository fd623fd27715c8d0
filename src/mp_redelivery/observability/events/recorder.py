"""Observability – operator-facing redelivery events.

Each method writes one structured log line and updates the matching metric.
Log event names are stable and meant for alerting/dashboards:

=============================  ==============================
log event                      metric
=============================  ==============================
``message.attempt_observed``   ``redelivery.attempts``
``message.succeeded``          ``redelivery.succeeded``
``message.requeued``           ``redelivery.requeued`` / ``redelivery.requeue_delay``
``message.dead_lettered``      ``redelivery.dead_lettered``
``handler.permanent_error``    ``redelivery.permanent_errors``
``envelope.decode_failed``     ``redelivery.decode_failures``
``envelope.dropped``           ``redelivery.dropped``
``dead_letter.received``        ``redelivery.dead_letters_read``
=============================  ==============================
"""
from __future__ import annotations

from typing import Any

from mp_redelivery.kernel.messaging import Envelope
from mp_redelivery.kernel.time import Clock, SystemClock
from mp_redelivery.observability.logging import get_logger
from mp_redelivery.observability.metrics import Metrics, NoopMetrics
from mp_redelivery.resilience.retry.decision import DeadLetter, Requeue

ATTEMPT_OBSERVED = "message.attempt_observed"
SUCCEEDED = "message.succeeded"
REQUEUED = "message.requeued"
DEAD_LETTERED = "message.dead_lettered"
PERMANENT_ERROR = "handler.permanent_error"
DECODE_FAILED = "envelope.decode_failed"
DROPPED = "envelope.dropped"
DEAD_LETTER_RECEIVED = "dead_letter.received"

_PREVIEW_CHARS = 256


class RedeliveryEvents:
    """Emit log lines and metrics for every step of a delivery attempt."""

    def __init__(
        self,
        metrics: Metrics | None = None,
        *,
        logger: Any = None,
        clock: Clock | None = None,
    ) -> None:
        metrics = metrics or NoopMetrics()
        self._log = logger or get_logger(__name__)
        self._clock = clock or SystemClock()
        self._attempts = metrics.counter("redelivery.attempts", "Delivery attempts observed")
        self._succeeded = metrics.counter("redelivery.succeeded", "Messages processed successfully")
        self._requeued = metrics.counter("redelivery.requeued", "Messages requeued with a delay")
        self._dead_lettered = metrics.counter("redelivery.dead_lettered", "Messages moved to dead-letter")
        self._permanent = metrics.counter("redelivery.permanent_errors", "Permanent handler errors")
        self._decode_failures = metrics.counter("redelivery.decode_failures", "Undecodable raw messages")
        self._dropped = metrics.counter("redelivery.dropped", "Raw messages dropped after decode failure")
        self._dead_letters_read = metrics.counter(
            "redelivery.dead_letters_read", "Messages read back from the dead-letter channel"
        )
        self._delay = metrics.histogram("redelivery.requeue_delay", "Requeue visibility delay", unit="s")
        self._in_flight_time = metrics.histogram(
            "redelivery.time_in_flight", "Time from first delivery to terminal outcome", unit="s"
        )
        self.in_flight = metrics.gauge("redelivery.in_flight", "Messages currently being handled")

    def _time_in_flight(self, envelope: Envelope[Any]) -> float | None:
        first_seen = envelope.first_seen_at
        now = self._clock.now()
        if (first_seen.tzinfo is None) != (now.tzinfo is None):
            return None
        return (now - first_seen).total_seconds()

    def attempt_observed(self, envelope: Envelope[Any]) -> None:
        self._attempts.add(1)
        self._log.info(
            ATTEMPT_OBSERVED,
            correlation_id=envelope.correlation_id,
            attempt_count=envelope.attempt_count,
        )

    def succeeded(self, envelope: Envelope[Any]) -> None:
        self._succeeded.add(1)
        elapsed = self._time_in_flight(envelope)
        if elapsed is not None:
            self._in_flight_time.record(elapsed, labels={"outcome": "succeeded"})
        self._log.info(
            SUCCEEDED,
            correlation_id=envelope.correlation_id,
            attempt_count=envelope.attempt_count,
            time_in_flight_s=elapsed,
        )

    def requeued(self, outcome: Requeue) -> None:
        delay = outcome.delay.total_seconds()
        self._requeued.add(1)
        self._delay.record(delay)
        self._log.warning(
            REQUEUED,
            correlation_id=outcome.envelope.correlation_id,
            attempt_count=outcome.envelope.attempt_count,
            delay_s=delay,
            error=outcome.error,
        )

    def permanent_error(self, outcome: DeadLetter) -> None:
        self._permanent.add(1)
        self._log.warning(
            PERMANENT_ERROR,
            correlation_id=outcome.envelope.correlation_id,
            attempt_count=outcome.envelope.attempt_count,
            error=outcome.error,
            error_detail=dict(outcome.error_detail),
        )

    def dead_lettered(self, outcome: DeadLetter) -> None:
        self._dead_lettered.add(1, labels={"reason": str(outcome.reason)})
        elapsed = self._time_in_flight(outcome.envelope)
        if elapsed is not None:
            self._in_flight_time.record(elapsed, labels={"outcome": "dead_lettered"})
        self._log.error(
            DEAD_LETTERED,
            correlation_id=outcome.envelope.correlation_id,
            attempt_count=outcome.envelope.attempt_count,
            reason=str(outcome.reason),
            error_kind=str(outcome.error_kind),
            error=outcome.error,
            error_detail=dict(outcome.error_detail),
            time_in_flight_s=elapsed,
        )

    def decode_failed(self, raw: str, error: BaseException) -> None:
        self._decode_failures.add(1)
        self._log.error(DECODE_FAILED, raw_preview=raw[:_PREVIEW_CHARS], error=str(error))

    def dropped(self, raw: str) -> None:
        self._dropped.add(1)
        self._log.error(DROPPED, raw_preview=raw[:_PREVIEW_CHARS])

    def dead_letter_received(self, raw: str, envelope: Envelope[Any] | None) -> None:
        self._dead_letters_read.add(1, labels={"decoded": str(envelope is not None).lower()})
        if envelope is None:
            self._log.warning(DEAD_LETTER_RECEIVED, raw_preview=raw[:_PREVIEW_CHARS])
            return
        self._log.warning(
            DEAD_LETTER_RECEIVED,
            correlation_id=envelope.correlation_id,
            attempt_count=envelope.attempt_count,
            raw_preview=raw[:_PREVIEW_CHARS],
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
