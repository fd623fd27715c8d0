"""Application – RedeliveryConsumer: the per-lease worker loop.

One delivery goes through::

    receive -> decode -> handler(payload) -> complete lease          (success)
                                \\-> decide -> requeue | dead-letter -> complete lease

The original lease is completed only after the outcome's backend call has
succeeded. If the worker dies in between, the lease expires and the backend
redelivers the original message, so every outcome takes effect at least once.
"""
from __future__ import annotations

import asyncio
import enum
import inspect
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeAlias

from mp_redelivery.config.settings import DecodeFailurePolicy, RedeliverySettings
from mp_redelivery.kernel.errors import DecodeError
from mp_redelivery.kernel.messaging import Envelope, EnvelopeCodec, Lease, QueueBackend, ReceivedMessage
from mp_redelivery.kernel.time import Clock
from mp_redelivery.observability.events import RedeliveryEvents
from mp_redelivery.observability.logging import get_logger, message_context
from mp_redelivery.observability.metrics import Metrics
from mp_redelivery.resilience.retry import (
    DeadLetter,
    DeadLetterReason,
    DeadLetterRouter,
    Outcome,
    Requeue,
    RetryDecisionEngine,
)

MessageHandler: TypeAlias = Callable[[Any], Awaitable[None] | None]

DEFAULT_MESSAGE_TTL = timedelta(days=7)

logger = get_logger(__name__)


class DeliveryResult(enum.StrEnum):
    SUCCEEDED = "succeeded"
    REQUEUED = "requeued"
    DEAD_LETTERED = "dead_lettered"
    DROPPED = "dropped"


class RedeliveryConsumer:
    """Drive a :class:`QueueBackend` through a handler with redelivery decisions.

    Parameters
    ----------
    backend:
        Injected queue backend; the consumer never creates its own client.
    handler:
        Business logic, called with the envelope payload. Sync or async;
        raising any exception marks the attempt as failed.
    engine:
        Decision engine (schedule, classifier, attempt budget).
    codec:
        Wire codec shared with producers.
    router:
        Dead-letter router; built from *backend* and *codec* when omitted.
    message_ttl:
        Time-to-live for requeued messages.
    decode_failure_policy:
        ``drop`` completes the lease of an undecodable message; ``dead_letter``
        first copies the raw body to the dead-letter channel.
    concurrency:
        Default number of worker loops for :meth:`run`.
    """

    def __init__(
        self,
        backend: QueueBackend,
        handler: MessageHandler,
        *,
        engine: RetryDecisionEngine | None = None,
        codec: EnvelopeCodec | None = None,
        router: DeadLetterRouter | None = None,
        events: RedeliveryEvents | None = None,
        message_ttl: timedelta | None = DEFAULT_MESSAGE_TTL,
        decode_failure_policy: DecodeFailurePolicy = DecodeFailurePolicy.DROP,
        poll_interval: float = 1.0,
        concurrency: int = 1,
    ) -> None:
        self._backend = backend
        self._handler = handler
        self._engine = engine or RetryDecisionEngine()
        self._codec = codec or EnvelopeCodec()
        self._router = router or DeadLetterRouter(backend, self._codec)
        self._events = events or RedeliveryEvents()
        self._message_ttl = message_ttl
        self._decode_failure_policy = DecodeFailurePolicy(decode_failure_policy)
        self._poll_interval = poll_interval
        self._concurrency = concurrency

    @classmethod
    def from_settings(
        cls,
        settings: RedeliverySettings,
        backend: QueueBackend,
        handler: MessageHandler,
        *,
        metrics: Metrics | None = None,
        clock: Clock | None = None,
    ) -> "RedeliveryConsumer":
        codec = EnvelopeCodec(base64_encoding=settings.base64_encoding, clock=clock)
        logger.info("consumer.configured", settings=settings.redacted())
        return cls(
            backend,
            handler,
            engine=RetryDecisionEngine(
                schedule=settings.backoff_schedule(),
                max_attempts=settings.max_attempts,
            ),
            codec=codec,
            router=DeadLetterRouter(backend, codec, ttl=settings.dead_letter_ttl),
            events=RedeliveryEvents(metrics, clock=clock),
            message_ttl=settings.message_ttl,
            decode_failure_policy=DecodeFailurePolicy(settings.decode_failure_policy),
            poll_interval=settings.poll_interval_seconds,
            concurrency=settings.concurrency,
        )

    @property
    def engine(self) -> RetryDecisionEngine:
        return self._engine

    @property
    def concurrency(self) -> int:
        return self._concurrency

    # ------------------------------------------------------------------
    # Single delivery
    # ------------------------------------------------------------------

    async def process(self, received: ReceivedMessage) -> DeliveryResult:
        """Handle one leased message end to end.

        Raises:
            TransportError: a backend call failed; the lease is left for the
                backend to expire and redeliver.
        """
        try:
            envelope = self._codec.decode(received.body)
        except DecodeError as exc:
            return await self._on_decode_failure(received, exc)

        with message_context(envelope.correlation_id, envelope.attempt_count):
            self._events.attempt_observed(envelope)
            self._events.in_flight.inc()
            try:
                await self._invoke(envelope)
            except Exception as exc:  # noqa: BLE001 - any handler failure is an attempt outcome
                outcome = self._engine.decide(envelope, exc)
                return await self.execute(outcome, received.lease)
            finally:
                self._events.in_flight.dec()

            await self._backend.complete_lease(received.lease)
            self._events.succeeded(envelope)
            return DeliveryResult.SUCCEEDED

    async def execute(self, outcome: Outcome, lease: Lease) -> DeliveryResult:
        """Apply *outcome* against the backend, then release the original lease."""
        match outcome:
            case Requeue(envelope=envelope, delay=delay):
                await self._backend.requeue(self._codec.encode(envelope), delay, ttl=self._message_ttl)
                await self._backend.complete_lease(lease)
                self._events.requeued(outcome)
                return DeliveryResult.REQUEUED
            case DeadLetter(envelope=envelope, reason=reason):
                if reason is DeadLetterReason.PERMANENT_ERROR:
                    self._events.permanent_error(outcome)
                await self._router.route(envelope)
                await self._backend.complete_lease(lease)
                self._events.dead_lettered(outcome)
                return DeliveryResult.DEAD_LETTERED
        raise TypeError(f"Unknown outcome {outcome!r}")

    async def _invoke(self, envelope: Envelope[Any]) -> None:
        result = self._handler(envelope.payload)
        if inspect.isawaitable(result):
            await result

    async def _on_decode_failure(self, received: ReceivedMessage, exc: DecodeError) -> DeliveryResult:
        self._events.decode_failed(received.body, exc)
        if self._decode_failure_policy is DecodeFailurePolicy.DEAD_LETTER:
            await self._router.route_raw(received.body)
            await self._backend.complete_lease(received.lease)
            return DeliveryResult.DEAD_LETTERED
        await self._backend.complete_lease(received.lease)
        self._events.dropped(received.body)
        return DeliveryResult.DROPPED

    # ------------------------------------------------------------------
    # Polling loop
    # ------------------------------------------------------------------

    async def poll_once(self) -> DeliveryResult | None:
        """Receive and process at most one message. ``None`` when the queue is idle."""
        received = await self._backend.receive()
        if received is None:
            return None
        return await self.process(received)

    async def run(
        self,
        stop: asyncio.Event | None = None,
        *,
        concurrency: int | None = None,
        max_messages: int | None = None,
    ) -> int:
        """Run *concurrency* worker loops (default: the configured count) until *stop* is set.

        With *max_messages* set, the loops also stop once that many messages
        were handled. A :class:`TransportError` in any worker ends the run and
        propagates to the caller.

        Returns the number of messages handled.
        """
        if concurrency is None:
            concurrency = self._concurrency
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        stop = stop or asyncio.Event()
        handled = 0

        async def worker(worker_id: int) -> None:
            nonlocal handled
            while not stop.is_set():
                if max_messages is not None and handled >= max_messages:
                    stop.set()
                    break
                result = await self.poll_once()
                if result is None:
                    if max_messages is None:
                        await self._sleep_or_stop(stop)
                        continue
                    # draining a bounded run: an idle queue means we are done
                    stop.set()
                    break
                handled += 1
                logger.debug("consumer.handled", worker=worker_id, result=str(result))

        logger.info("consumer.started", concurrency=concurrency)
        try:
            async with asyncio.TaskGroup() as group:
                for worker_id in range(concurrency):
                    group.create_task(worker(worker_id))
        except ExceptionGroup as eg:
            logger.error("consumer.crashed", errors=[repr(e) for e in eg.exceptions])
            raise eg.exceptions[0] from None
        logger.info("consumer.stopped", handled=handled)
        return handled

    async def _sleep_or_stop(self, stop: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop.wait(), timeout=self._poll_interval)
        except TimeoutError:
            pass


__all__ = ["DEFAULT_MESSAGE_TTL", "DeliveryResult", "MessageHandler", "RedeliveryConsumer"]
