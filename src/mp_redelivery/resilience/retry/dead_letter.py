"""Resilience – DeadLetterRouter: hand given-up messages to the dead-letter channel."""
from __future__ import annotations

from datetime import timedelta
from typing import Any

from mp_redelivery.kernel.messaging import Envelope, EnvelopeCodec, QueueBackend
from mp_redelivery.observability.logging import get_logger

DEFAULT_DEAD_LETTER_TTL = timedelta(days=7)

logger = get_logger(__name__)


class DeadLetterRouter:
    """Send envelopes to the backend's dead-letter channel.

    Backend failures surface as
    :class:`~mp_redelivery.kernel.errors.TransportError` and are not retried
    here; the worker's supervisor decides what to do with the lease.
    """

    def __init__(
        self,
        backend: QueueBackend,
        codec: EnvelopeCodec | None = None,
        *,
        ttl: timedelta | None = DEFAULT_DEAD_LETTER_TTL,
    ) -> None:
        self._backend = backend
        self._codec = codec or EnvelopeCodec()
        self._ttl = ttl

    async def route(self, envelope: Envelope[Any]) -> None:
        """Encode *envelope* and append it to the dead-letter channel."""
        await self._backend.send_dead_letter(self._codec.encode(envelope), ttl=self._ttl)
        logger.debug(
            "dead_letter.sent",
            correlation_id=envelope.correlation_id,
            attempt_count=envelope.attempt_count,
        )

    async def route_raw(self, raw: str) -> None:
        """Append an undecodable raw body verbatim, preserving it for inspection."""
        await self._backend.send_dead_letter(raw, ttl=self._ttl)
        logger.debug("dead_letter.sent_raw", size=len(raw))


__all__ = ["DEFAULT_DEAD_LETTER_TTL", "DeadLetterRouter"]
