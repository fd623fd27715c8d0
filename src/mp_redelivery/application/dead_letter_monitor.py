"""Application – DeadLetterMonitor: drains the dead-letter channel.

Every message read back is logged (``dead_letter.received``), handed to an
optional callback and then deleted. Bodies that no longer decode are still
reported with their raw text so nothing disappears silently.
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from mp_redelivery.kernel.errors import DecodeError
from mp_redelivery.kernel.messaging import Envelope, EnvelopeCodec, QueueBackend
from mp_redelivery.observability.events import RedeliveryEvents
from mp_redelivery.observability.logging import get_logger, message_context

DeadLetterCallback: TypeAlias = Callable[[str, Envelope[Any] | None], Awaitable[None] | None]

logger = get_logger(__name__)


class DeadLetterMonitor:
    """Read, report and remove messages from a backend's dead-letter channel.

    Example::

        monitor = DeadLetterMonitor(backend, codec, on_message=alert)
        await monitor.run(stop_event)
    """

    def __init__(
        self,
        backend: QueueBackend,
        codec: EnvelopeCodec | None = None,
        *,
        events: RedeliveryEvents | None = None,
        on_message: DeadLetterCallback | None = None,
        poll_interval: float = 1.0,
    ) -> None:
        self._backend = backend
        self._codec = codec or EnvelopeCodec()
        self._events = events or RedeliveryEvents()
        self._on_message = on_message
        self._poll_interval = poll_interval

    async def poll_once(self) -> str | None:
        """Handle at most one dead letter and return its raw body, or ``None`` when idle.

        The message is deleted only after the callback returned; a raising
        callback leaves it leased so the backend makes it visible again.
        """
        received = await self._backend.receive_dead_letter()
        if received is None:
            return None
        try:
            envelope: Envelope[Any] | None = self._codec.decode(received.body)
        except DecodeError:
            envelope = None

        if envelope is None:
            self._events.dead_letter_received(received.body, None)
            await self._notify(received.body, None)
        else:
            with message_context(envelope.correlation_id, envelope.attempt_count):
                self._events.dead_letter_received(received.body, envelope)
                await self._notify(received.body, envelope)
        await self._backend.complete_dead_letter(received.lease)
        return received.body

    async def _notify(self, raw: str, envelope: Envelope[Any] | None) -> None:
        if self._on_message is None:
            return
        result = self._on_message(raw, envelope)
        if inspect.isawaitable(result):
            await result

    async def run(self, stop: asyncio.Event | None = None, *, max_messages: int | None = None) -> int:
        """Poll the dead-letter channel until *stop* is set.

        With *max_messages* set the run also ends once that many messages were
        read or the channel is empty. Returns the number of messages read.
        """
        stop = stop or asyncio.Event()
        read = 0
        logger.info("dead_letter_monitor.started")
        while not stop.is_set():
            if max_messages is not None and read >= max_messages:
                break
            if await self.poll_once() is None:
                if max_messages is not None:
                    break
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self._poll_interval)
                except TimeoutError:
                    pass
                continue
            read += 1
        logger.info("dead_letter_monitor.stopped", read=read)
        return read


__all__ = ["DeadLetterCallback", "DeadLetterMonitor"]
