"""Kernel messaging – queue backend port (lease-based, at-least-once)."""
from __future__ import annotations

import abc
import dataclasses
from datetime import timedelta


@dataclasses.dataclass(frozen=True)
class Lease:
    """Backend-granted right to process one delivered message exclusively."""

    message_id: str
    receipt: str
    delivery_count: int = 1


@dataclasses.dataclass(frozen=True)
class ReceivedMessage:
    """A raw message body together with the lease that covers it."""

    body: str
    lease: Lease


class QueueBackend(abc.ABC):
    """Port: durable queue with a main channel and a dead-letter channel.

    Implementations raise :class:`~mp_redelivery.kernel.errors.TransportError`
    when the backend call itself fails.
    """

    @abc.abstractmethod
    async def receive(self) -> ReceivedMessage | None:
        """Lease the next visible message, or return ``None`` when idle."""
        ...

    @abc.abstractmethod
    async def requeue(self, raw: str, visibility_delay: timedelta, ttl: timedelta | None = None) -> None:
        """Enqueue *raw* so it is not visible before *visibility_delay* elapses."""
        ...

    @abc.abstractmethod
    async def send_dead_letter(self, raw: str, ttl: timedelta | None = None) -> None:
        """Append *raw* to the dead-letter channel, visible immediately."""
        ...

    @abc.abstractmethod
    async def complete_lease(self, lease: Lease) -> None:
        """Delete the leased message from the main channel."""
        ...

    @abc.abstractmethod
    async def receive_dead_letter(self) -> ReceivedMessage | None:
        """Lease the next message of the dead-letter channel, or ``None``."""
        ...

    @abc.abstractmethod
    async def complete_dead_letter(self, lease: Lease) -> None:
        """Delete a leased message from the dead-letter channel."""
        ...


__all__ = ["Lease", "QueueBackend", "ReceivedMessage"]
