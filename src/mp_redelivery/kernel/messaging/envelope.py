"""Kernel messaging – the retry envelope carried with every queue message."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import uuid4

from mp_redelivery.kernel.time import Clock, utc_now

T = TypeVar("T")


def new_correlation_id() -> str:
    """Return a fresh correlation id (UUID4, negligible collision probability)."""
    return str(uuid4())


@dataclasses.dataclass(frozen=True, kw_only=True)
class Envelope(Generic[T]):
    """Payload plus the metadata that survives every redelivery.

    ``correlation_id`` and ``first_seen_at`` are assigned once by the producer
    and copied verbatim onto every derived envelope. ``attempt_count`` is the
    number of failed deliveries so far. ``first_seen_text`` is the timestamp as
    it arrived on the wire, kept so re-encoding does not reformat it.

    Example::

        env = Envelope.new({"order_id": "o-1"})
        retry = env.next_attempt()
        assert retry.correlation_id == env.correlation_id
    """

    payload: T
    attempt_count: int = 0
    correlation_id: str = dataclasses.field(default_factory=new_correlation_id)
    first_seen_at: datetime = dataclasses.field(default_factory=utc_now)
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    first_seen_text: str | None = dataclasses.field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.attempt_count < 0:
            raise ValueError(f"attempt_count must be >= 0, got {self.attempt_count}")
        if not self.correlation_id:
            raise ValueError("correlation_id must be a non-empty string")

    @classmethod
    def new(cls, payload: T, *, clock: Clock | None = None) -> "Envelope[T]":
        """Create a first-attempt envelope for *payload*."""
        first_seen = clock.now() if clock is not None else utc_now()
        return cls(payload=payload, first_seen_at=first_seen)

    def next_attempt(self) -> "Envelope[T]":
        """Return a new envelope with ``attempt_count`` incremented by one."""
        return dataclasses.replace(self, attempt_count=self.attempt_count + 1)


__all__ = ["Envelope", "new_correlation_id"]
