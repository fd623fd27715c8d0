"""Resilience – redelivery backoff schedules.

A schedule maps the post-increment attempt count (1, 2, 3, …) to the
visibility delay applied to the requeued message. Schedules are plain values
injected into :class:`~mp_redelivery.resilience.retry.decision.RetryDecisionEngine`;
select one per deployment or per test instead of subclassing the engine.
"""
from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping, Sequence
from datetime import timedelta


class BackoffSchedule(abc.ABC):
    """Compute the redelivery delay after the *attempt_count*-th failure."""

    @abc.abstractmethod
    def delay_for(self, attempt_count: int) -> timedelta: ...

    def __call__(self, attempt_count: int) -> timedelta:
        return self.delay_for(attempt_count)


DEFAULT_BACKOFF_TABLE: tuple[timedelta, ...] = (
    timedelta(seconds=10),
    timedelta(seconds=30),
    timedelta(minutes=1),
    timedelta(minutes=5),
    timedelta(minutes=10),
    timedelta(minutes=30),
    timedelta(hours=1),
    timedelta(hours=3),
    timedelta(hours=6),
    timedelta(hours=12),
    timedelta(hours=12),
)


class TableBackoffSchedule(BackoffSchedule):
    """Explicit table of delays for attempts ``1..K``.

    Attempts past ``K`` saturate at the last entry, so the schedule is total
    over every integer input. Entries need not be monotonic.

    Example::

        schedule = TableBackoffSchedule([timedelta(seconds=1), timedelta(seconds=5)])
        schedule.delay_for(1)    # 1s
        schedule.delay_for(40)   # 5s
    """

    def __init__(self, table: Sequence[timedelta] | Mapping[int, timedelta] = DEFAULT_BACKOFF_TABLE) -> None:
        if isinstance(table, Mapping):
            keys = sorted(table)
            if keys != list(range(1, len(keys) + 1)):
                raise ValueError(f"backoff table keys must be 1..K without gaps, got {keys}")
            entries = tuple(table[k] for k in keys)
        else:
            entries = tuple(table)
        if not entries:
            raise ValueError("backoff table must contain at least one entry")
        if any(d < timedelta(0) for d in entries):
            raise ValueError("backoff delays must be >= 0")
        self._entries = entries

    @classmethod
    def from_seconds(cls, seconds: Iterable[float | int | str]) -> "TableBackoffSchedule":
        """Build a table from delays given in seconds (attempt 1 first)."""
        return cls([timedelta(seconds=float(s)) for s in seconds])

    @property
    def entries(self) -> tuple[timedelta, ...]:
        return self._entries

    @property
    def saturation(self) -> timedelta:
        """Delay returned for every attempt beyond the table."""
        return self._entries[-1]

    def delay_for(self, attempt_count: int) -> timedelta:
        index = min(max(attempt_count, 1), len(self._entries)) - 1
        return self._entries[index]

    def __repr__(self) -> str:
        return f"TableBackoffSchedule({[d.total_seconds() for d in self._entries]!r})"


class ExponentialBackoffSchedule(BackoffSchedule):
    """Delay grows exponentially: ``base_delay * 2^(attempt - 1)``, capped."""

    def __init__(
        self,
        base_delay: timedelta = timedelta(seconds=10),
        max_delay: timedelta = timedelta(hours=12),
    ) -> None:
        if base_delay < timedelta(0) or max_delay < timedelta(0):
            raise ValueError("base_delay and max_delay must be >= 0")
        if base_delay > max_delay:
            raise ValueError("base_delay must be <= max_delay")
        self._base = base_delay
        self._max = max_delay

    def delay_for(self, attempt_count: int) -> timedelta:
        exponent = max(attempt_count, 1) - 1
        # float exponent overflows past 2**1023
        if exponent >= 1023:
            return self._max
        seconds = self._base.total_seconds() * (2.0 ** exponent)
        if seconds >= self._max.total_seconds():
            return self._max
        return timedelta(seconds=seconds)


def default_schedule() -> TableBackoffSchedule:
    """10s, 30s, 1m, 5m, 10m, 30m, 1h, 3h, 6h, 12h, then 12h thereafter."""
    return TableBackoffSchedule(DEFAULT_BACKOFF_TABLE)


__all__ = [
    "BackoffSchedule",
    "DEFAULT_BACKOFF_TABLE",
    "ExponentialBackoffSchedule",
    "TableBackoffSchedule",
    "default_schedule",
]
