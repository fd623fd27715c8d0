"""Config settings – RedeliverySettings for the consumer and its engine."""
from __future__ import annotations

import dataclasses
import enum
from datetime import timedelta
from typing import ClassVar

from mp_redelivery.config.settings.base import Settings
from mp_redelivery.config.validation import InvalidSettingValueError
from mp_redelivery.resilience.retry import (
    DEFAULT_MAX_ATTEMPTS,
    BackoffSchedule,
    TableBackoffSchedule,
    default_schedule,
)

_SEVEN_DAYS = int(timedelta(days=7).total_seconds())


class DecodeFailurePolicy(enum.StrEnum):
    DROP = "drop"
    DEAD_LETTER = "dead_letter"


@dataclasses.dataclass
class RedeliverySettings(Settings):
    """Environment-driven settings, read from ``REDELIVERY_*`` variables.

    ``backoff_seconds`` is a comma-separated list of delays for attempts
    1..K; leave it empty to use the built-in table.
    """

    _prefix: ClassVar[str] = "REDELIVERY"
    _secret_fields: ClassVar[frozenset[str]] = frozenset({"connection_string"})

    queue_name: str = "myqueue-items"
    dead_letter_queue_name: str = ""
    connection_string: str = "UseDevelopmentStorage=true"
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    message_ttl_seconds: int = _SEVEN_DAYS
    dead_letter_ttl_seconds: int = _SEVEN_DAYS
    lease_seconds: int = 30
    poll_interval_seconds: float = 1.0
    concurrency: int = 1
    base64_encoding: bool = True
    decode_failure_policy: str = DecodeFailurePolicy.DROP
    backoff_seconds: list[float] = dataclasses.field(default_factory=list)

    def _validate(self) -> None:
        if not self.queue_name:
            raise InvalidSettingValueError("queue_name", self.queue_name, "must not be empty")
        if not self.connection_string:
            raise InvalidSettingValueError(
                "connection_string", self.connection_string, "must not be empty", secret=True
            )
        if not self.dead_letter_queue_name:
            self.dead_letter_queue_name = f"{self.queue_name}-poison"
        if self.max_attempts < 0:
            raise InvalidSettingValueError("max_attempts", self.max_attempts, "must be >= 0")
        for name in ("message_ttl_seconds", "dead_letter_ttl_seconds", "lease_seconds", "concurrency"):
            if getattr(self, name) < 1:
                raise InvalidSettingValueError(name, getattr(self, name), "must be >= 1")
        if self.poll_interval_seconds < 0:
            raise InvalidSettingValueError(
                "poll_interval_seconds", self.poll_interval_seconds, "must be >= 0"
            )
        if self.decode_failure_policy not in {p.value for p in DecodeFailurePolicy}:
            raise InvalidSettingValueError(
                "decode_failure_policy",
                self.decode_failure_policy,
                f"expected one of {[p.value for p in DecodeFailurePolicy]}",
            )
        self.decode_failure_policy = DecodeFailurePolicy(self.decode_failure_policy)
        if any(s < 0 for s in self.backoff_seconds):
            raise InvalidSettingValueError("backoff_seconds", self.backoff_seconds, "delays must be >= 0")

    @property
    def message_ttl(self) -> timedelta:
        return timedelta(seconds=self.message_ttl_seconds)

    @property
    def dead_letter_ttl(self) -> timedelta:
        return timedelta(seconds=self.dead_letter_ttl_seconds)

    @property
    def lease_duration(self) -> timedelta:
        return timedelta(seconds=self.lease_seconds)

    def backoff_schedule(self) -> BackoffSchedule:
        if not self.backoff_seconds:
            return default_schedule()
        return TableBackoffSchedule.from_seconds(self.backoff_seconds)


__all__ = ["DecodeFailurePolicy", "RedeliverySettings"]
