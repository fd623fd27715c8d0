"""Kernel messaging – JSON wire codec for :class:`Envelope`.

Wire shape::

    {
        "message": <payload>,
        "dequeueCount": 3,
        "correlationId": "5b0c…",
        "firstProcessedAt": "2026-01-01T12:00:00Z"
    }

Field names are matched case-insensitively on decode so that PascalCase
producers (``Message``, ``DequeueCount``) interoperate. Fields the codec does
not know are kept in ``Envelope.extra`` and written back on encode.

``firstProcessedAt`` is written back exactly as it was received (seven
fractional digits, ``+00:00`` offsets) as long as ``first_seen_at`` still
denotes that instant; only timestamps created locally are formatted here.
"""
from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any

from mp_redelivery.kernel.errors import DecodeError
from mp_redelivery.kernel.messaging.envelope import Envelope, new_correlation_id
from mp_redelivery.kernel.time import Clock, SystemClock

MESSAGE_FIELD = "message"
DEQUEUE_COUNT_FIELD = "dequeueCount"
CORRELATION_ID_FIELD = "correlationId"
FIRST_PROCESSED_AT_FIELD = "firstProcessedAt"

_KNOWN_FIELDS = frozenset(
    f.lower() for f in (MESSAGE_FIELD, DEQUEUE_COUNT_FIELD, CORRELATION_ID_FIELD, FIRST_PROCESSED_AT_FIELD)
)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 text; UTC offsets are written as ``Z``."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(value: str) -> datetime:
    """Parse ISO-8601 text; digits past microseconds are truncated."""
    return datetime.fromisoformat(value.replace("Z", "+00:00") if value.endswith("Z") else value)


def _same_instant(text: str, value: datetime) -> bool:
    parsed = parse_timestamp(text)
    return parsed == value and parsed.utcoffset() == value.utcoffset()


class EnvelopeCodec:
    """Serialise envelopes to queue message text and back.

    Parameters
    ----------
    base64_encoding:
        Wrap the JSON document in Base64 text, as queue clients configured
        with Base64 message encoding expect.
    clock:
        Source of ``first_seen_at`` for legacy messages that arrive without
        retry metadata.
    """

    def __init__(self, *, base64_encoding: bool = False, clock: Clock | None = None) -> None:
        self._base64 = base64_encoding
        self._clock = clock or SystemClock()

    def encode(self, envelope: Envelope[Any]) -> str:
        document: dict[str, Any] = dict(envelope.extra)
        document[MESSAGE_FIELD] = envelope.payload
        document[DEQUEUE_COUNT_FIELD] = envelope.attempt_count
        document[CORRELATION_ID_FIELD] = envelope.correlation_id
        document[FIRST_PROCESSED_AT_FIELD] = self._first_seen_text(envelope)
        text = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
        if self._base64:
            return base64.b64encode(text.encode("utf-8")).decode("ascii")
        return text

    def decode(self, raw: str | bytes) -> Envelope[Any]:
        """Parse *raw* into an envelope.

        Raises:
            DecodeError: the text is not a JSON object carrying a ``message``
                field with well-formed retry metadata.
        """
        try:
            document = json.loads(self._unwrap(raw))
        except RecursionError as exc:
            raise DecodeError("Message body is nested too deeply", raw=raw, cause=exc) from exc
        except ValueError as exc:  # JSONDecodeError, UnicodeDecodeError, binascii.Error
            raise DecodeError(f"Message body is not valid JSON: {exc}", raw=raw, cause=exc) from exc
        if not isinstance(document, dict):
            raise DecodeError(
                f"Message body must be a JSON object, got {type(document).__name__}", raw=raw
            )

        fields = {str(k).lower(): v for k, v in document.items()}
        if MESSAGE_FIELD.lower() not in fields:
            raise DecodeError("Message body has no 'message' field", raw=raw)

        attempt_count = fields.get(DEQUEUE_COUNT_FIELD.lower(), 0)
        if attempt_count is None:
            attempt_count = 0
        if isinstance(attempt_count, bool) or not isinstance(attempt_count, int) or attempt_count < 0:
            raise DecodeError(f"Invalid dequeueCount {attempt_count!r}", raw=raw)

        correlation_id = fields.get(CORRELATION_ID_FIELD.lower())
        if correlation_id is None:
            correlation_id = new_correlation_id()
        elif not isinstance(correlation_id, str) or not correlation_id:
            raise DecodeError(f"Invalid correlationId {correlation_id!r}", raw=raw)

        first_seen_text = fields.get(FIRST_PROCESSED_AT_FIELD.lower())
        if first_seen_text is None:
            first_seen_at = self._clock.now()
        elif isinstance(first_seen_text, str):
            try:
                first_seen_at = parse_timestamp(first_seen_text)
            except ValueError as exc:
                raise DecodeError(
                    f"Invalid firstProcessedAt {first_seen_text!r}", raw=raw, cause=exc
                ) from exc
        else:
            raise DecodeError(f"Invalid firstProcessedAt {first_seen_text!r}", raw=raw)

        extra = {k: v for k, v in document.items() if str(k).lower() not in _KNOWN_FIELDS}
        return Envelope(
            payload=fields[MESSAGE_FIELD.lower()],
            attempt_count=attempt_count,
            correlation_id=correlation_id,
            first_seen_at=first_seen_at,
            first_seen_text=first_seen_text,
            extra=extra,
        )

    def _first_seen_text(self, envelope: Envelope[Any]) -> str:
        received = envelope.first_seen_text
        if received is not None and _same_instant(received, envelope.first_seen_at):
            return received
        return format_timestamp(envelope.first_seen_at)

    def _unwrap(self, raw: str | bytes) -> str:
        if self._base64:
            return base64.b64decode(raw, validate=True).decode("utf-8")
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw


__all__ = [
    "CORRELATION_ID_FIELD",
    "DEQUEUE_COUNT_FIELD",
    "EnvelopeCodec",
    "FIRST_PROCESSED_AT_FIELD",
    "MESSAGE_FIELD",
    "format_timestamp",
    "parse_timestamp",
]
