"""Kernel messaging – envelope, wire codec and queue backend port."""
from mp_redelivery.kernel.messaging.codec import (
    CORRELATION_ID_FIELD,
    DEQUEUE_COUNT_FIELD,
    FIRST_PROCESSED_AT_FIELD,
    MESSAGE_FIELD,
    EnvelopeCodec,
)
from mp_redelivery.kernel.messaging.envelope import Envelope, new_correlation_id
from mp_redelivery.kernel.messaging.queue import Lease, QueueBackend, ReceivedMessage

__all__ = [
    "CORRELATION_ID_FIELD",
    "DEQUEUE_COUNT_FIELD",
    "Envelope",
    "EnvelopeCodec",
    "FIRST_PROCESSED_AT_FIELD",
    "Lease",
    "MESSAGE_FIELD",
    "QueueBackend",
    "ReceivedMessage",
    "new_correlation_id",
]
