"""Application – consumer worker wiring the decision engine to a queue backend."""
from mp_redelivery.application.consumer import DeliveryResult, MessageHandler, RedeliveryConsumer
from mp_redelivery.application.dead_letter_monitor import DeadLetterCallback, DeadLetterMonitor

__all__ = [
    "DeadLetterCallback",
    "DeadLetterMonitor",
    "DeliveryResult",
    "MessageHandler",
    "RedeliveryConsumer",
]
