"""Testing fakes – in-memory doubles for the queue backend, handler and metrics."""
from mp_redelivery.kernel.time import FrozenClock
from mp_redelivery.testing.fakes.clock import DEFAULT_START, FakeClock
from mp_redelivery.testing.fakes.handler import ScriptedHandler
from mp_redelivery.testing.fakes.metrics import FakeMetricsRegistry
from mp_redelivery.testing.fakes.queue import InMemoryQueueBackend, RequeueCall, StoredMessage

__all__ = [
    "DEFAULT_START",
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "InMemoryQueueBackend",
    "RequeueCall",
    "ScriptedHandler",
    "StoredMessage",
]
