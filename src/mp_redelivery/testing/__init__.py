"""Testing support – in-memory fakes for consumer and engine tests.

Usage::

    from mp_redelivery.testing import FakeClock, InMemoryQueueBackend, ScriptedHandler
"""

from mp_redelivery.testing.fakes import (
    FakeClock,
    FakeMetricsRegistry,
    FrozenClock,
    InMemoryQueueBackend,
    RequeueCall,
    ScriptedHandler,
    StoredMessage,
)

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "InMemoryQueueBackend",
    "RequeueCall",
    "ScriptedHandler",
    "StoredMessage",
]
