"""
mp_redelivery – redelivery decisions for at-least-once queue consumers.

Import path convention::

    from mp_redelivery.kernel.messaging import Envelope, EnvelopeCodec
    from mp_redelivery.resilience.retry import RetryDecisionEngine, BackoffSchedule
    from mp_redelivery.application import RedeliveryConsumer
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
