"""Observability – structured logging helpers."""
from mp_redelivery.observability.logging.factory import JsonLoggerFactory
from mp_redelivery.observability.logging.processors import get_logger, message_context

__all__ = ["JsonLoggerFactory", "get_logger", "message_context"]
