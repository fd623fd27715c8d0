"""Handler errors – explicit markers a handler raises to steer redelivery."""

from __future__ import annotations

from mp_redelivery.kernel.errors.base import BaseError


class HandlerError(BaseError):
    """Failure reported by message-handling business logic."""

    default_code = "handler_error"


class PermanentHandlerError(HandlerError):
    """Retrying with the same payload cannot succeed; dead-letter immediately."""

    default_code = "permanent_handler_error"


class TransientHandlerError(HandlerError):
    """Temporary failure; the message should be redelivered after a delay."""

    default_code = "transient_handler_error"


__all__ = ["HandlerError", "PermanentHandlerError", "TransientHandlerError"]
