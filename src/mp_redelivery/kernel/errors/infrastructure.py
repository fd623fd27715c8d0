"""Infrastructure errors – wire decoding and queue transport failures."""

from __future__ import annotations

from typing import Any

from mp_redelivery.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class DecodeError(InfrastructureError):
    """A raw queue message could not be parsed into an envelope."""

    default_code = "decode_error"

    def __init__(
        self,
        message: str,
        *,
        raw: str | bytes | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.raw = raw


class TransportError(InfrastructureError):
    """A queue backend call failed (send, receive, delete)."""

    default_code = "transport_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Queue backend operation '{operation}' failed", **kwargs)
        self.operation = operation


__all__ = ["DecodeError", "InfrastructureError", "TransportError"]
