"""Kernel – framework-agnostic building blocks: errors, envelope, clock."""

from mp_redelivery.kernel.errors import (
    ApplicationError,
    BaseError,
    DecodeError,
    DomainError,
    HandlerError,
    InfrastructureError,
    InvariantViolationError,
    PermanentHandlerError,
    TransientHandlerError,
    TransportError,
    ValidationError,
    error_detail,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DecodeError",
    "DomainError",
    "HandlerError",
    "InfrastructureError",
    "InvariantViolationError",
    "PermanentHandlerError",
    "TransientHandlerError",
    "TransportError",
    "ValidationError",
    "error_detail",
]
