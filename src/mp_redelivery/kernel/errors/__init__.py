"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── InvariantViolationError
    │   └── ValidationError
    ├── HandlerError         (handler.py)
    │   ├── PermanentHandlerError
    │   └── TransientHandlerError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        ├── DecodeError
        └── TransportError
"""

from mp_redelivery.kernel.errors.application import ApplicationError
from mp_redelivery.kernel.errors.base import BaseError, error_detail
from mp_redelivery.kernel.errors.domain import (
    DomainError,
    InvariantViolationError,
    ValidationError,
)
from mp_redelivery.kernel.errors.handler import (
    HandlerError,
    PermanentHandlerError,
    TransientHandlerError,
)
from mp_redelivery.kernel.errors.infrastructure import (
    DecodeError,
    InfrastructureError,
    TransportError,
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
