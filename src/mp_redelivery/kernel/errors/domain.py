"""Domain errors – business rule and validation failures raised by handlers."""

from __future__ import annotations

from typing import Any

from mp_redelivery.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a business rule is violated."""

    default_code = "domain_error"


class InvariantViolationError(DomainError):
    """A domain invariant was violated by the message content."""

    default_code = "invariant_violation"


class ValidationError(DomainError):
    """Payload data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = ["DomainError", "InvariantViolationError", "ValidationError"]
