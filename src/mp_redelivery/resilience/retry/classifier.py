"""Resilience – classify handler failures as permanent or transient."""
from __future__ import annotations

import enum

from mp_redelivery.kernel.errors import (
    DecodeError,
    InvariantViolationError,
    PermanentHandlerError,
    TransientHandlerError,
    ValidationError,
)


class ErrorKind(enum.StrEnum):
    PERMANENT = "permanent"
    TRANSIENT = "transient"


# json.JSONDecodeError and UnicodeDecodeError are ValueError subclasses.
DEFAULT_PERMANENT_ERRORS: tuple[type[BaseException], ...] = (
    PermanentHandlerError,
    DecodeError,
    ValidationError,
    InvariantViolationError,
    ValueError,
    TypeError,
)

DEFAULT_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (TransientHandlerError,)


class ErrorClassifier:
    """Map a handler failure to :class:`ErrorKind` by its type alone.

    Permanent errors are deterministic for a given payload (malformed data,
    failed validation, illegal arguments), so redelivering cannot help.
    Anything not recognised is transient. Explicit transient types win over
    permanent ones, so ``class Busy(TransientHandlerError, ValueError)``
    is still retried.
    """

    def __init__(
        self,
        permanent: tuple[type[BaseException], ...] = (),
        transient: tuple[type[BaseException], ...] = (),
        *,
        include_defaults: bool = True,
    ) -> None:
        base_permanent = DEFAULT_PERMANENT_ERRORS if include_defaults else ()
        base_transient = DEFAULT_TRANSIENT_ERRORS if include_defaults else ()
        self._permanent = base_permanent + tuple(permanent)
        self._transient = base_transient + tuple(transient)

    def classify(self, error: BaseException) -> ErrorKind:
        if isinstance(error, self._transient):
            return ErrorKind.TRANSIENT
        if isinstance(error, self._permanent):
            return ErrorKind.PERMANENT
        return ErrorKind.TRANSIENT

    def is_permanent(self, error: BaseException) -> bool:
        return self.classify(error) is ErrorKind.PERMANENT


__all__ = [
    "DEFAULT_PERMANENT_ERRORS",
    "DEFAULT_TRANSIENT_ERRORS",
    "ErrorClassifier",
    "ErrorKind",
]
