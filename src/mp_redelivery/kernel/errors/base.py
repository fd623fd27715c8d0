"""Root error class for the mp-redelivery error hierarchy."""

from __future__ import annotations

import json
from typing import Any, Self


class BaseError(Exception):
    """Root of the error hierarchy.

    A handler failure ends up in the ``requeued`` / ``dead_lettered`` log
    lines through :func:`error_detail`, so ``detail`` should hold
    JSON-friendly values that help whoever inspects the dead-letter queue.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Extra context, e.g. the order id the handler was working on.
        cause: Original exception that triggered this error.

    Example::

        raise PermanentHandlerError("Unknown SKU").with_detail(sku=payload["sku"])
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_detail(self, **detail: Any) -> Self:
        """Merge *detail* into ``self.detail`` and return ``self`` for chaining."""
        self.detail.update(detail)
        return self

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.detail:
            payload["detail"] = self.detail
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


def error_detail(error: BaseException) -> dict[str, Any]:
    """Structured description of any exception, for log lines and outcomes."""
    if isinstance(error, BaseError):
        return error.to_dict()
    return {"type": type(error).__name__, "message": str(error)}


__all__ = ["BaseError", "error_detail"]
