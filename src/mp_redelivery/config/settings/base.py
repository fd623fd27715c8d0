"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

_REDACTED = "***"


@dataclasses.dataclass
class Settings:
    """Base class for settings read from ``<PREFIX>_<FIELD>`` variables.

    Subclasses name their credential fields in ``_secret_fields``; those are
    masked by :meth:`redacted` and in validation errors.
    """

    _prefix: ClassVar[str] = ""
    _secret_fields: ClassVar[frozenset[str]] = frozenset()

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable holding *field_name*, e.g. ``REDELIVERY_MAX_ATTEMPTS``."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    @classmethod
    def is_secret(cls, field_name: str) -> bool:
        return field_name in cls._secret_fields

    def redacted(self) -> dict[str, Any]:
        """Field values safe to log: secrets that are set become ``***``."""
        values = dataclasses.asdict(self)
        for name in self._secret_fields:
            if values.get(name):
                values[name] = _REDACTED
        return values


__all__ = ["Settings"]
