"""Observability – NoopMetrics, the default when no metrics backend is wired."""
from __future__ import annotations

from mp_redelivery.observability.metrics.ports import Counter, Gauge, Histogram, Metrics


class _Discard(Counter, Histogram, Gauge):
    """One instrument that ignores every kind of measurement."""

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        pass

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass

    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass

    def inc(self, labels: dict[str, str] | None = None) -> None:
        pass

    def dec(self, labels: dict[str, str] | None = None) -> None:
        pass


_DISCARD = _Discard()


class NoopMetrics(Metrics):
    """Hands out one shared do-nothing instrument for every name."""

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return _DISCARD

    def histogram(self, name: str, description: str = "", unit: str = "s") -> Histogram:
        return _DISCARD

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return _DISCARD


__all__ = ["NoopMetrics"]
