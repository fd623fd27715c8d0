"""OpenTelemetry adapter – OtelMetrics."""
from __future__ import annotations

from typing import Any

from mp_redelivery.observability.metrics import Counter, Gauge, Histogram, Metrics


def _require_otel() -> Any:
    try:
        from opentelemetry import metrics
    except ImportError as exc:
        raise ImportError("Install 'mp-redelivery[otel]' to use the OpenTelemetry adapter") from exc
    return metrics


class _OtelCounter(Counter):
    def __init__(self, counter: Any) -> None:
        self._c = counter

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        self._c.add(value, attributes=labels)


class _OtelHistogram(Histogram):
    def __init__(self, hist: Any) -> None:
        self._h = hist

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        self._h.record(value, attributes=labels)


class _OtelGauge(Gauge):
    """Backed by an up/down counter so inc/dec map onto OTel deltas."""

    def __init__(self, updown: Any) -> None:
        self._u = updown
        self._value = 0.0

    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        self._u.add(value - self._value, attributes=labels)
        self._value = value

    def inc(self, labels: dict[str, str] | None = None) -> None:
        self._u.add(1, attributes=labels)
        self._value += 1

    def dec(self, labels: dict[str, str] | None = None) -> None:
        self._u.add(-1, attributes=labels)
        self._value -= 1


class OtelMetrics(Metrics):
    """OpenTelemetry metrics adapter."""

    def __init__(self, meter_name: str = "mp_redelivery") -> None:
        self._meter = _require_otel().get_meter(meter_name)

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return _OtelCounter(self._meter.create_counter(name, description=description, unit=unit))

    def histogram(self, name: str, description: str = "", unit: str = "s") -> Histogram:
        return _OtelHistogram(self._meter.create_histogram(name, description=description, unit=unit))

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return _OtelGauge(self._meter.create_up_down_counter(name, description=description, unit=unit))


__all__ = ["OtelMetrics"]
