"""OpenTelemetry adapter – metrics backend for the Metrics port."""
from mp_redelivery.adapters.opentelemetry.metrics import OtelMetrics

__all__ = ["OtelMetrics"]
