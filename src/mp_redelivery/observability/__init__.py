"""Observability – structured logging, metrics ports and redelivery events."""
