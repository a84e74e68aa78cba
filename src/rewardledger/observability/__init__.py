"""Observability for the reward ledger."""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
