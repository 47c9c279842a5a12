"""Observability layer: in-process metrics for the audit pipeline. No external SaaS."""

from app.observability.metrics import MetricsCollector

__all__ = [
    "MetricsCollector",
]
