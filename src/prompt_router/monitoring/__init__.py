"""Monitoring and metrics instrumentation for the prompt router.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from prompt_router.monitoring.metrics import (
    classification_total,
    dispatch_latency_seconds,
    dispatch_requests_total,
    dispatch_tokens_total,
)

__all__ = [
    "classification_total",
    "dispatch_requests_total",
    "dispatch_latency_seconds",
    "dispatch_tokens_total",
]
