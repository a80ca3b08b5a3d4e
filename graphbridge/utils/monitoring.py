"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

graph_operations_total = Counter(
    "graphbridge_operations_total",
    "Graph operations dispatched from messages",
    ["operation", "status"],
)

graph_operation_latency_seconds = Histogram(
    "graphbridge_operation_latency_seconds",
    "Graph operation dispatch latency",
    ["operation"],
)


def observe_operation(operation: str, status: str, duration_seconds: float) -> None:
    graph_operations_total.labels(operation=operation, status=status).inc()
    graph_operation_latency_seconds.labels(operation=operation).observe(duration_seconds)
