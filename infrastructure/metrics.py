"""Simple metrics tracking for the Prometheus-compatible /metrics endpoint."""

from typing import Dict

COUNTERS: Dict[str, str] = {
    "orders_created_total": "Total number of orders created",
    "orders_updated_total": "Total number of orders updated",
    "orders_deleted_total": "Total number of orders deleted",
    "orders_finished_total": "Total number of orders finished",
    "orders_canceled_total": "Total number of orders canceled",
    "order_submissions_rejected_total": "Total number of order submissions rejected by validation or pricing",
}


class MetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self):
        self._counters: Dict[str, int] = {name: 0 for name in COUNTERS}

    def increment(self, metric_name: str, value: int = 1) -> None:
        """Increment a counter metric; unknown names are ignored."""
        if metric_name in self._counters:
            self._counters[metric_name] += value

    def value(self, metric_name: str) -> int:
        return self._counters[metric_name]

    def reset(self) -> None:
        for name in self._counters:
            self._counters[name] = 0

    def get_prometheus_text(self) -> str:
        """Generate Prometheus-compatible text format."""
        lines = []
        for name, help_text in COUNTERS.items():
            lines.append(f"# HELP {name} {help_text}")
            lines.append(f"# TYPE {name} counter")
            lines.append(f"{name} {self._counters[name]}")
            lines.append("")
        return "\n".join(lines)


# Global metrics instance
metrics = MetricsCollector()
