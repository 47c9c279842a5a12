"""In-process metrics for the audit pipeline. Thread-safe counters and latency histograms."""

import threading
from collections import defaultdict
from typing import Any


def _label_key(name: str, label: str, value: str) -> str:
    return f"{name}:{label}={value}"


def _summarize(samples: list[float]) -> dict[str, Any]:
    ordered = sorted(samples)
    p95 = ordered[min(len(ordered) - 1, int(round(0.95 * (len(ordered) - 1))))] if ordered else 0.0
    return {
        "count": len(samples),
        "sum": sum(samples),
        "max": ordered[-1] if ordered else 0.0,
        "p95": p95,
        "values": list(samples),
    }


class MetricsCollector:
    """
    Counters may carry one label (action, branch or route) for dimensional breakdowns;
    labelled increments are kept apart from the unlabelled total of the same name.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: defaultdict[str, float] = defaultdict(float)
        self._labelled: defaultdict[str, defaultdict[str, float]] = defaultdict(lambda: defaultdict(float))
        self._latencies: defaultdict[str, list[float]] = defaultdict(list)

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        action: str | None = None,
        branch_id: str | None = None,
    ) -> None:
        """Add to a counter; action takes precedence over branch_id as the label."""
        with self._lock:
            if action is not None:
                self._labelled[name][_label_key(name, "action", action)] += value
            elif branch_id is not None:
                self._labelled[name][_label_key(name, "branch", branch_id)] += value
            else:
                self._counters[name] += value

    def observe_latency(self, name: str, latency_ms: float, *, route: str | None = None) -> None:
        with self._lock:
            key = name if route is None else _label_key(name, "route", route)
            self._latencies[key].append(latency_ms)

    def export_metrics(self) -> dict[str, Any]:
        """Snapshot of every series; safe to serialize."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {name: dict(series) for name, series in self._labelled.items()},
                "histograms": {key: _summarize(samples) for key, samples in self._latencies.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._labelled.clear()
            self._latencies.clear()
