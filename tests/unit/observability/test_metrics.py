"""MetricsCollector tests: counters, labels, histogram, thread safety."""

import threading

from app.observability.metrics import MetricsCollector


def test_metrics_counter_increment():
    m = MetricsCollector()
    m.increment("audit_write_failures")
    m.increment("audit_write_failures", 2)
    assert m.export_metrics()["counters"]["audit_write_failures"] == 3


def test_metrics_labels_separated():
    m = MetricsCollector()
    m.increment("audit_records_written", action="create")
    m.increment("audit_records_written", action="delete")
    m.increment("audit_queries", branch_id="b-1")
    out = m.export_metrics()
    assert out["counters_by_labels"]["audit_records_written"] == {
        "audit_records_written:action=create": 1,
        "audit_records_written:action=delete": 1,
    }
    assert "audit_queries:branch=b-1" in out["counters_by_labels"]["audit_queries"]
    assert "audit_records_written" not in out["counters"]


def test_metrics_histogram_tracks_latency():
    m = MetricsCollector()
    m.observe_latency("http_request_latency_ms", 10.5, route="/audit/logs")
    m.observe_latency("http_request_latency_ms", 20.0, route="/audit/logs")
    h = m.export_metrics()["histograms"]["http_request_latency_ms:route=/audit/logs"]
    assert h["count"] == 2
    assert h["sum"] == 30.5


def test_metrics_thread_safe():
    m = MetricsCollector()

    def work():
        for _ in range(100):
            m.increment("c")

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert m.export_metrics()["counters"]["c"] == 800


def test_metrics_reset():
    m = MetricsCollector()
    m.increment("c")
    m.reset()
    assert m.export_metrics()["counters"] == {}
