"""Prometheus metrics for anomaly alerts, insight volume and exchange-rate lookups"""

from typing import List
from prometheus_client import Counter, Histogram
from homefin.domain.models import Anomaly, Insight

# Analysis metrics
anomaly_counter = Counter(
    "homefin_anomalies_total",
    "Anomalies flagged on new expenses",
    ["type", "severity"],
)

insight_counter = Counter(
    "homefin_insights_total",
    "Smart insights generated",
    ["priority"],  # high | medium | low
)

# Exchange rate metrics
exchange_rate_fetch_counter = Counter(
    "exchange_rate_fetch_total",
    "USD/NPR rate lookups by outcome",
    ["outcome"],  # live | cached | fallback
)

exchange_rate_latency_histogram = Histogram(
    "exchange_rate_fetch_latency_seconds",
    "Forex API response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_anomalies(anomalies: List[Anomaly]) -> None:
    for anomaly in anomalies:
        anomaly_counter.labels(type=anomaly.type, severity=anomaly.severity).inc()


def record_insights(insights: List[Insight]) -> None:
    for insight in insights:
        insight_counter.labels(priority=insight.priority).inc()
