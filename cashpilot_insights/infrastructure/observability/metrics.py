"""Prometheus metrics for monitoring health grades, risk levels and strategy confidence"""

from prometheus_client import Counter, Histogram

# Assessment metrics
assessment_counter = Counter(
    "cashpilot_assessment_total",
    "Total financial assessments computed",
    ["grade"],  # A | B | C | D | F
)

risk_level_counter = Counter(
    "cashpilot_risk_level_total",
    "Assessments by overall risk level",
    ["level"],  # low | medium | high | critical
)

strategy_confidence_counter = Counter(
    "cashpilot_strategy_confidence_total",
    "Insight strategies by confidence level",
    ["confidence"],  # high | medium | low
)

snapshot_size_histogram = Histogram(
    "cashpilot_snapshot_transactions",
    "Transactions per assessed snapshot",
    buckets=[0, 10, 50, 100, 500, 1000, 5000, 10000, 50000],
)

rejected_snapshot_counter = Counter(
    "cashpilot_rejected_snapshots_total",
    "Snapshots rejected before analysis",
    ["reason"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(grade: str, risk_level: str, confidence_level: str, transaction_count: int) -> None:
    """Record assessment outcome metrics"""
    assessment_counter.labels(grade=grade).inc()
    risk_level_counter.labels(level=risk_level).inc()
    strategy_confidence_counter.labels(confidence=confidence_level).inc()
    snapshot_size_histogram.observe(transaction_count)


def record_strategy(confidence_level: str) -> None:
    strategy_confidence_counter.labels(confidence=confidence_level).inc()
