"""
Prometheus Metrics Registry.
Pattern: Observability

Central definition of all application metrics.
Uses official prometheus_client for thread-safe collection.
"""

from prometheus_client import Counter, Gauge, Histogram

# Namespace ensures metrics don't collide with other system metrics
NAMESPACE = "footprint"

# --- Assessment Metrics ---
FOOTPRINT_ASSESSMENTS = Counter(
    f"{NAMESPACE}_assessments_total",
    "Footprint calculations served",
    ["category"],  # Low, Moderate, High
)

RECOMMENDATIONS_ISSUED = Counter(
    f"{NAMESPACE}_recommendations_total",
    "Recommendations returned to users",
    ["category"],  # transport, energy, diet, waste
)

# --- Prediction Metrics ---
PREDICTION_LATENCY = Histogram(
    f"{NAMESPACE}_prediction_latency_seconds",
    "Time spent producing trend predictions (including lazy training)",
    ["status"],  # success, error
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

PREDICTION_COUNT = Counter(
    f"{NAMESPACE}_predictions_total",
    "Total number of trend predictions made",
    ["trend"],  # increasing, stable, decreasing, degraded
)

# --- Training Metrics ---
TRAINING_RUNS = Counter(
    f"{NAMESPACE}_training_runs_total",
    "Regression training runs",
    ["outcome"],  # trained, diverged, skipped, failed
)

TRAINING_DURATION = Histogram(
    f"{NAMESPACE}_training_duration_seconds",
    "Wall time of one full-batch training run",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

TRAINING_SET_SIZE = Gauge(
    f"{NAMESPACE}_training_set_size",
    "Number of points used by the most recent training run",
    ["source"],  # stored, synthetic
)

# --- Infrastructure ---
STORE_FAILURES = Counter(
    f"{NAMESPACE}_store_failures_total",
    "Failed store operations (logged and tolerated)",
    ["store", "operation"],
)
