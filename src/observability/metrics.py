"""
Prometheus metrics collection for the pagecount spike pipeline

Spark workers cannot update driver-side metrics, so the pipeline counts
outcomes with Spark actions and folds the totals into this registry once a
run has finished. The registry can then be exported to a textfile for the
node exporter or rendered with generate_metrics().
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    write_to_textfile,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# EXTRACTION METRICS
# =======================

# Raw lines read from the hourly dumps
records_read_total = Counter(
    name="spikes_records_read_total",
    documentation="Total number of raw pagecount lines read",
    registry=REGISTRY,
)

# Extraction outcomes
records_extracted_total = Counter(
    name="spikes_records_extracted_total",
    documentation="Total number of raw lines by extraction outcome",
    labelnames=["status", "reason"],  # status: extracted, filtered, failed
    registry=REGISTRY,
)

# =======================
# AGGREGATION METRICS
# =======================

# Entities aggregated
entities_aggregated_total = Counter(
    name="spikes_entities_aggregated_total",
    documentation="Total number of entities for which a spike result was written",
    registry=REGISTRY,
)

# Largest spike found in the last run
largest_spike_magnitude = Gauge(
    name="spikes_largest_spike_magnitude",
    documentation="Largest daily view increase found in the last run",
    registry=REGISTRY,
)

# =======================
# RUN METRICS
# =======================

# Stage duration histogram
stage_duration_seconds = Histogram(
    name="spikes_stage_duration_seconds",
    documentation="Time spent in each pipeline stage in seconds",
    labelnames=["stage"],  # stage: extract, aggregate, write
    buckets=[1.0, 5.0, 15.0, 30.0, 60.0, 300.0, 900.0, 1800.0, 3600.0],
    registry=REGISTRY,
)

# Runs counter
runs_total = Counter(
    name="spikes_runs_total",
    documentation="Total number of pipeline runs",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def write_metrics_textfile(path: str) -> None:
    """
    Write the registry to a textfile for node exporter collection

    Args:
        path: Destination .prom file
    """
    write_to_textfile(path, REGISTRY)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    histogram.labels(**labels).observe(value)


# =======================
# RUN-SPECIFIC HELPERS
# =======================

def record_extraction_outcomes(outcomes: dict[tuple[str, str], int]) -> None:
    """
    Record extraction outcome counts.

    Args:
        outcomes: Count per (status, reason); reason is "" unless status is failed
    """
    total = 0
    for (status, reason), count in outcomes.items():
        increment_counter(records_extracted_total, count, status=status, reason=reason)
        total += count
    increment_counter(records_read_total, total)


def record_aggregation(entities: int, max_magnitude: int) -> None:
    """
    Record aggregation results.

    Args:
        entities: Number of spike results produced
        max_magnitude: Largest magnitude among them
    """
    increment_counter(entities_aggregated_total, entities)
    largest_spike_magnitude.set(max_magnitude)


def record_stage_duration(stage: str, duration_seconds: float) -> None:
    """Record how long a pipeline stage took."""
    observe_histogram(stage_duration_seconds, duration_seconds, stage=stage)


def record_run(success: bool) -> None:
    """Count a finished run."""
    increment_counter(runs_total, 1, status="success" if success else "failure")
