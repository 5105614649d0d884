"""
Prometheus metrics for the liquidation ingestion pipeline

Counters and histograms live in a private registry so tests and embedding
hosts never collide with the default prometheus_client registry.
"""
import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# ROW METRICS
# =======================

rows_ingested_total = Counter(
    name="ingest_rows_total",
    documentation="Data rows seen by the parser",
    labelnames=["file_category", "status"],  # status: built, skipped
    registry=REGISTRY,
)

rows_skipped_total = Counter(
    name="ingest_rows_skipped_total",
    documentation="Rows skipped by row-level identifier rules",
    labelnames=["file_category", "reason"],
    registry=REGISTRY,
)

# =======================
# BATCH / STORE METRICS
# =======================

batches_processed_total = Counter(
    name="ingest_batches_processed_total",
    documentation="Upload batches processed",
    labelnames=["file_category", "status"],  # status: success, failure
    registry=REGISTRY,
)

batch_size_records = Histogram(
    name="ingest_batch_size_records",
    documentation="Records per upload batch",
    labelnames=["file_category"],
    buckets=[10, 50, 100, 250, 500, 1000, 5000],
    registry=REGISTRY,
)

store_writes_total = Counter(
    name="ingest_store_writes_total",
    documentation="Rows written to a derived store",
    labelnames=["table", "status"],  # status: success, failure
    registry=REGISTRY,
)

store_write_duration_seconds = Histogram(
    name="ingest_store_write_duration_seconds",
    documentation="Time spent in one store write call",
    labelnames=["table"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0],
    registry=REGISTRY,
)

secondary_write_failures_total = Counter(
    name="ingest_secondary_write_failures_total",
    documentation="Best-effort store writes that failed and were skipped",
    labelnames=["table"],
    registry=REGISTRY,
)

# =======================
# RUN METRICS
# =======================

runs_total = Counter(
    name="ingest_runs_total",
    documentation="Ingestion runs by outcome",
    labelnames=["file_category", "status"],  # status: complete, cancelled, error
    registry=REGISTRY,
)

run_duration_seconds = Histogram(
    name="ingest_run_duration_seconds",
    documentation="Wall-clock duration of an ingestion run",
    labelnames=["file_category", "status"],
    buckets=[0.5, 1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 900.0],
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """Render the registry in Prometheus text format."""
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: int | None = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: only the CLI exposes an endpoint
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


class MetricsCollector:
    """
    Facade the orchestrator records run, batch and store events through.
    """

    def record_rows(self, file_category: str, built: int, skip_reasons: dict[str, int]) -> None:
        if built:
            rows_ingested_total.labels(file_category=file_category, status="built").inc(built)
        for reason, count in skip_reasons.items():
            if count:
                rows_ingested_total.labels(file_category=file_category, status="skipped").inc(count)
                rows_skipped_total.labels(file_category=file_category, reason=reason).inc(count)

    def record_batch(self, file_category: str, record_count: int, success: bool = True) -> None:
        status = "success" if success else "failure"
        batches_processed_total.labels(file_category=file_category, status=status).inc()
        if record_count > 0:
            batch_size_records.labels(file_category=file_category).observe(record_count)

    def record_store_write(
        self,
        table: str,
        row_count: int,
        duration_seconds: float,
        success: bool = True,
    ) -> None:
        status = "success" if success else "failure"
        if row_count:
            store_writes_total.labels(table=table, status=status).inc(row_count)
        store_write_duration_seconds.labels(table=table).observe(duration_seconds)

    def record_secondary_failure(self, table: str) -> None:
        secondary_write_failures_total.labels(table=table).inc()

    def record_run(self, file_category: str, status: str, duration_seconds: float) -> None:
        runs_total.labels(file_category=file_category, status=status).inc()
        run_duration_seconds.labels(file_category=file_category, status=status).observe(duration_seconds)
