"""Ad performance aggregator package."""

from .application import RunResult, run_aggregation, run_reporting_pipeline
from .config import DEFAULT_TOP_K, RunConfig
from .domain import CampaignMetrics, InMemoryMetricsStore, MetricsStore
from .ingestion import MissingColumnsError, RowDecodeError, aggregate_rows

__all__ = [
    "CampaignMetrics",
    "InMemoryMetricsStore",
    "MetricsStore",
    "MissingColumnsError",
    "RowDecodeError",
    "aggregate_rows",
    "DEFAULT_TOP_K",
    "RunConfig",
    "RunResult",
    "run_aggregation",
    "run_reporting_pipeline",
]
