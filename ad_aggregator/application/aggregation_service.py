"""Application service for the streaming aggregation pass."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ad_aggregator.config import BadRowPolicy
from ad_aggregator.domain.store import InMemoryMetricsStore
from ad_aggregator.infrastructure.csv_source import iter_csv_records
from ad_aggregator.ingestion import IngestStats, aggregate_rows


@dataclass(frozen=True)
class AggregationResult:
    store: InMemoryMetricsStore
    stats: IngestStats


def run_aggregation(
    input_path: str | Path,
    delimiter: str = ",",
    on_bad_row: BadRowPolicy = "fail",
) -> AggregationResult:
    """Fold the whole input file into a fresh store in a single pass."""
    store = InMemoryMetricsStore()
    stats = aggregate_rows(iter_csv_records(input_path, delimiter=delimiter), store, on_bad_row=on_bad_row)
    return AggregationResult(store=store, stats=stats)
