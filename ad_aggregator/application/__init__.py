"""Application layer package."""

from .aggregation_service import AggregationResult, run_aggregation
from .report_service import RankedReports, RunResult, rank_campaigns, run_reporting_pipeline

__all__ = [
    "AggregationResult",
    "run_aggregation",
    "RankedReports",
    "RunResult",
    "rank_campaigns",
    "run_reporting_pipeline",
]
