"""Polars frame builders for ranked campaign reports."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import polars as pl

from ad_aggregator.application.reporting.metrics import (
    fmt_count,
    fmt_money,
    fmt_optional_money,
    fmt_rate,
)
from ad_aggregator.domain.models import CampaignMetrics

REPORT_COLUMNS: List[str] = [
    "campaign_id",
    "total_impressions",
    "total_clicks",
    "total_spend",
    "total_conversions",
    "ctr",
    "cpa",
]
VALUES_SCHEMA: Dict[str, Any] = {
    "campaign_id": pl.Utf8,
    "total_impressions": pl.Int64,
    "total_clicks": pl.Int64,
    "total_spend": pl.Float64,
    "total_conversions": pl.Int64,
    "ctr": pl.Float64,
    "cpa": pl.Float64,
}


def _cpa_or_none(metrics: CampaignMetrics) -> float | None:
    return metrics.cpa if metrics.has_cpa else None


def build_report_frame(rows: Sequence[CampaignMetrics]) -> pl.DataFrame:
    """Text cells in rank order; cpa is null where it is undefined."""
    records: List[Dict[str, Any]] = []
    for metrics in rows:
        records.append(
            {
                "campaign_id": metrics.campaign_id,
                "total_impressions": fmt_count(metrics.total_impressions),
                "total_clicks": fmt_count(metrics.total_clicks),
                "total_spend": fmt_money(metrics.total_spend),
                "total_conversions": fmt_count(metrics.total_conversions),
                "ctr": fmt_rate(metrics.ctr),
                "cpa": fmt_optional_money(_cpa_or_none(metrics)),
            }
        )
    schema = {column: pl.Utf8 for column in REPORT_COLUMNS}
    if not records:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(records, schema=schema).select(REPORT_COLUMNS)


def build_values_frame(rows: Sequence[CampaignMetrics]) -> pl.DataFrame:
    records: List[Dict[str, Any]] = [
        {
            "campaign_id": metrics.campaign_id,
            "total_impressions": metrics.total_impressions,
            "total_clicks": metrics.total_clicks,
            "total_spend": float(metrics.total_spend),
            "total_conversions": metrics.total_conversions,
            "ctr": metrics.ctr,
            "cpa": _cpa_or_none(metrics),
        }
        for metrics in rows
    ]
    if not records:
        return pl.DataFrame(schema=VALUES_SCHEMA)
    return pl.DataFrame(records, schema=VALUES_SCHEMA).select(REPORT_COLUMNS)
