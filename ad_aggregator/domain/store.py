"""Aggregation store: per-campaign running totals and ranked queries."""

from __future__ import annotations

from typing import Dict, List, Protocol

from .models import CampaignMetrics, SpendValue
from .ranking import top_k_by_cpa, top_k_by_ctr


class MetricsStore(Protocol):
    """Narrow capability interface consumed by ingestion and reporting."""

    def add(self, campaign_id: str, impressions: int, clicks: int, conversions: int, spend: SpendValue) -> None:
        ...

    def top_k_by_ctr(self, k: int) -> List[CampaignMetrics]:
        ...

    def top_k_by_cpa(self, k: int) -> List[CampaignMetrics]:
        ...

    def size(self) -> int:
        ...


class InMemoryMetricsStore:
    """Dict-backed MetricsStore.

    Memory grows with the number of distinct campaign ids, not with the
    number of rows added. The store does no validation of its own; callers
    hand it already-decoded values.
    """

    def __init__(self) -> None:
        self._metrics: Dict[str, CampaignMetrics] = {}

    def add(self, campaign_id: str, impressions: int, clicks: int, conversions: int, spend: SpendValue) -> None:
        entry = self._metrics.get(campaign_id)
        if entry is None:
            entry = CampaignMetrics(campaign_id=campaign_id)
            self._metrics[campaign_id] = entry
        entry.accumulate(impressions, clicks, conversions, spend)

    def merge(self, other: "InMemoryMetricsStore") -> None:
        """Fold another store's totals into this one (per-shard reduction)."""
        for metrics in other.campaigns():
            self.add(
                metrics.campaign_id,
                metrics.total_impressions,
                metrics.total_clicks,
                metrics.total_conversions,
                metrics.total_spend,
            )

    def get(self, campaign_id: str) -> CampaignMetrics | None:
        return self._metrics.get(campaign_id)

    def campaigns(self) -> List[CampaignMetrics]:
        return list(self._metrics.values())

    def top_k_by_ctr(self, k: int) -> List[CampaignMetrics]:
        return top_k_by_ctr(self._metrics.values(), k)

    def top_k_by_cpa(self, k: int) -> List[CampaignMetrics]:
        return top_k_by_cpa(self._metrics.values(), k)

    def size(self) -> int:
        return len(self._metrics)

    def __len__(self) -> int:
        return len(self._metrics)
