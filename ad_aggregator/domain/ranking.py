"""Top-K ranking policies over aggregated campaign metrics."""

from __future__ import annotations

from typing import Iterable, List

from .models import CampaignMetrics


def ctr_sort_key(metrics: CampaignMetrics) -> tuple[float, str]:
    return (-metrics.ctr, metrics.campaign_id)


def cpa_sort_key(metrics: CampaignMetrics) -> tuple[float, str]:
    return (metrics.cpa, metrics.campaign_id)


def _take(ordered: List[CampaignMetrics], k: int) -> List[CampaignMetrics]:
    return ordered[: min(k, len(ordered))]


def top_k_by_ctr(items: Iterable[CampaignMetrics], k: int) -> List[CampaignMetrics]:
    """Highest CTR first; equal CTRs fall back to campaign_id ascending."""
    if k <= 0:
        return []
    return _take(sorted(items, key=ctr_sort_key), k)


def top_k_by_cpa(items: Iterable[CampaignMetrics], k: int) -> List[CampaignMetrics]:
    """Lowest CPA first, restricted to campaigns with at least one conversion.

    Equal CPAs fall back to campaign_id ascending.
    """
    if k <= 0:
        return []
    eligible = [item for item in items if item.has_cpa]
    return _take(sorted(eligible, key=cpa_sort_key), k)
