"""Domain layer package."""

from .models import CampaignMetrics, CampaignRow
from .ranking import top_k_by_cpa, top_k_by_ctr
from .store import InMemoryMetricsStore, MetricsStore

__all__ = [
    "CampaignMetrics",
    "CampaignRow",
    "InMemoryMetricsStore",
    "MetricsStore",
    "top_k_by_ctr",
    "top_k_by_cpa",
]
