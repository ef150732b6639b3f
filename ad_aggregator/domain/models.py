"""Domain models for campaign performance aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

SpendValue = Decimal | float | int


def to_spend(value: SpendValue) -> Decimal:
    """Exact decimal for a spend amount; floats go through their shortest repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


@dataclass(frozen=True)
class CampaignRow:
    """One decoded input observation, detached from the decoder's record."""

    campaign_id: str
    impressions: int
    clicks: int
    spend: Decimal
    conversions: int


@dataclass
class CampaignMetrics:
    """Running totals for a single campaign_id.

    Totals are mutated in place by the store during the streaming pass.
    Spend is summed as a Decimal so totals do not depend on row order.
    CTR and CPA are derived on demand and never stored.
    """

    campaign_id: str
    total_impressions: int = 0
    total_clicks: int = 0
    total_spend: Decimal = Decimal(0)
    total_conversions: int = 0

    def __post_init__(self) -> None:
        self.total_spend = to_spend(self.total_spend)

    @property
    def ctr(self) -> float:
        if self.total_impressions == 0:
            return 0.0
        return self.total_clicks / self.total_impressions

    @property
    def has_cpa(self) -> bool:
        return self.total_conversions > 0

    @property
    def cpa(self) -> float:
        # 0.0 when undefined; check has_cpa before ranking or rendering.
        if self.total_conversions == 0:
            return 0.0
        return float(self.total_spend / self.total_conversions)

    def accumulate(self, impressions: int, clicks: int, conversions: int, spend: SpendValue) -> None:
        self.total_impressions += impressions
        self.total_clicks += clicks
        self.total_conversions += conversions
        self.total_spend += to_spend(spend)

    def __str__(self) -> str:
        return (
            f"campaign={self.campaign_id} imp={self.total_impressions} click={self.total_clicks} "
            f"spend={self.total_spend:.2f} conv={self.total_conversions} "
            f"ctr={self.ctr:.6f} cpa={self.cpa:.2f}"
        )
