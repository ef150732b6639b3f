"""Tests for campaign metric models and derived rates."""

from ad_aggregator.domain.models import CampaignMetrics


class TestDerivedMetrics:
    """CTR and CPA are computed from totals on demand."""

    def test_ctr(self):
        metrics = CampaignMetrics("camp1", total_impressions=1000, total_clicks=100)
        assert metrics.ctr == 0.1

    def test_cpa(self):
        metrics = CampaignMetrics("camp1", total_spend=500.0, total_conversions=50)
        assert metrics.cpa == 10.0
        assert metrics.has_cpa

    def test_zero_impressions_gives_zero_ctr(self):
        metrics = CampaignMetrics("camp1", total_impressions=0, total_clicks=0)
        assert metrics.ctr == 0.0

    def test_zero_conversions_gives_zero_cpa(self):
        metrics = CampaignMetrics("camp1", total_spend=200.0, total_conversions=0)
        assert metrics.cpa == 0.0
        assert not metrics.has_cpa

    def test_derived_values_follow_accumulation(self):
        metrics = CampaignMetrics("camp1")
        metrics.accumulate(impressions=100, clicks=10, conversions=2, spend=20.0)
        assert metrics.ctr == 0.1
        metrics.accumulate(impressions=100, clicks=30, conversions=2, spend=20.0)
        assert metrics.ctr == 0.2
        assert metrics.cpa == 10.0


def test_str_includes_totals_and_rates():
    metrics = CampaignMetrics("camp1", 1000, 100, 500.0, 50)
    text = str(metrics)
    assert "campaign=camp1" in text
    assert "ctr=0.100000" in text
    assert "cpa=10.00" in text
