"""Shared pytest fixtures for aggregator tests."""

import pytest

from ad_aggregator.domain.store import InMemoryMetricsStore

HEADER = "campaign_id,impressions,clicks,spend,conversions\n"


@pytest.fixture
def store():
    """Empty in-memory metrics store."""
    return InMemoryMetricsStore()


@pytest.fixture
def write_csv(tmp_path):
    """Write text to a CSV file under tmp_path and return its path."""

    def _write(text, name="input.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv):
    """Two campaigns whose CPAs tie at 10.0."""
    return write_csv(
        HEADER
        + "camp1,1000,100,500.00,50\n"
        + "camp2,2000,50,200.00,20\n"
    )
