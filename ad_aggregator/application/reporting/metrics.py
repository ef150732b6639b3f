"""Shared numeric/formatting utilities for reporting."""

from __future__ import annotations

CTR_DECIMALS = 6
MONEY_DECIMALS = 2


def fmt_count(value: int) -> str:
    return str(int(value))


def fmt_rate(value: float) -> str:
    return f"{value:.{CTR_DECIMALS}f}"


def fmt_money(value: float) -> str:
    return f"{value:.{MONEY_DECIMALS}f}"


def fmt_optional_money(value: float | None) -> str | None:
    """None stays None so writers can emit their undefined marker instead of 0.00."""
    if value is None:
        return None
    return fmt_money(value)
