"""Derived metrics package."""

from src.metrics.aggregator import (
    aggregate,
    allocation,
    asset_composition,
    category_names,
    format_amount,
    net_worth_trend,
    summarize,
)

__all__ = [
    "aggregate",
    "allocation",
    "asset_composition",
    "category_names",
    "format_amount",
    "net_worth_trend",
    "summarize",
]
