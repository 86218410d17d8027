"""
Data Models Package

This package contains all Pydantic models used in the Net Worth Tracker.
All data flowing through the system must conform to these schemas.
"""

from src.models.snapshot import (
    AllocationSlice,
    BucketType,
    ChangeDirection,
    DerivedRecord,
    Insight,
    MonthlyRecord,
    NetWorthSummary,
    SummaryChange,
    format_snapshot_date,
    next_month_end,
    parse_snapshot_date,
)
from src.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
    StoreEventType,
)

__all__ = [
    # Snapshot models
    "AllocationSlice",
    "BucketType",
    "ChangeDirection",
    "DerivedRecord",
    "Insight",
    "MonthlyRecord",
    "NetWorthSummary",
    "SummaryChange",
    # Date labels
    "format_snapshot_date",
    "next_month_end",
    "parse_snapshot_date",
    # Event models
    "EventSeverity",
    "StoreEvent",
    "StoreEventBuilder",
    "StoreEventType",
]
