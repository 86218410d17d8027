"""
Snapshot Models for Net Worth Tracker

A series is an ordered list of monthly snapshots. Each snapshot holds
two buckets (assets and liabilities) mapping category name to value.

DESIGN DECISION: Snapshots are frozen Pydantic models.
A series revision is a tuple of frozen records, so "rollback" on the
client is just keeping a reference to the previous tuple.
Buckets are never mutated after construction; every change builds a
new record via `with_bucket()`.

Wire format keeps the camelCase names used by the JSON baseline
and the insight prompt (`totalAsset`, `diffInNet`, ...).
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# DATE LABELS
# =============================================================================

def parse_snapshot_date(label: str) -> date:
    """
    Parse a `DD/MM/YY` label. Two-digit years are always 20YY.

    Raises:
        ValueError: If the label is not a valid calendar date.
    """
    parts = label.strip().split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid snapshot date: {label!r} (expected DD/MM/YY)")
    day, month, year = (int(p) for p in parts)
    if len(parts[2]) != 2:
        raise ValueError(f"Invalid snapshot date: {label!r} (expected DD/MM/YY)")
    return date(2000 + year, month, day)


def format_snapshot_date(value: date) -> str:
    """Format a date as `DD/MM/YY`."""
    return f"{value.day:02d}/{value.month:02d}/{value.year % 100:02d}"


def next_month_end(label: str) -> str:
    """
    Label for the snapshot after `label`.

    Advances one calendar month, then snaps to that month's last day,
    so 31/01/24 -> 29/02/24 and 29/02/24 -> 31/03/24.
    """
    current = parse_snapshot_date(label)
    year, month = current.year, current.month + 1
    if month > 12:
        year, month = year + 1, 1
    if month == 12:
        end = date(year + 1, 1, 1) - timedelta(days=1)
    else:
        end = date(year, month + 1, 1) - timedelta(days=1)
    return format_snapshot_date(end)


# =============================================================================
# ENUMS
# =============================================================================

class BucketType(str, Enum):
    """The two category buckets of a snapshot."""
    ASSETS = "assets"
    LIABILITIES = "liabilities"


class ChangeDirection(str, Enum):
    """Direction shown next to a summary figure."""
    INCREASE = "increase"
    DECREASE = "decrease"
    NEUTRAL = "neutral"


# =============================================================================
# SNAPSHOTS
# =============================================================================

class MonthlyRecord(BaseModel):
    """
    One snapshot: the full assets/liabilities state for a month.

    A bucket may be absent (None) in loaded data; that is distinct
    from an empty bucket. Aggregation treats both as zero.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: str = Field(
        ...,
        description="Month label in DD/MM/YY format"
    )
    assets: Optional[dict[str, float]] = Field(
        default=None,
        description="Asset category -> value"
    )
    liabilities: Optional[dict[str, float]] = Field(
        default=None,
        description="Liability category -> value"
    )

    @field_validator("date")
    @classmethod
    def validate_date_label(cls, v: str) -> str:
        parse_snapshot_date(v)
        return v

    def bucket(self, bucket: BucketType) -> Optional[dict[str, float]]:
        """Return the raw bucket (None when absent)."""
        return self.assets if bucket == BucketType.ASSETS else self.liabilities

    def with_bucket(
        self,
        bucket: BucketType,
        values: Optional[dict[str, float]],
    ) -> "MonthlyRecord":
        """Return a copy of this record with one bucket replaced."""
        return self.model_copy(update={bucket.value: values})

    def with_date(self, label: str) -> "MonthlyRecord":
        parse_snapshot_date(label)
        return self.model_copy(update={"date": label})

    def deep_copy(self) -> "MonthlyRecord":
        """Copy that shares no bucket dicts with this record."""
        return self.model_copy(deep=True)


class DerivedRecord(MonthlyRecord):
    """
    A snapshot plus the metrics computed for it.

    Produced fresh by every aggregation pass and never stored.
    `my_assets` duplicates `net`; it is kept for display.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    total_asset: float
    total_liability: float
    net: float
    diff_in_total_asset: float
    diff_in_net: float
    percentage_change: float
    my_assets: float


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class SummaryChange(BaseModel):
    """Month-over-month change of one headline figure."""

    value: float
    percentage: float = Field(
        default=0.0,
        description="Change vs previous month, in percent"
    )
    direction: ChangeDirection = ChangeDirection.NEUTRAL

    @property
    def percentage_label(self) -> str:
        return f"{self.percentage:.2f}%"


class NetWorthSummary(BaseModel):
    """Headline figures for the latest month."""

    date: str
    net_worth: SummaryChange
    total_assets: SummaryChange
    total_liabilities: SummaryChange


class AllocationSlice(BaseModel):
    """One category's share of a bucket in a single month."""

    name: str
    value: float


# =============================================================================
# INSIGHTS
# =============================================================================

class Insight(BaseModel):
    """
    One advisory insight returned by the text-generation service.

    Insights never feed back into the series.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        description="Concise title, e.g. 'Strong Asset Growth'"
    )
    explanation: str = Field(
        ...,
        min_length=1,
        description="Data-driven explanation citing numbers or trends"
    )
    suggestion: str = Field(
        ...,
        min_length=1,
        description="Actionable recommendation"
    )
