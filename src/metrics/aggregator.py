"""
Metrics Aggregator

DESIGN DECISION: Aggregation is a PURE function of the series.
There is no cache and no state between calls; the client simply calls
`aggregate()` again whenever its series changes. Two calls on equal
input produce identical output.

One left-to-right pass carries (previous total asset, previous net),
seeded at (0, 0). So the first month's diffs equal its own totals and
its percentage change is 0.
"""

from typing import Iterable, Optional, Sequence

from src.models.snapshot import (
    AllocationSlice,
    BucketType,
    ChangeDirection,
    DerivedRecord,
    MonthlyRecord,
    NetWorthSummary,
    SummaryChange,
)


def aggregate(series: Iterable[MonthlyRecord]) -> list[DerivedRecord]:
    """
    Compute the derived view of a series.

    Args:
        series: Monthly records in display order

    Returns:
        One DerivedRecord per input record, same order
    """
    derived: list[DerivedRecord] = []
    last_total_asset = 0.0
    last_net = 0.0

    for record in series:
        # An absent bucket sums to zero, same as an empty one
        total_asset = sum((record.assets or {}).values(), 0.0)
        total_liability = sum((record.liabilities or {}).values(), 0.0)
        net = total_asset - total_liability
        diff_in_total_asset = total_asset - last_total_asset
        diff_in_net = net - last_net
        percentage_change = (
            diff_in_net / abs(last_net) * 100 if last_net != 0 else 0.0
        )

        derived.append(DerivedRecord(
            date=record.date,
            assets=record.assets,
            liabilities=record.liabilities,
            total_asset=total_asset,
            total_liability=total_liability,
            net=net,
            diff_in_total_asset=diff_in_total_asset,
            diff_in_net=diff_in_net,
            percentage_change=percentage_change,
            my_assets=net,
        ))

        last_total_asset = total_asset
        last_net = net

    return derived


def category_names(series: Iterable[MonthlyRecord], bucket: BucketType) -> list[str]:
    """Sorted union of the category keys of one bucket across the series."""
    names: set[str] = set()
    for record in series:
        names.update(record.bucket(bucket) or {})
    return sorted(names)


def _change(
    current: float,
    previous: Optional[float],
    inverted: bool = False,
) -> SummaryChange:
    if previous is None or previous == 0:
        return SummaryChange(value=current)

    percentage = (current - previous) / abs(previous) * 100
    if percentage > 0:
        direction = ChangeDirection.INCREASE
    elif percentage < 0:
        direction = ChangeDirection.DECREASE
    else:
        direction = ChangeDirection.NEUTRAL

    # A growing liability is bad news
    if inverted and direction != ChangeDirection.NEUTRAL:
        direction = (
            ChangeDirection.DECREASE
            if direction == ChangeDirection.INCREASE
            else ChangeDirection.INCREASE
        )

    return SummaryChange(value=current, percentage=percentage, direction=direction)


def summarize(derived: Sequence[DerivedRecord]) -> Optional[NetWorthSummary]:
    """
    Headline figures for the latest month vs the one before it.

    Returns None for an empty series.
    """
    if not derived:
        return None

    latest = derived[-1]
    previous = derived[-2] if len(derived) > 1 else None

    return NetWorthSummary(
        date=latest.date,
        net_worth=_change(latest.net, previous.net if previous else None),
        total_assets=_change(
            latest.total_asset, previous.total_asset if previous else None
        ),
        total_liabilities=_change(
            latest.total_liability,
            previous.total_liability if previous else None,
            inverted=True,
        ),
    )


def allocation(record: MonthlyRecord, bucket: BucketType) -> list[AllocationSlice]:
    """Positive-valued categories of one bucket, in insertion order."""
    return [
        AllocationSlice(name=name, value=value)
        for name, value in (record.bucket(bucket) or {}).items()
        if value > 0
    ]


def asset_composition(series: Iterable[MonthlyRecord]) -> list[dict]:
    """One row per month: the date plus each asset category's value."""
    return [
        {"date": record.date, **(record.assets or {})}
        for record in series
    ]


def net_worth_trend(derived: Iterable[DerivedRecord]) -> list[dict]:
    """One row per month with the three headline totals."""
    return [
        {
            "date": record.date,
            "Net Worth": record.net,
            "Total Assets": record.total_asset,
            "Total Liabilities": record.total_liability,
        }
        for record in derived
    ]


def format_amount(value: float, currency_code: str) -> str:
    """Whole-unit display string, e.g. 'INR 1,234' or 'INR -50'."""
    return f"{currency_code} {value:,.0f}"
