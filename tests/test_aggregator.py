"""
Tests for the metrics aggregator.

The aggregator is pure, so these tests build series directly and never
touch the store.
"""

import pytest

from src.metrics import (
    aggregate,
    allocation,
    asset_composition,
    category_names,
    format_amount,
    net_worth_trend,
    summarize,
)
from src.models.snapshot import BucketType, ChangeDirection, MonthlyRecord


def _record(date, assets=None, liabilities=None):
    return MonthlyRecord(date=date, assets=assets, liabilities=liabilities)


class TestAggregate:
    """Tests for aggregate()."""

    def test_empty_series(self):
        """Test an empty series aggregates to an empty list."""
        assert aggregate([]) == []

    def test_single_record(self):
        """Test the first month's diffs equal its own totals."""
        derived = aggregate([_record("31/01/24", {"A": 100}, {"L": 40})])

        assert len(derived) == 1
        first = derived[0]
        assert first.total_asset == 100
        assert first.total_liability == 40
        assert first.net == 60
        assert first.diff_in_total_asset == 100
        assert first.diff_in_net == 60
        assert first.percentage_change == 0
        assert first.my_assets == 60

    def test_percentage_change_between_months(self, two_months):
        """Test net 1000 -> 1100 is a 10% change."""
        derived = aggregate(two_months)

        assert [d.net for d in derived] == [1000, 1100]
        assert derived[1].diff_in_net == 100
        assert derived[1].diff_in_total_asset == 100
        assert derived[1].percentage_change == pytest.approx(10.0)

    def test_percentage_uses_absolute_previous_net(self):
        """Test a negative previous net still gives a positive change on improvement."""
        derived = aggregate([
            _record("31/01/24", {"A": 0}, {"L": 200}),
            _record("29/02/24", {"A": 0}, {"L": 100}),
        ])

        assert derived[0].net == -200
        assert derived[1].diff_in_net == 100
        assert derived[1].percentage_change == pytest.approx(50.0)

    def test_zero_previous_net_gives_zero_percentage(self):
        """Test division by a zero net is avoided."""
        derived = aggregate([
            _record("31/01/24", {"A": 100}, {"L": 100}),
            _record("29/02/24", {"A": 300}, {"L": 100}),
        ])

        assert derived[1].diff_in_net == 200
        assert derived[1].percentage_change == 0

    def test_absent_bucket_counts_as_zero(self):
        """Test a record with no liabilities bucket still aggregates."""
        derived = aggregate([_record("31/01/24", {"A": 100})])

        assert derived[0].total_liability == 0
        assert derived[0].net == 100
        assert derived[0].liabilities is None

    def test_preserves_order_and_inputs(self, two_months):
        """Test output follows input order and keeps the raw buckets."""
        derived = aggregate(two_months)

        assert [d.date for d in derived] == ["31/01/24", "29/02/24"]
        assert derived[1].assets == two_months[1].assets

    def test_net_identity_holds(self, two_months):
        """Test net always equals assets minus liabilities."""
        for d in aggregate(two_months):
            assert d.net == d.total_asset - d.total_liability
            assert d.my_assets == d.net

    def test_deterministic(self, two_months):
        """Test two calls on the same input agree."""
        assert aggregate(two_months) == aggregate(two_months)

    def test_does_not_mutate_input(self, two_months):
        """Test the input records are left as they were."""
        before = [r.model_dump() for r in two_months]
        aggregate(two_months)
        assert [r.model_dump() for r in two_months] == before


class TestCategoryNames:
    """Tests for category_names()."""

    def test_sorted_union(self):
        """Test names from every record are merged and sorted."""
        series = [
            _record("31/01/24", {"Stocks": 1, "Bonds": 2}),
            _record("29/02/24", {"Cash": 3}),
        ]
        assert category_names(series, BucketType.ASSETS) == ["Bonds", "Cash", "Stocks"]

    def test_absent_bucket(self):
        """Test an absent bucket contributes no names."""
        series = [_record("31/01/24", {"Stocks": 1})]
        assert category_names(series, BucketType.LIABILITIES) == []


class TestSummarize:
    """Tests for summarize()."""

    def test_empty(self):
        """Test there is no summary without data."""
        assert summarize([]) is None

    def test_single_month_is_neutral(self):
        """Test a lone month has nothing to compare against."""
        summary = summarize(aggregate([_record("31/01/24", {"A": 100}, {"L": 40})]))

        assert summary.date == "31/01/24"
        assert summary.net_worth.value == 60
        assert summary.net_worth.direction == ChangeDirection.NEUTRAL
        assert summary.net_worth.percentage == 0

    def test_growth(self, two_months):
        """Test a rising net worth is an increase."""
        summary = summarize(aggregate(two_months))

        assert summary.net_worth.direction == ChangeDirection.INCREASE
        assert summary.net_worth.percentage_label == "10.00%"
        assert summary.total_liabilities.direction == ChangeDirection.NEUTRAL

    def test_liability_direction_is_inverted(self):
        """Test a falling liability reads as good news."""
        summary = summarize(aggregate([
            _record("31/01/24", {"A": 100}, {"L": 50}),
            _record("29/02/24", {"A": 100}, {"L": 40}),
        ]))

        assert summary.total_liabilities.percentage == pytest.approx(-20.0)
        assert summary.total_liabilities.direction == ChangeDirection.INCREASE


class TestAllocation:
    """Tests for allocation() and asset_composition()."""

    def test_only_positive_values(self):
        """Test zero and negative categories are left out."""
        record = _record("31/01/24", {"Stocks": 100, "Cash": 0, "Odd": -5})
        slices = allocation(record, BucketType.ASSETS)

        assert [(s.name, s.value) for s in slices] == [("Stocks", 100)]

    def test_absent_bucket(self):
        """Test an absent bucket has no slices."""
        assert allocation(_record("31/01/24"), BucketType.LIABILITIES) == []

    def test_asset_composition(self, two_months):
        """Test one row per month with the date first."""
        rows = asset_composition(two_months)

        assert rows[0] == {"date": "31/01/24", "Stocks": 1000, "Savings": 500}
        assert len(rows) == 2


class TestDisplayHelpers:
    """Tests for chart rows and amount formatting."""

    def test_net_worth_trend(self, two_months):
        """Test one row per month with the three totals."""
        rows = net_worth_trend(aggregate(two_months))

        assert rows[1] == {
            "date": "29/02/24",
            "Net Worth": 1100,
            "Total Assets": 1600,
            "Total Liabilities": 500,
        }
        assert [row["date"] for row in rows] == ["31/01/24", "29/02/24"]

    def test_net_worth_trend_empty(self):
        """Test no data gives no rows."""
        assert net_worth_trend([]) == []

    def test_format_amount(self):
        """Test amounts carry the currency and thousands separators."""
        assert format_amount(1234567.4, "INR") == "INR 1,234,567"
        assert format_amount(-50, "USD") == "USD -50"
        assert format_amount(0, "EUR") == "EUR 0"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
