"""
Tests for the mutation client.

A FlakyGateway in front of a real in-memory store lets each test decide
which remote call fails.
"""

import pytest
import pytest_asyncio

from src.client import InvalidInputError, MutationClient, parse_cell_input
from src.models.events import StoreEventType
from src.models.snapshot import BucketType
from src.services.storage import (
    ConflictError,
    NotFoundError,
    RemoteFailureError,
    StoreGateway,
)


class FlakyGateway(StoreGateway):
    """StoreGateway that can be told to fail specific operations."""

    def __init__(self, store):
        super().__init__(store)
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    async def _call(self, operation, coro):
        self.calls.append(operation)
        if operation in self.fail_on:
            coro.close()
            raise ConnectionError(f"{operation} unreachable")
        return await super()._call(operation, coro)


class RecordingEventLogger:
    """Collects events instead of writing them."""

    def __init__(self):
        self.events = []

    def log(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [event.event_type for event in self.events]


@pytest.fixture
def flaky(store):
    return FlakyGateway(store)


@pytest_asyncio.fixture
async def client(flaky):
    client = MutationClient(flaky)
    await client.refresh()
    flaky.calls.clear()
    return client


class TestParseCellInput:
    """Tests for parse_cell_input()."""

    def test_numbers(self):
        """Test numeric strings and numbers are accepted."""
        assert parse_cell_input("1200") == 1200.0
        assert parse_cell_input(" 12.5 ") == 12.5
        assert parse_cell_input(-3) == -3.0

    def test_empty_is_zero(self):
        """Test an emptied cell means 0."""
        assert parse_cell_input("") == 0.0

    def test_whitespace_is_not_a_number(self):
        """Test stray spaces do not wipe a cell."""
        assert parse_cell_input("   ") is None
        assert parse_cell_input("\t") is None

    def test_non_numeric(self):
        """Test non-numeric input is refused."""
        for raw in ["abc", "12abc", "nan", "inf", True, None]:
            assert parse_cell_input(raw) is None


class TestRefresh:
    """Tests for refresh and derived data."""

    @pytest.mark.asyncio
    async def test_refresh_loads_series(self, client):
        """Test the client mirrors the store after refresh."""
        assert [r.date for r in client.series] == ["31/01/24", "29/02/24"]
        assert [d.net for d in client.derived] == [1000, 1100]

    @pytest.mark.asyncio
    async def test_refresh_failure(self, flaky):
        """Test a failed fetch raises and sets last_error."""
        client = MutationClient(flaky)
        flaky.fail_on.add("fetch_series")

        with pytest.raises(RemoteFailureError):
            await client.refresh()

        assert client.series == ()
        assert "unreachable" in client.last_error

    @pytest.mark.asyncio
    async def test_categories(self, client):
        """Test category names come from the local series."""
        assert client.categories(BucketType.ASSETS) == ["Savings", "Stocks"]


class TestEditCell:
    """Tests for the optimistic cell edit."""

    @pytest.mark.asyncio
    async def test_success(self, client, store):
        """Test a confirmed edit is visible locally and in the store."""
        assert await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", "1200")

        assert client.series[1].assets["Stocks"] == 1200
        assert client.derived[1].total_asset == 1700
        assert (await store.get_all())[1].assets["Stocks"] == 1200
        assert client.last_error is None

    @pytest.mark.asyncio
    async def test_edit_is_visible_before_remote_returns(self, client, flaky):
        """Test listeners see the optimistic value first."""
        seen = []
        client.subscribe(lambda series: seen.append(series[0].assets["Stocks"]))

        await client.edit_cell("31/01/24", BucketType.ASSETS, "Stocks", 7)

        assert seen == [7]
        assert flaky.calls == ["mutate_cell"]

    @pytest.mark.asyncio
    async def test_failure_rolls_back(self, client, flaky, store):
        """Test a failed send restores the exact pre-edit series."""
        before = client.series
        before_dump = [r.model_dump() for r in before]
        flaky.fail_on.add("mutate_cell")

        with pytest.raises(RemoteFailureError) as exc_info:
            await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", "1200")

        assert client.series is before
        assert [r.model_dump() for r in client.series] == before_dump
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert client.last_error
        assert (await store.get_all())[1].assets["Stocks"] == 1100

    @pytest.mark.asyncio
    async def test_rollback_notifies_listeners(self, client, flaky):
        """Test listeners see the optimistic value then the original."""
        seen = []
        client.subscribe(lambda series: seen.append(series[1].assets["Stocks"]))
        flaky.fail_on.add("mutate_cell")

        with pytest.raises(RemoteFailureError):
            await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", 5)

        assert seen == [5, 1100]

    @pytest.mark.asyncio
    async def test_store_rejection_rolls_back(self, client):
        """Test a NotFound from the store also rolls back."""
        before = client.series

        with pytest.raises(NotFoundError):
            await client.edit_cell("29/02/24", BucketType.ASSETS, "Gold", 5)

        assert client.series is before
        assert "Gold" not in client.series[1].assets

    @pytest.mark.asyncio
    async def test_non_numeric_is_ignored(self, client, flaky):
        """Test non-numeric input changes nothing and sends nothing."""
        before = client.series

        assert await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", "abc") is False

        assert client.series is before
        assert flaky.calls == []

    @pytest.mark.asyncio
    async def test_empty_input_means_zero(self, client, store):
        """Test clearing a cell stores 0."""
        await client.edit_cell("29/02/24", BucketType.LIABILITIES, "Loan", "")

        assert client.series[1].liabilities["Loan"] == 0
        assert (await store.get_all())[1].liabilities["Loan"] == 0

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(self, client, flaky):
        """Test last_error is cleared by the next action."""
        flaky.fail_on.add("mutate_cell")
        with pytest.raises(RemoteFailureError):
            await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", 1)
        flaky.fail_on.clear()

        await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", 2)

        assert client.last_error is None


class TestShapeChanges:
    """Tests for mutations followed by a refetch."""

    @pytest.mark.asyncio
    async def test_add_category_refetches(self, client, flaky):
        """Test add_category sends then refetches the whole series."""
        series = await client.add_category(BucketType.ASSETS, "  Gold  ")

        assert flaky.calls == ["add_category", "fetch_series"]
        assert client.series == series
        assert all(record.assets["Gold"] == 0 for record in series)

    @pytest.mark.asyncio
    async def test_add_category_empty_name(self, client, flaky):
        """Test a blank name is refused before any remote call."""
        with pytest.raises(InvalidInputError):
            await client.add_category(BucketType.ASSETS, "   ")

        assert flaky.calls == []

    @pytest.mark.asyncio
    async def test_add_category_existing_name(self, client, flaky):
        """Test a known name is refused locally."""
        with pytest.raises(InvalidInputError):
            await client.add_category(BucketType.ASSETS, "Stocks")

        assert flaky.calls == []

    @pytest.mark.asyncio
    async def test_add_category_store_conflict(self, client, store):
        """Test a conflict the client did not know about is reported."""
        await store.add_category(BucketType.ASSETS, "Gold")

        with pytest.raises(ConflictError):
            await client.add_category(BucketType.ASSETS, "Gold")

        assert client.last_error

    @pytest.mark.asyncio
    async def test_remove_category(self, client):
        """Test the category disappears from every month."""
        series = await client.remove_category(BucketType.ASSETS, "Savings")

        assert all("Savings" not in record.assets for record in series)

    @pytest.mark.asyncio
    async def test_append_month(self, client):
        """Test a new month is fetched after appending."""
        series = await client.append_month()

        assert [r.date for r in series] == ["31/01/24", "29/02/24", "31/03/24"]
        assert len(client.derived) == 3

    @pytest.mark.asyncio
    async def test_reset(self, client):
        """Test reset brings back the baseline."""
        await client.edit_cell("31/01/24", BucketType.ASSETS, "Stocks", 1)
        await client.append_month()

        series = await client.reset_series()

        assert len(series) == 2
        assert series[0].assets["Stocks"] == 1000

    @pytest.mark.asyncio
    async def test_failed_mutation_keeps_series(self, client, flaky):
        """Test nothing is refetched or published when the mutation fails."""
        before = client.series
        flaky.fail_on.add("append_month")

        with pytest.raises(RemoteFailureError):
            await client.append_month()

        assert client.series is before
        assert flaky.calls == ["append_month"]


class TestListeners:
    """Tests for subscribe/unsubscribe."""

    @pytest.mark.asyncio
    async def test_unsubscribe(self, client):
        """Test an unsubscribed listener is not called."""
        seen = []
        unsubscribe = client.subscribe(seen.append)
        unsubscribe()

        await client.refresh()

        assert seen == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_block_edit(self, flaky, store):
        """Test an edit still reaches the store when a listener raises."""
        events = RecordingEventLogger()
        client = MutationClient(flaky, event_logger=events)
        await client.refresh()

        def explode(series):
            raise RuntimeError("render failed")

        client.subscribe(explode)

        assert await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", 9)

        remote = (await store.get_all())[1].assets["Stocks"]
        assert client.series[1].assets["Stocks"] == remote == 9
        assert StoreEventType.LISTENER_FAILED in events.types

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_hide_rollback(self, flaky):
        """Test the store error and rollback survive a raising listener."""
        events = RecordingEventLogger()
        client = MutationClient(flaky, event_logger=events)
        await client.refresh()
        before = client.series
        client.subscribe(lambda series: 1 / 0)
        flaky.fail_on.add("mutate_cell")

        with pytest.raises(RemoteFailureError):
            await client.edit_cell("29/02/24", BucketType.ASSETS, "Stocks", 9)

        assert client.series is before
        assert client.last_error
        assert StoreEventType.OPTIMISTIC_EDIT_ROLLED_BACK in events.types

    @pytest.mark.asyncio
    async def test_other_listeners_still_notified(self, client):
        """Test one raising listener does not starve the next one."""
        seen = []
        client.subscribe(lambda series: 1 / 0)
        client.subscribe(seen.append)

        await client.refresh()

        assert len(seen) == 1


class TestBucketValidation:
    """Tests for bucket names given as strings."""

    @pytest.mark.asyncio
    async def test_edit_unknown_bucket(self, client, flaky):
        """Test an unknown bucket is rejected locally."""
        before = client.series

        with pytest.raises(InvalidInputError):
            await client.edit_cell("29/02/24", "income", "Stocks", 9)

        assert client.series is before
        assert flaky.calls == []

    @pytest.mark.asyncio
    async def test_category_unknown_bucket(self, client, flaky):
        """Test category changes reject unknown buckets."""
        with pytest.raises(InvalidInputError):
            await client.add_category("income", "Salary")
        with pytest.raises(InvalidInputError):
            await client.remove_category("income", "Salary")

        assert flaky.calls == []

    @pytest.mark.asyncio
    async def test_bucket_by_name(self, client):
        """Test a valid bucket name works like the enum."""
        assert await client.edit_cell("29/02/24", "liabilities", "Loan", 450)
        assert client.series[1].liabilities["Loan"] == 450


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
