"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the snapshot store.
This allows us to:
1. Keep the volatile in-memory store as the reference backend
2. Put the store behind a remote boundary without changing callers
3. Use small fakes in tests

Every category mutation is a single logical transaction over the whole
series: implementations must either apply it to every record or to none,
so the category keys stay identical across all months.
"""

from abc import ABC, abstractmethod

from src.models.snapshot import BucketType, MonthlyRecord


class SeriesStoreInterface(ABC):
    """
    Authoritative holder of the monthly snapshot series.

    Any store implementation must implement these methods.
    """

    @abstractmethod
    async def get_all(self) -> list[MonthlyRecord]:
        """
        Return the whole series in insertion order.

        No side effects.
        """
        pass

    @abstractmethod
    async def set_value(
        self,
        date: str,
        bucket: BucketType,
        category: str,
        value: float,
    ) -> None:
        """
        Set a single cell.

        Args:
            date: Month label (DD/MM/YY) of the record to change
            bucket: Assets or liabilities
            category: Existing category in that bucket
            value: New value

        Raises:
            NotFoundError: If the month, bucket or category is absent
        """
        pass

    @abstractmethod
    async def add_category(self, bucket: BucketType, category: str) -> None:
        """
        Add `category` with value 0 to the bucket of every record.

        Raises:
            ConflictError: If the category already exists in any record
        """
        pass

    @abstractmethod
    async def remove_category(self, bucket: BucketType, category: str) -> None:
        """
        Remove `category` from the bucket of every record.

        Idempotent: removing an absent category is a no-op.
        """
        pass

    @abstractmethod
    async def append_month(self) -> MonthlyRecord:
        """
        Append a copy of the last record dated at the end of the next month.

        Returns:
            The new record

        Raises:
            EmptySeriesError: If the series has no records
        """
        pass

    @abstractmethod
    async def reset(self) -> None:
        """Replace the whole series with a fresh copy of the baseline."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Referenced month, bucket or category is absent."""
    pass


class ConflictError(StorageError):
    """Attempted to add a category that already exists."""
    pass


class EmptySeriesError(StorageError):
    """Operation needs at least one record."""
    pass


class RemoteFailureError(StorageError):
    """Transport or service error talking to a remote collaborator."""
    pass
