"""
Series Gateway

The boundary the client talks to. It mirrors the store operations
but is allowed to fail for reasons outside the store (transport,
service unavailability), which surface as RemoteFailureError.

No timeout or retry policy: one failed attempt is reported as-is.
"""

from abc import ABC, abstractmethod

from src.models.snapshot import BucketType, MonthlyRecord
from src.services.storage.interface import (
    RemoteFailureError,
    SeriesStoreInterface,
    StorageError,
)


class SeriesGatewayInterface(ABC):
    """Remote interface to the snapshot store."""

    @abstractmethod
    async def fetch_series(self) -> list[MonthlyRecord]:
        """Full series read."""
        pass

    @abstractmethod
    async def mutate_cell(
        self,
        date: str,
        bucket: BucketType,
        category: str,
        value: float,
    ) -> None:
        """
        Raises:
            NotFoundError: Month, bucket or category absent
            RemoteFailureError: Transport or service error
        """
        pass

    @abstractmethod
    async def add_category(self, bucket: BucketType, category: str) -> None:
        """
        Raises:
            ConflictError: Category already present
            RemoteFailureError: Transport or service error
        """
        pass

    @abstractmethod
    async def remove_category(self, bucket: BucketType, category: str) -> None:
        pass

    @abstractmethod
    async def append_month(self) -> None:
        """
        Raises:
            EmptySeriesError: Series has no records
            RemoteFailureError: Transport or service error
        """
        pass

    @abstractmethod
    async def reset_series(self) -> None:
        pass


class StoreGateway(SeriesGatewayInterface):
    """
    In-process gateway in front of a SeriesStoreInterface.

    Store errors pass through unchanged; anything else the store
    raises is reported as a RemoteFailureError.
    """

    def __init__(self, store: SeriesStoreInterface):
        self._store = store

    async def _call(self, operation: str, coro):
        try:
            return await coro
        except StorageError:
            raise
        except Exception as e:
            raise RemoteFailureError(f"{operation} failed: {e}") from e

    async def fetch_series(self) -> list[MonthlyRecord]:
        return await self._call("fetch_series", self._store.get_all())

    async def mutate_cell(
        self,
        date: str,
        bucket: BucketType,
        category: str,
        value: float,
    ) -> None:
        await self._call(
            "mutate_cell",
            self._store.set_value(date, bucket, category, value),
        )

    async def add_category(self, bucket: BucketType, category: str) -> None:
        await self._call("add_category", self._store.add_category(bucket, category))

    async def remove_category(self, bucket: BucketType, category: str) -> None:
        await self._call("remove_category", self._store.remove_category(bucket, category))

    async def append_month(self) -> None:
        await self._call("append_month", self._store.append_month())

    async def reset_series(self) -> None:
        await self._call("reset_series", self._store.reset())
