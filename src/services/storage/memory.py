"""
In-Memory Snapshot Store

The reference store: a volatile, process-local series seeded from the
baseline at construction time.

DESIGN DECISION: Copy-on-write.
Each mutation builds a complete new tuple of records and swaps it in
under a lock. Readers only ever see the series before or after an
operation, never a half-applied category change. This is what keeps
the category keys identical across every month.

TRADEOFFS:
- Every mutation copies the series (fine for a personal monthly series)
- No durability: restarting the process restarts from the baseline
"""

import threading
from typing import Iterable, Optional

from src.events import EventLogger
from src.models.events import StoreEventBuilder
from src.models.snapshot import BucketType, MonthlyRecord, next_month_end
from src.services.storage.interface import (
    ConflictError,
    EmptySeriesError,
    NotFoundError,
    SeriesStoreInterface,
)


class InMemorySeriesStore(SeriesStoreInterface):
    """
    Volatile implementation of the snapshot store.

    `revision` increases by one on every mutation that changed the
    series. Concurrent writers are not coordinated: the last write wins.
    """

    def __init__(
        self,
        baseline: Iterable[MonthlyRecord],
        event_logger: Optional[EventLogger] = None,
    ):
        self._baseline: tuple[MonthlyRecord, ...] = tuple(
            record.deep_copy() for record in baseline
        )
        self._series: tuple[MonthlyRecord, ...] = self._copy_baseline()
        self._revision = 0
        self._lock = threading.Lock()
        self._event_logger = event_logger

    @property
    def revision(self) -> int:
        return self._revision

    def _copy_baseline(self) -> tuple[MonthlyRecord, ...]:
        return tuple(record.deep_copy() for record in self._baseline)

    def _commit(self, series: tuple[MonthlyRecord, ...]) -> int:
        """Swap in a new series. Caller holds the lock."""
        self._series = series
        self._revision += 1
        return self._revision

    def _log(self, event) -> None:
        if self._event_logger:
            self._event_logger.log(event)

    async def get_all(self) -> list[MonthlyRecord]:
        series = self._series
        return [record.deep_copy() for record in series]

    async def set_value(
        self,
        date: str,
        bucket: BucketType,
        category: str,
        value: float,
    ) -> None:
        bucket = _coerce_bucket(bucket)
        with self._lock:
            index = next(
                (i for i, record in enumerate(self._series) if record.date == date),
                None,
            )
            if index is None:
                reason = f"Month not found: {date}"
            else:
                values = self._series[index].bucket(bucket)
                if values is None:
                    reason = f"Bucket {bucket.value} not found for {date}"
                elif category not in values:
                    reason = f"Category {category!r} not found in {bucket.value}"
                else:
                    reason = None

            if reason is not None:
                self._log(StoreEventBuilder.cell_update_rejected(
                    date, bucket.value, category, reason
                ))
                raise NotFoundError(reason)

            record = self._series[index]
            updated = record.with_bucket(
                bucket, {**record.bucket(bucket), category: float(value)}
            )
            series = self._series[:index] + (updated,) + self._series[index + 1:]
            revision = self._commit(series)

        self._log(StoreEventBuilder.cell_updated(
            date, bucket.value, category, float(value), revision=revision
        ))

    async def add_category(self, bucket: BucketType, category: str) -> None:
        bucket = _coerce_bucket(bucket)
        with self._lock:
            if any(category in (record.bucket(bucket) or {}) for record in self._series):
                reason = f"Category {category!r} already exists in {bucket.value}"
                self._log(StoreEventBuilder.category_add_rejected(
                    bucket.value, category, reason
                ))
                raise ConflictError(reason)

            series = tuple(
                record.with_bucket(bucket, {**(record.bucket(bucket) or {}), category: 0.0})
                for record in self._series
            )
            self._commit(series)

        self._log(StoreEventBuilder.category_added(bucket.value, category, len(series)))

    async def remove_category(self, bucket: BucketType, category: str) -> None:
        bucket = _coerce_bucket(bucket)
        with self._lock:
            affected = 0
            records = []
            for record in self._series:
                values = record.bucket(bucket)
                if values is not None and category in values:
                    affected += 1
                    record = record.with_bucket(
                        bucket, {k: v for k, v in values.items() if k != category}
                    )
                records.append(record)

            if affected:
                self._commit(tuple(records))

        self._log(StoreEventBuilder.category_removed(bucket.value, category, affected))

    async def append_month(self) -> MonthlyRecord:
        with self._lock:
            if not self._series:
                reason = "Cannot add a month to empty data."
                self._log(StoreEventBuilder.month_append_rejected(reason))
                raise EmptySeriesError(reason)

            last = self._series[-1]
            new_date = next_month_end(last.date)
            if any(record.date == new_date for record in self._series):
                raise ConflictError(f"Month {new_date} already exists")

            record = last.deep_copy().with_date(new_date)
            self._commit(self._series + (record,))

        self._log(StoreEventBuilder.month_appended(new_date, last.date))
        return record.deep_copy()

    async def reset(self) -> None:
        with self._lock:
            series = self._copy_baseline()
            revision = self._commit(series)

        self._log(StoreEventBuilder.series_reset(len(series), revision))


def _coerce_bucket(bucket: BucketType | str) -> BucketType:
    try:
        return BucketType(bucket)
    except ValueError:
        raise NotFoundError(f"Unknown bucket: {bucket!r}") from None
