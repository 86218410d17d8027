"""
Mutation Client

Client-side cache of the series with two update protocols:

1. CELL EDITS - optimistic:
   - Keep a reference to the current series (the rollback snapshot)
   - Publish a new series with the edit applied, immediately
   - Send the edit to the gateway
   - On failure, publish the rollback snapshot again and raise

2. SHAPE CHANGES (add/remove category, append month, reset) - refetch:
   - Send the mutation
   - On success, throw the local series away and fetch the full series

DESIGN DECISION: The local series is a tuple of frozen records.
Each change publishes a new tuple, so rollback is just restoring the
previous reference. Nothing is undone field by field.

KNOWN GAP: Edits are not serialized. If a second edit is issued before
the first one resolves, both remote calls race and the last one to
finish decides what is visible; a failed earlier edit rolls back to the
series it saw, which can hide a later optimistic edit.
"""

import math
from typing import Callable, Optional
from uuid import UUID

from src.events import EventLogger, create_correlation_id
from src.metrics import aggregate, category_names
from src.models.events import StoreEventBuilder
from src.models.snapshot import BucketType, DerivedRecord, MonthlyRecord
from src.services.storage import (
    RemoteFailureError,
    SeriesGatewayInterface,
    StorageError,
)


Series = tuple[MonthlyRecord, ...]
Listener = Callable[[Series], None]


class InvalidInputError(ValueError):
    """Input rejected locally, before any state change or remote call."""
    pass


def _coerce_bucket(bucket) -> BucketType:
    try:
        return BucketType(bucket)
    except ValueError:
        raise InvalidInputError(f"Unknown bucket: {bucket!r}") from None


def parse_cell_input(raw) -> Optional[float]:
    """
    Normalize a cell value typed by the user.

    Returns:
        The numeric value, 0.0 for an empty string, or None when the
        input is not numeric (the edit should be discarded).
        Whitespace-only input is not numeric.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif raw == "":
        return 0.0
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


class MutationClient:
    """
    Local view of the series, kept in step with the store.

    State changes are pushed to subscribed listeners. `last_error`
    holds the message of the most recent failure and is cleared when
    the next action starts.
    """

    def __init__(
        self,
        gateway: SeriesGatewayInterface,
        event_logger: Optional[EventLogger] = None,
    ):
        self._gateway = gateway
        self._event_logger = event_logger
        self._series: Series = ()
        self._listeners: list[Listener] = []
        self._derived_for: Optional[Series] = None
        self._derived: list[DerivedRecord] = []
        self.last_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def series(self) -> Series:
        return self._series

    @property
    def derived(self) -> list[DerivedRecord]:
        """Derived metrics for the current series, recomputed when it changes."""
        if self._derived_for is not self._series:
            self._derived = aggregate(self._series)
            self._derived_for = self._series
        return list(self._derived)

    def categories(self, bucket: BucketType) -> list[str]:
        return category_names(self._series, bucket)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(
        self,
        series: Series,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Make `series` current, then notify listeners.

        A failing listener is logged and skipped; it never interrupts
        the update protocol that is publishing.
        """
        self._series = series
        for listener in list(self._listeners):
            try:
                listener(series)
            except Exception as e:
                self._log(StoreEventBuilder.listener_failed(
                    len(series), str(e), correlation_id
                ))

    def _log(self, event) -> None:
        if self._event_logger:
            self._event_logger.log(event)

    def _fail(
        self,
        operation: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> StorageError:
        """Record a failure and return the error to raise."""
        if not isinstance(error, StorageError):
            wrapped = RemoteFailureError(f"{operation} failed: {error}")
            wrapped.__cause__ = error
            error = wrapped
        self.last_error = str(error)
        self._log(StoreEventBuilder.remote_failure(
            operation, str(error), correlation_id
        ))
        return error

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def refresh(self, correlation_id: Optional[UUID] = None) -> Series:
        """Replace the local series with the authoritative one."""
        try:
            records = await self._gateway.fetch_series()
        except Exception as e:
            raise self._fail("fetch_series", e, correlation_id)

        series = tuple(records)
        self._publish(series, correlation_id)
        self._log(StoreEventBuilder.series_refetched(
            len(series), "refresh", correlation_id
        ))
        return series

    # -------------------------------------------------------------------------
    # Optimistic cell edit
    # -------------------------------------------------------------------------

    async def edit_cell(
        self,
        date: str,
        bucket: BucketType,
        category: str,
        raw_value,
    ) -> bool:
        """
        Apply a single-cell edit optimistically.

        Args:
            date: Month label of the row being edited
            bucket: Assets or liabilities
            category: Column being edited
            raw_value: What the user typed ("" counts as 0)

        Returns:
            False if the input was not numeric and the edit was discarded,
            True once the store has accepted the edit.

        Raises:
            InvalidInputError: Unknown bucket; nothing was changed
            StorageError: The store rejected the edit or could not be
                reached. The local series has already been rolled back.
        """
        value = parse_cell_input(raw_value)
        if value is None:
            return False

        bucket = _coerce_bucket(bucket)
        correlation_id = create_correlation_id()
        self.last_error = None

        rollback_snapshot = self._series
        working = tuple(
            record.with_bucket(bucket, {**(record.bucket(bucket) or {}), category: value})
            if record.date == date
            else record
            for record in rollback_snapshot
        )
        self._publish(working, correlation_id)
        self._log(StoreEventBuilder.optimistic_edit_applied(
            date, bucket.value, category, value, correlation_id
        ))

        try:
            await self._gateway.mutate_cell(date, bucket, category, value)
        except Exception as e:
            self._publish(rollback_snapshot, correlation_id)
            error = self._fail("mutate_cell", e, correlation_id)
            self._log(StoreEventBuilder.optimistic_edit_rolled_back(
                date, bucket.value, category, str(error), correlation_id
            ))
            raise error

        return True

    # -------------------------------------------------------------------------
    # Shape changes: mutate, then refetch
    # -------------------------------------------------------------------------

    async def _mutate_and_refetch(self, operation: str, call) -> Series:
        correlation_id = create_correlation_id()
        self.last_error = None

        try:
            await call()
        except Exception as e:
            raise self._fail(operation, e, correlation_id)

        try:
            records = await self._gateway.fetch_series()
        except Exception as e:
            raise self._fail("fetch_series", e, correlation_id)

        series = tuple(records)
        self._publish(series, correlation_id)
        self._log(StoreEventBuilder.series_refetched(
            len(series), operation, correlation_id
        ))
        return series

    async def add_category(self, bucket: BucketType, category: str) -> Series:
        """
        Add a category to every month.

        Raises:
            InvalidInputError: Empty name, or already a category locally
            StorageError: The store rejected the change or was unreachable
        """
        bucket = _coerce_bucket(bucket)
        name = category.strip()
        if not name:
            raise InvalidInputError("Category name cannot be empty.")
        if name in self.categories(bucket):
            raise InvalidInputError(f"Category {name!r} already exists in {bucket.value}.")

        return await self._mutate_and_refetch(
            "add_category", lambda: self._gateway.add_category(bucket, name)
        )

    async def remove_category(self, bucket: BucketType, category: str) -> Series:
        """Remove a category from every month."""
        bucket = _coerce_bucket(bucket)
        return await self._mutate_and_refetch(
            "remove_category", lambda: self._gateway.remove_category(bucket, category)
        )

    async def append_month(self) -> Series:
        """Carry the last month over into a new month."""
        return await self._mutate_and_refetch("append_month", self._gateway.append_month)

    async def reset_series(self) -> Series:
        """Restore the baseline series."""
        return await self._mutate_and_refetch("reset_series", self._gateway.reset_series)
