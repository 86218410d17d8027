"""
Event Models for Net Worth Tracker

Every store mutation and every client-side reconciliation step emits a
structured event. Events go to the structured log only; they are not
persisted and there is no history query over them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class StoreEventType(str, Enum):
    """Types of events we log."""
    # Baseline / lifecycle
    SERIES_LOADED = "series_loaded"
    BASELINE_MISSING = "baseline_missing"
    BASELINE_UNREADABLE = "baseline_unreadable"
    SERIES_RESET = "series_reset"

    # Store mutations
    CELL_UPDATED = "cell_updated"
    CELL_UPDATE_REJECTED = "cell_update_rejected"
    CATEGORY_ADDED = "category_added"
    CATEGORY_ADD_REJECTED = "category_add_rejected"
    CATEGORY_REMOVED = "category_removed"
    MONTH_APPENDED = "month_appended"
    MONTH_APPEND_REJECTED = "month_append_rejected"

    # Client reconciliation
    OPTIMISTIC_EDIT_APPLIED = "optimistic_edit_applied"
    OPTIMISTIC_EDIT_ROLLED_BACK = "optimistic_edit_rolled_back"
    SERIES_REFETCHED = "series_refetched"
    REMOTE_FAILURE = "remote_failure"
    LISTENER_FAILED = "listener_failed"

    # Insights
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FAILED = "insights_failed"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StoreEvent(BaseModel):
    """A single structured log event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: StoreEventType
    severity: EventSeverity = EventSeverity.INFO

    # What part of the series this is about
    series_date: Optional[str] = None
    bucket: Optional[str] = None
    category: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one client action"
    )
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "series_date": self.series_date,
            "bucket": self.bucket,
            "category": self.category,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class StoreEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = StoreEventBuilder.cell_updated("31/01/24", "assets", "Stocks", 10.0)
    """

    @staticmethod
    def series_loaded(record_count: int, source: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SERIES_LOADED,
            description=f"Series loaded with {record_count} months from {source}",
            details={"record_count": record_count, "source": source},
        )

    @staticmethod
    def baseline_missing(path: str, written: bool) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.BASELINE_MISSING,
            severity=EventSeverity.WARNING,
            description=f"Baseline not found at {path}; using built-in default",
            details={"path": path, "default_written": written},
        )

    @staticmethod
    def baseline_unreadable(path: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.BASELINE_UNREADABLE,
            severity=EventSeverity.ERROR,
            description=f"Could not read or parse baseline at {path}",
            details={"path": path},
            error_message=error_message,
        )

    @staticmethod
    def series_reset(record_count: int, revision: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SERIES_RESET,
            description="Series reset to baseline",
            details={"record_count": record_count, "revision": revision},
        )

    @staticmethod
    def cell_updated(
        series_date: str,
        bucket: str,
        category: str,
        value: float,
        revision: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CELL_UPDATED,
            series_date=series_date,
            bucket=bucket,
            category=category,
            correlation_id=correlation_id,
            description=f"Updated {bucket}.{category} for {series_date} to {value}",
            details={"value": value, "revision": revision},
        )

    @staticmethod
    def cell_update_rejected(
        series_date: str,
        bucket: str,
        category: str,
        reason: str,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CELL_UPDATE_REJECTED,
            severity=EventSeverity.WARNING,
            series_date=series_date,
            bucket=bucket,
            category=category,
            description=f"Rejected update of {bucket}.{category} for {series_date}",
            error_message=reason,
        )

    @staticmethod
    def category_added(bucket: str, category: str, record_count: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORY_ADDED,
            bucket=bucket,
            category=category,
            description=f"Added category {category!r} to {bucket} in {record_count} months",
            details={"record_count": record_count},
        )

    @staticmethod
    def category_add_rejected(bucket: str, category: str, reason: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORY_ADD_REJECTED,
            severity=EventSeverity.WARNING,
            bucket=bucket,
            category=category,
            description=f"Rejected adding category {category!r} to {bucket}",
            error_message=reason,
        )

    @staticmethod
    def category_removed(bucket: str, category: str, affected: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORY_REMOVED,
            bucket=bucket,
            category=category,
            description=f"Removed category {category!r} from {bucket}",
            details={"records_affected": affected},
        )

    @staticmethod
    def month_appended(series_date: str, source_date: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.MONTH_APPENDED,
            series_date=series_date,
            description=f"Appended month {series_date} carried over from {source_date}",
            details={"source_date": source_date},
        )

    @staticmethod
    def month_append_rejected(reason: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.MONTH_APPEND_REJECTED,
            severity=EventSeverity.WARNING,
            description="Cannot add a month to an empty series",
            error_message=reason,
        )

    @staticmethod
    def optimistic_edit_applied(
        series_date: str,
        bucket: str,
        category: str,
        value: float,
        correlation_id: UUID,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.OPTIMISTIC_EDIT_APPLIED,
            severity=EventSeverity.DEBUG,
            series_date=series_date,
            bucket=bucket,
            category=category,
            correlation_id=correlation_id,
            description=f"Optimistically set {bucket}.{category} for {series_date}",
            details={"value": value},
        )

    @staticmethod
    def optimistic_edit_rolled_back(
        series_date: str,
        bucket: str,
        category: str,
        error_message: str,
        correlation_id: UUID,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.OPTIMISTIC_EDIT_ROLLED_BACK,
            severity=EventSeverity.WARNING,
            series_date=series_date,
            bucket=bucket,
            category=category,
            correlation_id=correlation_id,
            description=f"Rolled back edit of {bucket}.{category} for {series_date}",
            error_message=error_message,
        )

    @staticmethod
    def series_refetched(
        record_count: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SERIES_REFETCHED,
            severity=EventSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Series refetched after {reason}",
            details={"record_count": record_count, "reason": reason},
        )

    @staticmethod
    def remote_failure(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.REMOTE_FAILURE,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Remote call failed: {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def listener_failed(
        series_size: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.LISTENER_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Series listener raised while being notified",
            details={"series_size": series_size},
            error_message=error_message,
        )

    @staticmethod
    def insights_generated(count: int, model_name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.INSIGHTS_GENERATED,
            description=f"Generated {count} insights",
            details={"count": count, "model_name": model_name},
        )

    @staticmethod
    def insights_failed(error_message: str, model_name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.INSIGHTS_FAILED,
            severity=EventSeverity.ERROR,
            description="Insight generation failed",
            details={"model_name": model_name},
            error_message=error_message,
        )
