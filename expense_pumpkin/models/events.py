"""
Tracker Events

Conditions the calling layer must hear about without an exception being
raised: quota exhaustion, unavailable storage, discarded corrupt data,
migration results and cross-tab updates. Events are logged and handed to
subscribers; they are not persisted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class TrackerEventType(str, Enum):
    """Types of events the core reports."""
    # Storage
    STORAGE_UNAVAILABLE = "storage_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    CORRUPTED_DATA_DISCARDED = "corrupted_data_discarded"

    # Cross-tab sync
    EXTERNAL_UPDATE_APPLIED = "external_update_applied"
    EXTERNAL_UPDATE_IGNORED = "external_update_ignored"

    # Migration
    MIGRATION_SUCCEEDED = "migration_succeeded"
    MIGRATION_FAILED = "migration_failed"
    LEGACY_RECORD_SKIPPED = "legacy_record_skipped"

    # Lifecycle
    EXPENSE_ADDED = "expense_added"
    EXPENSES_CLEARED = "expenses_cleared"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"


class EventSeverity(str, Enum):
    """Severity level for tracker events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackerEvent(BaseModel):
    """A single reported event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: TrackerEventType
    severity: EventSeverity = EventSeverity.INFO

    storage_key: Optional[str] = Field(
        default=None,
        description="Storage key the event concerns, if any"
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
            "storage_key": self.storage_key,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class TrackerEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = TrackerEventBuilder.quota_exceeded(key, error)
        reporter.report(event)
    """

    @staticmethod
    def storage_unavailable(reason: Optional[str] = None) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.STORAGE_UNAVAILABLE,
            severity=EventSeverity.WARNING,
            description="Persistent storage is unavailable; data is kept in memory only",
            error_message=reason,
        )

    @staticmethod
    def quota_exceeded(key: str, error: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.QUOTA_EXCEEDED,
            severity=EventSeverity.ERROR,
            storage_key=key,
            description="Storage quota exceeded; the latest change only lives in memory",
            error_message=error,
        )

    @staticmethod
    def storage_write_failed(key: str, error: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.STORAGE_WRITE_FAILED,
            severity=EventSeverity.ERROR,
            storage_key=key,
            description="Could not persist value",
            error_message=error,
        )

    @staticmethod
    def corrupted_data_discarded(key: str, error: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.CORRUPTED_DATA_DISCARDED,
            severity=EventSeverity.WARNING,
            storage_key=key,
            description="Stored value could not be parsed and was discarded",
            error_message=error,
        )

    @staticmethod
    def external_update_applied(key: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXTERNAL_UPDATE_APPLIED,
            storage_key=key,
            description="Value replaced by an update from another process",
        )

    @staticmethod
    def external_update_ignored(key: str, error: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXTERNAL_UPDATE_IGNORED,
            severity=EventSeverity.WARNING,
            storage_key=key,
            description="Unparseable update from another process was ignored",
            error_message=error,
        )

    @staticmethod
    def migration_succeeded(migrated: int, skipped: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.MIGRATION_SUCCEEDED,
            description=f"Migrated legacy expenses into {migrated} monthly record(s)",
            details={"migrated_records": migrated, "skipped_records": skipped},
        )

    @staticmethod
    def migration_failed(reason: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.MIGRATION_FAILED,
            severity=EventSeverity.ERROR,
            description="Legacy expenses could not be migrated; they were left untouched",
            error_message=reason,
        )

    @staticmethod
    def legacy_record_skipped(record_id: str, reason: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.LEGACY_RECORD_SKIPPED,
            severity=EventSeverity.WARNING,
            description=f"Skipped legacy expense {record_id}",
            details={"record_id": record_id},
            error_message=reason,
        )

    @staticmethod
    def expense_added(expense_id: str, month: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXPENSE_ADDED,
            severity=EventSeverity.DEBUG,
            description=f"Expense added to {month}",
            details={"expense_id": expense_id, "month": month},
        )

    @staticmethod
    def expenses_cleared(count: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXPENSES_CLEARED,
            description=f"Cleared {count} expense(s)",
            details={"cleared": count},
        )

    @staticmethod
    def export_completed(filename: str, rows: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXPORT_COMPLETED,
            description=f"Exported {rows} expense(s) to {filename}",
            details={"filename": filename, "rows": rows},
        )

    @staticmethod
    def export_failed(error_code: str, error: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.EXPORT_FAILED,
            severity=EventSeverity.ERROR,
            description="Export failed",
            details={"error_code": error_code},
            error_message=error,
        )
