"""
Typed outcomes returned to the calling layer.

Services raise their own exceptions; the ExpenseTracker facade turns them
into these models so the UI never has to catch anything.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from expense_pumpkin.models.expense import Expense, LegacyExpense, ValidationResult


class ErrorKind(str, Enum):
    """Failure categories the calling layer can present differently."""
    VALIDATION = "validation"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"
    CORRUPTED_STORED_DATA = "corrupted_stored_data"
    MIGRATION_FAILURE = "migration_failure"
    EXPORT_WITH_NO_DATA = "export_with_no_data"
    DOWNLOAD_UNSUPPORTED = "download_unsupported"
    EXPORT_FAILED = "export_failed"


# =============================================================================
# MIGRATION
# =============================================================================

class MigrationStatus(str, Enum):
    SUCCESS = "success"
    NO_LEGACY_DATA = "no_legacy_data"
    INVALID = "invalid"


class MigrationOutcome(BaseModel):
    """
    Result of one migration attempt.

    SUCCESS carries the new records (and how many legacy records were
    skipped). INVALID carries a reason. NO_LEGACY_DATA means there was
    nothing to do.

    `persisted` is only True once a successful migration has been written
    and the legacy collection removed. A SUCCESS that could not be written
    keeps the legacy data and carries the write error as `reason`.
    """

    status: MigrationStatus
    records: list[Expense] = Field(default_factory=list)
    reason: Optional[str] = None
    skipped: int = 0
    persisted: bool = False

    @classmethod
    def success(cls, records: list[Expense], skipped: int = 0) -> "MigrationOutcome":
        return cls(status=MigrationStatus.SUCCESS, records=records, skipped=skipped)

    @classmethod
    def no_legacy_data(cls) -> "MigrationOutcome":
        return cls(status=MigrationStatus.NO_LEGACY_DATA)

    @classmethod
    def invalid(cls, reason: str) -> "MigrationOutcome":
        return cls(status=MigrationStatus.INVALID, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status == MigrationStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == MigrationStatus.INVALID

    @property
    def unsaved(self) -> bool:
        """Migrated in memory, but the legacy data is still what is on disk."""
        return self.succeeded and not self.persisted

    def mark_persisted(self) -> "MigrationOutcome":
        return self.model_copy(update={"persisted": True})

    def mark_not_persisted(self, reason: str) -> "MigrationOutcome":
        return self.model_copy(update={"persisted": False, "reason": reason})


class LegacyRecordCheck(BaseModel):
    """Structural check of one raw legacy record: accepted or rejected."""

    accepted: bool
    record: Optional[LegacyExpense] = None
    reason: Optional[str] = None

    @classmethod
    def accept(cls, record: LegacyExpense) -> "LegacyRecordCheck":
        return cls(accepted=True, record=record)

    @classmethod
    def reject(cls, reason: str) -> "LegacyRecordCheck":
        return cls(accepted=False, reason=reason)


# =============================================================================
# FACADE RESULTS
# =============================================================================

class StartupReport(BaseModel):
    """
    What happened when the tracker was opened.

    `problems` lists every startup condition the UI should surface:
    STORAGE_UNAVAILABLE, CORRUPTED_STORED_DATA (see `discarded_keys`)
    and MIGRATION_FAILURE (invalid legacy data, or a migration that could
    not be saved).
    """

    storage_available: bool
    migration: MigrationOutcome
    discarded_keys: list[str] = Field(default_factory=list)
    problems: list[ErrorKind] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


class AddExpenseResult(BaseModel):
    """
    Result of submitting an expense.

    A rejected submission has `validation.issues` and no expense.
    An accepted one may still carry `error_kind` if persisting failed;
    the expense is kept in memory regardless.
    """

    success: bool
    expense: Optional[Expense] = None
    validation: ValidationResult
    persisted: bool = False
    error_kind: Optional[ErrorKind] = None


class ExportResult(BaseModel):
    """Result of an export request."""

    success: bool
    filename: Optional[str] = None
    location: Optional[str] = None
    row_count: int = 0
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
